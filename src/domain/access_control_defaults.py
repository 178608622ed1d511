"""
Access Control Defaults

Static permission catalog and the system roles seeded at bootstrap.
Resources and actions are an open namespace; adding a permission only
requires a new entry here (or a new Permission row).
"""

from typing import Dict, List, NamedTuple, Optional

from src.domain.entities.enums import LegacyUserRole, PermissionScope
from src.domain.entities.permission import permission_key

ORG = PermissionScope.ORG
TEAM = PermissionScope.TEAM
SELF = PermissionScope.SELF


class PermissionDefinition(NamedTuple):
    resource: str
    action: str
    description: str

    @property
    def key(self) -> str:
        return permission_key(self.resource, self.action)


class SystemRoleDefinition(NamedTuple):
    name: str
    description: str
    is_system_default: bool = True
    is_editable: bool = False


PERMISSIONS: List[PermissionDefinition] = [
    PermissionDefinition("staff", "view", "View staff members"),
    PermissionDefinition("staff", "manage", "Create, update, and manage staff members"),
    PermissionDefinition("staff", "invite", "Invite new staff members"),
    PermissionDefinition("staff", "deactivate", "Deactivate staff members"),
    PermissionDefinition("roles", "view", "View roles and permissions"),
    PermissionDefinition("roles", "manage", "Create and edit custom roles"),
    PermissionDefinition("roles", "assign", "Assign roles to users"),
    PermissionDefinition("approvals", "view", "View approval flows"),
    PermissionDefinition("approvals", "configure", "Configure approval flow definitions"),
    PermissionDefinition("approvals", "approve", "Approve requests in approval flows"),
    PermissionDefinition("performance_reviews", "view", "View performance reviews"),
    PermissionDefinition("performance_reviews", "manage", "Create and manage performance reviews"),
    PermissionDefinition("performance_reviews", "conduct", "Conduct reviews for direct reports"),
    PermissionDefinition("goals", "view", "View goals and OKRs"),
    PermissionDefinition("goals", "manage", "Create and manage goals"),
    PermissionDefinition("goals", "approve", "Approve goal changes"),
    PermissionDefinition("competencies", "view", "View competency library"),
    PermissionDefinition("competencies", "manage", "Manage competency definitions"),
    PermissionDefinition("development_plans", "view", "View development plans"),
    PermissionDefinition("development_plans", "manage", "Create and manage development plans"),
    PermissionDefinition("feedback", "view", "View feedback items"),
    PermissionDefinition("feedback", "give", "Give feedback to others"),
    PermissionDefinition("reports", "view", "View reports and analytics"),
    PermissionDefinition("reports", "export", "Export reports and data"),
    PermissionDefinition("audit_logs", "view", "View audit logs"),
]

TENANT_OWNER = "TENANT_OWNER"
HR_ADMIN = "HR_ADMIN"
LINE_MANAGER = "LINE_MANAGER"
EMPLOYEE = "EMPLOYEE"
READ_ONLY = "READ_ONLY"

SYSTEM_ROLE_DEFINITIONS: Dict[str, SystemRoleDefinition] = {
    TENANT_OWNER: SystemRoleDefinition(
        "Organization Owner", "Full access to all organizational resources and settings"
    ),
    HR_ADMIN: SystemRoleDefinition(
        "HR Administrator", "Manage staff, roles, approvals, and HR modules"
    ),
    LINE_MANAGER: SystemRoleDefinition(
        "Line Manager", "Manage teams, reviews, goals, and approvals for direct reports"
    ),
    EMPLOYEE: SystemRoleDefinition("Employee", "Employee self-service access"),
    READ_ONLY: SystemRoleDefinition("Read Only", "View-only access to authorized resources"),
}

# The owner holds every catalog permission organization-wide
ROLE_PERMISSIONS: Dict[str, Dict[str, Optional[PermissionScope]]] = {
    TENANT_OWNER: {definition.key: ORG for definition in PERMISSIONS},
    HR_ADMIN: {
        "staff.view": ORG,
        "staff.manage": ORG,
        "staff.invite": ORG,
        "roles.view": ORG,
        "roles.manage": ORG,
        "roles.assign": ORG,
        "approvals.view": ORG,
        "approvals.configure": ORG,
        "performance_reviews.view": ORG,
        "performance_reviews.manage": ORG,
        "goals.view": ORG,
        "goals.manage": ORG,
        "competencies.view": ORG,
        "competencies.manage": ORG,
        "development_plans.view": ORG,
        "development_plans.manage": ORG,
        "feedback.view": ORG,
        "reports.view": ORG,
        "reports.export": ORG,
    },
    LINE_MANAGER: {
        "staff.view": TEAM,
        "performance_reviews.view": TEAM,
        "performance_reviews.conduct": TEAM,
        "goals.view": TEAM,
        "goals.manage": TEAM,
        "goals.approve": TEAM,
        "development_plans.view": TEAM,
        "development_plans.manage": TEAM,
        "feedback.view": TEAM,
        "feedback.give": TEAM,
        "approvals.approve": TEAM,
        "competencies.view": ORG,
        "reports.view": TEAM,
    },
    EMPLOYEE: {
        "performance_reviews.view": SELF,
        "goals.view": SELF,
        "goals.manage": SELF,
        "development_plans.view": SELF,
        "feedback.view": SELF,
        "feedback.give": ORG,
        "competencies.view": ORG,
    },
    READ_ONLY: {
        "staff.view": ORG,
        "performance_reviews.view": ORG,
        "goals.view": ORG,
        "competencies.view": ORG,
        "reports.view": ORG,
    },
}

LEGACY_ROLE_TO_SYSTEM_ROLE: Dict[LegacyUserRole, str] = {
    LegacyUserRole.SYSTEM_ADMIN: TENANT_OWNER,
    LegacyUserRole.ADMIN: TENANT_OWNER,
    LegacyUserRole.HR_MANAGER: HR_ADMIN,
    LegacyUserRole.DEPARTMENT_HEAD: LINE_MANAGER,
    LegacyUserRole.MANAGER: LINE_MANAGER,
    LegacyUserRole.EMPLOYEE: EMPLOYEE,
    LegacyUserRole.REVIEWER: READ_ONLY,
}


def map_legacy_role_to_system_role(role: Optional[str]) -> str:
    """Map a legacy single-role value onto a system role key (EMPLOYEE by default)"""
    if not role:
        return EMPLOYEE
    try:
        return LEGACY_ROLE_TO_SYSTEM_ROLE[LegacyUserRole(role)]
    except ValueError:
        return EMPLOYEE
