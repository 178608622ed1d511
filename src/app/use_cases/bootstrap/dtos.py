"""
Bootstrap Use Case DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel


class SeedAccessControlResponse(BaseModel):
    """Counts of catalog rows written by the seed"""

    permissions: int
    roles: int
    grants: int


class ProvisionedMembershipResponse(BaseModel):
    """Membership provisioned (or found) for a legacy user"""

    membership_id: str
    tenant_id: str
    user_id: str
    primary_role_id: str
    role_key: str
    created: bool


class BackfillResponse(BaseModel):
    """Result of a legacy membership backfill"""

    scanned: int
    created: int
