"""
RBAC API Routes

Permission introspection for the calling user.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.app.services.access_control import (
    AccessControlService,
    PermissionContext,
    PermissionDecision,
    UserPermission,
)
from src.depends import get_access_control, get_current_user

router = APIRouter(prefix="/rbac", tags=["RBAC"])


class MyPermissionsResponse(BaseModel):
    """GET /rbac/me/permissions response payload"""

    tenant_id: str
    user_id: str
    permissions: List[UserPermission]


class CheckPermissionRequest(BaseModel):
    """
    Check permission HTTP request payload

    Checks the calling user; target fields describe what the action is on.
    """

    resource: str = Field(..., min_length=1, description="Resource name, e.g. goals")
    action: str = Field(..., min_length=1, description="Action name, e.g. view")
    target_user_id: Optional[UUID] = Field(None, description="User the action targets")
    target_department: Optional[str] = None
    target_team: Optional[str] = None


@router.get(
    "/me/permissions",
    status_code=status.HTTP_200_OK,
    response_model=MyPermissionsResponse,
)
async def get_my_permissions(
    current_user: dict = Depends(get_current_user),
    access_control: AccessControlService = Depends(get_access_control),
):
    """
    List the caller's permissions in their current tenant.

    Each key appears once with the broadest scope any role grants.
    Empty when the caller has no ACTIVE membership.
    """
    tenant_id = UUID(current_user["tenant_id"])
    user_id = UUID(current_user["user_id"])

    permissions = await access_control.get_user_permissions(tenant_id, user_id)
    return MyPermissionsResponse(
        tenant_id=str(tenant_id),
        user_id=str(user_id),
        permissions=sorted(permissions, key=lambda permission: permission.key),
    )


@router.post(
    "/check",
    status_code=status.HTTP_200_OK,
    response_model=PermissionDecision,
)
async def check_permission(
    request: CheckPermissionRequest,
    current_user: dict = Depends(get_current_user),
    access_control: AccessControlService = Depends(get_access_control),
):
    """
    Check a single permission for the caller.

    Always 200: a denied check is a decision, not an error.
    """
    return await access_control.check_permission(
        UUID(current_user["tenant_id"]),
        UUID(current_user["user_id"]),
        request.resource,
        request.action,
        PermissionContext(
            target_user_id=request.target_user_id,
            target_department=request.target_department,
            target_team=request.target_team,
        ),
    )
