"""
Role API Routes

Role catalog and custom role management.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.utils.authorization import authorize
from src.app.services.access_control import AccessControlService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.roles import (
    AssignPermissionsUseCase,
    CreateRoleUseCase,
    DeleteRoleResponse,
    DeleteRoleUseCase,
    GetRoleUseCase,
    ListPermissionsUseCase,
    ListRolesUseCase,
    PermissionCatalogResponse,
    PermissionGrantInput,
    RoleResponse,
    UpdateRoleUseCase,
)
from src.depends import get_access_control, get_unit_of_work
from src.domain.errors import DomainError

router = APIRouter(prefix="/roles", tags=["Roles"])


def _raise_http(error: DomainError):
    if error.code == "ROLE_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    if error.code == "ROLE_NOT_EDITABLE":
        raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
    if error.code in ("ROLE_KEY_EXISTS", "ROLE_IN_USE"):
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    if error.code in ("PERMISSION_NOT_FOUND", "DUPLICATE_PERMISSION"):
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    raise ServerError(error)


class CreateRoleRequest(BaseModel):
    """Create role HTTP request payload"""

    name: str = Field(..., min_length=1, max_length=255)
    key: str = Field(..., min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_]+$")
    description: Optional[str] = Field(None, max_length=500)
    permissions: List[PermissionGrantInput] = Field(default_factory=list)


class UpdateRoleRequest(BaseModel):
    """Update role HTTP request payload"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=500)


class AssignPermissionsRequest(BaseModel):
    """Replace role permissions HTTP request payload"""

    permissions: List[PermissionGrantInput]


@router.get("", status_code=status.HTTP_200_OK, response_model=List[RoleResponse])
async def list_roles(
    current_user: dict = Depends(authorize("roles", "view")),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """System roles followed by the tenant's custom roles"""
    return await ListRolesUseCase(uow).execute(UUID(current_user["tenant_id"]))


@router.get(
    "/permissions",
    status_code=status.HTTP_200_OK,
    response_model=PermissionCatalogResponse,
)
async def list_permissions(
    current_user: dict = Depends(authorize("roles", "view")),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Permission catalog grouped by resource"""
    return await ListPermissionsUseCase(uow).execute()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=RoleResponse)
async def create_role(
    request: CreateRoleRequest,
    current_user: dict = Depends(authorize("roles", "manage")),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create a custom role for the caller's tenant.

    Raises:
        - 400 Bad Request: Unknown or duplicate permission
        - 403 Forbidden: Missing roles.manage
        - 409 Conflict: Key already used in this tenant
    """
    try:
        return await CreateRoleUseCase(uow).execute(
            actor_user_id=UUID(current_user["user_id"]),
            tenant_id=UUID(current_user["tenant_id"]),
            name=request.name,
            key=request.key,
            description=request.description,
            permissions=request.permissions,
        )
    except DomainError as error:
        _raise_http(error)


@router.get("/{role_id}", status_code=status.HTTP_200_OK, response_model=RoleResponse)
async def get_role(
    role_id: UUID,
    current_user: dict = Depends(authorize("roles", "view")),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    try:
        return await GetRoleUseCase(uow).execute(UUID(current_user["tenant_id"]), role_id)
    except DomainError as error:
        _raise_http(error)


@router.patch("/{role_id}", status_code=status.HTTP_200_OK, response_model=RoleResponse)
async def update_role(
    role_id: UUID,
    request: UpdateRoleRequest,
    current_user: dict = Depends(authorize("roles", "manage")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    access_control: AccessControlService = Depends(get_access_control),
):
    """
    Rename or re-describe a custom role.

    Raises:
        - 403 Forbidden: Role not editable, or missing roles.manage
        - 404 Not Found: Role not owned by the tenant (system roles included)
    """
    try:
        return await UpdateRoleUseCase(uow, access_control.cache).execute(
            actor_user_id=UUID(current_user["user_id"]),
            tenant_id=UUID(current_user["tenant_id"]),
            role_id=role_id,
            name=request.name,
            description=request.description,
        )
    except DomainError as error:
        _raise_http(error)


@router.put(
    "/{role_id}/permissions",
    status_code=status.HTTP_200_OK,
    response_model=RoleResponse,
)
async def assign_permissions(
    role_id: UUID,
    request: AssignPermissionsRequest,
    current_user: dict = Depends(authorize("roles", "manage")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    access_control: AccessControlService = Depends(get_access_control),
):
    """Replace every grant of a custom role"""
    try:
        return await AssignPermissionsUseCase(uow, access_control.cache).execute(
            actor_user_id=UUID(current_user["user_id"]),
            tenant_id=UUID(current_user["tenant_id"]),
            role_id=role_id,
            permissions=request.permissions,
        )
    except DomainError as error:
        _raise_http(error)


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_200_OK,
    response_model=DeleteRoleResponse,
)
async def delete_role(
    role_id: UUID,
    current_user: dict = Depends(authorize("roles", "manage")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    access_control: AccessControlService = Depends(get_access_control),
):
    """
    Delete a custom role.

    Raises:
        - 403 Forbidden: Role not editable, or missing roles.manage
        - 404 Not Found: Role not owned by the tenant (system roles included)
        - 409 Conflict: ROLE_IN_USE while any membership references the role
    """
    try:
        return await DeleteRoleUseCase(uow, access_control.cache).execute(
            actor_user_id=UUID(current_user["user_id"]),
            tenant_id=UUID(current_user["tenant_id"]),
            role_id=role_id,
        )
    except DomainError as error:
        _raise_http(error)
