"""
Role Management Use Cases

Custom role lifecycle and permission assignment.
"""

from .assign_permissions_use_case import AssignPermissionsUseCase
from .create_role_use_case import CreateRoleUseCase
from .delete_role_use_case import DeleteRoleUseCase
from .dtos import (
    DeleteRoleResponse,
    PermissionCatalogResponse,
    PermissionGrantInput,
    PermissionResponse,
    RolePermissionResponse,
    RoleResponse,
)
from .list_roles_use_case import GetRoleUseCase, ListPermissionsUseCase, ListRolesUseCase
from .update_role_use_case import UpdateRoleUseCase

__all__ = [
    "ListRolesUseCase",
    "GetRoleUseCase",
    "ListPermissionsUseCase",
    "CreateRoleUseCase",
    "UpdateRoleUseCase",
    "AssignPermissionsUseCase",
    "DeleteRoleUseCase",
    "PermissionGrantInput",
    "RoleResponse",
    "RolePermissionResponse",
    "PermissionResponse",
    "PermissionCatalogResponse",
    "DeleteRoleResponse",
]
