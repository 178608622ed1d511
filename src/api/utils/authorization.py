"""
Route Authorization

FastAPI dependencies that gate a route on the access control engine.

Usage:
    @router.get("/staff", dependencies=[Depends(authorize("staff", "view"))])
    async def list_staff(...): ...

    @router.patch("/staff/{user_id}")
    async def update(current_user: dict = Depends(authorize("staff", "manage", "user_id"))):
        ...
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from fastapi import Depends, Request, status

from src.api.error import ClientError
from src.app.services.access_control import (
    AccessControlService,
    PermissionCheckInput,
    PermissionContext,
)
from src.depends import get_access_control, get_current_user
from src.domain.entities import permission_key
from src.domain.errors import DomainError

logger = logging.getLogger(__name__)

Permission = Tuple[str, str]


def _forbidden(message: str) -> ClientError:
    return ClientError(
        DomainError("PERMISSION_DENIED", message), status_code=status.HTTP_403_FORBIDDEN
    )


def _target_context(request: Request, target_user_param: Optional[str]) -> Optional[PermissionContext]:
    """Read the target user id from the path, then the query string"""
    if not target_user_param:
        return None

    raw = request.path_params.get(target_user_param) or request.query_params.get(target_user_param)
    if not raw:
        return None

    try:
        return PermissionContext(target_user_id=UUID(str(raw)))
    except ValueError:
        raise ClientError(
            DomainError("INVALID_TARGET", f"Invalid {target_user_param}: {raw}"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )


def _checks(current_user: dict, permissions: List[Permission]) -> List[PermissionCheckInput]:
    return [
        PermissionCheckInput(
            tenant_id=UUID(current_user["tenant_id"]),
            user_id=UUID(current_user["user_id"]),
            resource=resource,
            action=action,
        )
        for resource, action in permissions
    ]


def authorize(resource: str, action: str, target_user_param: Optional[str] = None):
    """
    Require one permission.

    Args:
        resource: Resource name
        action: Action name
        target_user_param: Path or query parameter naming the target user,
            used for SELF and TEAM scoped grants

    Returns:
        Dependency returning the JWT payload of the allowed caller
    """

    async def dependency(
        request: Request,
        current_user: dict = Depends(get_current_user),
        access_control: AccessControlService = Depends(get_access_control),
    ) -> dict:
        decision = await access_control.check_permission(
            UUID(current_user["tenant_id"]),
            UUID(current_user["user_id"]),
            resource,
            action,
            _target_context(request, target_user_param),
        )
        if not decision.allowed:
            logger.warning(
                f"Authorization failed: user={current_user['user_id']} "
                f"permission={permission_key(resource, action)} reason={decision.reason}"
            )
            raise _forbidden(decision.reason or "Access denied")
        return current_user

    return dependency


def authorize_any(permissions: List[Permission]):
    """Require at least one of the permissions (no target context)"""
    required = " or ".join(permission_key(resource, action) for resource, action in permissions)

    async def dependency(
        current_user: dict = Depends(get_current_user),
        access_control: AccessControlService = Depends(get_access_control),
    ) -> dict:
        if not await access_control.any_allowed(_checks(current_user, permissions)):
            logger.warning(
                f"Authorization failed (any): user={current_user['user_id']} required={required}"
            )
            raise _forbidden(f"Requires one of the following permissions: {required}")
        return current_user

    return dependency


def authorize_all(permissions: List[Permission]):
    """Require every one of the permissions (no target context)"""

    async def dependency(
        current_user: dict = Depends(get_current_user),
        access_control: AccessControlService = Depends(get_access_control),
    ) -> dict:
        decisions = await access_control.check_permissions(_checks(current_user, permissions))
        denied = [
            permission_key(resource, action)
            for (resource, action), decision in zip(permissions, decisions)
            if not decision.allowed
        ]
        if not permissions or denied:
            logger.warning(
                f"Authorization failed (all): user={current_user['user_id']} denied={denied}"
            )
            raise _forbidden(f"Missing required permissions: {', '.join(denied)}")
        return current_user

    return dependency
