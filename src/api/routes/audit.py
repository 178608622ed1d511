"""
Audit API Routes

Handles audit event retrieval endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.utils.authorization import authorize
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.audit import AuditEventPage, GetAuditEventsUseCase
from src.depends import get_unit_of_work

router = APIRouter(prefix="/audit", tags=["Audit"])


@router.get(
    "/events",
    status_code=status.HTTP_200_OK,
    response_model=AuditEventPage,
)
async def get_audit_events(
    current_user: dict = Depends(authorize("audit_logs", "view")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of events to return"),
    cursor: Optional[str] = Query(None, description="Pagination cursor"),
    resource_type: Optional[str] = Query(None, description="Only events about this resource type"),
):
    """
    Get Access Control Audit Events

    Returns role, staff and invitation audit logs for the tenant.

    Query Parameters:
        - limit: Maximum number of events to return (1-100, default 50)
        - cursor: Pagination cursor for fetching next page
        - resource_type: role, membership or invitation

    Returns:
        - events: List of audit events ordered by newest first
        - next_cursor: Cursor for next page (null if no more events)

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: Missing audit_logs.view
    """
    return await GetAuditEventsUseCase(uow).execute(
        tenant_id=UUID(current_user["tenant_id"]),
        limit=limit,
        cursor=cursor,
        resource_type=resource_type,
    )
