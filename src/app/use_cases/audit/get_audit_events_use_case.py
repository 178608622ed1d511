"""
Get Audit Events Use Case

Retrieves access control audit events for a tenant with pagination.
"""

from typing import Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork

from .dtos import AuditEventPage, AuditEventResponse


class GetAuditEventsUseCase:
    """
    Use case for retrieving audit events for a tenant.

    Business Rules:
    - Results are tenant-scoped (only events for the tenant)
    - Results ordered by newest first
    - Supports cursor-based pagination and a resource_type filter
    - Each event includes action, user_email, timestamp, metadata

    Callers are authorized by the route (audit_logs.view).
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        tenant_id: UUID,
        limit: int = 50,
        cursor: Optional[str] = None,
        resource_type: Optional[str] = None,
    ) -> AuditEventPage:
        """
        Execute get audit events use case.

        Args:
            tenant_id: Tenant UUID from JWT
            limit: Maximum number of events to return
            cursor: Pagination cursor (optional)
            resource_type: Only events about this resource type (optional)

        Returns:
            AuditEventPage with events and next_cursor
        """
        async with self.uow:
            events, next_cursor = await self.uow.audit_events.get_by_tenant_paginated(
                tenant_id, limit=limit, cursor=cursor, resource_type=resource_type
            )

            user_ids = list({event.user_id for event in events if event.user_id})
            users = await self.uow.users.get_by_ids(user_ids)
            emails = {user.id: user.email for user in users}

            return AuditEventPage(
                events=[
                    AuditEventResponse(
                        id=str(event.id),
                        action=event.action,
                        user_id=str(event.user_id) if event.user_id else None,
                        user_email=emails.get(event.user_id),
                        resource_type=event.resource_type,
                        resource_id=event.resource_id,
                        timestamp=event.created_at.isoformat() + "Z",
                        metadata=event.event_metadata or {},
                    )
                    for event in events
                ],
                next_cursor=next_cursor,
            )
