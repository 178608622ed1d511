"""
Audit Use Cases

All audit-related business logic.
"""

from .dtos import AuditEventPage, AuditEventResponse
from .get_audit_events_use_case import GetAuditEventsUseCase

__all__ = [
    "GetAuditEventsUseCase",
    "AuditEventPage",
    "AuditEventResponse",
]
