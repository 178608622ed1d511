"""
Audit Use Case DTOs (Data Transfer Objects)
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class AuditEventResponse(BaseModel):
    """Audit event with the acting user's email"""

    id: str
    action: str
    user_id: Optional[str]
    user_email: Optional[str]
    resource_type: Optional[str]
    resource_id: Optional[str]
    timestamp: str
    metadata: Dict[str, Any]


class AuditEventPage(BaseModel):
    """Page of audit events, newest first"""

    events: List[AuditEventResponse]
    next_cursor: Optional[str]
