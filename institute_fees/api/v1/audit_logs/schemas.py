from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from institute_fees.core.enums import AuditAction, AuditEntity


class AuditLogResponse(BaseModel):
    id: UUID
    action_type: AuditAction
    entity_type: AuditEntity
    entity_id: Optional[UUID] = None
    performed_by: Optional[UUID] = None
    performed_by_name: str
    details: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    class Config:
        from_attributes = True
