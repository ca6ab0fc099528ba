"""
Audit logging for student, payment and user changes. Call on every mutation.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from institute_fees.auth.schemas import CurrentUser
from institute_fees.core.enums import AuditAction, AuditEntity
from institute_fees.core.models import AuditLog

from .schemas import AuditLogResponse

logger = logging.getLogger(__name__)


def log_activity(
    db: AsyncSession,
    actor: Optional[CurrentUser],
    action: AuditAction,
    entity_type: AuditEntity,
    entity_id: Optional[UUID] = None,
    *,
    before: Optional[Dict[str, Any]] = None,
    after: Optional[Dict[str, Any]] = None,
    description: Optional[str] = None,
) -> AuditLog:
    """Append one audit log entry to the session. Caller must commit."""
    details: Dict[str, Any] = {}
    if before is not None:
        details["before"] = before
    if after is not None:
        details["after"] = after
    if description:
        details["description"] = description

    entry = AuditLog(
        action_type=action.value,
        entity_type=entity_type.value,
        entity_id=entity_id,
        performed_by=actor.id if actor else None,
        performed_by_name=(actor.full_name or actor.email) if actor else "Unknown User",
        details=details,
    )
    db.add(entry)
    logger.debug("Audit %s %s %s by %s", action.value, entity_type.value, entity_id, entry.performed_by_name)
    return entry


async def list_audit_logs(
    db: AsyncSession,
    action: Optional[AuditAction] = None,
    entity_type: Optional[AuditEntity] = None,
    limit: int = 100,
) -> List[AuditLogResponse]:
    stmt = select(AuditLog)
    if action is not None:
        stmt = stmt.where(AuditLog.action_type == action.value)
    if entity_type is not None:
        stmt = stmt.where(AuditLog.entity_type == entity_type.value)
    stmt = stmt.order_by(AuditLog.created_at.desc()).limit(limit)
    result = await db.execute(stmt)
    return [AuditLogResponse.model_validate(a) for a in result.scalars().all()]
