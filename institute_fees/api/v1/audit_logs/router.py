from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from institute_fees.auth.rbac import require_admin
from institute_fees.auth.schemas import CurrentUser
from institute_fees.core.enums import AuditAction, AuditEntity
from institute_fees.db.session import get_db

from .schemas import AuditLogResponse
from . import service

router = APIRouter(prefix="/api/v1/audit-logs", tags=["audit-logs"])


@router.get("", response_model=List[AuditLogResponse])
async def list_audit_logs(
    action: Optional[AuditAction] = Query(None),
    entity: Optional[AuditEntity] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
) -> List[AuditLogResponse]:
    """Newest first. Admin only."""
    return await service.list_audit_logs(db, action=action, entity_type=entity, limit=limit)
