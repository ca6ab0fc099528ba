"""
Audit log for student, payment and user changes. Every mutation is logged.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Uuid

from institute_fees.db.session import Base


class AuditLog(Base):
    """Immutable record of who changed what. details holds before/after snapshots and a description."""

    __tablename__ = "audit_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    action_type = Column(String(20), nullable=False, index=True)  # CREATE, UPDATE, DELETE, LOGIN
    entity_type = Column(String(20), nullable=False, index=True)  # STUDENT, PAYMENT, USER
    entity_id = Column(Uuid, nullable=True)
    performed_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    performed_by_name = Column(String(255), nullable=False, default="Unknown User")
    details = Column(JSON, nullable=False, default=dict)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
