"""Student enrollment and its monthly payment schedule."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from institute_fees.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Student(Base):
    """One enrollment. Owns its monthly payments; deleting the student deletes them."""

    __tablename__ = "students"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name = Column(String(100), nullable=False)
    course = Column(String(255), nullable=False, index=True)
    batch = Column(String(50), nullable=False, default="")
    # Total fee in whole rupees; copied from the course catalog unless edited
    fees_amount = Column(Integer, nullable=False, default=0)
    # Advisory only; schedule amounts are authoritative
    monthly_fee = Column(Integer, nullable=False, default=0)
    course_duration = Column(Integer, nullable=False, default=0)
    enrollment_date = Column(Date, nullable=True)
    # paid | not_paid, recomputed on every payment toggle
    fees_status = Column(String(20), nullable=False, default="not_paid")
    mobile = Column(String(20), nullable=False, default="")
    address = Column(String(500), nullable=False, default="")
    notes = Column(Text, nullable=False, default="")
    created_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    monthly_payments = relationship(
        "MonthlyPayment",
        back_populates="student",
        cascade="all, delete-orphan",
        order_by=lambda: [MonthlyPayment.year, MonthlyPayment.month],
        lazy="selectin",
    )


class MonthlyPayment(Base):
    """A single scheduled obligation. month is 1-indexed (1 = January)."""

    __tablename__ = "monthly_payments"
    __table_args__ = (
        UniqueConstraint("student_id", "year", "month", name="uq_monthly_payment_student_month"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    amount = Column(Integer, nullable=False)
    is_paid = Column(Boolean, nullable=False, default=False)
    # Set exactly when is_paid becomes true, cleared when it becomes false
    paid_date = Column(DateTime(timezone=True), nullable=True)

    student = relationship("Student", back_populates="monthly_payments")
