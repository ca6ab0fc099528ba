"""Students schemas."""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from institute_fees.core.enums import FeesStatus, PaymentToggleOutcome
from institute_fees.core.schemas import FeeStats, MonthlyPaymentRecord, StudentRecord


class StudentCreate(BaseModel):
    """
    New enrollment. fees_amount, monthly_fee and course_duration are pre-filled
    from the course catalog when omitted and the course is a catalog course.
    """

    full_name: str = Field(..., min_length=1, max_length=100)
    course: str = Field(..., min_length=1, max_length=255)
    batch: str = Field("", max_length=50)
    fees_amount: Optional[int] = Field(None, ge=0)
    monthly_fee: Optional[int] = Field(None, ge=0)
    course_duration: Optional[int] = Field(None, ge=0, le=120)
    enrollment_date: date
    fees_status: FeesStatus = FeesStatus.not_paid
    mobile: str = Field("", max_length=20)
    address: str = Field("", max_length=500)
    notes: str = Field("", max_length=1000)

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Full name is required")
        return v


class StudentUpdate(BaseModel):
    """Student-level edits. Never regenerates the payment schedule."""

    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    course: Optional[str] = Field(None, min_length=1, max_length=255)
    batch: Optional[str] = Field(None, max_length=50)
    fees_amount: Optional[int] = Field(None, ge=0)
    monthly_fee: Optional[int] = Field(None, ge=0)
    course_duration: Optional[int] = Field(None, ge=0, le=120)
    enrollment_date: Optional[date] = None
    fees_status: Optional[FeesStatus] = None
    mobile: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=1000)


class StudentResponse(StudentRecord):
    id: UUID


class PaymentStatusUpdate(BaseModel):
    is_paid: bool


class PaymentUpdateResponse(BaseModel):
    outcome: PaymentToggleOutcome
    payment_index: int
    payment: MonthlyPaymentRecord
    student: StudentResponse


class StatsResponse(FeeStats):
    """Five aggregate fields plus the values the dashboard derives from them."""

    pending_fees: int = 0
    collection_rate: int = 0
