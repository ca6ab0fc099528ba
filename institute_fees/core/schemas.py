"""Plain data records shared by the fee derivation functions and the API layer."""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from institute_fees.core.enums import FeesStatus, PaymentToggleOutcome


class Course(BaseModel):
    """Static catalog entry. monthly_fee is informational only."""

    name: str
    category: str
    duration_months: int = Field(..., gt=0)
    total_fee: int = Field(..., ge=0)
    monthly_fee: int = Field(..., ge=0)

    class Config:
        frozen = True


class MonthlyPaymentRecord(BaseModel):
    """One scheduled monthly obligation. month is 1-indexed (1 = January)."""

    month: int = Field(..., ge=1, le=12)
    year: int
    amount: int = Field(..., ge=0)
    is_paid: bool = False
    paid_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class StudentRecord(BaseModel):
    id: Optional[UUID] = None
    full_name: str
    course: str
    batch: str = ""
    fees_amount: int = 0
    monthly_fee: int = 0
    course_duration: int = 0
    enrollment_date: Optional[date] = None
    fees_status: FeesStatus = FeesStatus.not_paid
    mobile: str = ""
    address: str = ""
    notes: str = ""
    monthly_payments: List[MonthlyPaymentRecord] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentToggleResult(BaseModel):
    outcome: PaymentToggleOutcome
    student: StudentRecord
    payment_index: int
    previous: MonthlyPaymentRecord
    current: MonthlyPaymentRecord


class FeeStats(BaseModel):
    total: int = 0
    paid: int = 0
    not_paid: int = 0
    total_fees: int = 0
    paid_fees: int = 0


class StudentFeeSummary(BaseModel):
    """Per-student view of the schedule and course timeline."""

    total_amount: int
    total_paid: int
    total_pending: int
    paid_count: int
    payment_count: int
    payment_progress: int  # percent of obligations paid
    amount_progress: int  # percent of amount paid
    expected_end_date: Optional[date] = None
    course_completed: bool = False
    months_completed: int = 0
    days_remaining: int = 0
    next_due: Optional[MonthlyPaymentRecord] = None


class PaymentInRange(BaseModel):
    """Obligation flattened out of its student, keeping the owner's name and course."""

    student_id: Optional[UUID] = None
    student_name: str
    course: str
    year: int
    month: int
    amount: int
    is_paid: bool


class MonthlyBreakdownItem(BaseModel):
    year: int
    month: int
    label: str  # e.g. "Jan 25"
    collected: int = 0
    pending: int = 0


class CourseBreakdownItem(BaseModel):
    course: str
    enrolled: int = 0
    collected: int = 0
    pending: int = 0
    total: int = 0
    collection_rate: int = 0


class PieSlice(BaseModel):
    name: str
    value: int


class RangeAnalytics(BaseModel):
    start: date
    end: date
    enrollments_in_range: int = 0
    total_payments_expected: int = 0
    total_payments_collected: int = 0
    total_payments_pending: int = 0
    paid_count: int = 0
    unpaid_count: int = 0
    collection_rate: int = 0
    monthly_breakdown: List[MonthlyBreakdownItem] = Field(default_factory=list)
    course_breakdown: List[CourseBreakdownItem] = Field(default_factory=list)
    pie_data: List[PieSlice] = Field(default_factory=list)
