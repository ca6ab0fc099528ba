"""Date-range collection analytics for the dashboard."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from institute_fees.api.v1.students import service as student_service
from institute_fees.auth.dependencies import require_approved_user
from institute_fees.auth.schemas import CurrentUser
from institute_fees.core.analytics import compute_range_analytics, resolve_date_range
from institute_fees.core.enums import DatePreset
from institute_fees.core.schemas import RangeAnalytics
from institute_fees.db.session import get_db

router = APIRouter(prefix="/api/v1/analytics", tags=["analytics"])


@router.get("/range", response_model=RangeAnalytics)
async def get_range_analytics(
    preset: DatePreset = Query(DatePreset.this_month),
    start: Optional[date] = Query(None, description="Used with preset=custom"),
    end: Optional[date] = Query(None, description="Used with preset=custom"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_approved_user),
) -> RangeAnalytics:
    """
    Collected / pending amounts, counts, enrollments and monthly and course breakdowns
    for obligations scheduled inside the period (both ends inclusive).
    """
    range_start, range_end = resolve_date_range(preset, date.today(), start, end)
    if range_start > range_end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start must not be after end",
        )
    students = await student_service.load_students(db)
    return compute_range_analytics(students, range_start, range_end)
