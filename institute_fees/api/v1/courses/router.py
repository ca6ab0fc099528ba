from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from institute_fees.auth.dependencies import get_current_user
from institute_fees.auth.schemas import CurrentUser
from institute_fees.core.courses import COURSE_CATEGORIES, find_course_by_name, list_courses
from institute_fees.core.schemas import Course

router = APIRouter(prefix="/api/v1/courses", tags=["courses"])


@router.get("", response_model=List[Course])
async def get_courses(
    category: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[Course]:
    """Course catalog used to pre-fill the enrollment form."""
    return list_courses(category)


@router.get("/categories", response_model=List[str])
async def get_categories(
    current_user: CurrentUser = Depends(get_current_user),
) -> List[str]:
    return COURSE_CATEGORIES


@router.get("/{name}", response_model=Course)
async def get_course(
    name: str,
    current_user: CurrentUser = Depends(get_current_user),
) -> Course:
    course = find_course_by_name(name)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    return course
