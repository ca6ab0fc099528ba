"""Search and fees-status filtering over an already loaded student list."""

from typing import Iterable, List, Union

from institute_fees.core.enums import FeesFilter
from institute_fees.core.schemas import StudentRecord


def matches_query(student: StudentRecord, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    return needle in student.full_name.lower() or needle in student.course.lower()


def matches_status(student: StudentRecord, status_filter: Union[FeesFilter, str]) -> bool:
    status_filter = FeesFilter(status_filter)
    if status_filter == FeesFilter.all:
        return True
    return student.fees_status.value == status_filter.value


def filter_students(
    students: Iterable[StudentRecord],
    query: str = "",
    status_filter: Union[FeesFilter, str] = FeesFilter.all,
) -> List[StudentRecord]:
    """Keep students matching both the search query and the status filter, keeping their input order."""
    status_filter = FeesFilter(status_filter)
    return [s for s in students if matches_query(s, query) and matches_status(s, status_filter)]
