"""Course catalog offered by the institute. Read-only."""

from typing import List, Optional

from institute_fees.core.schemas import Course

COURSE_CATEGORIES: List[str] = [
    "Computer Applications",
    "Design & Publishing",
    "Accounting",
    "Office Management",
    "Language & Skills",
    "Professional",
]


def _course(name: str, months: int, total_fee: int, monthly_fee: int, category: str) -> Course:
    return Course(
        name=name,
        category=category,
        duration_months=months,
        total_fee=total_fee,
        monthly_fee=monthly_fee,
    )


COURSES: List[Course] = [
    # Computer Applications
    _course("Office Application", 3, 1500, 400, "Computer Applications"),
    _course("Basics of Computer Application", 6, 2500, 350, "Computer Applications"),
    _course("Diploma in Computer Application", 12, 5000, 350, "Computer Applications"),
    _course("Diploma in Information Technology", 14, 5700, 350, "Computer Applications"),
    _course("Advance Diploma in Computer Application", 18, 8200, 400, "Computer Applications"),
    _course("Post Graduate Diploma in Computer Application", 18, 9000, 500, "Computer Applications"),
    # Design & Publishing
    _course("Certificate in Desktop Publishing", 6, 2500, 350, "Design & Publishing"),
    _course("Diploma in Desktop Publishing", 12, 5000, 350, "Design & Publishing"),
    _course("Certificate in Photoshop & CorelDraw", 3, 1500, 400, "Design & Publishing"),
    _course("Certificate in Web Page Designing", 6, 2500, 350, "Design & Publishing"),
    _course("Diploma in Web Page Designing", 12, 5000, 350, "Design & Publishing"),
    # Accounting
    _course("Certificate in Financial Accounting", 6, 2500, 350, "Accounting"),
    _course("Diploma in Financial Accounting", 12, 5000, 350, "Accounting"),
    _course("Certificate in Tally ERP9", 3, 1500, 400, "Accounting"),
    # Office Management
    _course("Diploma in Office Application & Management", 12, 5000, 350, "Office Management"),
    _course("Diploma in Office Management", 12, 5000, 350, "Office Management"),
    _course("Advance Diploma in Computer Technology", 12, 5000, 350, "Office Management"),
    # Language & Skills
    _course("Typing Certificate", 3, 2000, 500, "Language & Skills"),
    _course("Basic Spoken English", 3, 2000, 500, "Language & Skills"),
    _course("Certificate in Spoken English", 6, 3000, 350, "Language & Skills"),
    # Professional
    _course("Diploma in Computer Teachers Training", 18, 8200, 400, "Professional"),
]

_COURSES_BY_NAME = {c.name: c for c in COURSES}


def find_course_by_name(name: str) -> Optional[Course]:
    """Exact-name lookup; None when the course is not in the catalog."""
    return _COURSES_BY_NAME.get(name)


def list_courses(category: Optional[str] = None) -> List[Course]:
    if category is None:
        return list(COURSES)
    return [c for c in COURSES if c.category == category]
