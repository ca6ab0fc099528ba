"""Student list exports: CSV, JSON and Excel."""

import csv
import io
import json
from typing import Any, Iterable, List

from openpyxl import Workbook
from openpyxl.styles import Font

from institute_fees.core.enums import FeesStatus
from institute_fees.core.schemas import StudentRecord
from institute_fees.core.stats import student_paid_fees, student_total_fees

EXPORT_HEADERS = [
    "S.No",
    "Full Name",
    "Course",
    "Batch",
    "Total Fees",
    "Monthly Fee",
    "Duration (Months)",
    "Enrollment Date",
    "Fees Status",
    "Paid Amount",
    "Pending Amount",
    "Mobile",
    "Payment Progress",
]


def _progress(student: StudentRecord) -> str:
    total = len(student.monthly_payments)
    if not total:
        return "N/A"
    paid = sum(1 for p in student.monthly_payments if p.is_paid)
    return f"{paid}/{total} months"


def export_rows(students: Iterable[StudentRecord]) -> List[List[Any]]:
    """One row per student, aligned with EXPORT_HEADERS."""
    rows: List[List[Any]] = []
    for index, s in enumerate(students, start=1):
        paid = student_paid_fees(s)
        rows.append([
            index,
            s.full_name,
            s.course,
            s.batch,
            s.fees_amount,
            s.monthly_fee,
            s.course_duration,
            s.enrollment_date.strftime("%d/%m/%Y") if s.enrollment_date else "",
            "Paid" if s.fees_status == FeesStatus.paid else "Pending",
            paid,
            student_total_fees(s) - paid,
            s.mobile,
            _progress(s),
        ])
    return rows


def to_csv(students: Iterable[StudentRecord]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    writer.writerows(export_rows(students))
    return buffer.getvalue()


def to_json(students: Iterable[StudentRecord]) -> str:
    data = []
    for index, s in enumerate(students, start=1):
        item = {"sno": index}
        item.update(s.model_dump(mode="json", exclude={"address", "notes"}))
        data.append(item)
    return json.dumps(data, indent=2, ensure_ascii=False)


def to_xlsx(students: Iterable[StudentRecord]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Students"
    ws.append(EXPORT_HEADERS)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in export_rows(students):
        ws.append(row)
    ws.freeze_panes = "A2"

    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()
