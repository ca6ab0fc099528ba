from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from institute_fees.api.v1.students import service as student_service
from institute_fees.auth.dependencies import require_approved_user
from institute_fees.auth.schemas import CurrentUser
from institute_fees.core.enums import FeesFilter
from institute_fees.db.session import get_db

from . import service

router = APIRouter(prefix="/api/v1/exports", tags=["exports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _attachment(extension: str) -> dict:
    filename = f"students_data_{date.today().isoformat()}.{extension}"
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/students.csv")
async def export_students_csv(
    q: str = Query(""),
    status_filter: FeesFilter = Query(FeesFilter.all, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_approved_user),
) -> Response:
    students = await student_service.list_students(db, q, status_filter)
    # BOM so spreadsheet apps detect UTF-8
    content = "\ufeff" + service.to_csv(students)
    return Response(content=content, media_type="text/csv; charset=utf-8", headers=_attachment("csv"))


@router.get("/students.json")
async def export_students_json(
    q: str = Query(""),
    status_filter: FeesFilter = Query(FeesFilter.all, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_approved_user),
) -> Response:
    students = await student_service.list_students(db, q, status_filter)
    return Response(content=service.to_json(students), media_type="application/json", headers=_attachment("json"))


@router.get("/students.xlsx")
async def export_students_xlsx(
    q: str = Query(""),
    status_filter: FeesFilter = Query(FeesFilter.all, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_approved_user),
) -> Response:
    students = await student_service.list_students(db, q, status_filter)
    return Response(content=service.to_xlsx(students), media_type=XLSX_MEDIA_TYPE, headers=_attachment("xlsx"))
