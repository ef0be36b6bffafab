from datetime import date
from io import BytesIO
from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_operator, get_session, query_day, storage_timeout
from ..domain.errors import DomainError
from ..domain.report import DayReport
from ..exports.pdf import PDF_MEDIA_TYPE, day_report_to_pdf
from ..exports.spreadsheet import XLSX_MEDIA_TYPE, day_report_to_xlsx
from ..infrastructure.repositories import SqlAlchemyPerformanceRepository, SqlAlchemyReservationRepository
from ..schemas import DayReportRead
from ..usecases import reports as report_usecase
from .errors import http_error

router = APIRouter(prefix="/reports", tags=["reports"], dependencies=[Depends(get_current_operator)])


async def _load_report(session: AsyncSession, report_date: date) -> DayReport:
    timeout = storage_timeout()
    try:
        return await report_usecase.build_day_report(
            SqlAlchemyPerformanceRepository(session, timeout=timeout),
            SqlAlchemyReservationRepository(session, timeout=timeout),
            report_date=report_date,
        )
    except DomainError as exc:
        raise http_error(exc) from exc


@router.get("/day", response_model=DayReportRead)
async def day_report(
    on: date = Depends(query_day),
    session: AsyncSession = Depends(get_session),
) -> DayReportRead:
    return DayReportRead.from_domain(await _load_report(session, on))


@router.get("/day/export")
async def export_day_report(
    on: date = Depends(query_day),
    format: Literal["xlsx", "pdf"] = Query(default="xlsx"),
    session: AsyncSession = Depends(get_session),
) -> StreamingResponse:
    report = await _load_report(session, on)
    if format == "pdf":
        content, media_type = day_report_to_pdf(report), PDF_MEDIA_TYPE
    else:
        content, media_type = day_report_to_xlsx(report), XLSX_MEDIA_TYPE
    return StreamingResponse(
        BytesIO(content),
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={report.filename_stem}.{format}"},
    )
