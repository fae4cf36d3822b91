"""Reports router: filtered view, create/edit/delete, edit drafts and CSV export."""

from typing import Literal
from urllib.parse import quote

from fastapi import APIRouter, Query, Response, status

from tutor_reports.dependencies import (
    CurrentViewer,
    ReportServiceDep,
    ReportStoreDep,
    SettingsDep,
)
from tutor_reports.exceptions import FieldValidationError, ResourceNotFoundError
from tutor_reports.repositories.report_repository import ReportStore
from tutor_reports.roles import Viewer
from tutor_reports.schemas.reports import (
    ExportResponse,
    Report,
    ReportDraft,
    ReportDraftResponse,
    ReportListResponse,
    ReportQuery,
    TopicSelectionResponse,
)
from tutor_reports.services.export_service import (
    CapturingArtifactSink,
    DirectoryArtifactSink,
    export_reports,
)
from tutor_reports.services.query_service import filter_reports
from tutor_reports.services.topic_selection import TopicSelection
from tutor_reports.utils.logger import get_logger
from tutor_reports.vocabulary import Category, Subject, topic_options

router = APIRouter()
log = get_logger(__name__)

ALL = "all"


def _parse_query(search: str, category: str, subject: str) -> ReportQuery:
    """Build a ReportQuery from raw query parameters; "all" or empty means no filter."""
    try:
        parsed_category = Category(category) if category and category != ALL else None
    except ValueError:
        raise FieldValidationError("category", f"Unknown category: {category}")
    try:
        parsed_subject = Subject(subject) if subject and subject != ALL else None
    except ValueError:
        raise FieldValidationError("subject", f"Unknown subject: {subject}")
    return ReportQuery(search=search, category=parsed_category, subject=parsed_subject)


async def _visible_report(store: ReportStore, viewer: Viewer, report_id: str) -> Report:
    """Fetch a report the viewer can see; others' reports look absent to tutors."""
    report = await store.get(report_id)
    if report is None or (not viewer.privileged and report.tutor_name != viewer.identity):
        raise ResourceNotFoundError("Report", report_id)
    return report


@router.get("/reports", response_model=ReportListResponse)
async def list_reports(
    store: ReportStoreDep,
    viewer: CurrentViewer,
    search: str = Query("", max_length=200),
    category: str = Query(ALL),
    subject: str = Query(ALL),
) -> ReportListResponse:
    """Filtered, role-scoped report view, most recent first."""
    query = _parse_query(search, category, subject)
    reports = filter_reports(await store.load(), viewer, query)
    return ReportListResponse(reports=reports, total=len(reports), privileged=viewer.privileged)


@router.get("/reports/export", response_model=None)
async def export_report_view(
    store: ReportStoreDep,
    viewer: CurrentViewer,
    settings: SettingsDep,
    search: str = Query("", max_length=200),
    category: str = Query(ALL),
    subject: str = Query(ALL),
    destination: Literal["download", "directory"] = "download",
) -> Response | ExportResponse:
    """
    Export the current view as CSV.

    With destination=download the file is returned as an attachment (204 when
    the view is empty); with destination=directory it is written to the
    configured export directory.
    """
    query = _parse_query(search, category, subject)
    view = filter_reports(await store.load(), viewer, query)

    if destination == "directory":
        filename = export_reports(
            view,
            viewer.export_prefix,
            DirectoryArtifactSink(settings.export_dir),
            tz=settings.display_timezone,
        )
        return ExportResponse(filename=filename, rows=len(view), destination=destination)

    sink = CapturingArtifactSink()
    filename = export_reports(view, viewer.export_prefix, sink, tz=settings.display_timezone)
    if filename is None or sink.payload is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return Response(
        content=sink.payload,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@router.post("/reports", response_model=Report, status_code=status.HTTP_201_CREATED)
async def create_report(
    draft: ReportDraft,
    service: ReportServiceDep,
    viewer: CurrentViewer,
) -> Report:
    """Validate and persist a new report authored by the current identity."""
    return await service.submit(draft, viewer.identity)


@router.get("/reports/{report_id}/draft", response_model=ReportDraftResponse)
async def get_edit_draft(
    report_id: str,
    store: ReportStoreDep,
    viewer: CurrentViewer,
) -> ReportDraftResponse:
    """Form state for editing a stored report, with custom topics split out."""
    report = await _visible_report(store, viewer, report_id)
    selection = TopicSelection.from_topics(report.topics, report.category, report.subject)
    return ReportDraftResponse(
        report_id=report.id,
        draft=ReportDraft.from_report(report),
        selection=TopicSelectionResponse(
            chosen=list(selection.chosen),
            custom=list(selection.custom),
            options=list(topic_options(report.category, report.subject)),
        ),
    )


@router.put("/reports/{report_id}", response_model=Report)
async def update_report(
    report_id: str,
    draft: ReportDraft,
    service: ReportServiceDep,
    viewer: CurrentViewer,
) -> Report:
    """Overwrite an existing report's editable fields; id, tutor and timestamp are kept."""
    await _visible_report(service.store, viewer, report_id)
    await service.begin_edit(report_id)
    return await service.submit(draft, viewer.identity)


@router.delete("/reports/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: str,
    service: ReportServiceDep,
    viewer: CurrentViewer,
) -> None:
    """Delete a report."""
    await _visible_report(service.store, viewer, report_id)
    await service.delete(report_id)
    log.info("report deleted", report_id=report_id, by=viewer.identity)
