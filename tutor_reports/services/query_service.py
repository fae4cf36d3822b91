"""Filtered, role-scoped view of the report collection."""

from collections.abc import Iterable

from tutor_reports.roles import Viewer
from tutor_reports.schemas.reports import Report, ReportQuery


def _matches_search(report: Report, term: str, privileged: bool) -> bool:
    if term in report.student_name.lower() or term in report.details.lower():
        return True
    return privileged and term in report.tutor_name.lower()


def filter_reports(reports: Iterable[Report], viewer: Viewer, query: ReportQuery) -> list[Report]:
    """
    Narrow the collection for one viewer.

    Steps are conjunctive and applied in order: ownership scope for
    non-privileged viewers, category, subject, then case-insensitive substring
    search over student name and details (and tutor name for privileged
    viewers). Input order is preserved.

    Args:
        reports: Full collection, as loaded from the store
        viewer: Who is looking
        query: Search text and categorical filters (None means all)

    Returns:
        Reports visible to the viewer that satisfy every filter
    """
    data = list(reports)

    if not viewer.privileged:
        data = [r for r in data if r.tutor_name == viewer.identity]

    if query.category is not None:
        data = [r for r in data if r.category == query.category]

    if query.subject is not None:
        data = [r for r in data if r.subject == query.subject]

    term = query.search.strip().lower()
    if term:
        data = [r for r in data if _matches_search(r, term, viewer.privileged)]

    return data
