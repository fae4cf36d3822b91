"""Report lifecycle: validated create/edit/delete against the store."""

from __future__ import annotations

import inspect
import time
from collections.abc import Awaitable, Callable
from typing import Optional

from tutor_reports.exceptions import FieldValidationError, ResourceNotFoundError
from tutor_reports.repositories.report_repository import ReportStore
from tutor_reports.schemas.reports import Report, ReportDraft
from tutor_reports.utils.logger import get_logger
from tutor_reports.vocabulary import effective_subject, topic_label

log = get_logger(__name__)

MIN_DETAILS_LENGTH = 30

RefreshCallback = Callable[[list[Report]], Optional[Awaitable[None]]]


def validate_draft(draft: ReportDraft) -> None:
    """
    Enforce submission rules on a draft.

    Raises:
        FieldValidationError: For the first failing field (student name, topics, details)
    """
    if not draft.student_name.strip():
        raise FieldValidationError("studentName", "請輸入學生姓名。")
    if not draft.topics:
        raise FieldValidationError("topics", f"請至少選擇一個{topic_label(draft.category)}。")
    length = len(draft.details.strip())
    if length < MIN_DETAILS_LENGTH:
        raise FieldValidationError(
            "details", f"內容詳述不得少於 {MIN_DETAILS_LENGTH} 字。目前字數：{length}"
        )


def _now_ms() -> int:
    return int(time.time() * 1000)


class ReportService:
    """
    Orchestrates report mutations and view refreshes.

    Holds the "currently editing" record: submit() updates it when set and
    creates a new report otherwise.
    """

    def __init__(self, store: ReportStore, on_refresh: Optional[RefreshCallback] = None):
        self.store = store
        self.on_refresh = on_refresh
        self.editing: Optional[Report] = None

    async def refresh(self) -> list[Report]:
        """Reload the collection and hand it to the refresh callback."""
        reports = await self.store.load()
        if self.on_refresh is not None:
            result = self.on_refresh(reports)
            if inspect.isawaitable(result):
                await result
        return reports

    async def begin_edit(self, report_id: str) -> Report:
        """Open a stored report for editing."""
        report = await self.store.get(report_id)
        if report is None:
            raise ResourceNotFoundError("Report", report_id)
        self.editing = report
        log.debug("editing started", report_id=report_id)
        return report

    def cancel_edit(self) -> None:
        self.editing = None

    async def submit(self, draft: ReportDraft, tutor_name: str) -> Report:
        """
        Validate the draft, then create a report or update the one being edited.

        Args:
            draft: Form state
            tutor_name: Identity of the submitting tutor (used on create only)

        Returns:
            The persisted report

        Raises:
            FieldValidationError: If the draft fails validation (no write happens)
        """
        validate_draft(draft)

        fields = {
            "date": draft.date,
            "category": draft.category,
            "student_name": draft.student_name.strip(),
            "subject": effective_subject(draft.category, draft.subject),
            "topics": list(draft.topics),
            "details": draft.details.strip(),
        }

        if self.editing is not None:
            report = self.editing.model_copy(update=fields)
            await self.store.update(report)
            self.editing = None
            log.info("report edited", report_id=report.id)
        else:
            report = await self.store.save(
                Report(tutor_name=tutor_name, timestamp=_now_ms(), **fields)
            )
            log.info("report created", report_id=report.id, tutor=tutor_name)

        await self.refresh()
        return report

    async def delete(self, report_id: str) -> bool:
        """Remove a report; clears editing state if it was the open record."""
        removed = await self.store.remove(report_id)
        if self.editing is not None and self.editing.id == report_id:
            self.editing = None
        await self.refresh()
        return removed
