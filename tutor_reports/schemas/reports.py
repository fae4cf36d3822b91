"""Schemas for report operations.

Persisted records and API payloads both use camelCase keys (``tutorName``,
``studentName``); Python code uses the snake_case attribute names.
"""

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from tutor_reports.vocabulary import Category, Subject


class Report(BaseModel):
    """One recorded tutoring or makeup session."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field("", description="Opaque report ID; empty until first persisted")
    tutor_name: str = Field(..., description="Identity of the creating tutor")
    date: dt.date = Field(..., description="Session date")
    category: Category = Field(Category.TUTORING, description="Tutoring or makeup session")
    student_name: str = Field(..., description="Student name")
    subject: Subject = Field(..., description="Subject; fixed value for makeup sessions")
    topics: list[str] = Field(default_factory=list, description="Selected and custom topics")
    details: str = Field("", description="Free-text session narrative")
    timestamp: int = Field(..., description="Creation instant, epoch milliseconds")

    @field_validator("category", mode="before")
    @classmethod
    def default_legacy_category(cls, value: Any) -> Any:
        """Records written before categories existed are tutoring sessions."""
        if value is None or value == "":
            return Category.TUTORING
        return value

    def to_record(self) -> dict[str, Any]:
        """Serialize to the persisted JSON record shape."""
        return self.model_dump(mode="json", by_alias=True)


class ReportDraft(BaseModel):
    """Form state submitted to create or edit a report."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: dt.date = Field(default_factory=dt.date.today, description="Session date")
    category: Category = Category.TUTORING
    student_name: str = ""
    subject: Subject = Subject.ENGLISH
    topics: list[str] = Field(default_factory=list)
    details: str = ""

    @classmethod
    def from_report(cls, report: Report) -> "ReportDraft":
        """Build an edit draft from a stored report."""
        return cls(
            date=report.date,
            category=report.category,
            student_name=report.student_name,
            subject=report.subject,
            topics=list(report.topics),
            details=report.details,
        )


class ReportQuery(BaseModel):
    """Search text and categorical filters for the report view."""

    search: str = ""
    category: Category | None = None
    subject: Subject | None = None


class ReportListResponse(BaseModel):
    """Response for the filtered report view."""

    reports: list[Report]
    total: int = Field(..., description="Number of reports in the filtered view")
    privileged: bool = Field(..., description="Whether the viewer sees every tutor's reports")


class TopicSelectionResponse(BaseModel):
    """Topic selection split into vocabulary picks and custom entries."""

    chosen: list[str]
    custom: list[str]
    options: list[str]


class ReportDraftResponse(BaseModel):
    """Edit draft for an existing report."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    report_id: str
    draft: ReportDraft
    selection: TopicSelectionResponse


class VocabularyResponse(BaseModel):
    """Fixed subject and topic vocabulary."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    categories: list[Category]
    subjects: list[Subject]
    subject_topics: dict[str, list[str]]
    makeup_topics: list[str]


class ExportResponse(BaseModel):
    """Result of an export written to the server-side export directory."""

    filename: str | None = Field(None, description="None when the view was empty")
    rows: int
    destination: str
