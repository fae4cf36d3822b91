"""Repository layer for data access."""

from tutor_reports.repositories.slot_repository import SlotRepository
from tutor_reports.repositories.report_repository import ReportStore

__all__ = [
    "SlotRepository",
    "ReportStore",
]
