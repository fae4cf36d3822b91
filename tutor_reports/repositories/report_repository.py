"""Report store: the whole report collection kept in one storage slot."""

import json
import uuid
from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_reports.repositories.slot_repository import SlotRepository
from tutor_reports.schemas.reports import Report
from tutor_reports.utils.logger import get_logger

log = get_logger(__name__)

DEFAULT_SLOT_KEY = "tutor_reports_v1"


def generate_id() -> str:
    """Generate an opaque, collision-resistant report ID."""
    return uuid.uuid4().hex


class ReportStore:
    """
    Persistence for the report collection.

    The collection is a JSON array in a single slot, most recent first. Every
    mutation is a full read-modify-write of that array; with a single active
    writer the last write wins. Records lacking an ID are backfilled on read
    and written back once.
    """

    def __init__(self, session: AsyncSession, slot_key: str = DEFAULT_SLOT_KEY):
        self.slots = SlotRepository(session)
        self.slot_key = slot_key

    async def _write_records(self, records: list[dict[str, Any]]) -> None:
        payload = json.dumps(records, ensure_ascii=False, separators=(",", ":"))
        await self.slots.write(self.slot_key, payload)

    async def _read_records(self) -> list[dict[str, Any]]:
        """Read raw records, backfilling missing IDs. Corrupt data reads as empty."""
        raw = await self.slots.read(self.slot_key)
        if not raw:
            return []

        try:
            records = json.loads(raw)
            if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
                raise ValueError("expected a JSON array of objects")
        except ValueError as e:
            log.error("failed to load reports", slot=self.slot_key, error=str(e))
            return []

        backfilled = 0
        migrated: list[dict[str, Any]] = []
        for record in records:
            if not record.get("id"):
                record = {**record, "id": generate_id()}
                backfilled += 1
            migrated.append(record)

        if backfilled:
            await self._write_records(migrated)
            log.info("report ids backfilled", slot=self.slot_key, count=backfilled)

        return migrated

    async def load(self) -> list[Report]:
        """Return the full collection in stored order (no re-sorting)."""
        records = await self._read_records()
        try:
            return [Report.model_validate(record) for record in records]
        except ValidationError as e:
            log.error(
                "failed to deserialize reports",
                slot=self.slot_key,
                errors=e.error_count(),
                error=str(e),
            )
            return []

    async def get(self, report_id: str) -> Optional[Report]:
        """Find a single report by ID."""
        for report in await self.load():
            if report.id == report_id:
                return report
        return None

    async def save(self, report: Report) -> Report:
        """Prepend a new report, assigning an ID if it has none."""
        records = await self._read_records()
        if not report.id:
            report = report.model_copy(update={"id": generate_id()})

        await self._write_records([report.to_record(), *records])
        log.info("report saved", report_id=report.id, total=len(records) + 1)
        return report

    async def update(self, report: Report) -> bool:
        """
        Replace the record whose ID matches, keeping every other record as stored.

        Returns:
            True if a record was replaced
        """
        records = await self._read_records()
        matched = False
        updated: list[dict[str, Any]] = []
        for record in records:
            if record.get("id") == report.id:
                updated.append(report.to_record())
                matched = True
            else:
                updated.append(record)

        await self._write_records(updated)
        if matched:
            log.info("report updated", report_id=report.id)
        else:
            log.warning("report update matched nothing", report_id=report.id)
        return matched

    async def remove(self, report_id: str) -> bool:
        """
        Remove the record with the given ID.

        Returns:
            True if a record was removed
        """
        records = await self._read_records()
        remaining = [r for r in records if r.get("id") != report_id]
        await self._write_records(remaining)

        removed = len(remaining) != len(records)
        log.info("report removed", report_id=report_id, removed=removed)
        return removed
