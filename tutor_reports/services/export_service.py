"""CSV export of a report view.

Formatting is pure; the download itself is delegated to an injected
ArtifactSink so the host environment decides where the file goes.
"""

import re
from collections.abc import Sequence
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Protocol
from zoneinfo import ZoneInfo

from tutor_reports.schemas.reports import Report
from tutor_reports.utils.logger import get_logger

log = get_logger(__name__)

UTF8_BOM = "\ufeff"

CSV_HEADERS = ["日期", "導師姓名", "類別", "學生姓名", "科目", "內容重點", "詳細內容", "提交時間"]

# Not allowed within a single path component
_UNSAFE_FILENAME_CHARS = re.compile(r"[\\/:*?\"<>|\x00-\x1f]")


class ArtifactSink(Protocol):
    """Hands a finished artifact to the host environment."""

    def __call__(self, filename: str, payload: bytes) -> None: ...


class DirectoryArtifactSink:
    """Writes artifacts into a local directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def __call__(self, filename: str, payload: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / Path(filename).name
        path.write_bytes(payload)
        log.info("export written", path=str(path), size=len(payload))


class CapturingArtifactSink:
    """Keeps the last artifact in memory (used to return it over HTTP)."""

    def __init__(self) -> None:
        self.filename: Optional[str] = None
        self.payload: Optional[bytes] = None

    def __call__(self, filename: str, payload: bytes) -> None:
        self.filename = filename
        self.payload = payload


def format_timestamp(timestamp_ms: int, tz: str = "Asia/Taipei") -> str:
    """Render epoch milliseconds as a zh-TW locale string, e.g. 2024/3/5 下午2:07:09."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=ZoneInfo(tz))
    period = "上午" if moment.hour < 12 else "下午"
    hour = moment.hour % 12 or 12
    return (
        f"{moment.year}/{moment.month}/{moment.day} "
        f"{period}{hour}:{moment.minute:02d}:{moment.second:02d}"
    )


def _quoted(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def build_csv(reports: Sequence[Report], tz: str = "Asia/Taipei") -> str:
    """Build the CSV text (header plus one row per report, newline separated)."""
    lines = [",".join(CSV_HEADERS)]
    for r in reports:
        row = [
            r.date.isoformat(),
            r.tutor_name,
            r.category.value,
            r.student_name,
            r.subject.value,
            _quoted(", ".join(r.topics)),
            _quoted(r.details),
            format_timestamp(r.timestamp, tz),
        ]
        lines.append(",".join(row))
    return "\n".join(lines)


def export_filename(name_prefix: str, today: Optional[date] = None) -> str:
    """
    Return {prefix}_{YYYY-MM-DD}.csv for the given (default: current UTC) date.

    Characters that are not safe in a single path component are replaced with
    "_", so display names never select a different directory.
    """
    day = today or datetime.now(timezone.utc).date()
    prefix = _UNSAFE_FILENAME_CHARS.sub("_", name_prefix)
    return f"{prefix}_{day.isoformat()}.csv"


def export_reports(
    reports: Sequence[Report],
    name_prefix: str,
    sink: ArtifactSink,
    today: Optional[date] = None,
    tz: str = "Asia/Taipei",
) -> Optional[str]:
    """
    Serialize a report view and hand it to the sink.

    An empty view is a silent no-op: the sink is not called.

    Args:
        reports: Report view to export, in display order
        name_prefix: Filename prefix
        sink: Receives the filename and BOM-prefixed UTF-8 bytes
        today: Date used in the filename
        tz: Time zone for the submission-time column

    Returns:
        The artifact filename, or None if nothing was exported
    """
    if not reports:
        log.debug("export skipped, empty view", prefix=name_prefix)
        return None

    payload = (UTF8_BOM + build_csv(reports, tz)).encode("utf-8")
    filename = export_filename(name_prefix, today)
    sink(filename, payload)
    log.info("reports exported", filename=filename, rows=len(reports))
    return filename
