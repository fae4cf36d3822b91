"""Viewer roles.

The single privileged role is recognized by an exact, case-sensitive match of
the display name against the configured admin identity. This is a visibility
convention, not an access control.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tutor_reports.config import Settings


@dataclass(frozen=True, slots=True)
class Viewer:
    identity: str
    privileged: bool

    @property
    def export_prefix(self) -> str:
        """Filename prefix for CSV exports of this viewer's report view."""
        if self.privileged:
            return "admin_all_reports"
        return f"tutor_reports_{self.identity}"


def resolve_viewer(identity: str, settings: Settings) -> Viewer:
    """Build the Viewer for a logged-in identity."""
    return Viewer(identity=identity, privileged=identity == settings.admin_identity)
