"""Process-wide logged-in session.

The identity is persisted in its own storage slot, separate from the report
collection: read once at startup, written on login, cleared on logout.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tutor_reports.exceptions import FieldValidationError, NotLoggedInError
from tutor_reports.repositories.slot_repository import SlotRepository
from tutor_reports.utils.logger import get_logger

log = get_logger(__name__)


class SessionState:
    """
    Holds the current identity for the single active browser tab.

    Safe for single-threaded async use within one event loop.
    """

    def __init__(self, slot_key: str = "tutor_user") -> None:
        self.slot_key = slot_key
        self._identity: Optional[str] = None

    @property
    def identity(self) -> Optional[str]:
        return self._identity

    @property
    def logged_in(self) -> bool:
        return self._identity is not None

    def require_identity(self) -> str:
        """Return the identity or raise NotLoggedInError."""
        if self._identity is None:
            raise NotLoggedInError()
        return self._identity

    async def restore(self, session: AsyncSession) -> Optional[str]:
        """Load a previously persisted identity (startup)."""
        stored = await SlotRepository(session).read(self.slot_key)
        self._identity = stored or None
        log.info("session restored", logged_in=self.logged_in)
        return self._identity

    async def login(self, session: AsyncSession, name: str) -> str:
        """Accept a bare display name as the identity and persist it."""
        identity = name.strip()
        if not identity:
            raise FieldValidationError("name", "請輸入姓名。")
        await SlotRepository(session).write(self.slot_key, identity)
        self._identity = identity
        log.info("session started", identity=identity)
        return identity

    async def logout(self, session: AsyncSession) -> None:
        """Clear the identity in memory and in storage."""
        await SlotRepository(session).delete(self.slot_key)
        log.info("session ended", identity=self._identity)
        self._identity = None
