"""Repository for named key-value storage slots."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tutor_reports.models.storage_slot import StorageSlot
from tutor_reports.utils.logger import get_logger

log = get_logger(__name__)


class SlotRepository:
    """Read, replace and clear whole slot payloads."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def read(self, key: str) -> Optional[str]:
        """Return the raw payload stored under key, or None if the slot is absent."""
        slot = await self.session.get(StorageSlot, key)
        return slot.value if slot is not None else None

    async def write(self, key: str, value: str) -> None:
        """Replace the slot payload in one statement (insert or overwrite)."""
        slot = await self.session.get(StorageSlot, key)
        if slot is None:
            self.session.add(StorageSlot(key=key, value=value))
        else:
            slot.value = value
        await self.session.flush()
        log.debug("slot written", key=key, size=len(value))

    async def delete(self, key: str) -> bool:
        """Remove the slot. Returns True if it existed."""
        slot = await self.session.get(StorageSlot, key)
        if slot is None:
            return False
        await self.session.delete(slot)
        await self.session.flush()
        log.debug("slot deleted", key=key)
        return True
