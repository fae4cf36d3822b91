"""Database models."""

from tutor_reports.models.storage_slot import StorageSlot

__all__ = [
    "StorageSlot",
]
