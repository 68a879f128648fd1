# File: repository.py
"""Save slot repository interface.

The storage manager never touches a storage backend directly. It is handed
a SlotRepository, which keeps one JSON-compatible document per save slot:

- PetBudgetStore (store.py): Home Assistant Store-backed, used in production
- InMemorySlotRepository: dict-backed, used by tests and demo sessions

Both can enforce a serialized byte budget and raise StorageQuotaExceededError
when a write would exceed it; the storage manager reacts by retrying with
smaller ledger retention tiers. A write the backend accepted but could not
persist raises StorageWriteError, which the storage manager reports as a
failed save.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import copy
import json
from typing import Any

from . import const


class StorageQuotaExceededError(Exception):
    """Raised when a slot write would exceed the repository's byte budget.

    Attributes:
        slot: Save slot being written
        size_bytes: Serialized size of the rejected write
        max_bytes: Configured byte budget
    """

    def __init__(self, slot: int, size_bytes: int, max_bytes: int) -> None:
        """Initialize StorageQuotaExceededError."""
        self.slot = slot
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
        super().__init__(
            f"Storage quota exceeded writing slot {slot}: "
            f"{size_bytes} bytes > {max_bytes} bytes"
        )


class StorageWriteError(OSError):
    """Raised when an accepted slot write could not be persisted.

    Attributes:
        slot: Save slot being written
    """

    def __init__(self, slot: int) -> None:
        """Initialize StorageWriteError."""
        self.slot = slot
        super().__init__(f"Failed to persist save slot {slot}")


class SlotRepository(ABC):
    """Persistent map of save slot number → slot state document."""

    @abstractmethod
    async def async_get(self, slot: int) -> dict[str, Any] | None:
        """Return a copy of the stored slot document, or None when empty."""

    @abstractmethod
    async def async_put(self, slot: int, state: dict[str, Any]) -> None:
        """Replace the slot document.

        Raises:
            StorageQuotaExceededError: If the write exceeds the byte budget
            StorageWriteError: If the backend could not persist the write
        """

    @abstractmethod
    async def async_delete(self, slot: int) -> None:
        """Clear the slot (a no-op for an empty slot)."""


class InMemorySlotRepository(SlotRepository):
    """Dict-backed repository with an optional byte budget.

    The budget applies to the whole document (all slots together).
    """

    def __init__(self, max_bytes: int | None = None) -> None:
        """Initialize the repository.

        Args:
            max_bytes: Optional serialized size budget for all slots combined.
        """
        self._slots: dict[str, dict[str, Any]] = {}
        self.max_bytes = max_bytes

    @staticmethod
    def measure(document: dict[str, Any]) -> int:
        """Serialized size of a document in bytes."""
        return len(json.dumps(document, separators=(",", ":")).encode("utf-8"))

    async def async_get(self, slot: int) -> dict[str, Any] | None:
        """Return a copy of the slot document."""
        state = self._slots.get(str(slot))
        return copy.deepcopy(state) if state is not None else None

    async def async_put(self, slot: int, state: dict[str, Any]) -> None:
        """Store a copy of the slot document, enforcing the byte budget."""
        candidate = {**self._slots, str(slot): state}
        if self.max_bytes is not None:
            size = self.measure(candidate)
            if size > self.max_bytes:
                raise StorageQuotaExceededError(slot, size, self.max_bytes)
        self._slots[str(slot)] = copy.deepcopy(state)
        const.LOGGER.debug("DEBUG: Stored slot %s in memory", slot)

    async def async_delete(self, slot: int) -> None:
        """Forget the slot."""
        self._slots.pop(str(slot), None)
