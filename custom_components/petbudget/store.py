# File: store.py
"""Handles persistent data storage for the PetBudget integration.

Uses Home Assistant's Storage helper to keep every save slot in a single
JSON document, so a pet, its ledger and its quests survive restarts. The
document is shaped as {"slots": {"1": {...}, "2": {...}, "3": {...}}}.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.json import json_bytes
from homeassistant.helpers.storage import Store

from . import const
from .repository import SlotRepository, StorageQuotaExceededError, StorageWriteError

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class PetBudgetStore(SlotRepository):
    """Home Assistant Store-backed slot repository.

    Keeps an in-memory copy of the document for quick reads and writes the
    whole document on every put. Writes larger than `max_bytes` are refused
    with StorageQuotaExceededError before anything is touched. A write the
    HA Store fails to persist is rolled back and raises StorageWriteError.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        storage_key: str = const.STORAGE_KEY,
        max_bytes: int | None = const.DEFAULT_STORAGE_QUOTA_BYTES,
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).
            max_bytes: Serialized size budget for the whole document (None = unlimited).

        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}  # In-memory data cache for quick access.
        self.max_bytes = max_bytes

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return the empty document used for fresh installations."""
        return {const.DATA_SLOTS: {}}

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with an empty structure.
        """
        const.LOGGER.debug("DEBUG: PetBudgetStore: Loading data from storage")
        existing_data = await self._store.async_load()

        if not isinstance(existing_data, dict):
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = PetBudgetStore.get_default_structure()
            return

        self._data = existing_data
        if not isinstance(self._data.get(const.DATA_SLOTS), dict):
            const.LOGGER.warning(
                "WARNING: Storage document has no slot map, starting with empty slots"
            )
            self._data[const.DATA_SLOTS] = {}
        const.LOGGER.debug(
            "DEBUG: Loaded existing data from storage: slots %s",
            sorted(self._data[const.DATA_SLOTS]),
        )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    # =========================================================================
    # SlotRepository
    # =========================================================================

    async def async_get(self, slot: int) -> dict[str, Any] | None:
        """Return a copy of the slot document, or None when empty."""
        state = self._data.get(const.DATA_SLOTS, {}).get(str(slot))
        return copy.deepcopy(state) if state is not None else None

    async def async_put(self, slot: int, state: dict[str, Any]) -> None:
        """Write a slot and persist the document.

        Raises:
            StorageQuotaExceededError: If the serialized document would exceed max_bytes
            StorageWriteError: If the document could not be written to disk
            TypeError: If the state contains values that cannot be serialized
        """
        slots = dict(self._data.get(const.DATA_SLOTS, {}))
        slots[str(slot)] = copy.deepcopy(state)
        candidate = {**self._data, const.DATA_SLOTS: slots}
        if self.max_bytes is not None:
            size = len(json_bytes(candidate))
            if size > self.max_bytes:
                raise StorageQuotaExceededError(slot, size, self.max_bytes)
        previous = self._data
        self._data = candidate
        if not await self.async_save():
            self._data = previous
            raise StorageWriteError(slot)

    async def async_delete(self, slot: int) -> None:
        """Clear a slot and persist the document.

        Raises:
            StorageWriteError: If the document could not be written to disk
        """
        slots = self._data.get(const.DATA_SLOTS, {})
        removed = slots.pop(str(slot), None)
        if removed is None:
            return
        if not await self.async_save():
            slots[str(slot)] = removed
            raise StorageWriteError(slot)
        const.LOGGER.info("INFO: Cleared save slot %s", slot)

    # =========================================================================
    # Persistence
    # =========================================================================

    async def async_save(self) -> bool:
        """Save the current data structure to storage asynchronously.

        Returns:
            True when the document was written, False when the failure was logged.

        Raises:
            No exceptions raised - errors are logged and reported via the result.
            OSError: Logged when file system issues prevent saving.
            TypeError: Logged when data contains non-serializable types.
            ValueError: Logged when data is invalid for JSON serialization.
        """
        try:
            await self._store.async_save(self._data)
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s. "
                "Data contains types that cannot be converted to JSON",
                err,
            )
        except ValueError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data format: %s. "
                "Data structure may be corrupted",
                err,
            )
        else:
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
            return True
        return False

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        self._data = PetBudgetStore.get_default_structure()
        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s",
                self._store.path,
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
