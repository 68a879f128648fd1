"""Tests for PetBudgetStore, the Home Assistant Store-backed slot repository."""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

from homeassistant.core import HomeAssistant
import pytest

from custom_components.petbudget import const
from custom_components.petbudget.repository import (
    StorageQuotaExceededError,
    StorageWriteError,
)
from custom_components.petbudget.storage_manager import PetBudgetStorageManager
from custom_components.petbudget.store import PetBudgetStore
from tests.conftest import NOW, create_test_pet


def _stored(data: dict[str, Any]) -> dict[str, Any]:
    return {
        "version": const.STORAGE_VERSION,
        "minor_version": 1,
        "key": const.STORAGE_KEY,
        "data": data,
    }


async def test_initialize_without_storage(hass: HomeAssistant) -> None:
    """A fresh installation starts with no slots."""
    store = PetBudgetStore(hass)

    await store.async_initialize()

    assert store.data == {const.DATA_SLOTS: {}}
    assert await store.async_get(1) is None


async def test_initialize_loads_existing_slots(
    hass: HomeAssistant, hass_storage: dict[str, Any]
) -> None:
    """Stored slots are readable after startup."""
    pet = create_test_pet()
    hass_storage[const.STORAGE_KEY] = _stored(
        {const.DATA_SLOTS: {"2": {const.DATA_PET: pet}}}
    )
    store = PetBudgetStore(hass)

    await store.async_initialize()

    assert (await store.async_get(2))[const.DATA_PET] == pet


async def test_initialize_repairs_missing_slot_map(
    hass: HomeAssistant, hass_storage: dict[str, Any]
) -> None:
    """A document without a slot map gets an empty one."""
    hass_storage[const.STORAGE_KEY] = _stored({"unexpected": True})
    store = PetBudgetStore(hass)

    await store.async_initialize()

    assert store.data[const.DATA_SLOTS] == {}


async def test_put_persists_document(
    hass: HomeAssistant, hass_storage: dict[str, Any]
) -> None:
    """Each put writes the whole document through the HA Store."""
    store = PetBudgetStore(hass)
    await store.async_initialize()
    state = {const.DATA_PET: create_test_pet()}

    await store.async_put(1, state)

    written = hass_storage[const.STORAGE_KEY]["data"]
    assert written[const.DATA_SLOTS]["1"][const.DATA_PET]["name"] == "Biscuit"


async def test_get_returns_copy(hass: HomeAssistant) -> None:
    """Mutating a returned document does not touch the cache."""
    store = PetBudgetStore(hass)
    await store.async_initialize()
    await store.async_put(1, {const.DATA_PET: create_test_pet()})

    loaded = await store.async_get(1)
    loaded[const.DATA_PET]["coins"] = 0

    assert (await store.async_get(1))[const.DATA_PET]["coins"] == 1000


async def test_put_over_quota_is_refused(hass: HomeAssistant) -> None:
    """Oversized writes raise and leave the stored document alone."""
    store = PetBudgetStore(hass, max_bytes=200)
    await store.async_initialize()

    with pytest.raises(StorageQuotaExceededError) as err:
        await store.async_put(3, {const.DATA_PET: create_test_pet()})

    assert err.value.slot == 3
    assert err.value.max_bytes == 200
    assert err.value.size_bytes > 200
    assert await store.async_get(3) is None


async def test_delete_slot(
    hass: HomeAssistant, hass_storage: dict[str, Any]
) -> None:
    """Deleting clears the slot in memory and on disk."""
    store = PetBudgetStore(hass)
    await store.async_initialize()
    await store.async_put(1, {const.DATA_PET: create_test_pet()})

    await store.async_delete(1)
    await store.async_delete(2)

    assert await store.async_get(1) is None
    assert hass_storage[const.STORAGE_KEY]["data"][const.DATA_SLOTS] == {}


async def test_delete_storage_resets_cache(hass: HomeAssistant) -> None:
    """Removing the storage file empties every slot."""
    store = PetBudgetStore(hass)
    await store.async_initialize()
    await store.async_put(1, {const.DATA_PET: create_test_pet()})

    await store.async_delete_storage()

    assert store.data == PetBudgetStore.get_default_structure()


async def test_failed_write_raises_and_rolls_back(
    hass: HomeAssistant, hass_storage: dict[str, Any]
) -> None:
    """A disk error surfaces to the caller and the cache keeps the old slot."""
    store = PetBudgetStore(hass)
    await store.async_initialize()
    await store.async_put(1, {const.DATA_PET: create_test_pet(coins=10)})

    with (
        patch(
            "homeassistant.helpers.storage.Store.async_save",
            side_effect=OSError("disk full"),
        ),
        pytest.raises(StorageWriteError) as err,
    ):
        await store.async_put(1, {const.DATA_PET: create_test_pet(coins=99)})

    assert err.value.slot == 1
    assert (await store.async_get(1))[const.DATA_PET]["coins"] == 10


async def test_failed_delete_keeps_slot(hass: HomeAssistant) -> None:
    """A slot whose removal could not be written is still there."""
    store = PetBudgetStore(hass)
    await store.async_initialize()
    await store.async_put(2, {const.DATA_PET: create_test_pet()})

    with (
        patch(
            "homeassistant.helpers.storage.Store.async_save",
            side_effect=OSError("read-only file system"),
        ),
        pytest.raises(StorageWriteError),
    ):
        await store.async_delete(2)

    assert await store.async_get(2) is not None


async def test_save_all_reports_disk_failure(hass: HomeAssistant) -> None:
    """The storage manager returns False when the HA Store cannot write."""
    store = PetBudgetStore(hass)
    await store.async_initialize()
    manager = PetBudgetStorageManager(store)

    with patch(
        "homeassistant.helpers.storage.Store.async_save",
        side_effect=OSError("disk full"),
    ):
        saved = await manager.async_save_all(1, create_test_pet(), now=NOW)

    assert not saved
    assert await store.async_get(1) is None
