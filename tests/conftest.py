"""Shared fixtures for PetBudget tests."""

from datetime import UTC, datetime
from typing import Any
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.petbudget.const import (
    DOMAIN,
    PETBUDGET_TITLE,
    SPECIES_CAT,
)
from custom_components.petbudget.engines.pet_engine import PetEngine
from custom_components.petbudget.utils.dt_utils import set_default_timezone

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name

# Midday UTC, so the local day key is the same in every test timezone
NOW = datetime(2026, 3, 14, 18, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture(autouse=True)
def reset_default_timezone() -> Any:
    """Integration setup switches day keys to the HA timezone; undo it."""
    yield
    set_default_timezone(ZoneInfo("UTC"))


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant."""
    return NOW


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title=PETBUDGET_TITLE,
        data={},
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the PetBudget integration for testing with empty storage."""
    mock_config_entry.add_to_hass(hass)

    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=None,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    return mock_config_entry


def create_test_pet(
    name: str = "Biscuit",
    species: str = SPECIES_CAT,
    now: datetime = NOW,
    **overrides: Any,
) -> dict[str, Any]:
    """Build a freshly created pet with optional field overrides."""
    result = PetEngine.create_pet(name, species, now, pet_id="pet-1")
    assert result.success
    pet = result.pet
    stats = overrides.pop("stats", None)
    if stats:
        pet["stats"] = {**pet["stats"], **stats}
    pet.update(overrides)
    return pet


def create_expense(
    record_id: str,
    amount: float,
    category: str = "Food",
    timestamp: str = "2026-03-14T12:00:00+00:00",
    label: str = "Purchased Basic Food",
) -> dict[str, Any]:
    """Build a well-formed expense record."""
    return {
        "id": record_id,
        "timestamp": timestamp,
        "amount": amount,
        "category": category,
        "label": label,
    }


def create_income(
    record_id: str,
    amount: float,
    source: str = "Task",
    timestamp: str = "2026-03-14T12:00:00+00:00",
    label: str = "Completed task: Clean Room",
) -> dict[str, Any]:
    """Build a well-formed income record."""
    return {
        "id": record_id,
        "timestamp": timestamp,
        "amount": amount,
        "source": source,
        "label": label,
    }
