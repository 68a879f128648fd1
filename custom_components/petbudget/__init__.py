# File: __init__.py
"""Initialization file for the PetBudget integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage, and preparing the coordinator for data handling.

Key Features:
- Config entry setup and unload support.
- Coordinator initialization for the decay tick.
- Storage management for persistent save slots.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady
from homeassistant.util import dt as dt_util

from . import const
from .coordinator import PetBudgetCoordinator
from .services import async_setup_services, async_unload_services
from .storage_manager import PetBudgetStorageManager
from .store import PetBudgetStore
from .utils.dt_utils import set_default_timezone


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for PetBudget entry: %s", entry.entry_id)

    # Day keys (quest resets, check-ins) follow the Home Assistant timezone
    set_default_timezone(dt_util.get_default_time_zone())

    # Initialize the slot store and the storage manager around it.
    store = PetBudgetStore(hass, const.STORAGE_KEY)
    await store.async_initialize()
    storage_manager = PetBudgetStorageManager(store)

    # Create the data coordinator for the decay tick and slot session.
    coordinator = PetBudgetCoordinator(hass, entry, storage_manager)
    await coordinator.async_setup()

    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise ConfigEntryNotReady from e

    # Store the coordinator and data manager in hass.data.
    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORAGE_MANAGER: storage_manager,
    }

    # Set up services required by the integration.
    async_setup_services(hass)

    const.LOGGER.info("INFO: PetBudget setup complete for entry: %s", entry.entry_id)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading PetBudget entry: %s", entry.entry_id)

    hass.data[const.DOMAIN].pop(entry.entry_id, None)
    if not hass.data[const.DOMAIN]:
        await async_unload_services(hass)

    return True


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry: delete every save slot."""
    const.LOGGER.info("INFO: Removing PetBudget entry: %s", entry.entry_id)

    store = PetBudgetStore(hass, const.STORAGE_KEY)
    await store.async_delete_storage()

    const.LOGGER.info("INFO: PetBudget entry data cleared: %s", entry.entry_id)
