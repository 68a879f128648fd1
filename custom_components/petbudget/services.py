# File: services.py
"""Defines custom services for the PetBudget integration.

These services allow direct actions through scripts or automations. Each
handler is a thin wrapper over the coordinator; a failed ActionResult is
surfaced as a HomeAssistantError carrying the result message.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import const
from .coordinator import PetBudgetCoordinator
from .engines.economy_engine import ActionResult

# --- Service Schemas ---
SLOT_VALIDATOR = vol.All(vol.Coerce(int), vol.In(const.SAVE_SLOTS))

CREATE_PET_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_SLOT): SLOT_VALIDATOR,
        vol.Required(const.FIELD_PET_NAME): cv.string,
        vol.Required(const.FIELD_SPECIES): vol.In(const.SPECIES_OPTIONS),
        vol.Optional(const.FIELD_DEMO, default=False): cv.boolean,
    }
)

SLOT_SCHEMA = vol.Schema({vol.Required(const.FIELD_SLOT): SLOT_VALIDATOR})

PERFORM_ACTION_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ACTION): vol.In(const.ACTION_OPTIONS),
        vol.Optional(const.FIELD_ITEM_ID): vol.Coerce(int),
        vol.Optional(const.FIELD_COST): vol.All(vol.Coerce(int), vol.Range(min=1)),
    }
)

BUY_ITEM_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_ITEM_ID): vol.Coerce(int)}
)

GIVE_COINS_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_AMOUNT): vol.All(vol.Coerce(int), vol.Range(min=1)),
        vol.Optional(const.FIELD_SOURCE, default=const.INCOME_SOURCE_BONUS): vol.In(
            const.INCOME_SOURCE_OPTIONS
        ),
    }
)

ACKNOWLEDGE_EVOLUTION_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_EVENT_ID): cv.string}
)

CLAIM_QUEST_SCHEMA = vol.Schema({vol.Required(const.FIELD_QUEST_ID): cv.string})

COMPLETE_TASK_SCHEMA = vol.Schema({vol.Required(const.FIELD_TASK_ID): cv.string})

EMPTY_SCHEMA = vol.Schema({})

SERVICES = (
    const.SERVICE_CREATE_PET,
    const.SERVICE_LOAD_SLOT,
    const.SERVICE_DELETE_SLOT,
    const.SERVICE_PERFORM_ACTION,
    const.SERVICE_BUY_ITEM,
    const.SERVICE_GIVE_COINS,
    const.SERVICE_ACKNOWLEDGE_EVOLUTION,
    const.SERVICE_CLAIM_QUEST,
    const.SERVICE_CLAIM_ALLOWANCE,
    const.SERVICE_CLAIM_DAILY_CHECK_IN,
    const.SERVICE_COMPLETE_TASK,
)


def get_first_petbudget_entry(hass: HomeAssistant) -> str | None:
    """Retrieve the first PetBudget config entry ID."""
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        return None
    return next(iter(domain_entries.keys()), None)


def _get_coordinator(hass: HomeAssistant, service: str) -> PetBudgetCoordinator:
    entry_id = get_first_petbudget_entry(hass)
    if not entry_id:
        const.LOGGER.warning("WARNING: %s: %s", service, const.MSG_NO_ENTRY_FOUND)
        raise HomeAssistantError(const.MSG_NO_ENTRY_FOUND)
    return hass.data[const.DOMAIN][entry_id][const.COORDINATOR]


def _raise_on_failure(service: str, result: ActionResult) -> None:
    if not result.success:
        const.LOGGER.warning("WARNING: %s: %s", service, result.message)
        raise HomeAssistantError(result.message)
    const.LOGGER.info("INFO: %s: %s", service, result.message)


def async_setup_services(hass: HomeAssistant) -> None:
    """Register PetBudget services."""

    async def handle_create_pet(call: ServiceCall) -> None:
        """Handle creating a pet in a save slot."""
        coordinator = _get_coordinator(hass, "Create Pet")
        result = await coordinator.async_create_pet(
            call.data[const.FIELD_SLOT],
            call.data[const.FIELD_PET_NAME],
            call.data[const.FIELD_SPECIES],
            demo=call.data[const.FIELD_DEMO],
        )
        _raise_on_failure("Create Pet", result)

    async def handle_load_slot(call: ServiceCall) -> None:
        """Handle loading a save slot."""
        coordinator = _get_coordinator(hass, "Load Slot")
        slot = call.data[const.FIELD_SLOT]
        if not await coordinator.async_load_slot(slot):
            raise HomeAssistantError(f"Save slot {slot} has no pet to load.")

    async def handle_delete_slot(call: ServiceCall) -> None:
        """Handle clearing a save slot."""
        coordinator = _get_coordinator(hass, "Delete Slot")
        slot = call.data[const.FIELD_SLOT]
        if not await coordinator.async_delete_slot(slot):
            raise HomeAssistantError(f"Save slot {slot} could not be deleted.")

    async def handle_perform_action(call: ServiceCall) -> None:
        """Handle a care action."""
        coordinator = _get_coordinator(hass, "Perform Action")
        action = call.data[const.FIELD_ACTION]
        ref: Any = None
        if action == const.ACTION_FEED:
            ref = call.data.get(const.FIELD_ITEM_ID)
        else:
            ref = call.data.get(const.FIELD_COST)
        result = await coordinator.async_perform_action(action, ref)
        _raise_on_failure("Perform Action", result)

    async def handle_buy_item(call: ServiceCall) -> None:
        """Handle a store purchase."""
        coordinator = _get_coordinator(hass, "Buy Item")
        result = await coordinator.async_buy_item(call.data[const.FIELD_ITEM_ID])
        _raise_on_failure("Buy Item", result)

    async def handle_give_coins(call: ServiceCall) -> None:
        """Handle crediting coins."""
        coordinator = _get_coordinator(hass, "Give Coins")
        result = await coordinator.async_give_coins(
            call.data[const.FIELD_AMOUNT], call.data[const.FIELD_SOURCE]
        )
        _raise_on_failure("Give Coins", result)

    async def handle_acknowledge_evolution(call: ServiceCall) -> None:
        """Handle acknowledging an evolution event."""
        coordinator = _get_coordinator(hass, "Acknowledge Evolution")
        result = await coordinator.async_acknowledge_evolution(
            call.data[const.FIELD_EVENT_ID]
        )
        _raise_on_failure("Acknowledge Evolution", result)

    async def handle_claim_quest(call: ServiceCall) -> None:
        """Handle claiming a daily quest."""
        coordinator = _get_coordinator(hass, "Claim Quest")
        result = await coordinator.async_claim_quest(call.data[const.FIELD_QUEST_ID])
        _raise_on_failure("Claim Quest", result)

    async def handle_claim_allowance(call: ServiceCall) -> None:  # pylint: disable=unused-argument
        """Handle claiming the weekly allowance."""
        coordinator = _get_coordinator(hass, "Claim Allowance")
        result = await coordinator.async_claim_allowance()
        _raise_on_failure("Claim Allowance", result)

    async def handle_claim_daily_check_in(call: ServiceCall) -> None:  # pylint: disable=unused-argument
        """Handle the daily check-in."""
        coordinator = _get_coordinator(hass, "Daily Check-In")
        result = await coordinator.async_claim_daily_check_in()
        _raise_on_failure("Daily Check-In", result)

    async def handle_complete_task(call: ServiceCall) -> None:
        """Handle completing a task."""
        coordinator = _get_coordinator(hass, "Complete Task")
        result = await coordinator.async_complete_task(call.data[const.FIELD_TASK_ID])
        _raise_on_failure("Complete Task", result)

    handlers = {
        const.SERVICE_CREATE_PET: (handle_create_pet, CREATE_PET_SCHEMA),
        const.SERVICE_LOAD_SLOT: (handle_load_slot, SLOT_SCHEMA),
        const.SERVICE_DELETE_SLOT: (handle_delete_slot, SLOT_SCHEMA),
        const.SERVICE_PERFORM_ACTION: (handle_perform_action, PERFORM_ACTION_SCHEMA),
        const.SERVICE_BUY_ITEM: (handle_buy_item, BUY_ITEM_SCHEMA),
        const.SERVICE_GIVE_COINS: (handle_give_coins, GIVE_COINS_SCHEMA),
        const.SERVICE_ACKNOWLEDGE_EVOLUTION: (
            handle_acknowledge_evolution,
            ACKNOWLEDGE_EVOLUTION_SCHEMA,
        ),
        const.SERVICE_CLAIM_QUEST: (handle_claim_quest, CLAIM_QUEST_SCHEMA),
        const.SERVICE_CLAIM_ALLOWANCE: (handle_claim_allowance, EMPTY_SCHEMA),
        const.SERVICE_CLAIM_DAILY_CHECK_IN: (handle_claim_daily_check_in, EMPTY_SCHEMA),
        const.SERVICE_COMPLETE_TASK: (handle_complete_task, COMPLETE_TASK_SCHEMA),
    }
    for service, (handler, schema) in handlers.items():
        hass.services.async_register(const.DOMAIN, service, handler, schema=schema)

    const.LOGGER.info("INFO: PetBudget services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister PetBudget services when unloading the integration."""
    for service in SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: PetBudget services have been unregistered")
