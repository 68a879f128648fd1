# File: config_flow.py
"""Config flow for the PetBudget integration.

PetBudget has no options; the flow only creates the single config entry.
Pets are created and loaded through services afterwards.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries

from . import const


class PetBudgetConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for PetBudget."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        """Confirm setup of the single PetBudget instance."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        if user_input is not None:
            return self.async_create_entry(title=const.PETBUDGET_TITLE, data={})

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER, data_schema=vol.Schema({})
        )
