"""Config flow for Card Pet integration."""
from __future__ import annotations

from typing import Any

from homeassistant import config_entries
from homeassistant.core import callback
import voluptuous as vol

from .const import CONF_ANNOUNCE_EVOLUTIONS, CONF_OWNERS, DEFAULT_OWNERS, DOMAIN


class CardPetConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        # Check for existing instance
        if self._async_current_entries():
            return self.async_abort(reason="single_instance_allowed")

        errors = {}
        if user_input is not None:
            owners = [o.strip() for o in user_input.get(CONF_OWNERS, "").split(",") if o.strip()]
            if owners:
                return self.async_create_entry(title="Card Pet", data=user_input)
            errors[CONF_OWNERS] = "no_owners"

        data_schema = vol.Schema({
            vol.Required(CONF_OWNERS, default=DEFAULT_OWNERS): str,
        })
        return self.async_show_form(step_id="user", data_schema=data_schema, errors=errors)

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        return CardPetOptionsFlow(config_entry)

class CardPetOptionsFlow(config_entries.OptionsFlow):
    def __init__(self, entry):
        self.entry = entry

    async def async_step_init(self, user_input=None):
        if user_input is not None:
            return self.async_create_entry(title="", data=user_input)

        data_schema = vol.Schema({
            vol.Optional(
                CONF_ANNOUNCE_EVOLUTIONS,
                default=self.entry.options.get(CONF_ANNOUNCE_EVOLUTIONS, True),
            ): bool,
        })
        return self.async_show_form(step_id="init", data_schema=data_schema)
