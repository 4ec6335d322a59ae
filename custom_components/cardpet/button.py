"""Button entities for Card Pet integration."""
from __future__ import annotations

import logging

from homeassistant.components.button import ButtonEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import entity_registry as er
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, SERVICE_REGISTER_CARD
from .coordinator import CardPetCoordinator

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry, add_entities: AddEntitiesCallback):
    coordinator: CardPetCoordinator = hass.data[DOMAIN][entry.entry_id]
    add_entities([CardPetRegisterCardButton(coordinator, hass)], True)

class CardPetRegisterCardButton(ButtonEntity):
    _attr_icon = "mdi:card-plus"

    def __init__(self, coord: CardPetCoordinator, hass: HomeAssistant):
        self._coord = coord
        self._hass = hass
        self._attr_unique_id = f"{DOMAIN}_register_card_button"
        self._attr_name = "Card Pet Register Card"

    def _input_entity_ids(self) -> dict[str, str]:
        """Map the text input unique ids to their entity ids."""
        wanted = {
            f"{DOMAIN}_card_name_input": "name",
            f"{DOMAIN}_card_company_input": "company",
            f"{DOMAIN}_card_owner_input": "owner",
        }
        found = {}
        for entry in er.async_get(self._hass).entities.values():
            if entry.unique_id in wanted:
                found[wanted[entry.unique_id]] = entry.entity_id
        return found

    async def async_press(self) -> None:
        _LOGGER.info("Card Pet: Register card button pressed")

        entity_ids = self._input_entity_ids()
        if "name" not in entity_ids or "owner" not in entity_ids:
            _LOGGER.warning("Card Pet: Could not find the card input entities")
            return

        values = {}
        for key, entity_id in entity_ids.items():
            state = self._hass.states.get(entity_id)
            values[key] = state.state.strip() if state and state.state else ""

        if not values["name"]:
            _LOGGER.warning("Card Pet: Card name is empty")
            return
        if not values["owner"]:
            _LOGGER.warning("Card Pet: Card owner is empty")
            return

        service_data = {"owner": values["owner"], "name": values["name"]}
        if values.get("company"):
            service_data["company"] = values["company"]

        try:
            await self._hass.services.async_call(
                DOMAIN, SERVICE_REGISTER_CARD, service_data, blocking=True
            )
        except HomeAssistantError as ex:
            _LOGGER.error("Card Pet: Failed to register card: %s", ex)
            return

        _LOGGER.info("Card Pet: Registered card '%s' for %s", values["name"], values["owner"])
        # Clear the name field for the next card
        await self._hass.services.async_call(
            "text", "set_value", {"entity_id": entity_ids["name"], "value": ""}
        )
