"""Text input entities for Card Pet integration."""
from __future__ import annotations
from homeassistant.components.text import TextEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from . import parse_owners
from .const import DOMAIN
from .coordinator import CardPetCoordinator

async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry, add_entities: AddEntitiesCallback):
    coordinator: CardPetCoordinator = hass.data[DOMAIN][entry.entry_id]
    owners = parse_owners(entry)

    add_entities([
        CardPetCardName(coordinator),
        CardPetCardCompany(coordinator),
        CardPetCardOwner(coordinator, owners),
    ], True)

class CardPetCardName(TextEntity):
    _attr_icon = "mdi:card-account-details"
    _attr_native_min = 0
    _attr_native_max = 100
    _attr_mode = "text"

    def __init__(self, coord: CardPetCoordinator):
        self._coord = coord
        self._attr_unique_id = f"{DOMAIN}_card_name_input"
        self._attr_name = "Card Name"
        self._attr_native_value = ""

    async def async_set_value(self, value: str) -> None:
        self._attr_native_value = value
        self.async_write_ha_state()

class CardPetCardCompany(TextEntity):
    _attr_icon = "mdi:domain"
    _attr_native_min = 0
    _attr_native_max = 100
    _attr_mode = "text"

    def __init__(self, coord: CardPetCoordinator):
        self._coord = coord
        self._attr_unique_id = f"{DOMAIN}_card_company_input"
        self._attr_name = "Card Company"
        self._attr_native_value = ""

    async def async_set_value(self, value: str) -> None:
        self._attr_native_value = value
        self.async_write_ha_state()

class CardPetCardOwner(TextEntity):
    _attr_icon = "mdi:account"
    _attr_mode = "text"

    def __init__(self, coord: CardPetCoordinator, owners: list[str]):
        self._coord = coord
        self._owners = owners
        self._attr_unique_id = f"{DOMAIN}_card_owner_input"
        self._attr_name = "Card Owner"
        self._attr_native_value = owners[0] if owners else ""

    async def async_set_value(self, value: str) -> None:
        # Only configured owners can collect cards
        if value in self._owners:
            self._attr_native_value = value
            self.async_write_ha_state()
