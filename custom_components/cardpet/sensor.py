"""Sensor entities for Card Pet integration."""
from __future__ import annotations

from homeassistant.components.sensor import SensorEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import parse_owners
from .const import DOMAIN
from .coordinator import CardPetCoordinator
from .evolution import MAX_STAGE

STAGE_ICONS = {
    0: "mdi:egg-outline",
    1: "mdi:egg-easter",
    2: "mdi:paw",
    3: "mdi:crown",
}


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry, add_entities: AddEntitiesCallback):
    coordinator: CardPetCoordinator = hass.data[DOMAIN][entry.entry_id]

    entities = []
    for owner in parse_owners(entry):
        entities.append(CardPetStageSensor(coordinator, owner))
        entities.append(CardPetCardCountSensor(coordinator, owner))

    add_entities(entities, True)

class CardPetStageSensor(SensorEntity):
    def __init__(self, coord: CardPetCoordinator, owner_id: str):
        self._coord = coord
        self._owner_id = owner_id
        self._attr_unique_id = f"{DOMAIN}_{owner_id}_pet_stage"
        self._attr_name = f"{owner_id.capitalize()} Pet Stage"
        coord.register_pet_sensor(owner_id, self)

    @property
    def native_value(self) -> int:
        pet = self._coord.get_pet(self._owner_id)
        return pet.stage if pet else 0

    @property
    def icon(self) -> str:
        return STAGE_ICONS.get(self.native_value, "mdi:egg-outline")

    @property
    def extra_state_attributes(self):
        """Return lineage, form and progress towards the next stage."""
        attributes = self._coord.get_pet_summary(self._owner_id)
        attributes["owner_id"] = self._owner_id
        attributes["max_stage"] = MAX_STAGE
        attributes["fully_evolved"] = attributes["next_evolution_at"] is None
        return attributes

    @property
    def available(self) -> bool:
        """Check if coordinator is ready."""
        return self._coord.model is not None

class CardPetCardCountSensor(SensorEntity):
    _attr_icon = "mdi:card-account-details-outline"
    _attr_native_unit_of_measurement = "cards"

    def __init__(self, coord: CardPetCoordinator, owner_id: str):
        self._coord = coord
        self._owner_id = owner_id
        self._attr_unique_id = f"{DOMAIN}_{owner_id}_card_count"
        self._attr_name = f"{owner_id.capitalize()} Business Cards"
        coord.register_pet_sensor(owner_id, self)

    @property
    def native_value(self) -> int:
        return self._coord.count_cards(self._owner_id)

    @property
    def extra_state_attributes(self):
        """Return the most recently registered cards."""
        recent = self._coord.search_cards(self._owner_id, limit=5)
        return {
            "recent_cards": [
                {"id": card.id, "name": card.name, "company": card.company}
                for card in recent
            ]
        }

    @property
    def available(self) -> bool:
        """Check if coordinator is ready."""
        return self._coord.model is not None
