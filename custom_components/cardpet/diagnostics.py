"""Diagnostics support for Card Pet integration."""
from __future__ import annotations

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import DOMAIN
from .coordinator import CardPetCoordinator
from .evolution import MAX_STAGE


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: CardPetCoordinator = hass.data[DOMAIN][entry.entry_id]

    if not coordinator.model:
        return {"error": "Coordinator model not initialized"}

    pets_by_stage = {}
    pets_by_lineage = {}
    for pet in coordinator.model.pets.values():
        pets_by_stage[pet.stage] = pets_by_stage.get(pet.stage, 0) + 1
        if pet.lineage:
            pets_by_lineage[pet.lineage] = pets_by_lineage.get(pet.lineage, 0) + 1

    # Contact details stay out of diagnostics
    return {
        "config_data": {
            "owners": entry.data.get("owners", ""),
            "announce_evolutions": coordinator.announce_evolutions,
        },
        "statistics": {
            "total_cards": len(coordinator.model.cards),
            "total_pets": len(coordinator.model.pets),
            "pets_by_stage": pets_by_stage,
            "pets_by_lineage": pets_by_lineage,
            "fully_evolved_pets": pets_by_stage.get(MAX_STAGE, 0),
        },
        "pets_summary": {
            owner_id: coordinator.get_pet_summary(owner_id)
            for owner_id in coordinator.model.pets
        },
        "storage_status": {
            "model_loaded": coordinator.model is not None,
            "storage_version": coordinator.store._store.version,
            "storage_key": coordinator.store._store.key,
        },
    }
