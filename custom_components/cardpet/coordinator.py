"""Data coordinator for Card Pet integration."""
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
import logging
import random
from typing import Any
import uuid

from homeassistant.core import HomeAssistant

_LOGGER = logging.getLogger(__name__)

from .const import EVENT_PET_EVOLVED, SEARCH_DEFAULT_LIMIT, SEARCH_FIELDS, SEARCH_MAX_LIMIT
from .evolution import DEFAULT_LINEAGES, compute_stage, pick_evolution_key, pick_lineage
from .models import CARD_FIELDS, BusinessCard, PetStats, StorageModel
from .storage import CardPetStore

_UNSET = object()


def normalize_text(value: Any) -> str | None:
    """Strip a text value; blank or non-string values become None."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class CardPetCoordinator:
    """Coordinates card registration and pet growth."""

    def __init__(self, hass: HomeAssistant, rng: Callable[[], float] = random.random) -> None:
        """Initialize the coordinator."""
        self.hass = hass
        self.store = CardPetStore(hass)
        self.model: StorageModel | None = None
        self.rng = rng
        self.announce_evolutions = True
        self._pet_sensors: dict[str, list] = {}

    async def async_init(self) -> None:
        """Initialize the coordinator by loading data."""
        self.model = await self.store.async_load()
        _LOGGER.debug("Loaded %d cards for %d pets", len(self.model.cards), len(self.model.pets))

    async def async_save(self) -> None:
        """Save the model data."""
        if self.model is None:
            raise RuntimeError("Model not initialized")
        await self.store.async_save(self.model)

    # ---- owners/pets ----
    async def ensure_owner(self, owner_id: str) -> PetStats:
        """Ensure an owner has a pet record."""
        if self.model is None:
            raise RuntimeError("Model not initialized")
        if owner_id not in self.model.pets:
            self.model.pets[owner_id] = PetStats(owner_id=owner_id)
            await self.async_save()
        return self.model.pets[owner_id]

    def get_pet(self, owner_id: str) -> PetStats | None:
        if not self.model:
            return None
        return self.model.pets.get(owner_id)

    def get_pet_summary(self, owner_id: str) -> dict[str, Any]:
        """Return lineage, stage and next threshold for an owner's pet."""
        pet = self.get_pet(owner_id) or PetStats(owner_id=owner_id)
        return pet.as_dict()

    def count_cards(self, owner_id: str) -> int:
        if not self.model:
            return 0
        return sum(1 for card in self.model.cards.values() if card.owner_id == owner_id)

    async def advance_pet(self, owner_id: str) -> PetStats:
        """Recompute an owner's pet after a card was registered."""
        pet = await self.ensure_owner(owner_id)
        card_count = self.count_cards(owner_id)
        old_stage = pet.stage

        if pet.lineage is None and card_count > 0:
            pet.lineage = pick_lineage(DEFAULT_LINEAGES, self.rng)
            _LOGGER.info("Pet of %s hatched with lineage %s", owner_id, pet.lineage)

        # The stored stage never drops, even if the count does
        new_stage = max(compute_stage(card_count), old_stage)
        pet.card_count = card_count
        pet.updated_ts = datetime.now().timestamp()

        if new_stage > old_stage:
            pet.stage = new_stage
            pet.evolution_key = pick_evolution_key(pet.lineage, new_stage, self.rng)
            _LOGGER.info("Pet of %s evolved: stage %d -> %d (%s)",
                         owner_id, old_stage, new_stage, pet.evolution_key)
            if self.announce_evolutions:
                self.hass.bus.async_fire(
                    EVENT_PET_EVOLVED,
                    {
                        "owner_id": owner_id,
                        "lineage": pet.lineage,
                        "old_stage": old_stage,
                        "new_stage": new_stage,
                        "evolution_key": pet.evolution_key,
                    },
                )

        await self.async_save()
        self._update_entities(owner_id)
        return pet

    # ---- cards ----
    async def add_card(self, owner_id: str, name: str, **fields: Any) -> tuple[BusinessCard, PetStats]:
        """Register a card and grow the owner's pet."""
        if self.model is None:
            raise RuntimeError("Model not initialized")
        name = normalize_text(name)
        if not name:
            raise ValueError("name is required")

        card = BusinessCard(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            name=name,
            **{key: normalize_text(fields.get(key)) for key in CARD_FIELDS},
        )
        self.model.cards[card.id] = card
        await self.async_save()
        _LOGGER.debug("Registered card %s for %s", card.id, owner_id)

        pet = await self.advance_pet(owner_id)
        return card, pet

    async def update_card(self, owner_id: str, card_id: str, **fields: Any) -> BusinessCard | None:
        """Update the given fields of a card; None if the owner has no such card."""
        if self.model is None:
            raise RuntimeError("Model not initialized")

        patch: dict[str, str | None] = {}
        name = fields.get("name", _UNSET)
        if name is not _UNSET:
            name = normalize_text(name)
            if not name:
                raise ValueError("name cannot be empty when provided")
            patch["name"] = name
        for key in CARD_FIELDS:
            if key in fields:
                patch[key] = normalize_text(fields[key])

        if not patch:
            raise ValueError("No updates provided")

        card = self.model.cards.get(card_id)
        if card is None or card.owner_id != owner_id:
            return None

        for key, value in patch.items():
            setattr(card, key, value)
        card.updated_ts = datetime.now().timestamp()
        await self.async_save()
        return card

    def search_cards(
        self, owner_id: str, query: str = "", field: str = "all", limit: int = SEARCH_DEFAULT_LIMIT
    ) -> list[BusinessCard]:
        """Return an owner's cards, newest first, optionally filtered by a substring."""
        if not self.model:
            return []
        limit = min(max(int(limit), 1), SEARCH_MAX_LIMIT)
        needle = (query or "").strip().lower()
        if field not in SEARCH_FIELDS:
            field = "all"
        fields = ("name", "company", "email") if field == "all" else (field,)

        cards = [card for card in self.model.cards.values() if card.owner_id == owner_id]
        if needle:
            cards = [
                card for card in cards
                if any(needle in (getattr(card, f) or "").lower() for f in fields)
            ]
        cards.sort(key=lambda card: card.created_ts, reverse=True)
        return cards[:limit]

    # ---- entities ----
    def register_pet_sensor(self, owner_id: str, sensor) -> None:
        self._pet_sensors.setdefault(owner_id, []).append(sensor)

    def _update_entities(self, owner_id: str) -> None:
        """Push new state to the sensors of an owner."""
        sensors = self._pet_sensors.get(owner_id, [])
        if not sensors:
            _LOGGER.debug("No sensors registered for %s", owner_id)
        for sensor in sensors:
            if sensor.hass is not None:
                sensor.async_write_ha_state()
