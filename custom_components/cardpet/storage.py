"""Storage utilities for Card Pet integration."""
from __future__ import annotations

from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store

from .const import STORAGE_KEY, STORAGE_VERSION
from .models import BusinessCard, PetStats, StorageModel


class CardPetStore:
    def __init__(self, hass: HomeAssistant):
        self._store: Store[dict] = Store(hass, STORAGE_VERSION, STORAGE_KEY)

    async def async_load(self) -> StorageModel:
        data = await self._store.async_load() or {}
        cards = {k: BusinessCard(**v) for k, v in data.get("cards", {}).items()}
        pets = {k: PetStats(**v) for k, v in data.get("pets", {}).items()}
        return StorageModel(cards=cards, pets=pets)

    async def async_save(self, model: StorageModel) -> None:
        data = {
            "cards": {k: vars(v) for k, v in model.cards.items()},
            "pets": {k: vars(v) for k, v in model.pets.items()},
        }
        await self._store.async_save(data)
