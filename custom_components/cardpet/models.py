"""Data models for Card Pet integration."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .evolution import next_threshold

# Optional contact fields a card may carry besides its name
CARD_FIELDS = ("company", "email", "phone", "title", "memo")


@dataclass
class BusinessCard:
    id: str
    owner_id: str
    name: str
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    title: str | None = None
    memo: str | None = None
    created_ts: float = field(default_factory=lambda: datetime.now().timestamp())
    updated_ts: float | None = None

@dataclass
class PetStats:
    """Growth state of one owner's pet"""
    owner_id: str
    lineage: str | None = None  # assigned on the first registered card, never changed
    stage: int = 0
    evolution_key: str | None = None
    card_count: int = 0
    updated_ts: float | None = None

    def as_dict(self) -> dict:
        """Return the public summary of this pet."""
        return {
            "lineage": self.lineage,
            "stage": self.stage,
            "evolution_key": self.evolution_key,
            "card_count": self.card_count,
            "next_evolution_at": next_threshold(self.stage),
        }

@dataclass
class StorageModel:
    cards: dict[str, BusinessCard] = field(default_factory=dict)  # key: card id
    pets: dict[str, PetStats] = field(default_factory=dict)  # key: owner_id
