"""Pet evolution rules for the Card Pet integration.

Everything in here is pure: stages are derived from a card count against a
fixed threshold ladder, and random picks draw from an ``rng`` callable the
caller passes in, so results are reproducible in tests.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TypeVar

T = TypeVar("T")

RandomSource = Callable[[], float]

# stage -> minimum card count
EVOLUTION_THRESHOLDS = MappingProxyType({
    1: 3,
    2: 10,
    3: 25,
})
MAX_STAGE = max(EVOLUTION_THRESHOLDS)

DEFAULT_LINEAGES = (
    "ANIMAL",
    "ANCIENT",
    "SPIRIT",
    "ARCHETYPE",
    "DATA",
)


class InvalidInputError(ValueError):
    """Raised when an evolution helper is called outside its contract."""


@dataclass(frozen=True)
class WeightedCandidate:
    """A selectable value with a relative weight."""
    key: str
    weight: int | float | None = 1

    @property
    def effective_weight(self) -> float:
        # Missing or non-positive weights count as 1
        return max(self.weight or 1, 1)


def _forms(*pairs: tuple[str, int]) -> tuple[WeightedCandidate, ...]:
    return tuple(WeightedCandidate(key=key, weight=weight) for key, weight in pairs)


# (lineage, stage) -> evolution forms; the rare form of each stage has weight 1
EVOLUTION_FORMS = MappingProxyType({
    ("ANIMAL", 1): _forms(("ANIMAL_PUP", 3), ("ANIMAL_CUB", 3), ("ANIMAL_KIT", 1)),
    ("ANIMAL", 2): _forms(("ANIMAL_HUNTER", 3), ("ANIMAL_GUARDIAN", 2)),
    ("ANIMAL", 3): _forms(("ANIMAL_ALPHA", 3), ("ANIMAL_PRIMAL", 1)),
    ("ANCIENT", 1): _forms(("ANCIENT_EGG", 3), ("ANCIENT_SHARD", 1)),
    ("ANCIENT", 2): _forms(("ANCIENT_WYRMLING", 3), ("ANCIENT_GOLEM", 2)),
    ("ANCIENT", 3): _forms(("ANCIENT_DRAGON", 3), ("ANCIENT_TITAN", 1)),
    ("SPIRIT", 1): _forms(("SPIRIT_WISP", 3), ("SPIRIT_EMBER", 1)),
    ("SPIRIT", 2): _forms(("SPIRIT_SHADE", 3), ("SPIRIT_KODAMA", 2)),
    ("SPIRIT", 3): _forms(("SPIRIT_PHOENIX", 3), ("SPIRIT_KITSUNE", 1)),
    ("ARCHETYPE", 1): _forms(("ARCHETYPE_SAPLING", 3), ("ARCHETYPE_SPARK", 1)),
    ("ARCHETYPE", 2): _forms(("ARCHETYPE_SAGE", 3), ("ARCHETYPE_TRICKSTER", 2)),
    ("ARCHETYPE", 3): _forms(("ARCHETYPE_HERO", 3), ("ARCHETYPE_ORACLE", 1)),
    ("DATA", 1): _forms(("DATA_BIT", 3), ("DATA_PIXEL", 1)),
    ("DATA", 2): _forms(("DATA_SPRITE", 3), ("DATA_DAEMON", 2)),
    ("DATA", 3): _forms(("DATA_CONSTRUCT", 3), ("DATA_SINGULARITY", 1)),
})


def compute_stage(card_count: int) -> int:
    """Return the highest stage whose threshold is <= card_count."""
    if isinstance(card_count, bool) or not isinstance(card_count, int):
        raise InvalidInputError(f"card count must be an integer, got {card_count!r}")
    if card_count < 0:
        raise InvalidInputError(f"card count must not be negative, got {card_count}")

    for stage in sorted(EVOLUTION_THRESHOLDS, reverse=True):
        if card_count >= EVOLUTION_THRESHOLDS[stage]:
            return stage
    return 0


def next_threshold(stage: int) -> int | None:
    """Return the card count needed to reach stage + 1, or None at the final stage."""
    if stage <= 0:
        return EVOLUTION_THRESHOLDS[min(EVOLUTION_THRESHOLDS)]
    if stage >= MAX_STAGE:
        return None
    return EVOLUTION_THRESHOLDS.get(stage + 1)


def pick_weighted(
    candidates: Sequence[WeightedCandidate], rng: RandomSource
) -> WeightedCandidate | None:
    """Pick one candidate with probability proportional to its effective weight.

    An empty sequence yields None. ``rng`` is called exactly once.
    """
    if not candidates:
        return None

    total_weight = sum(candidate.effective_weight for candidate in candidates)
    cursor = rng() * total_weight

    for candidate in candidates:
        cursor -= candidate.effective_weight
        if cursor <= 0:
            return candidate

    # Float drift can leave the cursor slightly positive
    return candidates[-1]


def pick_lineage(lineages: Sequence[T], rng: RandomSource) -> T:
    """Pick a lineage uniformly at random."""
    if not lineages:
        raise InvalidInputError("lineages must not be empty")
    index = int(rng() * len(lineages))
    return lineages[min(index, len(lineages) - 1)]


def pick_evolution_key(lineage: str | None, stage: int, rng: RandomSource) -> str | None:
    """Pick the evolution form for a lineage at a stage, if one is defined."""
    picked = pick_weighted(EVOLUTION_FORMS.get((lineage, stage), ()), rng)
    return picked.key if picked else None
