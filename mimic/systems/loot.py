"""Death drops for a killed mimic."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mimic.core.enums import Domain
from mimic.systems import scaling

if TYPE_CHECKING:
    from mimic.core.balance import BalanceConfig
    from mimic.core.models import Mimic
    from mimic.systems.rng import DeterministicRNG

MAX_LOOTING_LEVEL = 3


@dataclass(frozen=True, slots=True)
class LootDrop:
    teeth: int
    rare_book: bool
    experience: int
    multiplier: float


def roll_loot(
    config: BalanceConfig,
    mimic: Mimic,
    looting_level: int,
    rng: DeterministicRNG,
    tick: int,
) -> LootDrop:
    """Roll tooth and rare-book drops; looting level is clamped to 0-3."""
    looting_level = max(0, min(looting_level, MAX_LOOTING_LEVEL))
    multiplier = scaling.loot_multiplier(config, looting_level)

    tooth_roll = rng.next_float(Domain.LOOT, mimic.id, tick, salt=0)
    book_roll = rng.next_float(Domain.LOOT, mimic.id, tick, salt=1)

    teeth = max(1, int(multiplier)) if scaling.should_drop_tooth(config, tooth_roll) else 0
    return LootDrop(
        teeth=teeth,
        rare_book=scaling.should_drop_rare_book(config, mimic.variant, book_roll),
        experience=mimic.experience,
        multiplier=multiplier,
    )
