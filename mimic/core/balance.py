"""Balance document — the validated, reloadable tuning config for mimics.

Every section is a frozen pydantic dataclass so a persisted JSON document can
be parsed and type-checked in one step (see ``mimic.systems.config_file``).
Once built, a ``BalanceConfig`` is never mutated; a reload replaces it whole.

Defaults are literal constants: ``BalanceConfig()`` is the default document
and always passes ``validate()``.
"""

from __future__ import annotations

import logging
from dataclasses import field
from datetime import date
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import field_serializer, field_validator
from pydantic.dataclasses import dataclass as pydantic_dataclass

from mimic.core.variants import VARIANT_IDS, MimicVariant

logger = logging.getLogger(__name__)

SPAWN_RATE_TOLERANCE = 0.01
CHRISTMAS_FORCE_CHANCE = 0.5
DATE_FORMAT = "%m-%d"


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

@pydantic_dataclass(frozen=True)
class SpawnRates:
    """Relative spawn chance per variant; should total 1.0."""

    classic: float = 0.70
    corrupted: float = 0.20
    ender: float = 0.08
    christmas: float = 0.02

    def rate_for(self, variant_id: str) -> float:
        if variant_id == MimicVariant.CORRUPTED.value:
            return self.corrupted
        if variant_id == MimicVariant.ENDER.value:
            return self.ender
        if variant_id == MimicVariant.CHRISTMAS.value:
            return self.christmas
        return self.classic

    def total(self) -> float:
        return self.classic + self.corrupted + self.ender + self.christmas


@pydantic_dataclass(frozen=True)
class CombatScaling:
    health_base: float = 24.0
    health_per_difficulty: float = 8.0
    damage_base: float = 4.0
    damage_per_difficulty: float = 2.0
    experience_base: int = 10


@pydantic_dataclass(frozen=True)
class VariantMultipliers:
    health: float = 1.0
    damage: float = 1.0
    experience: float = 1.0


@pydantic_dataclass(frozen=True)
class SpawnSettings:
    min_group_size: int = 1
    max_group_size: int = 1
    spawn_weight: int = 8
    min_light_level: int = 0
    max_light_level: int = 7
    spawn_in_dungeon: bool = True
    spawn_in_mineshaft: bool = True
    spawn_in_stronghold: bool = True


@pydantic_dataclass(frozen=True)
class Behavior:
    idle_sound_interval_ticks: int = 200
    reveal_on_attack: bool = True
    can_disguise_again: bool = False
    aggro_range: float = 24.0
    movement_speed: float = 0.23


@pydantic_dataclass(frozen=True)
class RareBookDropChance:
    """Per-variant chance of a rare book; unknown variants use the classic tier."""

    classic: float = 0.15
    corrupted: float = 0.25
    ender: float = 0.30
    christmas: float = 0.50

    def chance_for(self, variant_id: str) -> float:
        if variant_id == MimicVariant.CORRUPTED.value:
            return self.corrupted
        if variant_id == MimicVariant.ENDER.value:
            return self.ender
        if variant_id == MimicVariant.CHRISTMAS.value:
            return self.christmas
        return self.classic


@pydantic_dataclass(frozen=True)
class LootSettings:
    always_drop_tooth: bool = True
    tooth_drop_chance: float = 0.8
    rare_book_drop_chance: RareBookDropChance = field(default_factory=RareBookDropChance)
    looting_multiplier: float = 0.5


@pydantic_dataclass(frozen=True)
class Debug:
    enable_spawn_logging: bool = False
    enable_combat_logging: bool = False
    show_hitboxes: bool = False


# ---------------------------------------------------------------------------
# Default tables
# ---------------------------------------------------------------------------

DEFAULT_CHRISTMAS_DATES: tuple[str, ...] = ("12-24", "12-25", "12-26")

DEFAULT_BIOME_WEIGHTS: dict[str, float] = {
    "plains": 1.0,
    "forest": 1.2,
    "dark_forest": 1.8,
    "swamp": 1.5,
    "taiga": 1.1,
    "jungle": 1.3,
    "desert": 0.7,
    "savanna": 0.8,
    "badlands": 0.9,
    "mushroom_fields": 0.3,
    "nether": 0.0,
    "end": 0.0,
    "deep_dark": 2.5,
    "dripstone_caves": 1.6,
    "lush_caves": 1.4,
}

DEFAULT_VARIANT_MULTIPLIERS: dict[str, tuple[float, float, float]] = {
    "classic": (1.0, 1.0, 1.0),
    "corrupted": (1.5, 1.4, 2.0),
    "ender": (2.0, 1.8, 3.0),
    "christmas": (1.2, 1.1, 1.5),
}

_NEUTRAL_MULTIPLIERS = VariantMultipliers()


def _default_biome_weights() -> Mapping[str, float]:
    return MappingProxyType(dict(DEFAULT_BIOME_WEIGHTS))


def _default_variant_multipliers() -> Mapping[str, VariantMultipliers]:
    return MappingProxyType({vid: VariantMultipliers(*mults) for vid, mults in DEFAULT_VARIANT_MULTIPLIERS.items()})


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

@pydantic_dataclass(frozen=True)
class BalanceConfig:
    """The whole balance document.

    Table fields are frozen on construction (read-only mappings, tuple of
    dates) so an installed document cannot be edited in place.
    """

    spawn_rates: SpawnRates = field(default_factory=SpawnRates)
    christmas_dates: tuple[str, ...] = DEFAULT_CHRISTMAS_DATES
    combat_scaling: CombatScaling = field(default_factory=CombatScaling)
    biome_weights: dict[str, float] = field(default_factory=_default_biome_weights)
    variant_multipliers: dict[str, VariantMultipliers] = field(default_factory=_default_variant_multipliers)
    spawn_settings: SpawnSettings = field(default_factory=SpawnSettings)
    behavior: Behavior = field(default_factory=Behavior)
    loot_settings: LootSettings = field(default_factory=LootSettings)
    debug: Debug = field(default_factory=Debug)

    @field_validator("biome_weights", "variant_multipliers")
    @classmethod
    def _freeze_table(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("biome_weights")
    def _dump_biome_weights(self, value: Mapping[str, float]) -> dict[str, float]:
        return dict(value)

    @field_serializer("variant_multipliers")
    def _dump_variant_multipliers(self, value: Mapping[str, VariantMultipliers]) -> dict[str, VariantMultipliers]:
        return dict(value)

    def validate(self) -> bool:
        """Sanity-check the document.  Stops at, and logs, the first failed check."""
        total = self.spawn_rates.total()
        if abs(total - 1.0) > SPAWN_RATE_TOLERANCE:
            logger.warning("Spawn rates don't sum to 1.0 (got %s)", total)
            return False

        scaling = self.combat_scaling
        if scaling.health_base <= 0:
            logger.warning("Invalid health_base: %s, must be positive", scaling.health_base)
            return False
        if scaling.damage_base <= 0:
            logger.warning("Invalid damage_base: %s, must be positive", scaling.damage_base)
            return False

        spawn = self.spawn_settings
        if spawn.min_group_size > spawn.max_group_size:
            logger.warning(
                "min_group_size (%d) cannot be greater than max_group_size (%d)",
                spawn.min_group_size, spawn.max_group_size,
            )
            return False
        if spawn.min_light_level > spawn.max_light_level:
            logger.warning(
                "min_light_level (%d) cannot be greater than max_light_level (%d)",
                spawn.min_light_level, spawn.max_light_level,
            )
            return False

        for biome_id, weight in self.biome_weights.items():
            if weight < 0:
                logger.warning("Biome weight for %s is negative: %s", biome_id, weight)
                return False

        return True

    # -- lookups with documented fallbacks --

    def biome_weight(self, biome_id: str) -> float:
        return self.biome_weights.get(biome_id, 1.0)

    def variant_multipliers_for(self, variant_id: str) -> VariantMultipliers:
        return self.variant_multipliers.get(variant_id, _NEUTRAL_MULTIPLIERS)

    # -- seasonal variant selection --

    def is_christmas_date(self, today: date | None = None) -> bool:
        today = today or date.today()
        return today.strftime(DATE_FORMAT) in self.christmas_dates

    def pick_variant(self, roll: float, holiday_roll: float = 1.0, today: date | None = None) -> str:
        """Choose a variant id from two uniform rolls in [0, 1).

        On a Christmas date, *holiday_roll* below 0.5 forces ``christmas``.
        Otherwise *roll* walks the cumulative spawn rates in catalog order;
        anything past the last bucket is ``christmas``.
        """
        if holiday_roll < CHRISTMAS_FORCE_CHANCE and self.is_christmas_date(today):
            return MimicVariant.CHRISTMAS.value

        cumulative = 0.0
        for variant_id in VARIANT_IDS[:-1]:
            cumulative += self.spawn_rates.rate_for(variant_id)
            if roll < cumulative:
                return variant_id
        return VARIANT_IDS[-1]

    def log_configuration(self) -> None:
        if not self.debug.enable_spawn_logging:
            return
        rates = self.spawn_rates
        scaling = self.combat_scaling
        logger.info("=== Mimic balance configuration ===")
        logger.info(
            "Spawn rates: classic=%s corrupted=%s ender=%s christmas=%s",
            rates.classic, rates.corrupted, rates.ender, rates.christmas,
        )
        logger.info(
            "Base stats: health=%s damage=%s experience=%s",
            scaling.health_base, scaling.damage_base, scaling.experience_base,
        )
        logger.info("Christmas dates: %s (today: %s)", self.christmas_dates, self.is_christmas_date())


def create_defaults() -> BalanceConfig:
    """Build the literal default document (always valid)."""
    return BalanceConfig()
