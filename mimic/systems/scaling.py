"""Stat scaling — biome, variant and difficulty aware combat numbers.

All functions are pure over their inputs (the only side effect is optional
diagnostic logging gated by the config's debug flags).  Floors:

  health      >= 1.0
  damage      >= 0.5   (also under PEACEFUL, where the multiplier is 0.0)
  experience  >= 1
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mimic.core.enums import Difficulty

if TYPE_CHECKING:
    from mimic.core.balance import BalanceConfig
    from mimic.core.variants import MimicVariant

logger = logging.getLogger(__name__)

MIN_HEALTH = 1.0
MIN_DAMAGE = 0.5
MIN_EXPERIENCE = 1

DIFFICULTY_HEALTH_MULTIPLIER: dict[int, float] = {
    Difficulty.PEACEFUL: 0.5,
    Difficulty.EASY: 0.75,
    Difficulty.NORMAL: 1.0,
    Difficulty.HARD: 1.5,
}

DIFFICULTY_DAMAGE_MULTIPLIER: dict[int, float] = {
    Difficulty.PEACEFUL: 0.0,
    Difficulty.EASY: 0.5,
    Difficulty.NORMAL: 1.0,
    Difficulty.HARD: 1.5,
}


def difficulty_health_multiplier(difficulty: Difficulty) -> float:
    return DIFFICULTY_HEALTH_MULTIPLIER[difficulty]


def difficulty_damage_multiplier(difficulty: Difficulty) -> float:
    return DIFFICULTY_DAMAGE_MULTIPLIER[difficulty]


def scaled_health(config: BalanceConfig, biome_id: str, variant: MimicVariant, difficulty: Difficulty) -> float:
    scaling = config.combat_scaling
    difficulty_bonus = scaling.health_per_difficulty * (config.biome_weight(biome_id) - 1.0)
    raw = (scaling.health_base + difficulty_bonus) * config.variant_multipliers_for(variant.id).health
    result = raw * difficulty_health_multiplier(difficulty)

    if config.debug.enable_combat_logging:
        logger.debug("Scaled health for %s in %s: result=%s", variant, biome_id, result)

    return max(MIN_HEALTH, result)


def scaled_damage(config: BalanceConfig, biome_id: str, variant: MimicVariant, difficulty: Difficulty) -> float:
    scaling = config.combat_scaling
    difficulty_bonus = scaling.damage_per_difficulty * (config.biome_weight(biome_id) - 1.0)
    raw = (scaling.damage_base + difficulty_bonus) * config.variant_multipliers_for(variant.id).damage
    result = raw * difficulty_damage_multiplier(difficulty)

    if config.debug.enable_combat_logging:
        logger.debug("Scaled damage for %s in %s: result=%s", variant, biome_id, result)

    return max(MIN_DAMAGE, result)


def scaled_experience(config: BalanceConfig, variant: MimicVariant, base_xp: int) -> int:
    result = round(base_xp * config.variant_multipliers_for(variant.id).experience)

    if config.debug.enable_combat_logging:
        logger.debug("Scaled experience for %s: result=%s", variant, result)

    return max(MIN_EXPERIENCE, result)


# ---------------------------------------------------------------------------
# Loot
# ---------------------------------------------------------------------------

def loot_multiplier(config: BalanceConfig, looting_level: int) -> float:
    """Looting enchantment bonus (levels 0-3)."""
    return 1.0 + looting_level * config.loot_settings.looting_multiplier


def should_drop_rare_book(config: BalanceConfig, variant: MimicVariant, roll: float) -> bool:
    return roll < config.loot_settings.rare_book_drop_chance.chance_for(variant.id)


def should_drop_tooth(config: BalanceConfig, roll: float) -> bool:
    if config.loot_settings.always_drop_tooth:
        return True
    return roll < config.loot_settings.tooth_drop_chance


# ---------------------------------------------------------------------------
# Spawning & behavior knobs
# ---------------------------------------------------------------------------

def biome_spawn_weight(config: BalanceConfig, biome_id: str) -> float:
    """Spawn weight for a biome (0 = never spawn there)."""
    weight = config.biome_weight(biome_id)
    if config.debug.enable_spawn_logging:
        logger.debug("Biome spawn weight for %s: %s", biome_id, weight)
    return weight


def can_spawn_in_light(config: BalanceConfig, light_level: int) -> bool:
    spawn = config.spawn_settings
    return spawn.min_light_level <= light_level <= spawn.max_light_level


def idle_sound_interval(config: BalanceConfig) -> int:
    return config.behavior.idle_sound_interval_ticks


def should_reveal_on_attack(config: BalanceConfig) -> bool:
    return config.behavior.reveal_on_attack


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ScalingReport:
    biome_id: str
    variant: str
    difficulty: str
    health: float
    damage: float
    experience: int
    warnings: tuple[str, ...] = field(default=())


def validate_scaling(
    config: BalanceConfig,
    biome_id: str,
    variant: MimicVariant,
    difficulty: Difficulty,
) -> ScalingReport:
    """Compute all scaled values for one combination and flag floor violations."""
    logger.info("Validating scaling for %s in %s (%s)", variant, biome_id, difficulty.name)
    health = scaled_health(config, biome_id, variant, difficulty)
    damage = scaled_damage(config, biome_id, variant, difficulty)
    experience = scaled_experience(config, variant, config.combat_scaling.experience_base)
    logger.info("Results: health=%s damage=%s experience=%s", health, damage, experience)

    warnings: list[str] = []
    if health < MIN_HEALTH:
        warnings.append("Health is below minimum (1.0)")
    if damage < MIN_DAMAGE:
        warnings.append("Damage is below minimum (0.5)")
    if experience < MIN_EXPERIENCE:
        warnings.append("Experience is below minimum (1)")
    for w in warnings:
        logger.warning(w)

    return ScalingReport(
        biome_id=biome_id,
        variant=variant.id,
        difficulty=difficulty.name,
        health=health,
        damage=damage,
        experience=experience,
        warnings=tuple(warnings),
    )
