"""Per-tick mimic behavior: stat application, reveal/disguise, idle sounds.

``MimicBehavior.step`` is what the worker pool runs for each mimic.  It only
mutates the mimic it was handed and reads the shared, immutable balance
config, so many steps can run in parallel.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mimic.systems import scaling
from mimic.utils.event_log import SimEvent

if TYPE_CHECKING:
    from mimic.core.balance import BalanceConfig
    from mimic.core.enums import Difficulty
    from mimic.core.models import Mimic
    from mimic.core.world_state import WorldState
    from mimic.systems.config_store import ConfigStore

logger = logging.getLogger(__name__)


def apply_scaled_stats(mimic: Mimic, biome_id: str, config: BalanceConfig, difficulty: Difficulty) -> None:
    """Overwrite the mimic's combat numbers with scaled values."""
    health = scaling.scaled_health(config, biome_id, mimic.variant, difficulty)
    damage = scaling.scaled_damage(config, biome_id, mimic.variant, difficulty)
    experience = scaling.scaled_experience(config, mimic.variant, config.combat_scaling.experience_base)

    mimic.max_health = health
    mimic.health = health
    mimic.attack_damage = damage
    mimic.experience = experience

    if config.debug.enable_combat_logging:
        logger.debug(
            "Applied stats to mimic %d: variant=%s biome=%s health=%s damage=%s xp=%s",
            mimic.id, mimic.variant, biome_id, health, damage, experience,
        )


class MimicBehavior:
    """Stateless step logic; shares one ConfigStore with every worker."""

    __slots__ = ("_store",)

    def __init__(self, store: ConfigStore) -> None:
        self._store = store

    def refresh_stats(self, mimic: Mimic, world: WorldState) -> None:
        """Recompute stats right now (variant change, spawn command)."""
        config = self._store.get()
        biome_id = mimic.derived.resolve_biome(world.biome_map.biome_at, mimic.pos)
        apply_scaled_stats(mimic, biome_id, config, world.difficulty)
        mimic.derived.mark_stats_applied()

    def step(self, mimic: Mimic, world: WorldState) -> list[SimEvent]:
        if not mimic.alive:
            return []

        config = self._store.get()
        tick = world.tick
        events: list[SimEvent] = []

        biome_id = mimic.derived.resolve_biome(world.biome_map.biome_at, mimic.pos)

        if not mimic.derived.stats_applied:
            apply_scaled_stats(mimic, biome_id, config, world.difficulty)
            mimic.derived.mark_stats_applied()
            events.append(SimEvent(
                tick=tick,
                category="stats",
                message=f"Mimic {mimic.id} ({mimic.variant}) scaled for {biome_id}",
                entity_ids=(mimic.id,),
                metadata={
                    "health": mimic.max_health,
                    "damage": mimic.attack_damage,
                    "experience": mimic.experience,
                },
            ))

        if mimic.target_id is not None:
            if not mimic.revealed and scaling.should_reveal_on_attack(config):
                mimic.revealed = True
                events.append(SimEvent(
                    tick=tick,
                    category="reveal",
                    message=f"Mimic {mimic.id} reveals itself",
                    entity_ids=(mimic.id, mimic.target_id),
                ))
            return events

        if mimic.revealed and config.behavior.can_disguise_again:
            mimic.revealed = False
            events.append(SimEvent(
                tick=tick,
                category="disguise",
                message=f"Mimic {mimic.id} disguises itself again",
                entity_ids=(mimic.id,),
            ))

        interval = mimic.derived.interval(config)
        if interval > 0 and mimic.age % interval == 0:
            events.append(SimEvent(
                tick=tick,
                category="idle_sound",
                message=f"Mimic {mimic.id} creaks",
                entity_ids=(mimic.id,),
            ))

        return events
