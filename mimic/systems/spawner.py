"""Mimic spawner — natural spawns on an interval plus command-driven spawns."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from mimic.core.derived_state import DEFAULT_BIOME_ID
from mimic.core.enums import Domain
from mimic.core.models import BlockPos, Mimic
from mimic.core.variants import MimicVariant, resolve
from mimic.systems import scaling

if TYPE_CHECKING:
    from mimic.config import SimulationConfig
    from mimic.core.world_state import WorldState
    from mimic.systems.config_store import ConfigStore
    from mimic.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

UNDERGROUND_Y = -32
RING_BASE_RADIUS = 5.0
RING_RADIUS_STEP = 2.0


def ring_positions(center: BlockPos, count: int) -> list[BlockPos]:
    """Spread *count* positions on a loose ring (radius 5, 7 or 9) around *center*."""
    positions: list[BlockPos] = []
    for i in range(count):
        angle = (2 * math.pi * i) / count
        radius = RING_BASE_RADIUS + (i % 3) * RING_RADIUS_STEP
        positions.append(BlockPos(
            center.x + round(math.cos(angle) * radius),
            center.y,
            center.z + round(math.sin(angle) * radius),
        ))
    return positions


class MimicSpawner:
    """Creates mimics; natural spawns respect biome weight and light level."""

    __slots__ = ("_config", "_rng", "_store")

    def __init__(self, config: SimulationConfig, rng: DeterministicRNG, store: ConfigStore) -> None:
        self._config = config
        self._rng = rng
        self._store = store

    def should_spawn(self, world: WorldState) -> bool:
        return (
            world.tick % self._config.spawner_interval == 0
            and len(world.alive_mimics()) < self._config.spawner_max_mimics
        )

    def create(self, world: WorldState, pos: BlockPos, variant: MimicVariant | None = None) -> Mimic:
        """Build a mimic at *pos*; picks a variant from the spawn rates when none is given."""
        balance = self._store.get()
        eid = world.allocate_entity_id()
        if variant is None:
            roll = self._rng.next_float(Domain.VARIANT, eid, world.tick, salt=0)
            holiday_roll = self._rng.next_float(Domain.VARIANT, eid, world.tick, salt=1)
            variant = resolve(balance.pick_variant(roll, holiday_roll))

        scaling_cfg = balance.combat_scaling
        mimic = Mimic(
            id=eid,
            pos=pos,
            variant=variant,
            health=scaling_cfg.health_base,
            max_health=scaling_cfg.health_base,
            attack_damage=scaling_cfg.damage_base,
            experience=scaling_cfg.experience_base,
        )
        if balance.debug.enable_spawn_logging:
            logger.debug("Created %s mimic %d at %s", variant, eid, pos)
        return mimic

    def spawn_natural(self, world: WorldState) -> list[Mimic]:
        """Attempt one natural spawn group; returns the mimics created (maybe none).

        The group lands only if the biome weight is positive, the light level
        is in range, and a roll passes ``biome_weight * spawn_weight / 10``.
        """
        balance = self._store.get()
        tick = world.tick
        key = len(world.mimics)

        radius = self._config.spawn_radius
        x = self._rng.next_int(Domain.SPAWN, key, tick, -radius, radius, salt=0)
        z = self._rng.next_int(Domain.SPAWN, key, tick, -radius, radius, salt=1)
        underground = self._rng.next_bool(Domain.SPAWN, key, tick + 1)
        pos = BlockPos(x, UNDERGROUND_Y if underground else self._config.surface_y, z)

        biome_id = world.biome_map.biome_at(pos) or DEFAULT_BIOME_ID
        weight = scaling.biome_spawn_weight(balance, biome_id)
        if weight <= 0:
            return []

        light = world.biome_map.light_at(pos, tick)
        if not scaling.can_spawn_in_light(balance, light):
            return []

        chance = min(1.0, weight * balance.spawn_settings.spawn_weight / 10.0)
        if self._rng.next_float(Domain.SPAWN, key, tick, salt=2) >= chance:
            return []

        settings = balance.spawn_settings
        group_size = self._rng.next_int(
            Domain.SPAWN, key, tick, settings.min_group_size, settings.max_group_size, salt=3,
        )
        if group_size <= 0:
            return []
        positions = [pos] + ring_positions(pos, group_size)[1:]
        group = [self.create(world, p) for p in positions]
        if balance.debug.enable_spawn_logging:
            logger.debug("Natural spawn of %d mimic(s) in %s at %s (light %d)", group_size, biome_id, pos, light)
        return group
