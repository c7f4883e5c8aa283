"""Immutable snapshot of the world state for API readers."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from mimic.core.enums import Difficulty
from mimic.core.models import Mimic
from mimic.core.world_state import WorldState


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only view of the world, safe to share across threads.

    Mimics are copied (including their derived-state cache) and exposed via
    a MappingProxyType.
    """

    tick: int
    seed: int
    difficulty: Difficulty
    mimics: Mapping[int, Mimic]
    config_generation: int
    biome_lookups: int

    @classmethod
    def from_world(cls, world: WorldState, config_generation: int = 0) -> Snapshot:
        copied = {mid: m.copy() for mid, m in world.mimics.items()}
        return cls(
            tick=world.tick,
            seed=world.seed,
            difficulty=world.difficulty,
            mimics=MappingProxyType(copied),
            config_generation=config_generation,
            biome_lookups=world.biome_map.lookups,
        )
