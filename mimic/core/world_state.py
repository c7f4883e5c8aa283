"""Mutable authoritative world state, only mutated by the WorldLoop thread
(or by API commands holding the engine's world lock)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mimic.core.enums import Difficulty
from mimic.core.models import BlockPos, Mimic

if TYPE_CHECKING:
    from mimic.systems.biome_map import BiomeMap


class WorldState:
    """The single source of truth for the simulation."""

    __slots__ = ("tick", "seed", "difficulty", "mimics", "biome_map", "_next_entity_id")

    def __init__(self, seed: int, biome_map: BiomeMap, difficulty: Difficulty = Difficulty.NORMAL) -> None:
        self.tick: int = 0
        self.seed: int = seed
        self.difficulty: Difficulty = difficulty
        self.mimics: dict[int, Mimic] = {}
        self.biome_map: BiomeMap = biome_map
        self._next_entity_id: int = 1

    def allocate_entity_id(self) -> int:
        eid = self._next_entity_id
        self._next_entity_id += 1
        return eid

    def add_mimic(self, mimic: Mimic) -> None:
        self.mimics[mimic.id] = mimic

    def remove_mimic(self, entity_id: int) -> Mimic | None:
        return self.mimics.pop(entity_id, None)

    def move_mimic(self, entity_id: int, new_pos: BlockPos) -> None:
        mimic = self.mimics.get(entity_id)
        if mimic is not None:
            mimic.pos = new_pos

    def alive_mimics(self) -> list[Mimic]:
        return [m for m in self.mimics.values() if m.alive]
