"""Deterministic biome and light lookup for the host world.

Biomes are assigned per 64x64 block region from the world seed; below the
cave line the cave biomes are used instead.  Individual chunk columns can be
pinned to a biome (tests, admin tools).  Each ``biome_at`` call counts as a
lookup so the effect of per-entity caching is observable.
"""

from __future__ import annotations

import threading

from mimic.core.enums import Domain
from mimic.core.models import BlockPos
from mimic.systems.rng import DeterministicRNG

SURFACE_BIOMES: tuple[str, ...] = (
    "plains", "forest", "dark_forest", "swamp", "taiga",
    "jungle", "desert", "savanna", "badlands", "mushroom_fields",
)
CAVE_BIOMES: tuple[str, ...] = ("dripstone_caves", "lush_caves", "deep_dark")

CAVE_LINE_Y = 0
REGION_SHIFT = 6


class BiomeMap:
    __slots__ = ("_rng", "_pinned", "_lookups", "_lock")

    def __init__(self, rng: DeterministicRNG) -> None:
        self._rng = rng
        self._pinned: dict[tuple[int, int], str] = {}
        self._lookups = 0
        self._lock = threading.Lock()

    @property
    def lookups(self) -> int:
        return self._lookups

    def pin(self, chunk: tuple[int, int], biome_id: str) -> None:
        self._pinned[chunk] = biome_id

    def biome_at(self, pos: BlockPos) -> str | None:
        with self._lock:
            self._lookups += 1

        pinned = self._pinned.get(pos.chunk())
        if pinned is not None:
            return pinned

        rx, rz = pos.x >> REGION_SHIFT, pos.z >> REGION_SHIFT
        roll = self._rng.float_at(Domain.MAP_GEN, rx, rz)
        table = CAVE_BIOMES if pos.y < CAVE_LINE_Y else SURFACE_BIOMES
        return table[int(roll * len(table))]

    def light_at(self, pos: BlockPos, tick: int = 0) -> int:
        """Block light level 0-15; underground is never brighter than 7."""
        high = 7 if pos.y < CAVE_LINE_Y else 15
        f = self._rng.float_at(Domain.LIGHT, pos.x ^ (tick >> 8), pos.z)
        return int(f * (high + 1))
