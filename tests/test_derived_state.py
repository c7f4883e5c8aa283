"""Tests for the per-entity derived-state cache (biome by chunk, interval, stats flag)."""

from __future__ import annotations

import unittest
from dataclasses import replace

from mimic.core.balance import Behavior, create_defaults
from mimic.core.derived_state import (
    DEFAULT_BIOME_ID,
    EntityDerivedState,
    EntityDerivedStateCache,
    partition_of,
    resolve_biome,
)
from mimic.core.models import BlockPos


class CountingLookup:
    """Biome lookup stub that records every call."""

    def __init__(self, biome: str | None = "forest") -> None:
        self.biome = biome
        self.calls: list[BlockPos] = []

    def __call__(self, pos: BlockPos) -> str | None:
        self.calls.append(pos)
        return self.biome


class TestPartition(unittest.TestCase):

    def test_positive(self):
        self.assertEqual(partition_of(BlockPos(0, 64, 0)), (0, 0))
        self.assertEqual(partition_of(BlockPos(15, 64, 15)), (0, 0))
        self.assertEqual(partition_of(BlockPos(16, 64, 31)), (1, 1))

    def test_negative_uses_floor(self):
        self.assertEqual(partition_of(BlockPos(-1, 0, -1)), (-1, -1))
        self.assertEqual(partition_of(BlockPos(-16, 0, -16)), (-1, -1))
        self.assertEqual(partition_of(BlockPos(-17, 0, 0)), (-2, 0))

    def test_height_ignored(self):
        self.assertEqual(partition_of(BlockPos(3, -60, 3)), partition_of(BlockPos(3, 300, 3)))


class TestBiomeCache(unittest.TestCase):

    def test_first_resolve_looks_up(self):
        lookup = CountingLookup("swamp")
        cache = EntityDerivedStateCache()
        self.assertIsNone(cache.biome_id)
        self.assertEqual(cache.resolve_biome(lookup, BlockPos(1, 64, 1)), "swamp")
        self.assertEqual(len(lookup.calls), 1)

    def test_same_chunk_reuses_cached_biome(self):
        lookup = CountingLookup()
        cache = EntityDerivedStateCache()
        for pos in (BlockPos(0, 64, 0), BlockPos(15, 64, 15), BlockPos(7, -20, 3)):
            cache.resolve_biome(lookup, pos)
        self.assertEqual(len(lookup.calls), 1)

    def test_crossing_chunk_boundary_looks_up_again(self):
        lookup = CountingLookup()
        cache = EntityDerivedStateCache()
        cache.resolve_biome(lookup, BlockPos(15, 64, 0))
        cache.resolve_biome(lookup, BlockPos(16, 64, 0))
        cache.resolve_biome(lookup, BlockPos(15, 64, 0))
        self.assertEqual(len(lookup.calls), 3)

    def test_crossing_into_negative_chunk(self):
        lookup = CountingLookup()
        cache = EntityDerivedStateCache()
        cache.resolve_biome(lookup, BlockPos(0, 64, 0))
        cache.resolve_biome(lookup, BlockPos(-1, 64, 0))
        self.assertEqual(len(lookup.calls), 2)
        self.assertEqual(cache.state.last_check_partition, (-1, 0))

    def test_missing_biome_defaults_to_plains(self):
        lookup = CountingLookup(None)
        cache = EntityDerivedStateCache()
        with self.assertLogs("mimic.core.derived_state", level="WARNING"):
            self.assertEqual(cache.resolve_biome(lookup, BlockPos(0, 64, 0)), DEFAULT_BIOME_ID)
        cache.resolve_biome(lookup, BlockPos(1, 64, 1))
        self.assertEqual(len(lookup.calls), 1)

    def test_pure_transition_returns_same_state_when_cached(self):
        lookup = CountingLookup()
        state = resolve_biome(EntityDerivedState(), BlockPos(0, 64, 0), lookup)
        self.assertIs(resolve_biome(state, BlockPos(2, 64, 2), lookup), state)


class TestIntervalAndStats(unittest.TestCase):

    def test_interval_cached_until_invalidated(self):
        cache = EntityDerivedStateCache()
        defaults = create_defaults()
        faster = replace(defaults, behavior=Behavior(idle_sound_interval_ticks=50))

        self.assertEqual(cache.interval(defaults), 200)
        self.assertEqual(cache.interval(faster), 200)
        cache.invalidate_interval()
        self.assertEqual(cache.interval(faster), 50)

    def test_stats_flag(self):
        cache = EntityDerivedStateCache()
        self.assertFalse(cache.stats_applied)
        cache.mark_stats_applied()
        self.assertTrue(cache.stats_applied)
        cache.invalidate_stats()
        self.assertFalse(cache.stats_applied)

    def test_invalidating_stats_keeps_biome(self):
        cache = EntityDerivedStateCache()
        cache.resolve_biome(CountingLookup("taiga"), BlockPos(0, 64, 0))
        cache.mark_stats_applied()
        cache.invalidate_stats()
        self.assertEqual(cache.biome_id, "taiga")

    def test_copy_is_independent(self):
        cache = EntityDerivedStateCache()
        clone = cache.copy()
        cache.mark_stats_applied()
        self.assertFalse(clone.stats_applied)


if __name__ == "__main__":
    unittest.main()
