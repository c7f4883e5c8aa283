"""Tests for the world loop: ticking, caching effect, reload, parallel determinism."""

from __future__ import annotations

import unittest

from mimic.core.models import BlockPos
from mimic.core.variants import MimicVariant
from tests.helpers.mimic_arena import MimicArena


def _fingerprint(arena: MimicArena) -> list[tuple]:
    return [
        (m.id, m.pos, m.variant.id, m.max_health, m.attack_damage, m.experience, m.revealed)
        for m in sorted(arena.world.mimics.values(), key=lambda m: m.id)
    ]


class TestTicking(unittest.TestCase):

    def tearDown(self):
        self.arena.close()

    def test_tick_advances_and_ages(self):
        self.arena = MimicArena()
        m = self.arena.add_mimic()
        self.arena.run_ticks(3)
        self.assertEqual(self.arena.world.tick, 3)
        self.assertEqual(self.arena.mimic(m.id).age, 3)

    def test_stops_at_max_ticks(self):
        self.arena = MimicArena(max_ticks=3)
        for _ in range(3):
            self.assertTrue(self.arena.loop.tick_once())
        self.assertFalse(self.arena.loop.tick_once())
        self.assertEqual(self.arena.world.tick, 3)

    def test_dead_mimics_are_removed(self):
        self.arena = MimicArena()
        m = self.arena.add_mimic()
        m.alive = False
        self.arena.run_ticks(1)
        self.assertNotIn(m.id, self.arena.world.mimics)

    def test_stationary_mimics_look_up_biome_once(self):
        self.arena = MimicArena()
        for i in range(5):
            self.arena.add_mimic(MimicVariant.CLASSIC, BlockPos(i * 40, 64, 0))
        self.arena.run_ticks(20)
        self.assertEqual(self.arena.biome_map.lookups, 5)

    def test_invalidate_clears_every_mimic(self):
        self.arena = MimicArena()
        for _ in range(3):
            self.arena.add_mimic()
        self.arena.run_ticks(1)
        self.arena.loop.invalidate_derived_state()
        self.assertTrue(all(not m.derived.stats_applied for m in self.arena.world.mimics.values()))
        self.assertTrue(all(m.derived.state.cached_interval is None for m in self.arena.world.mimics.values()))

    def test_snapshot_is_detached(self):
        self.arena = MimicArena()
        m = self.arena.add_mimic()
        snap = self.arena.loop.create_snapshot()
        self.arena.run_ticks(1)
        self.assertFalse(snap.mimics[m.id].derived.stats_applied)
        self.assertEqual(snap.tick, 0)
        self.assertEqual(snap.config_generation, 1)


class TestParallelDeterminism(unittest.TestCase):
    """Worker count must not change the outcome."""

    def _run(self, workers: int) -> list[tuple]:
        arena = MimicArena(num_workers=workers, wander_chance=0.3, spawner_max_mimics=40)
        try:
            for i in range(8):
                arena.add_mimic(pos=BlockPos(i * 13 - 50, 64, i * 7 - 20))
            arena.run_ticks(120)
            return _fingerprint(arena)
        finally:
            arena.close()

    def test_single_vs_multi_worker(self):
        self.assertEqual(self._run(1), self._run(4))


if __name__ == "__main__":
    unittest.main()
