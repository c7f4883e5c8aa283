"""Tests for the mimic spawner: variant picks, natural spawn gates, ring layout."""

from __future__ import annotations

import unittest
from dataclasses import replace

from mimic.core.balance import SpawnSettings, create_defaults
from mimic.core.models import BlockPos
from mimic.core.variants import MimicVariant
from mimic.systems.biome_map import CAVE_BIOMES, SURFACE_BIOMES
from mimic.systems.spawner import ring_positions
from tests.helpers.mimic_arena import MimicArena

ALL_BIOMES = SURFACE_BIOMES + CAVE_BIOMES


class TestRingPositions(unittest.TestCase):

    def test_ring_layout(self):
        center = BlockPos(0, 64, 0)
        ring = ring_positions(center, 4)
        self.assertEqual(len(ring), 4)
        self.assertEqual(ring[0], BlockPos(5, 64, 0))
        self.assertEqual(ring[1], BlockPos(0, 64, 7))
        self.assertTrue(all(p.y == 64 for p in ring))

    def test_radius_cycles_every_three(self):
        ring = ring_positions(BlockPos(0, 0, 0), 6)
        self.assertEqual(ring[0], BlockPos(5, 0, 0))
        self.assertEqual(ring[3], BlockPos(-5, 0, 0))


class TestCreate(unittest.TestCase):

    def setUp(self):
        self.arena = MimicArena()

    def tearDown(self):
        self.arena.close()

    def test_explicit_variant_uses_base_stats(self):
        m = self.arena.spawner.create(self.arena.world, BlockPos(1, 64, 1), MimicVariant.CORRUPTED)
        self.assertIs(m.variant, MimicVariant.CORRUPTED)
        self.assertEqual(m.max_health, 24.0)
        self.assertEqual(m.attack_damage, 4.0)
        self.assertFalse(m.derived.stats_applied)

    def test_ids_are_unique(self):
        ids = {self.arena.spawner.create(self.arena.world, BlockPos()).id for _ in range(20)}
        self.assertEqual(len(ids), 20)

    def test_picked_variant_is_deterministic(self):
        other = MimicArena()
        try:
            a = [self.arena.spawner.create(self.arena.world, BlockPos()).variant for _ in range(30)]
            b = [other.spawner.create(other.world, BlockPos()).variant for _ in range(30)]
        finally:
            other.close()
        self.assertEqual(a, b)
        self.assertIn(MimicVariant.CLASSIC, a)


class TestNaturalSpawn(unittest.TestCase):

    def tearDown(self):
        self.arena.close()

    def test_should_spawn_gates(self):
        self.arena = MimicArena(spawner_max_mimics=2)
        world = self.arena.world
        self.assertTrue(self.arena.spawner.should_spawn(world))
        world.tick = 1
        self.assertFalse(self.arena.spawner.should_spawn(world))
        world.tick = 40
        self.arena.add_mimic()
        self.arena.add_mimic()
        self.assertFalse(self.arena.spawner.should_spawn(world))

    def test_zero_weight_everywhere_never_spawns(self):
        balance = replace(create_defaults(), biome_weights={b: 0.0 for b in ALL_BIOMES})
        self.arena = MimicArena(balance=balance)
        for tick in range(0, 400, 40):
            self.arena.world.tick = tick
            self.assertEqual(self.arena.spawner.spawn_natural(self.arena.world), [])

    def test_light_range_excluding_everything_never_spawns(self):
        balance = replace(
            create_defaults(),
            spawn_settings=SpawnSettings(min_light_level=16, max_light_level=20),
        )
        self.arena = MimicArena(balance=balance)
        for tick in range(0, 400, 40):
            self.arena.world.tick = tick
            self.assertEqual(self.arena.spawner.spawn_natural(self.arena.world), [])

    def test_certain_spawn_yields_group_in_range(self):
        balance = replace(
            create_defaults(),
            biome_weights={b: 2.0 for b in ALL_BIOMES},
            spawn_settings=SpawnSettings(
                min_group_size=2, max_group_size=4, spawn_weight=10, min_light_level=0, max_light_level=15,
            ),
        )
        self.arena = MimicArena(balance=balance)
        group = self.arena.spawner.spawn_natural(self.arena.world)
        self.assertTrue(2 <= len(group) <= 4)
        self.assertEqual(len({m.id for m in group}), len(group))
        self.assertEqual(len({m.pos for m in group}), len(group))

    def test_empty_group_size_spawns_nothing(self):
        balance = replace(
            create_defaults(),
            biome_weights={b: 2.0 for b in ALL_BIOMES},
            spawn_settings=SpawnSettings(
                min_group_size=0, max_group_size=0, spawn_weight=10, min_light_level=0, max_light_level=15,
            ),
        )
        self.arena = MimicArena(balance=balance)
        self.assertTrue(self.arena.store.get().validate())
        for tick in range(0, 400, 40):
            self.arena.world.tick = tick
            self.assertEqual(self.arena.spawner.spawn_natural(self.arena.world), [])
        self.assertEqual(self.arena.world.mimics, {})


if __name__ == "__main__":
    unittest.main()
