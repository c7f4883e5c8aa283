"""Tests for the REST routes, called directly against a real EngineManager."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from fastapi import HTTPException

from mimic.api.dependencies import get_engine_manager, set_engine_manager
from mimic.api.engine_manager import EngineManager
from mimic.api.routes.config import (
    get_balance_config,
    get_settings,
    get_variants,
    preview_scaling,
    reload_balance_config,
)
from mimic.api.routes.control import ControlAction, control, set_difficulty, set_speed
from mimic.api.routes.mimics import (
    get_mimic,
    hide_mimic,
    kill_all_mimics,
    kill_mimic,
    list_mimics,
    reveal_mimic,
    set_mimic_target,
    set_mimic_variant,
    spawn_mimics,
)
from mimic.api.routes.state import get_biome, get_events, get_state
from mimic.api.schemas import SpawnRequest, TargetRequest, VariantRequest
from mimic.config import SimulationConfig


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.balance_path = Path(self._tmp.name) / "mimicmod.json"
        cfg = SimulationConfig(
            balance_file=str(self.balance_path),
            num_workers=1,
            initial_mimic_count=5,
            spawner_max_mimics=0,
        )
        self.mgr = EngineManager(cfg)
        set_engine_manager(self.mgr)

    def tearDown(self):
        self.mgr.stop()
        set_engine_manager(None)
        self._tmp.cleanup()


class TestStateRoutes(ApiTestCase):

    def test_initial_state(self):
        state = get_state(manager=self.mgr)
        self.assertEqual(state.tick, 0)
        self.assertEqual(state.mimic_count, 5)
        self.assertEqual(state.difficulty, "NORMAL")
        self.assertEqual(state.config_generation, 1)
        self.assertFalse(state.running)

    def test_balance_file_created_on_startup(self):
        self.assertTrue(self.balance_path.exists())

    def test_biome_lookup(self):
        biome = get_biome(x=-1, y=64, z=17, manager=self.mgr)
        self.assertEqual(biome.chunk, (-1, 1))
        self.assertTrue(biome.biome)

    def test_events_feed(self):
        spawn_mimics(SpawnRequest(variant="ender", count=1), manager=self.mgr)
        resp = get_events(since_tick=0, limit=100, category=None, manager=self.mgr)
        self.assertIn("command", [e.category for e in resp.events])
        self.assertGreaterEqual(resp.counts["command"], 1)

    def test_events_filtered_by_category(self):
        control(ControlAction.step, manager=self.mgr)
        mimic_id = list_mimics(manager=self.mgr).mimics[0].id
        kill_mimic(mimic_id, looting=0, manager=self.mgr)
        resp = get_events(since_tick=0, limit=100, category=["death"], manager=self.mgr)
        self.assertEqual([e.category for e in resp.events], ["death"])
        self.assertEqual(resp.events[0].entity_ids, [mimic_id])

    def test_dependency_requires_manager(self):
        set_engine_manager(None)
        with self.assertRaises(RuntimeError):
            get_engine_manager()
        set_engine_manager(self.mgr)
        self.assertIs(get_engine_manager(), self.mgr)


class TestControlRoutes(ApiTestCase):

    def test_step_when_idle_ticks_synchronously(self):
        resp = control(ControlAction.step, manager=self.mgr)
        self.assertEqual(resp.status, "ok")
        self.assertEqual(resp.tick, 1)
        mimics = list_mimics(manager=self.mgr).mimics
        self.assertTrue(all(m.stats_applied for m in mimics))

    def test_pause_when_not_running(self):
        self.assertEqual(control(ControlAction.pause, manager=self.mgr).status, "error")

    def test_speed(self):
        set_speed(tps=10.0, manager=self.mgr)
        self.assertAlmostEqual(self.mgr.tick_rate, 0.1)

    def test_set_difficulty_invalidates_stats(self):
        control(ControlAction.step, manager=self.mgr)
        resp = set_difficulty("hard", manager=self.mgr)
        self.assertEqual(resp.status, "ok")
        self.assertEqual(get_state(manager=self.mgr).difficulty, "HARD")
        self.assertTrue(all(not m.stats_applied for m in list_mimics(manager=self.mgr).mimics))

    def test_unknown_difficulty_rejected(self):
        with self.assertRaises(HTTPException) as ctx:
            set_difficulty("nightmare", manager=self.mgr)
        self.assertEqual(ctx.exception.status_code, 422)

    def test_reset_rebuilds_world(self):
        control(ControlAction.step, manager=self.mgr)
        resp = control(ControlAction.reset, manager=self.mgr)
        self.assertEqual(resp.tick, 0)
        self.assertEqual(get_state(manager=self.mgr).mimic_count, 5)


class TestMimicRoutes(ApiTestCase):

    def test_spawn_with_variant_applies_stats(self):
        resp = spawn_mimics(SpawnRequest(variant="ender", x=100, y=64, z=100, count=3), manager=self.mgr)
        self.assertEqual(resp.count, 3)
        for m in resp.mimics:
            self.assertEqual(m.variant, "ender")
            self.assertTrue(m.fire_immune)
            self.assertTrue(m.stats_applied)
            self.assertEqual(m.experience, 30)
        self.assertEqual(list_mimics(manager=self.mgr).count, 8)

    def test_spawn_unknown_variant_is_classic(self):
        resp = spawn_mimics(SpawnRequest(variant="golden"), manager=self.mgr)
        self.assertEqual(resp.mimics[0].variant, "classic")

    def test_get_missing_mimic(self):
        with self.assertRaises(HTTPException) as ctx:
            get_mimic(9999, manager=self.mgr)
        self.assertEqual(ctx.exception.status_code, 404)

    def test_change_variant(self):
        mimic_id = list_mimics(manager=self.mgr).mimics[0].id
        m = set_mimic_variant(mimic_id, VariantRequest(variant="corrupted"), manager=self.mgr)
        self.assertEqual(m.variant, "corrupted")
        self.assertEqual(m.experience, 20)
        self.assertTrue(m.stats_applied)

    def test_reveal_hide_target(self):
        mimic_id = list_mimics(manager=self.mgr).mimics[0].id
        self.assertTrue(reveal_mimic(mimic_id, manager=self.mgr).revealed)
        self.assertFalse(hide_mimic(mimic_id, manager=self.mgr).revealed)
        self.assertEqual(set_mimic_target(mimic_id, TargetRequest(target_id=12), manager=self.mgr).target_id, 12)

    def test_kill_returns_loot(self):
        mimic_id = list_mimics(manager=self.mgr).mimics[0].id
        loot = kill_mimic(mimic_id, looting=3, manager=self.mgr)
        self.assertEqual(loot.teeth, 2)
        self.assertEqual(loot.multiplier, 2.5)
        with self.assertRaises(HTTPException):
            kill_mimic(mimic_id, looting=0, manager=self.mgr)

    def test_kill_all(self):
        self.assertEqual(kill_all_mimics(manager=self.mgr).killed, 5)
        self.assertEqual(list_mimics(manager=self.mgr).count, 0)


class TestConfigRoutes(ApiTestCase):

    def test_settings(self):
        settings = get_settings(manager=self.mgr)
        self.assertEqual(settings.balance_file, str(self.balance_path))

    def test_variants(self):
        resp = get_variants(manager=self.mgr)
        self.assertEqual(resp.fallback, "classic")
        self.assertEqual([v.id for v in resp.variants], ["classic", "corrupted", "ender", "christmas"])

    def test_scaling_preview(self):
        resp = preview_scaling(biome="deep_dark", variant="ender", difficulty="hard", manager=self.mgr)
        self.assertAlmostEqual(resp.health, 108.0)
        self.assertAlmostEqual(resp.damage, 18.9)
        self.assertEqual(resp.biome_weight, 2.5)

    def test_scaling_preview_bad_difficulty(self):
        with self.assertRaises(HTTPException) as ctx:
            preview_scaling(biome="plains", variant="classic", difficulty="ultra", manager=self.mgr)
        self.assertEqual(ctx.exception.status_code, 422)

    def test_reload_picks_up_edited_file(self):
        data = json.loads(self.balance_path.read_text(encoding="utf-8"))
        data["combat_scaling"]["health_base"] = 40.0
        self.balance_path.write_text(json.dumps(data), encoding="utf-8")

        before = get_balance_config(manager=self.mgr)
        self.assertEqual(before.config["combat_scaling"]["health_base"], 24.0)

        after = reload_balance_config(manager=self.mgr)
        self.assertEqual(after.generation, before.generation + 1)
        self.assertEqual(after.config["combat_scaling"]["health_base"], 40.0)
        self.assertTrue(all(not m.stats_applied for m in list_mimics(manager=self.mgr).mimics))

    def test_reload_of_broken_file_keeps_defaults(self):
        self.balance_path.write_text("{ nope", encoding="utf-8")
        after = reload_balance_config(manager=self.mgr)
        self.assertEqual(after.config["combat_scaling"]["health_base"], 24.0)


if __name__ == "__main__":
    unittest.main()
