"""Tests for reading and writing the balance document on disk."""

from __future__ import annotations

import json
import tempfile
import unittest
from dataclasses import replace
from pathlib import Path

from mimic.core.balance import CombatScaling, create_defaults
from mimic.systems.config_file import ConfigFile, dump_document, parse_document, to_dict


class TestParseDocument(unittest.TestCase):

    def test_partial_document_fills_defaults(self):
        cfg = parse_document('{"combat_scaling": {"health_base": 30.0}}')
        assert cfg is not None
        self.assertEqual(cfg.combat_scaling.health_base, 30.0)
        self.assertEqual(cfg.combat_scaling.damage_base, 4.0)
        self.assertEqual(cfg.spawn_rates, create_defaults().spawn_rates)

    def test_unknown_keys_ignored(self):
        cfg = parse_document('{"future_section": {"x": 1}, "debug": {"show_hitboxes": true, "extra": 2}}')
        assert cfg is not None
        self.assertTrue(cfg.debug.show_hitboxes)

    def test_malformed_json(self):
        with self.assertLogs("mimic.systems.config_file", level="WARNING"):
            self.assertIsNone(parse_document("{not json"))

    def test_wrong_types(self):
        with self.assertLogs("mimic.systems.config_file", level="WARNING"):
            self.assertIsNone(parse_document('{"combat_scaling": {"health_base": "lots"}}'))

    def test_dump_is_parseable_json(self):
        text = dump_document(create_defaults())
        data = json.loads(text)
        self.assertIn("spawn_rates", data)
        self.assertEqual(data["biome_weights"]["deep_dark"], 2.5)
        self.assertEqual(data, to_dict(create_defaults()))


class TestConfigFile(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "config" / "mimicmod.json"
        self.file = ConfigFile(self.path)

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, text: str):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding="utf-8")

    def test_missing_file_is_created_with_defaults(self):
        self.assertFalse(self.path.exists())
        cfg = self.file.load()
        self.assertEqual(cfg, create_defaults())
        self.assertTrue(self.path.exists())
        self.assertEqual(parse_document(self.path.read_text(encoding="utf-8")), create_defaults())

    def test_valid_file_is_loaded(self):
        custom = replace(create_defaults(), combat_scaling=CombatScaling(health_base=40.0))
        self.file.save(custom)
        self.assertEqual(self.file.load(), custom)

    def test_malformed_file_falls_back_to_defaults(self):
        self._write("]]]")
        with self.assertLogs("mimic.systems.config_file", level="WARNING"):
            self.assertEqual(self.file.load(), create_defaults())

    def test_non_utf8_file_falls_back_to_defaults(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(b'{"debug": "\xff\xfe"}')
        with self.assertLogs("mimic.systems.config_file", level="WARNING"):
            self.assertEqual(self.file.load(), create_defaults())

    def test_invalid_values_fall_back_to_defaults(self):
        self._write('{"combat_scaling": {"health_base": -5}}')
        with self.assertLogs("mimic.systems.config_file", level="WARNING"):
            self.assertEqual(self.file.load(), create_defaults())
        # Invalid file is left untouched
        self.assertIn("-5", self.path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
