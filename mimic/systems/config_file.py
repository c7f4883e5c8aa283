"""Load/save the balance document as pretty-printed JSON on disk."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from mimic.core.balance import BalanceConfig, create_defaults

logger = logging.getLogger(__name__)

_ADAPTER = TypeAdapter(BalanceConfig)


def parse_document(raw: str | bytes) -> BalanceConfig | None:
    """Parse a JSON document; ``None`` when it is malformed or mistyped."""
    try:
        return _ADAPTER.validate_json(raw)
    except ValidationError as exc:
        logger.warning("Malformed balance document (%d error(s)): %s", exc.error_count(), exc.errors()[0]["msg"])
        return None


def dump_document(config: BalanceConfig) -> str:
    return _ADAPTER.dump_json(config, indent=2).decode("utf-8")


def to_dict(config: BalanceConfig) -> dict:
    return _ADAPTER.dump_python(config, mode="json")


class ConfigFile:
    """The persisted balance document at *path*.

    ``load()`` never raises: a missing file is created from defaults, and a
    malformed or invalid file is ignored in favor of defaults.
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> BalanceConfig:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)

            if not self._path.exists():
                logger.info("Config file not found, creating default configuration at %s", self._path)
                defaults = create_defaults()
                self.save(defaults)
                return defaults

            config = parse_document(self._path.read_bytes())
        except OSError:
            logger.error("Failed to load balance config from %s", self._path, exc_info=True)
            return create_defaults()

        if config is None or not config.validate():
            logger.warning("Invalid configuration detected in %s, using defaults", self._path)
            return create_defaults()

        logger.info("Configuration loaded from %s", self._path)
        return config

    def save(self, config: BalanceConfig) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(dump_document(config), encoding="utf-8")
            logger.info("Configuration saved to %s", self._path)
        except OSError:
            logger.error("Failed to save balance config to %s", self._path, exc_info=True)
