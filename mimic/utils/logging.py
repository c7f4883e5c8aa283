"""Logging configuration for the engine and its debug channels."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mimic.core.balance import BalanceConfig

LOG_FORMAT = "%(asctime)s [%(levelname)-5s] %(name)-25s | %(message)s"

# Loggers whose DEBUG output is switched on by the balance document's debug flags.
COMBAT_LOGGERS = ("mimic.systems.scaling", "mimic.systems.behavior")
SPAWN_LOGGERS = ("mimic.systems.spawner", "mimic.core.derived_state")


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger; unknown level names fall back to INFO."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)


def apply_debug_channels(config: BalanceConfig) -> None:
    """Open the combat/spawn DEBUG channels requested by *config*.

    Channels that are switched off go back to inheriting the root level.
    """
    for name in COMBAT_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if config.debug.enable_combat_logging else logging.NOTSET)
    for name in SPAWN_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if config.debug.enable_spawn_logging else logging.NOTSET)
