"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class Difficulty(IntEnum):
    """World difficulty supplied by the host."""

    PEACEFUL = 0
    EASY = 1
    NORMAL = 2
    HARD = 3


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    SPAWN = 0
    VARIANT = 1
    LOOT = 2
    WANDER = 3
    MAP_GEN = 4
    LIGHT = 5
