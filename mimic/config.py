"""Host runtime settings with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable settings for one simulation run.

    Balance numbers (health, damage, loot chances) do NOT live here; they come
    from the reloadable balance document, see ``mimic.core.balance``.
    """

    # World
    world_seed: int = 42
    difficulty: int = 2                    # Difficulty.NORMAL
    spawn_radius: int = 128                # Natural spawns land within this many blocks of origin
    surface_y: int = 64

    # Timing
    max_ticks: int = 50000
    worker_timeout_seconds: float = 2.0

    # Workers
    num_workers: int = 4

    # Population
    initial_mimic_count: int = 12
    spawner_interval: int = 40
    spawner_max_mimics: int = 60

    # Movement
    wander_chance: float = 0.25            # Per-tick chance an idle mimic shuffles one block

    # Balance document
    balance_file: str = "config/mimicmod.json"

    # Logging
    log_level: str = "INFO"
