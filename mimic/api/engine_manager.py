"""EngineManager — owns the world, the config store, and the loop thread.

The API reads from an atomically-swapped immutable Snapshot.  The WorldLoop
mutates WorldState on its own thread; admin commands (spawn, kill, reload,
...) take the same world lock so they never interleave with a tick.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Callable

from mimic.core.derived_state import DEFAULT_BIOME_ID
from mimic.core.enums import Difficulty, Domain
from mimic.core.models import BlockPos, Mimic
from mimic.core.snapshot import Snapshot
from mimic.core.variants import resolve
from mimic.core.world_state import WorldState
from mimic.engine.worker_pool import WorkerPool
from mimic.engine.world_loop import WorldLoop
from mimic.systems.behavior import MimicBehavior
from mimic.systems.biome_map import BiomeMap
from mimic.systems.config_file import ConfigFile
from mimic.systems.config_store import ConfigStore
from mimic.systems.loot import LootDrop, roll_loot
from mimic.systems.rng import DeterministicRNG
from mimic.systems.spawner import MimicSpawner, ring_positions
from mimic.utils.event_log import EventLog, SimEvent
from mimic.utils.logging import apply_debug_channels

if TYPE_CHECKING:
    from mimic.config import SimulationConfig
    from mimic.core.balance import BalanceConfig

logger = logging.getLogger(__name__)

MAX_SPAWN_COUNT = 50


class EngineManager:
    """Manages the simulation lifecycle on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - event log (lock-guarded buffer)
      - control commands (start / pause / resume / step / reset)
      - admin commands on mimics and the balance config
    """

    def __init__(self, config: SimulationConfig, store: ConfigStore | None = None) -> None:
        self._config = config
        self._tick_rate: float = 0.05  # seconds between ticks (20 tps default)

        self._config_file = ConfigFile(config.balance_file)
        self._store = store or ConfigStore(self._config_file.load)

        self._rng: DeterministicRNG | None = None
        self._loop: WorldLoop | None = None
        self._worker_pool: WorkerPool | None = None
        self._behavior: MimicBehavior | None = None
        self._spawner: MimicSpawner | None = None

        self._world_lock = threading.RLock()
        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: Snapshot | None = None
        self._event_log = EventLog()

        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._stop_requested = threading.Event()

        self._build()
        self._publish_snapshot()

    # -- public properties --

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def store(self) -> ConfigStore:
        return self._store

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.01, min(value, 2.0))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    # -- snapshot access --

    def get_snapshot(self) -> Snapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="engine-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (tick_rate=%.3fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused at tick %d", self._current_tick())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("EngineManager resumed at tick %d", self._current_tick())

    def step(self) -> None:
        """Execute exactly one tick (must be paused)."""
        if not self._paused.is_set():
            self.pause()
        self._step_requested.set()

    def tick_now(self) -> bool:
        """Run one tick synchronously on the caller's thread."""
        assert self._loop is not None
        with self._world_lock:
            can_continue = self._loop.tick_once()
        self._publish_snapshot_and_events()
        return can_continue

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        if self._worker_pool:
            self._worker_pool.shutdown()
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Stop, rebuild, and leave ready to start."""
        self.stop()
        self._event_log.clear()
        self._build()
        self._publish_snapshot()
        logger.info("EngineManager reset.")

    # -- admin commands --

    def set_difficulty(self, difficulty: Difficulty) -> None:
        assert self._loop is not None
        with self._world_lock:
            self._loop.world.difficulty = difficulty
            self._loop.invalidate_derived_state()
        self._publish_snapshot()
        logger.info("Difficulty set to %s", difficulty.name)

    def spawn(self, variant_id: str | None, center: BlockPos, count: int = 1) -> list[Mimic]:
        """Spawn *count* mimics (1-50); several are placed on a ring around *center*."""
        assert self._loop is not None and self._spawner is not None and self._behavior is not None
        count = max(1, min(count, MAX_SPAWN_COUNT))
        variant = resolve(variant_id) if variant_id else None
        positions = [center] if count == 1 else ring_positions(center, count)

        world = self._loop.world
        spawned: list[Mimic] = []
        with self._world_lock:
            for pos in positions:
                mimic = self._spawner.create(world, pos, variant)
                self._behavior.refresh_stats(mimic, world)
                world.add_mimic(mimic)
                spawned.append(mimic.copy())
        self._log_event("command", f"Spawned {len(spawned)} mimic(s) at {center}", tuple(m.id for m in spawned))
        self._publish_snapshot()
        return spawned

    def set_variant(self, mimic_id: int, variant_id: str) -> Mimic | None:
        assert self._loop is not None and self._behavior is not None
        world = self._loop.world
        with self._world_lock:
            mimic = world.mimics.get(mimic_id)
            if mimic is None:
                return None
            mimic.set_variant(resolve(variant_id))
            self._behavior.refresh_stats(mimic, world)
            result = mimic.copy()
        self._publish_snapshot()
        return result

    def set_revealed(self, mimic_id: int, revealed: bool) -> Mimic | None:
        return self._mutate(mimic_id, lambda m: setattr(m, "revealed", revealed))

    def set_target(self, mimic_id: int, target_id: int | None) -> Mimic | None:
        return self._mutate(mimic_id, lambda m: setattr(m, "target_id", target_id))

    def kill(self, mimic_id: int, looting_level: int = 0) -> LootDrop | None:
        assert self._loop is not None and self._rng is not None
        world = self._loop.world
        with self._world_lock:
            mimic = world.remove_mimic(mimic_id)
            if mimic is None:
                return None
            mimic.alive = False
            drop = roll_loot(self._store.get(), mimic, looting_level, self._rng, world.tick)
        self._log_event(
            "death",
            f"Mimic {mimic_id} killed: {drop.teeth} teeth, rare book={drop.rare_book}",
            (mimic_id,),
        )
        self._publish_snapshot()
        return drop

    def kill_all(self) -> int:
        assert self._loop is not None
        with self._world_lock:
            count = len(self._loop.world.mimics)
            self._loop.world.mimics.clear()
        self._log_event("command", f"Killed {count} mimic(s)")
        self._publish_snapshot()
        return count

    def reload_config(self) -> BalanceConfig:
        """Re-read the balance file and make every mimic pick it up next tick."""
        assert self._loop is not None
        with self._world_lock:
            config = self._store.reload()
            apply_debug_channels(config)
            config.log_configuration()
            self._loop.invalidate_derived_state()
        self._log_event("config", f"Balance config reloaded (generation {self._store.generation})")
        self._publish_snapshot()
        return config

    def biome_at(self, pos: BlockPos) -> tuple[str, float]:
        assert self._loop is not None
        biome_id = self._loop.world.biome_map.biome_at(pos) or DEFAULT_BIOME_ID
        return biome_id, self._store.get().biome_weight(biome_id)

    # -- internals --

    def _mutate(self, mimic_id: int, fn: Callable[[Mimic], None]) -> Mimic | None:
        assert self._loop is not None
        with self._world_lock:
            mimic = self._loop.world.mimics.get(mimic_id)
            if mimic is None:
                return None
            fn(mimic)
            result = mimic.copy()
        self._publish_snapshot()
        return result

    def _build(self) -> None:
        """Construct all simulation components from config."""
        cfg = self._config
        balance = self._store.ensure_initialized()
        apply_debug_channels(balance)
        balance.log_configuration()

        self._rng = DeterministicRNG(cfg.world_seed)
        world = WorldState(
            seed=cfg.world_seed,
            biome_map=BiomeMap(self._rng),
            difficulty=Difficulty(cfg.difficulty),
        )

        self._behavior = MimicBehavior(self._store)
        self._worker_pool = WorkerPool(cfg, self._behavior)
        self._spawner = MimicSpawner(cfg, self._rng, self._store)

        radius = cfg.spawn_radius
        for i in range(cfg.initial_mimic_count):
            x = self._rng.next_int(Domain.SPAWN, i, -1, -radius, radius, salt=0)
            z = self._rng.next_int(Domain.SPAWN, i, -1, -radius, radius, salt=1)
            world.add_mimic(self._spawner.create(world, BlockPos(x, cfg.surface_y, z)))

        self._loop = WorldLoop(
            config=cfg,
            world=world,
            store=self._store,
            worker_pool=self._worker_pool,
            spawner=self._spawner,
            rng=self._rng,
        )
        logger.info("World built with %d mimics (seed=%d)", len(world.mimics), cfg.world_seed)

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Engine thread started.")
        assert self._loop is not None

        while not self._stop_requested.is_set():
            if self._paused.is_set() and not self._step_requested.is_set():
                time.sleep(0.01)
                continue

            single_step = self._step_requested.is_set()
            if single_step:
                self._step_requested.clear()

            with self._world_lock:
                can_continue = self._loop.tick_once()
            self._publish_snapshot_and_events()

            if not can_continue:
                logger.info("Simulation ended at tick %d.", self._loop.world.tick)
                break

            if not single_step:
                time.sleep(self._tick_rate)

        self._running.clear()
        logger.info("Engine thread exited.")

    def _log_event(self, category: str, message: str, entity_ids: tuple[int, ...] = ()) -> None:
        self._event_log.append(SimEvent(
            tick=self._current_tick(),
            category=category,
            message=message,
            entity_ids=entity_ids,
        ))

    def _publish_snapshot(self) -> None:
        assert self._loop is not None
        with self._world_lock:
            snap = self._loop.create_snapshot()
        with self._snapshot_lock:
            self._latest_snapshot = snap

    def _publish_snapshot_and_events(self) -> None:
        """Swap snapshot + push events from the last tick."""
        assert self._loop is not None
        self._publish_snapshot()
        events = self._loop.tick_events
        if events:
            self._event_log.append_many(events)

    def _current_tick(self) -> int:
        if self._loop:
            return self._loop.world.tick
        return 0
