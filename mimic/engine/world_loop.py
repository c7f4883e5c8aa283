"""WorldLoop — the host tick engine driving every mimic.

Phase cycle:
  1. Spawning — natural spawn attempt on the spawner interval
  2. Movement — deterministic wander for idle mimics
  3. Behavior — parallel per-mimic steps via the worker pool
  4. Cleanup & Advancement — drop dead mimics, age the living, advance tick
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from mimic.core.enums import Domain
from mimic.core.models import BlockPos
from mimic.core.snapshot import Snapshot
from mimic.utils.event_log import SimEvent

if TYPE_CHECKING:
    from mimic.config import SimulationConfig
    from mimic.core.world_state import WorldState
    from mimic.engine.worker_pool import WorkerPool
    from mimic.systems.config_store import ConfigStore
    from mimic.systems.rng import DeterministicRNG
    from mimic.systems.spawner import MimicSpawner

logger = logging.getLogger(__name__)

_WANDER_OFFSETS = (BlockPos(0, 0, -1), BlockPos(1, 0, 0), BlockPos(0, 0, 1), BlockPos(-1, 0, 0))


class WorldLoop:
    """The heartbeat of the simulation.

    World mutation outside the behavior phase happens on the loop's own
    thread; during the behavior phase each worker owns one mimic.
    """

    __slots__ = (
        "_config",
        "_world",
        "_store",
        "_worker_pool",
        "_spawner",
        "_rng",
        "_tick_events",
    )

    def __init__(
        self,
        config: SimulationConfig,
        world: WorldState,
        store: ConfigStore,
        worker_pool: WorkerPool,
        spawner: MimicSpawner,
        rng: DeterministicRNG,
    ) -> None:
        self._config = config
        self._world = world
        self._store = store
        self._worker_pool = worker_pool
        self._spawner = spawner
        self._rng = rng
        self._tick_events: list[SimEvent] = []

    @property
    def world(self) -> WorldState:
        return self._world

    @property
    def tick_events(self) -> list[SimEvent]:
        """Events emitted during the most recent tick."""
        return self._tick_events

    def _emit(self, category: str, message: str, entity_ids: tuple[int, ...] = ()) -> None:
        self._tick_events.append(SimEvent(
            tick=self._world.tick,
            category=category,
            message=message,
            entity_ids=entity_ids,
        ))

    def create_snapshot(self) -> Snapshot:
        return Snapshot.from_world(self._world, self._store.generation)

    def tick_once(self) -> bool:
        """Execute a single tick. Returns False if simulation should stop."""
        if self._world.tick >= self._config.max_ticks:
            logger.info("Tick %d: Max ticks reached.", self._world.tick)
            return False

        self._step()
        self._world.tick += 1
        return True

    def run(self) -> None:
        """Execute the simulation until max_ticks."""
        logger.info("=== Simulation started (seed=%d) ===", self._world.seed)
        while self.tick_once():
            if self._world.tick % 100 == 0:
                logger.info(
                    "Tick %d: %d mimics alive, %d biome lookups",
                    self._world.tick,
                    len(self._world.alive_mimics()),
                    self._world.biome_map.lookups,
                )
        logger.info("=== Simulation finished at tick %d ===", self._world.tick)

    def invalidate_derived_state(self) -> None:
        """Force every mimic to re-read the balance config on its next step."""
        for mimic in self._world.mimics.values():
            mimic.derived.invalidate_stats()
            mimic.derived.invalidate_interval()
        logger.info("Invalidated derived state for %d mimics", len(self._world.mimics))

    def _step(self) -> None:
        self._tick_events = []
        t0 = time.perf_counter()

        self._phase_spawning()
        self._phase_movement()

        living = self._world.alive_mimics()
        self._tick_events.extend(self._worker_pool.dispatch(living, self._world))

        self._phase_cleanup()

        elapsed_ms = (time.perf_counter() - t0) * 1000
        if elapsed_ms > 50:
            logger.debug("Tick %d took %.1f ms (%d mimics)", self._world.tick, elapsed_ms, len(living))

    def _phase_spawning(self) -> None:
        if not self._spawner.should_spawn(self._world):
            return
        for mimic in self._spawner.spawn_natural(self._world):
            self._world.add_mimic(mimic)
            self._emit("spawn", f"A {mimic.variant} mimic appeared at {mimic.pos}", (mimic.id,))

    def _phase_movement(self) -> None:
        tick = self._world.tick
        chance = self._config.wander_chance
        for mimic in self._world.alive_mimics():
            if mimic.target_id is not None:
                continue
            if not self._rng.next_bool(Domain.WANDER, mimic.id, tick, chance):
                continue
            step = _WANDER_OFFSETS[self._rng.next_int(Domain.WANDER, mimic.id, tick, 0, 3, salt=1)]
            self._world.move_mimic(mimic.id, mimic.pos + step)

    def _phase_cleanup(self) -> None:
        for mimic in list(self._world.mimics.values()):
            if not mimic.alive:
                self._world.remove_mimic(mimic.id)
                continue
            mimic.age += 1
