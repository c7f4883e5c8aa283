"""Parallel worker pool for per-mimic behavior steps."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mimic.config import SimulationConfig
    from mimic.core.models import Mimic
    from mimic.core.world_state import WorldState
    from mimic.systems.behavior import MimicBehavior
    from mimic.utils.event_log import SimEvent

logger = logging.getLogger(__name__)


class WorkerPool:
    """Manages a ThreadPoolExecutor that steps mimics in parallel.

    Each task owns exactly one mimic for the duration of the tick; the only
    shared state workers touch is the read-only balance config and the
    biome map.
    """

    __slots__ = ("_config", "_behavior", "_executor")

    def __init__(self, config: SimulationConfig, behavior: MimicBehavior) -> None:
        self._config = config
        self._behavior = behavior
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, config.num_workers),
            thread_name_prefix="mimic-worker",
        )

    def dispatch(self, mimics: list[Mimic], world: WorldState) -> list[SimEvent]:
        """Step every mimic and return their events ordered by mimic id.

        Blocks until all workers finish or timeout.  A failing step is
        logged and skipped for this tick.
        """
        if not mimics:
            return []

        results: dict[int, list[SimEvent]] = {}

        # Single-worker mode runs inline
        if self._config.num_workers <= 1:
            for mimic in mimics:
                try:
                    results[mimic.id] = self._behavior.step(mimic, world)
                except Exception:
                    logger.exception("Step failed for mimic %d — skipping", mimic.id)
        else:
            futures: dict[Future[list[SimEvent]], int] = {
                self._executor.submit(self._behavior.step, mimic, world): mimic.id
                for mimic in mimics
            }
            for future in as_completed(futures, timeout=self._config.worker_timeout_seconds):
                mimic_id = futures[future]
                try:
                    results[mimic_id] = future.result()
                except Exception:
                    logger.exception("Worker failed for mimic %d — skipping", mimic_id)

        events: list[SimEvent] = []
        for mimic_id in sorted(results):
            events.extend(results[mimic_id])
        return events

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
