"""Per-entity derived-state cache.

Two values are expensive or config-backed and change rarely, so each mimic
keeps them instead of recomputing every tick:

  * the biome id at its position, refreshed only when the mimic crosses into
    a different 16x16 chunk column;
  * the idle-sound interval, read once from the balance config and kept
    until explicitly invalidated (after a config reload).

The state itself is an immutable value with pure transition functions so the
chunk-boundary logic can be tested without a running world.
``EntityDerivedStateCache`` is the small mutable holder an entity owns; it is
touched only by that entity's own step, so it needs no locking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from mimic.core.balance import BalanceConfig
    from mimic.core.models import BlockPos

logger = logging.getLogger(__name__)

DEFAULT_BIOME_ID = "plains"
CHUNK_SHIFT = 4

BiomeLookup = Callable[["BlockPos"], Optional[str]]


def partition_of(pos: BlockPos) -> tuple[int, int]:
    """Chunk column key of *pos*: ``(x >> 4, z >> 4)``."""
    return pos.x >> CHUNK_SHIFT, pos.z >> CHUNK_SHIFT


@dataclass(frozen=True, slots=True)
class EntityDerivedState:
    cached_biome_id: str | None = None
    last_check_partition: tuple[int, int] | None = None
    cached_interval: int | None = None
    stats_applied: bool = False


def resolve_biome(state: EntityDerivedState, position: BlockPos, lookup: BiomeLookup) -> EntityDerivedState:
    """Return *state* with a biome valid for *position*.

    *lookup* is only called when the chunk column differs from the last check
    (or nothing was checked yet).  A lookup yielding nothing maps to plains.
    """
    partition = partition_of(position)
    if state.last_check_partition == partition and state.cached_biome_id is not None:
        return state

    biome_id = lookup(position)
    if not biome_id:
        logger.warning("No biome resolved at %s, assuming %s", position, DEFAULT_BIOME_ID)
        biome_id = DEFAULT_BIOME_ID
    return replace(state, cached_biome_id=biome_id, last_check_partition=partition)


def with_interval(state: EntityDerivedState, config: BalanceConfig) -> EntityDerivedState:
    if state.cached_interval is not None:
        return state
    return replace(state, cached_interval=config.behavior.idle_sound_interval_ticks)


def clear_interval(state: EntityDerivedState) -> EntityDerivedState:
    return replace(state, cached_interval=None)


def mark_stats_applied(state: EntityDerivedState) -> EntityDerivedState:
    return replace(state, stats_applied=True)


def clear_stats_applied(state: EntityDerivedState) -> EntityDerivedState:
    return replace(state, stats_applied=False)


class EntityDerivedStateCache:
    """Mutable per-entity holder around an ``EntityDerivedState``."""

    __slots__ = ("_state",)

    def __init__(self, state: EntityDerivedState | None = None) -> None:
        self._state = state or EntityDerivedState()

    @property
    def state(self) -> EntityDerivedState:
        return self._state

    @property
    def biome_id(self) -> str | None:
        return self._state.cached_biome_id

    @property
    def stats_applied(self) -> bool:
        return self._state.stats_applied

    def resolve_biome(self, world_lookup_fn: BiomeLookup, position: BlockPos) -> str:
        new_state = resolve_biome(self._state, position, world_lookup_fn)
        if new_state is not self._state:
            logger.debug("Biome cache refreshed at %s: %s", position, new_state.cached_biome_id)
            self._state = new_state
        return new_state.cached_biome_id  # type: ignore[return-value]

    def interval(self, config: BalanceConfig) -> int:
        self._state = with_interval(self._state, config)
        return self._state.cached_interval  # type: ignore[return-value]

    def mark_stats_applied(self) -> None:
        self._state = mark_stats_applied(self._state)

    def invalidate_stats(self) -> None:
        self._state = clear_stats_applied(self._state)

    def invalidate_interval(self) -> None:
        self._state = clear_interval(self._state)

    def copy(self) -> EntityDerivedStateCache:
        return EntityDerivedStateCache(self._state)
