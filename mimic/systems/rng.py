"""Domain-separated deterministic RNG using xxhash.

Every roll is a pure function of (WorldSeed, Domain, key...) so results do
not depend on which worker thread evaluates an entity or in what order.
"""

from __future__ import annotations

import struct

import xxhash

from mimic.core.enums import Domain


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    No internal mutable state, therefore fully thread-safe.
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, *keys: int) -> int:
        payload = struct.pack(f"<qi{len(keys)}q", self._seed, domain.value, *keys)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, entity_id: int, tick: int, salt: int = 0) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, entity_id, tick, salt) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, entity_id: int, tick: int, low: int, high: int, salt: int = 0) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, entity_id, tick, salt)
        return low + int(f * (high - low + 1))

    def next_bool(self, domain: Domain, entity_id: int, tick: int, probability: float = 0.5) -> bool:
        """Return True with the given probability."""
        return self.next_float(domain, entity_id, tick) < probability

    def float_at(self, domain: Domain, x: int, z: int) -> float:
        """Deterministic float in [0.0, 1.0) keyed by a 2D coordinate."""
        return self._hash(domain, x, z) / (self._MAX_UINT64 + 1)
