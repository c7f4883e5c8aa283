"""Core data models: BlockPos, Mimic."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mimic.core.derived_state import (
    EntityDerivedState,
    EntityDerivedStateCache,
    partition_of,
)
from mimic.core.variants import MimicVariant, resolve


@dataclass(frozen=True, slots=True)
class BlockPos:
    """Immutable integer block coordinate (y is height)."""

    x: int = 0
    y: int = 0
    z: int = 0

    def __add__(self, other: BlockPos) -> BlockPos:
        return BlockPos(self.x + other.x, self.y + other.y, self.z + other.z)

    def chunk(self) -> tuple[int, int]:
        return partition_of(self)

    def manhattan(self, other: BlockPos) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y) + abs(self.z - other.z)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"


@dataclass(slots=True)
class Mimic:
    """A chest-disguised hostile entity.

    Combat numbers start at the unscaled base values; the behavior step
    replaces them with scaled values on the first tick.
    """

    id: int
    pos: BlockPos
    variant: MimicVariant = MimicVariant.CLASSIC
    revealed: bool = False

    health: float = 24.0
    max_health: float = 24.0
    attack_damage: float = 4.0
    experience: int = 10

    age: int = 0
    target_id: int | None = None
    alive: bool = True

    derived: EntityDerivedStateCache = field(default_factory=EntityDerivedStateCache)

    @property
    def fire_immune(self) -> bool:
        return self.variant is MimicVariant.ENDER

    @property
    def biome_id(self) -> str | None:
        return self.derived.biome_id

    def set_variant(self, variant: MimicVariant) -> None:
        """Change variant; stats must be recomputed before the next use."""
        self.variant = variant
        self.derived.invalidate_stats()

    def copy(self) -> Mimic:
        return Mimic(
            id=self.id,
            pos=self.pos,
            variant=self.variant,
            revealed=self.revealed,
            health=self.health,
            max_health=self.max_health,
            attack_damage=self.attack_damage,
            experience=self.experience,
            age=self.age,
            target_id=self.target_id,
            alive=self.alive,
            derived=self.derived.copy(),
        )

    # -- persistence record (host storage format) --

    def to_record(self) -> dict[str, Any]:
        return {
            "Variant": self.variant.id,
            "Revealed": self.revealed,
            "StatsApplied": self.derived.stats_applied,
            "Health": self.health,
            "MaxHealth": self.max_health,
            "AttackDamage": self.attack_damage,
            "Experience": self.experience,
        }

    @classmethod
    def from_record(cls, entity_id: int, pos: BlockPos, record: dict[str, Any]) -> Mimic:
        """Rebuild a mimic from a stored record; unknown variants load as classic."""
        mimic = cls(
            id=entity_id,
            pos=pos,
            variant=resolve(record.get("Variant")),
            revealed=bool(record.get("Revealed", False)),
        )
        if "Health" in record:
            mimic.health = float(record["Health"])
            mimic.max_health = float(record.get("MaxHealth", record["Health"]))
        if "AttackDamage" in record:
            mimic.attack_damage = float(record["AttackDamage"])
        if "Experience" in record:
            mimic.experience = int(record["Experience"])
        if record.get("StatsApplied"):
            mimic.derived = EntityDerivedStateCache(EntityDerivedState(stats_applied=True))
        return mimic
