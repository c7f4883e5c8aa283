"""Pydantic response models for the REST API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from mimic.core.models import Mimic
from mimic.utils.event_log import SimEvent


# --- Mimics ---

class PositionSchema(BaseModel):
    x: int
    y: int
    z: int


class MimicSchema(BaseModel):
    id: int
    variant: str
    pos: PositionSchema
    revealed: bool
    health: float
    max_health: float
    attack_damage: float
    experience: int
    age: int
    target_id: int | None = None
    biome: str | None = None
    fire_immune: bool = False
    stats_applied: bool = False

    @classmethod
    def from_mimic(cls, m: Mimic) -> MimicSchema:
        return cls(
            id=m.id,
            variant=m.variant.id,
            pos=PositionSchema(x=m.pos.x, y=m.pos.y, z=m.pos.z),
            revealed=m.revealed,
            health=m.health,
            max_health=m.max_health,
            attack_damage=m.attack_damage,
            experience=m.experience,
            age=m.age,
            target_id=m.target_id,
            biome=m.biome_id,
            fire_immune=m.fire_immune,
            stats_applied=m.derived.stats_applied,
        )


class MimicListResponse(BaseModel):
    tick: int
    count: int
    mimics: list[MimicSchema]


class SpawnRequest(BaseModel):
    variant: str | None = None
    x: int = 0
    y: int = 64
    z: int = 0
    count: int = Field(1, ge=1, le=50)


class VariantRequest(BaseModel):
    variant: str


class TargetRequest(BaseModel):
    target_id: int | None = None


class LootResponse(BaseModel):
    mimic_id: int
    teeth: int
    rare_book: bool
    experience: int
    multiplier: float


class KillAllResponse(BaseModel):
    killed: int


# --- Balance ---

class VariantSchema(BaseModel):
    id: str
    health_multiplier: float
    damage_multiplier: float
    experience_multiplier: float
    spawn_rate: float
    rare_book_chance: float


class VariantsResponse(BaseModel):
    fallback: str
    variants: list[VariantSchema]


class ScalingResponse(BaseModel):
    biome: str
    biome_weight: float
    variant: str
    difficulty: str
    health: float
    damage: float
    experience: int
    warnings: list[str] = Field(default_factory=list)


class BiomeResponse(BaseModel):
    biome: str
    weight: float
    chunk: tuple[int, int]


class BalanceConfigResponse(BaseModel):
    generation: int
    config: dict[str, Any]


# --- World / control ---

class WorldStateResponse(BaseModel):
    tick: int
    difficulty: str
    mimic_count: int
    config_generation: int
    biome_lookups: int
    running: bool
    paused: bool


class EventSchema(BaseModel):
    tick: int
    category: str
    message: str
    entity_ids: list[int] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None

    @classmethod
    def from_event(cls, e: SimEvent) -> EventSchema:
        return cls(
            tick=e.tick,
            category=e.category,
            message=e.message,
            entity_ids=list(e.entity_ids),
            metadata=e.metadata,
        )


class EventsResponse(BaseModel):
    events: list[EventSchema]
    counts: dict[str, int] = Field(default_factory=dict)


class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int


class SimulationConfigResponse(BaseModel):
    world_seed: int
    difficulty: int
    max_ticks: int
    num_workers: int
    initial_mimic_count: int
    spawner_interval: int
    spawner_max_mimics: int
    balance_file: str
    tick_rate: float
