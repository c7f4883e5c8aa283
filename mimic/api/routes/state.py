"""World state, event feed and biome lookup endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from mimic.api.dependencies import get_engine_manager
from mimic.api.engine_manager import EngineManager
from mimic.api.schemas import BiomeResponse, EventSchema, EventsResponse, WorldStateResponse
from mimic.core.models import BlockPos

router = APIRouter()


@router.get("/state", response_model=WorldStateResponse)
def get_state(
    manager: EngineManager = Depends(get_engine_manager),
) -> WorldStateResponse:
    snapshot = manager.get_snapshot()
    assert snapshot is not None
    return WorldStateResponse(
        tick=snapshot.tick,
        difficulty=snapshot.difficulty.name,
        mimic_count=len(snapshot.mimics),
        config_generation=snapshot.config_generation,
        biome_lookups=snapshot.biome_lookups,
        running=manager.running,
        paused=manager.paused,
    )


@router.get("/events", response_model=EventsResponse)
def get_events(
    since_tick: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    category: list[str] | None = Query(None, description="Only these categories, e.g. reveal, death"),
    manager: EngineManager = Depends(get_engine_manager),
) -> EventsResponse:
    log = manager.event_log
    events = log.since_tick(since_tick, category)[-limit:]
    return EventsResponse(events=[EventSchema.from_event(e) for e in events], counts=log.counts())


@router.get("/biome", response_model=BiomeResponse)
def get_biome(
    x: int = Query(0),
    y: int = Query(64),
    z: int = Query(0),
    manager: EngineManager = Depends(get_engine_manager),
) -> BiomeResponse:
    pos = BlockPos(x, y, z)
    biome_id, weight = manager.biome_at(pos)
    return BiomeResponse(biome=biome_id, weight=weight, chunk=pos.chunk())
