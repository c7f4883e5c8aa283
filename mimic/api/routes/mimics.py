"""Mimic admin endpoints: list, inspect, spawn, change variant, reveal, kill."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from mimic.api.dependencies import get_engine_manager
from mimic.api.engine_manager import EngineManager
from mimic.api.schemas import (
    KillAllResponse,
    LootResponse,
    MimicListResponse,
    MimicSchema,
    SpawnRequest,
    TargetRequest,
    VariantRequest,
)
from mimic.core.models import BlockPos, Mimic

router = APIRouter(prefix="/mimics")


def _found(mimic: Mimic | None, mimic_id: int) -> MimicSchema:
    if mimic is None:
        raise HTTPException(status_code=404, detail=f"Mimic {mimic_id} not found")
    return MimicSchema.from_mimic(mimic)


@router.get("", response_model=MimicListResponse)
def list_mimics(
    manager: EngineManager = Depends(get_engine_manager),
) -> MimicListResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        return MimicListResponse(tick=0, count=0, mimics=[])
    mimics = [MimicSchema.from_mimic(snapshot.mimics[mid]) for mid in sorted(snapshot.mimics)]
    return MimicListResponse(tick=snapshot.tick, count=len(mimics), mimics=mimics)


@router.get("/{mimic_id}", response_model=MimicSchema)
def get_mimic(
    mimic_id: int,
    manager: EngineManager = Depends(get_engine_manager),
) -> MimicSchema:
    snapshot = manager.get_snapshot()
    mimic = snapshot.mimics.get(mimic_id) if snapshot else None
    return _found(mimic, mimic_id)


@router.post("", response_model=MimicListResponse)
def spawn_mimics(
    body: SpawnRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> MimicListResponse:
    spawned = manager.spawn(body.variant, BlockPos(body.x, body.y, body.z), body.count)
    snapshot = manager.get_snapshot()
    return MimicListResponse(
        tick=snapshot.tick if snapshot else 0,
        count=len(spawned),
        mimics=[MimicSchema.from_mimic(m) for m in spawned],
    )


@router.post("/{mimic_id}/variant", response_model=MimicSchema)
def set_mimic_variant(
    mimic_id: int,
    body: VariantRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> MimicSchema:
    return _found(manager.set_variant(mimic_id, body.variant), mimic_id)


@router.post("/{mimic_id}/reveal", response_model=MimicSchema)
def reveal_mimic(
    mimic_id: int,
    manager: EngineManager = Depends(get_engine_manager),
) -> MimicSchema:
    return _found(manager.set_revealed(mimic_id, True), mimic_id)


@router.post("/{mimic_id}/hide", response_model=MimicSchema)
def hide_mimic(
    mimic_id: int,
    manager: EngineManager = Depends(get_engine_manager),
) -> MimicSchema:
    return _found(manager.set_revealed(mimic_id, False), mimic_id)


@router.post("/{mimic_id}/target", response_model=MimicSchema)
def set_mimic_target(
    mimic_id: int,
    body: TargetRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> MimicSchema:
    return _found(manager.set_target(mimic_id, body.target_id), mimic_id)


@router.post("/{mimic_id}/kill", response_model=LootResponse)
def kill_mimic(
    mimic_id: int,
    looting: int = Query(0, ge=0, le=3, description="Looting enchantment level"),
    manager: EngineManager = Depends(get_engine_manager),
) -> LootResponse:
    drop = manager.kill(mimic_id, looting)
    if drop is None:
        raise HTTPException(status_code=404, detail=f"Mimic {mimic_id} not found")
    return LootResponse(
        mimic_id=mimic_id,
        teeth=drop.teeth,
        rare_book=drop.rare_book,
        experience=drop.experience,
        multiplier=drop.multiplier,
    )


@router.delete("", response_model=KillAllResponse)
def kill_all_mimics(
    manager: EngineManager = Depends(get_engine_manager),
) -> KillAllResponse:
    return KillAllResponse(killed=manager.kill_all())
