"""Balance config endpoints: view, reload, variants, scaling preview."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from mimic.api.dependencies import get_engine_manager
from mimic.api.engine_manager import EngineManager
from mimic.api.schemas import (
    BalanceConfigResponse,
    ScalingResponse,
    SimulationConfigResponse,
    VariantSchema,
    VariantsResponse,
)
from mimic.core.derived_state import DEFAULT_BIOME_ID
from mimic.core.enums import Difficulty
from mimic.core.variants import FALLBACK_VARIANT, MimicVariant, resolve
from mimic.systems.config_file import to_dict
from mimic.systems.scaling import validate_scaling

router = APIRouter()


@router.get("/settings", response_model=SimulationConfigResponse)
def get_settings(
    manager: EngineManager = Depends(get_engine_manager),
) -> SimulationConfigResponse:
    cfg = manager.config
    return SimulationConfigResponse(
        world_seed=cfg.world_seed,
        difficulty=cfg.difficulty,
        max_ticks=cfg.max_ticks,
        num_workers=cfg.num_workers,
        initial_mimic_count=cfg.initial_mimic_count,
        spawner_interval=cfg.spawner_interval,
        spawner_max_mimics=cfg.spawner_max_mimics,
        balance_file=cfg.balance_file,
        tick_rate=manager.tick_rate,
    )


@router.get("/config", response_model=BalanceConfigResponse)
def get_balance_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> BalanceConfigResponse:
    config = manager.store.get()
    return BalanceConfigResponse(generation=manager.store.generation, config=to_dict(config))


@router.post("/config/reload", response_model=BalanceConfigResponse)
def reload_balance_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> BalanceConfigResponse:
    config = manager.reload_config()
    return BalanceConfigResponse(generation=manager.store.generation, config=to_dict(config))


@router.get("/variants", response_model=VariantsResponse)
def get_variants(
    manager: EngineManager = Depends(get_engine_manager),
) -> VariantsResponse:
    config = manager.store.get()
    variants = []
    for v in MimicVariant:
        mults = config.variant_multipliers_for(v.id)
        variants.append(VariantSchema(
            id=v.id,
            health_multiplier=mults.health,
            damage_multiplier=mults.damage,
            experience_multiplier=mults.experience,
            spawn_rate=config.spawn_rates.rate_for(v.id),
            rare_book_chance=config.loot_settings.rare_book_drop_chance.chance_for(v.id),
        ))
    return VariantsResponse(fallback=FALLBACK_VARIANT.id, variants=variants)


@router.get("/scaling", response_model=ScalingResponse)
def preview_scaling(
    biome: str = Query(DEFAULT_BIOME_ID, description="Biome id, e.g. deep_dark"),
    variant: str = Query("classic", description="Variant id; unknown ids fall back to classic"),
    difficulty: str = Query("NORMAL", description="PEACEFUL, EASY, NORMAL or HARD"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ScalingResponse:
    try:
        level = Difficulty[difficulty.upper()]
    except KeyError:
        raise HTTPException(status_code=422, detail=f"Unknown difficulty: {difficulty}") from None

    config = manager.store.get()
    report = validate_scaling(config, biome, resolve(variant), level)
    return ScalingResponse(
        biome=report.biome_id,
        biome_weight=config.biome_weight(biome),
        variant=report.variant,
        difficulty=report.difficulty,
        health=report.health,
        damage=report.damage,
        experience=report.experience,
        warnings=list(report.warnings),
    )
