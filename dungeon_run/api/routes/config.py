"""GET /api/v1/config — expose run configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dungeon_run.api.dependencies import get_run_manager
from dungeon_run.api.run_manager import RunManager
from dungeon_run.api.schemas import RunConfigResponse

router = APIRouter()


@router.get("/config", response_model=RunConfigResponse)
def get_config(
    manager: RunManager = Depends(get_run_manager),
) -> RunConfigResponse:
    cfg = manager.config
    return RunConfigResponse(
        seed=cfg.seed,
        total_rooms=cfg.total_rooms,
        rooms_per_theme=cfg.rooms_per_theme,
        start_at_room_index=cfg.start_at_room_index,
        use_fixed_sequence=cfg.use_fixed_sequence,
        fixed_sequence=list(cfg.fixed_sequence),
        tick_seconds=cfg.tick_seconds,
        max_ticks=cfg.max_ticks,
        use_gate_template=cfg.use_gate_template,
        repair_enemy_spawn_count=cfg.repair_enemy_spawn_count,
        repair_enemy_spawn_radius=cfg.repair_enemy_spawn_radius,
        themes_file=cfg.themes_file,
        tick_rate=manager.tick_rate,
    )
