"""GET /api/v1/state — live room, gate, enemy and event data (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from dungeon_run.api.dependencies import get_run_manager
from dungeon_run.api.run_manager import RunManager
from dungeon_run.api.schemas import (
    EnemySchema,
    EventSchema,
    PointSchema,
    RunStateResponse,
    RunStats,
)

router = APIRouter()


def _point(v) -> PointSchema | None:
    if v is None:
        return None
    return PointSchema(x=v.x, y=v.y)


@router.get("/state", response_model=RunStateResponse)
def get_state(
    since_tick: int = Query(0, ge=0, description="Only return events since this tick"),
    manager: RunManager = Depends(get_run_manager),
) -> RunStateResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No snapshot available yet.")

    events = [
        EventSchema(
            tick=e.tick,
            category=e.category,
            message=e.message,
            room_index=e.room_index,
            entity_ids=list(e.entity_ids),
        )
        for e in manager.event_log.since_tick(since_tick)
    ]

    return RunStateResponse(
        tick=snapshot.tick,
        elapsed=snapshot.elapsed,
        seed=snapshot.seed,
        phase=snapshot.phase.name.lower(),
        complete=snapshot.complete,
        room_index=snapshot.room_index,
        room_count=snapshot.room_count,
        blueprint=snapshot.blueprint,
        theme=snapshot.theme,
        gate_state=snapshot.gate_state.name.lower() if snapshot.gate_state is not None else None,
        gate_pos=_point(snapshot.gate_pos),
        alive_count=snapshot.alive,
        spawn_phase=snapshot.spawn_phase.name.lower(),
        spawn_pending=snapshot.spawn_pending,
        player_pos=_point(snapshot.player_pos),
        enemies=[
            EnemySchema(id=e.id, kind=e.kind, x=e.pos.x, y=e.pos.y, hp=e.hp, max_hp=e.max_hp)
            for e in snapshot.enemies
        ],
        events=events,
    )


@router.get("/stats", response_model=RunStats)
def get_stats(
    manager: RunManager = Depends(get_run_manager),
) -> RunStats:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No snapshot available yet.")

    return RunStats(
        tick=snapshot.tick,
        rooms_loaded=snapshot.rooms_loaded,
        rooms_cleared=snapshot.rooms_cleared,
        total_spawned=snapshot.total_spawned,
        total_deaths=snapshot.total_deaths,
        running=manager.running,
        paused=manager.paused,
        finished=manager.finished,
    )
