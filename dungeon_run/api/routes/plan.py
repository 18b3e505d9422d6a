"""GET /api/v1/plan — the seed-derived room sequence of the current run."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from dungeon_run.api.dependencies import get_run_manager
from dungeon_run.api.run_manager import RunManager
from dungeon_run.api.schemas import PlanEntrySchema, RunPlanResponse

router = APIRouter()


@router.get("/plan", response_model=RunPlanResponse)
def get_plan(
    manager: RunManager = Depends(get_run_manager),
) -> RunPlanResponse:
    plan = manager.plan
    if plan is None:
        raise HTTPException(status_code=503, detail="Run has not been planned yet.")

    return RunPlanResponse(
        seed=plan.seed,
        requested=plan.requested,
        fixed=plan.fixed,
        entries=[
            PlanEntrySchema(
                slot=entry.slot,
                theme=entry.theme,
                pool_index=entry.pool_index,
                blueprint=entry.blueprint.name,
                has_spawn_profile=entry.blueprint.spawn_profile is not None,
                has_embedded_gate=entry.blueprint.has_embedded_gate,
            )
            for entry in plan
        ],
        skipped_slots=list(plan.skipped_slots),
    )
