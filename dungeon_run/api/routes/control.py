"""POST /api/v1/control/{action} — run lifecycle controls.

Each action handler returns ``(status, message)``; the route stamps the
response with the tick reached after the action ran.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from fastapi import APIRouter, Depends, Query

from dungeon_run.api.dependencies import get_run_manager
from dungeon_run.api.run_manager import RunManager
from dungeon_run.api.schemas import ControlResponse

router = APIRouter()

Outcome = tuple[str, str]


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    reset = "reset"


def _start(manager: RunManager) -> Outcome:
    if manager.running:
        return "noop", "Already running."
    if manager.finished:
        return "error", "Run already finished; reset first."
    manager.start()
    return "ok", "Run started."


def _pause(manager: RunManager) -> Outcome:
    if not manager.running:
        return "error", "Not running."
    manager.pause()
    return "ok", "Run paused."


def _resume(manager: RunManager) -> Outcome:
    if not manager.running:
        return "error", "Not running."
    manager.resume()
    return "ok", "Run resumed."


def _step(manager: RunManager) -> Outcome:
    if manager.step():
        return "ok", "Single tick executed."
    return "noop", "Run already finished."


def _reset(manager: RunManager) -> Outcome:
    manager.reset()
    return "ok", "Run reset."


_HANDLERS: dict[ControlAction, Callable[[RunManager], Outcome]] = {
    ControlAction.start: _start,
    ControlAction.pause: _pause,
    ControlAction.resume: _resume,
    ControlAction.step: _step,
    ControlAction.reset: _reset,
}


def _reply(manager: RunManager, outcome: Outcome) -> ControlResponse:
    status, message = outcome
    snapshot = manager.get_snapshot()
    return ControlResponse(status=status, message=message, tick=snapshot.tick if snapshot else 0)


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    manager: RunManager = Depends(get_run_manager),
) -> ControlResponse:
    return _reply(manager, _HANDLERS[action](manager))


@router.post("/speed", response_model=ControlResponse)
def set_speed(
    tps: float = Query(20.0, gt=0.5, le=100.0, description="Ticks per second"),
    manager: RunManager = Depends(get_run_manager),
) -> ControlResponse:
    manager.tick_rate = 1.0 / tps
    return _reply(manager, ("ok", f"Speed set to {tps:.1f} tps."))
