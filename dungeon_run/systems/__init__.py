"""Run systems: RNG, plan building, room validation, spawning."""

from dungeon_run.systems.rng import DeterministicRNG, SeededRNG
from dungeon_run.systems.room_validator import RoomValidator
from dungeon_run.systems.run_plan import RunPlan, RunPlanBuilder
from dungeon_run.systems.spawner import SpawnProfileExecutor

__all__ = [
    "DeterministicRNG",
    "RoomValidator",
    "RunPlan",
    "RunPlanBuilder",
    "SeededRNG",
    "SpawnProfileExecutor",
]
