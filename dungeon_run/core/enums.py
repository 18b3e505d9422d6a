"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class RoomPhase(IntEnum):
    """Lifecycle phases of the room orchestrator."""

    EMPTY = 0
    LOADING = 1
    AWAITING_CLEAR = 2
    UNLOCKED = 3
    TRANSITIONING = 4
    COMPLETE = 5


@unique
class GateState(IntEnum):
    """Exit gate states.  UNLOCKED is terminal for a room instance."""

    LOCKED = 0
    UNLOCKED = 1


@unique
class SpawnPhase(IntEnum):
    """Internal phases of a spawn profile execution."""

    IDLE = 0
    INITIAL_DELAY = 1
    SPAWNING = 2
    AWAITING_CLEAR = 3
    DONE = 4
    CANCELLED = 5


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    PLAN = 0
    SPAWN_COUNT = 1
    SPAWN_POINT = 2
    SPAWN_DELAY = 3


@unique
class RepairKind(IntEnum):
    """What the auto-repair pass had to synthesize for a room."""

    PLAYER_SPAWN = 0
    EXIT_ANCHOR = 1
    ENEMY_SPAWNS = 2
