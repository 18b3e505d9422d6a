"""Core data models: blueprints, rooms, gates and death tracking."""

from dungeon_run.core.blueprints import RoomBlueprint, SpawnEntry, SpawnProfile, Theme
from dungeon_run.core.death_tracker import DeathTracker
from dungeon_run.core.enums import Domain, GateState, RepairKind, RoomPhase, SpawnPhase
from dungeon_run.core.exit_gate import ExitGate
from dungeon_run.core.models import Enemy, Player, Vector2
from dungeon_run.core.room import ActiveRoomState, RoomInstance
from dungeon_run.core.snapshot import RunSnapshot
from dungeon_run.core.themes import ThemeRegistry

__all__ = [
    "ActiveRoomState",
    "DeathTracker",
    "Domain",
    "Enemy",
    "ExitGate",
    "GateState",
    "Player",
    "RepairKind",
    "RoomBlueprint",
    "RoomInstance",
    "RoomPhase",
    "RunSnapshot",
    "SpawnEntry",
    "SpawnPhase",
    "SpawnProfile",
    "Theme",
    "ThemeRegistry",
    "Vector2",
]
