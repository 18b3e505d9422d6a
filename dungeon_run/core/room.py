"""Runtime room objects: the instantiated room and the active-room state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from dungeon_run.core.blueprints import RoomBlueprint
from dungeon_run.core.enums import RepairKind
from dungeon_run.core.exit_gate import ExitGate
from dungeon_run.core.models import ORIGIN, Enemy, Vector2

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RepairNote:
    """One default the auto-repair pass had to synthesize."""

    kind: RepairKind
    message: str


class RoomInstance:
    """A live copy of a blueprint placed at ``origin``.

    Anchors are stored in world space.  The blueprint itself is shared and
    never touched; repairs only replace this instance's own anchors.
    """

    __slots__ = (
        "instance_id", "blueprint", "origin",
        "player_spawn", "exit_anchor", "enemy_spawns",
        "gate", "enemies", "repairs", "destroyed",
    )

    def __init__(self, instance_id: int, blueprint: RoomBlueprint, origin: Vector2 = ORIGIN) -> None:
        self.instance_id = instance_id
        self.blueprint = blueprint
        self.origin = origin
        self.player_spawn: Vector2 | None = (
            origin + blueprint.player_spawn if blueprint.player_spawn is not None else None
        )
        self.exit_anchor: Vector2 | None = (
            origin + blueprint.exit_anchor if blueprint.exit_anchor is not None else None
        )
        self.enemy_spawns: tuple[Vector2, ...] = tuple(origin + p for p in blueprint.enemy_spawns)
        self.gate: ExitGate | None = None
        if blueprint.has_embedded_gate:
            self.gate = ExitGate(self.exit_anchor or origin, embedded=True)
        self.enemies: dict[int, Enemy] = {}
        self.repairs: list[RepairNote] = []
        self.destroyed = False

    @property
    def name(self) -> str:
        return self.blueprint.name

    @property
    def center(self) -> Vector2:
        return self.origin

    def add_enemy(self, enemy: Enemy) -> None:
        self.enemies[enemy.id] = enemy

    def living_enemies(self) -> list[Enemy]:
        return [e for e in self.enemies.values() if e.alive]

    def destroy(self) -> None:
        """Tear down every enemy (firing their death fallbacks), then the room."""
        if self.destroyed:
            return
        for enemy in list(self.enemies.values()):
            enemy.destroy()
        self.enemies.clear()
        self.gate = None
        self.destroyed = True
        logger.debug("Room instance %d (%s) destroyed", self.instance_id, self.name)


@dataclass(slots=True)
class ActiveRoomState:
    """Per-room bookkeeping owned by the orchestrator."""

    index: int
    room: RoomInstance
    gate: ExitGate | None = None
    alive: int = 0
    spawned_total: int = 0
    deaths: int = 0
    cleared: bool = False
    died_ids: list[int] = field(default_factory=list)

    def record_spawn(self) -> None:
        self.alive += 1
        self.spawned_total += 1

    def record_death(self, enemy_id: int) -> None:
        self.alive = max(0, self.alive - 1)
        self.deaths += 1
        self.died_ids.append(enemy_id)
