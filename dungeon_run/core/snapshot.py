"""Immutable snapshot of a run for the API thread."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from dungeon_run.core.enums import GateState, RoomPhase, SpawnPhase
from dungeon_run.core.models import Vector2

if TYPE_CHECKING:
    from dungeon_run.engine.room_lifecycle import RoomLifecycleManager


@dataclass(frozen=True, slots=True)
class EnemyView:
    id: int
    kind: str
    pos: Vector2
    hp: int
    max_hp: int


@dataclass(frozen=True, slots=True)
class RunSnapshot:
    """Read-only view of the run, safe to share across threads.

    Only plain values and tuples are captured, so later ticks on the loop
    thread cannot change a snapshot a handler is still serializing.
    """

    tick: int
    elapsed: float
    seed: int
    phase: RoomPhase
    room_index: int
    room_count: int
    blueprint: str | None
    theme: str | None
    gate_state: GateState | None
    gate_pos: Vector2 | None
    alive: int
    spawn_phase: SpawnPhase
    spawn_pending: int
    player_pos: Vector2 | None
    enemies: tuple[EnemyView, ...]
    rooms_loaded: int
    rooms_cleared: int
    total_spawned: int
    total_deaths: int

    @property
    def complete(self) -> bool:
        return self.phase == RoomPhase.COMPLETE

    @classmethod
    def from_manager(cls, manager: RoomLifecycleManager) -> RunSnapshot:
        plan = manager.plan
        state = manager.active
        gate = manager.gate
        player = manager.player

        blueprint = theme = None
        enemies: tuple[EnemyView, ...] = ()
        if state is not None:
            blueprint = state.room.name
            if plan is not None and 0 <= state.index < len(plan):
                theme = plan[state.index].theme or None
            enemies = tuple(
                EnemyView(id=e.id, kind=e.kind, pos=e.pos, hp=e.hp, max_hp=e.max_hp)
                for e in sorted(state.room.living_enemies(), key=lambda e: e.id)
            )

        return cls(
            tick=manager.ticks,
            elapsed=manager.elapsed,
            seed=plan.seed if plan is not None else 0,
            phase=manager.phase,
            room_index=manager.room_index,
            room_count=len(plan) if plan is not None else 0,
            blueprint=blueprint,
            theme=theme,
            gate_state=gate.state if gate is not None else None,
            gate_pos=gate.pos if gate is not None else None,
            alive=manager.alive_count,
            spawn_phase=manager.executor.phase,
            spawn_pending=manager.executor.pending,
            player_pos=player.pos if player is not None else None,
            enemies=enemies,
            rooms_loaded=manager.rooms_loaded,
            rooms_cleared=manager.rooms_cleared,
            total_spawned=manager.total_spawned,
            total_deaths=manager.total_deaths,
        )
