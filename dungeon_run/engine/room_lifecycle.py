"""RoomLifecycleManager — the room-by-room state machine of a run.

Phase cycle:
  EMPTY -> LOADING -> AWAITING_CLEAR -> UNLOCKED -> TRANSITIONING -> LOADING ...
  ... -> COMPLETE (terminal, plan exhausted)

``load_room`` always tears the previous room down before the next one is
built, so two rooms (or two sets of death trackers) never coexist.  The
gate is locked before any spawning starts and only unlocks once the alive
counter reaches zero.  ``try_advance`` defers the actual load by one
``tick`` so duplicate gate contacts in the same step collapse into a single
transition.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from dungeon_run.core.enums import GateState, RoomPhase
from dungeon_run.core.errors import RunNotStartedError
from dungeon_run.core.room import ActiveRoomState, RoomInstance
from dungeon_run.systems.room_validator import RoomValidator
from dungeon_run.systems.run_plan import RunPlan, RunPlanBuilder
from dungeon_run.systems.spawner import SpawnProfileExecutor
from dungeon_run.utils.event_log import EventLog, RunEvent

if TYPE_CHECKING:
    from dungeon_run.config import RunConfig
    from dungeon_run.core.exit_gate import ExitGate
    from dungeon_run.core.models import Enemy, Player
    from dungeon_run.engine.context import RunContext
    from dungeon_run.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

CompleteListener = Callable[["RoomLifecycleManager"], None]


class RoomLifecycleManager:
    """Orchestrates plan building, room loading, spawning and progression."""

    __slots__ = (
        "_config",
        "_context",
        "_builder",
        "_validator",
        "_executor",
        "_plan",
        "_rng",
        "_phase",
        "_index",
        "_active",
        "_transitioning",
        "_advance_pending",
        "_next_instance_id",
        "_ticks",
        "_elapsed",
        "_events",
        "_complete_listeners",
        "_rooms_loaded",
        "_rooms_cleared",
        "_total_spawned",
        "_total_deaths",
    )

    def __init__(
        self,
        config: RunConfig,
        context: RunContext,
        plan_builder: RunPlanBuilder | None = None,
        validator: RoomValidator | None = None,
    ) -> None:
        self._config = config
        self._context = context
        self._builder = plan_builder or RunPlanBuilder()
        self._validator = validator or RoomValidator.from_config(config)
        self._executor = SpawnProfileExecutor(
            context.enemies,
            on_spawned=self._on_enemy_spawned,
            on_died=self._on_enemy_died,
            on_cleared=self._on_room_cleared,
        )
        self._plan: RunPlan | None = None
        self._rng: DeterministicRNG | None = None
        self._phase = RoomPhase.EMPTY
        self._index = -1
        self._active: ActiveRoomState | None = None
        self._transitioning = False
        self._advance_pending = False
        self._next_instance_id = 1
        self._ticks = 0
        self._elapsed = 0.0
        self._events = EventLog(config.event_log_capacity)
        self._complete_listeners: list[CompleteListener] = []
        self._rooms_loaded = 0
        self._rooms_cleared = 0
        self._total_spawned = 0
        self._total_deaths = 0

    # -- public properties --

    @property
    def phase(self) -> RoomPhase:
        return self._phase

    @property
    def room_index(self) -> int:
        return self._index

    @property
    def plan(self) -> RunPlan | None:
        return self._plan

    @property
    def active(self) -> ActiveRoomState | None:
        return self._active

    @property
    def alive_count(self) -> int:
        return self._active.alive if self._active else 0

    @property
    def gate(self) -> ExitGate | None:
        return self._active.gate if self._active else None

    @property
    def gate_state(self) -> GateState | None:
        gate = self.gate
        return gate.state if gate else None

    @property
    def transitioning(self) -> bool:
        return self._transitioning

    @property
    def complete(self) -> bool:
        return self._phase == RoomPhase.COMPLETE

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def executor(self) -> SpawnProfileExecutor:
        return self._executor

    @property
    def player(self) -> Player | None:
        return self._context.players.player()

    @property
    def rooms_loaded(self) -> int:
        return self._rooms_loaded

    @property
    def rooms_cleared(self) -> int:
        return self._rooms_cleared

    @property
    def total_spawned(self) -> int:
        return self._total_spawned

    @property
    def total_deaths(self) -> int:
        return self._total_deaths

    def add_complete_listener(self, listener: CompleteListener) -> None:
        self._complete_listeners.append(listener)

    # -- lifecycle --

    def start_run(self) -> RunPlan:
        """Build the plan and load the first room."""
        cfg = self._config
        themes = self._context.themes

        if cfg.use_fixed_sequence:
            sequence = []
            for name in cfg.fixed_sequence:
                blueprint = themes.blueprint(name)
                if blueprint is None:
                    logger.warning("Fixed sequence names unknown room '%s'", name)
                sequence.append(blueprint)
            plan = self._builder.build_fixed(sequence, cfg.total_rooms, cfg.seed)
        else:
            plan = self._builder.build(cfg.seed, cfg.total_rooms, cfg.rooms_per_theme, themes)

        self._plan = plan
        self._rng = self._context.rng_factory(plan.seed)
        self._transitioning = False
        self._advance_pending = False
        logger.info(
            "=== Run started (seed=%d, rooms=%d/%d) ===",
            plan.seed, len(plan), plan.requested,
        )
        self._emit("run", f"Run started with seed {plan.seed} ({len(plan)} rooms)")

        start = cfg.start_at_room_index
        if start > 0:
            start = min(start, len(plan))
            logger.info("Skipping to room index %d", start)
        self.load_room(max(0, start))
        return plan

    def try_advance(self) -> bool:
        """Request a transition to the next room.  Returns False if absorbed."""
        if self._plan is None or self._phase == RoomPhase.COMPLETE:
            return False
        if self._transitioning:
            return False
        self._transitioning = True
        self._advance_pending = True
        self._phase = RoomPhase.TRANSITIONING
        logger.debug("Advance requested from room %d", self._index)
        return True

    def tick(self, dt: float) -> None:
        """Advance one fixed step: the deferred transition first, else spawning."""
        self._ticks += 1
        self._elapsed += dt

        if self._advance_pending:
            self._advance_pending = False
            try:
                self.load_room(self._index + 1)
            finally:
                self._transitioning = False
            return

        self._executor.tick(dt)

    def load_room(self, index: int) -> None:
        """Tear down the current room and build room ``index`` of the plan."""
        if self._plan is None:
            raise RunNotStartedError("load_room() called before start_run()")
        if index < 0:
            raise IndexError(f"Room index must be >= 0, got {index}")

        self._teardown_active()
        self._index = index

        if index >= len(self._plan):
            self._finish_run()
            return

        self._phase = RoomPhase.LOADING
        entry = self._plan[index]
        room = RoomInstance(self._next_instance_id, entry.blueprint)
        self._next_instance_id += 1
        self._rooms_loaded += 1
        logger.info("Loading room %d/%d: '%s'", index + 1, len(self._plan), room.name)

        for note in self._validator.repair(room):
            self._emit("repair", note.message)

        state = ActiveRoomState(index=index, room=room)
        self._active = state

        gate = self._resolve_gate(room)
        state.gate = gate
        if gate is not None:
            gate.init(self)

        self._place_player(room)
        self._emit("room", f"Loaded room {index + 1}: {room.name}")

        profile = entry.blueprint.spawn_profile
        if profile is None:
            logger.info("No spawn profile on room '%s'; unlocking gate immediately", room.name)
            self._unlock_now(state)
            return
        if not room.enemy_spawns:
            logger.info("No enemy spawns in room '%s'; unlocking gate immediately", room.name)
            self._unlock_now(state)
            return

        assert self._rng is not None
        self._phase = RoomPhase.AWAITING_CLEAR
        self._executor.execute(profile, room, state, self._rng)

    # -- internals --

    def _teardown_active(self) -> None:
        state = self._active
        if state is None:
            return
        self._active = None
        self._executor.cancel()
        state.room.destroy()
        logger.debug("Room %d torn down", state.index)

    def _finish_run(self) -> None:
        self._phase = RoomPhase.COMPLETE
        logger.info(
            "=== Run complete: %d rooms cleared, %d enemies defeated ===",
            self._rooms_cleared, self._total_deaths,
        )
        self._emit("run", "Run complete")
        for listener in list(self._complete_listeners):
            listener(self)

    def _resolve_gate(self, room: RoomInstance) -> ExitGate | None:
        if room.gate is not None:
            # embedded gates are built before repair may have moved the exit anchor
            if room.gate.embedded and room.exit_anchor is not None and room.gate.pos != room.exit_anchor:
                room.gate.pos = room.exit_anchor
            return room.gate
        factory = self._context.gate_factory
        if factory is not None and room.exit_anchor is not None:
            room.gate = factory(room.exit_anchor)
            return room.gate
        logger.error(
            "No exit gate found or created for room '%s' (missing template or exit anchor). "
            "Room will have no exit.", room.name,
        )
        self._emit("error", f"Room {room.name} has no exit gate")
        return None

    def _place_player(self, room: RoomInstance) -> None:
        player = self._context.players.player()
        if player is None:
            logger.warning("No player registered; nothing to place in room '%s'", room.name)
            return
        spawn = room.player_spawn
        if spawn is None:
            logger.warning("No player spawn for room '%s'; placing player at room center", room.name)
            spawn = room.center
        player.move_to(spawn)

    def _unlock_now(self, state: ActiveRoomState) -> None:
        state.cleared = True
        self._rooms_cleared += 1
        if state.gate is not None:
            state.gate.unlock()
        self._phase = RoomPhase.UNLOCKED
        self._emit("gate", f"Room {state.index + 1} has no enemies; gate unlocked")

    def _on_enemy_spawned(self, enemy: Enemy, state: ActiveRoomState) -> None:
        self._total_spawned += 1
        self._emit("spawn", f"{enemy.kind} #{enemy.id} spawned at {enemy.pos}", (enemy.id,), state.index)

    def _on_enemy_died(self, enemy_id: int, state: ActiveRoomState) -> None:
        if state is not self._active:
            return
        self._total_deaths += 1
        self._emit("death", f"Enemy #{enemy_id} died ({state.alive} left)", (enemy_id,), state.index)

    def _on_room_cleared(self, state: ActiveRoomState) -> None:
        if state is not self._active:
            return
        self._rooms_cleared += 1
        if self._phase == RoomPhase.AWAITING_CLEAR:
            self._phase = RoomPhase.UNLOCKED
        logger.info("Room %d cleared; gate unlocked", state.index + 1)
        self._emit("gate", f"Room {state.index + 1} cleared; gate unlocked")

    def _emit(
        self,
        category: str,
        message: str,
        entity_ids: tuple[int, ...] = (),
        room_index: int | None = None,
    ) -> None:
        self._events.append(RunEvent(
            tick=self._ticks,
            category=category,
            message=message,
            room_index=self._index if room_index is None else room_index,
            entity_ids=entity_ids,
        ))
