"""SpawnProfileExecutor — populates a room from its spawn profile.

Phase cycle (advanced by ``tick(dt)``):
  1. INITIAL_DELAY — gradual profiles only; waits ``initial_delay``
  2. SPAWNING      — spawn one, wait a drawn stagger delay, repeat
  3. AWAITING_CLEAR — poll the alive counter until it reaches zero
  4. DONE          — gate unlocked

Instant profiles spawn everything inside ``execute`` and go straight to
AWAITING_CLEAR.  Waits are remaining-time counters; time left over after a
wait finishes carries into the next one so a large ``dt`` can cover several
spawns without drifting.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Callable

from dungeon_run.core.death_tracker import DeathTracker
from dungeon_run.core.enums import Domain, SpawnPhase
from dungeon_run.core.errors import UnknownEnemyError

if TYPE_CHECKING:
    from dungeon_run.core.blueprints import SpawnProfile
    from dungeon_run.core.models import Enemy
    from dungeon_run.core.room import ActiveRoomState, RoomInstance
    from dungeon_run.engine.context import EnemyFactory
    from dungeon_run.systems.rng import DeterministicRNG, SeededRNG

logger = logging.getLogger(__name__)

SpawnCallback = Callable[["Enemy", "ActiveRoomState"], None]
DeathCallback = Callable[[int, "ActiveRoomState"], None]
ClearedCallback = Callable[["ActiveRoomState"], None]


class SpawnProfileExecutor:
    """Runs one room's spawn profile at a time."""

    __slots__ = (
        "_factory",
        "_on_spawned",
        "_on_died",
        "_on_cleared",
        "_phase",
        "_queue",
        "_timer",
        "_clock",
        "_profile",
        "_room",
        "_state",
        "_point_rng",
        "_delay_rng",
    )

    def __init__(
        self,
        enemy_factory: EnemyFactory,
        on_spawned: SpawnCallback | None = None,
        on_died: DeathCallback | None = None,
        on_cleared: ClearedCallback | None = None,
    ) -> None:
        self._factory = enemy_factory
        self._on_spawned = on_spawned
        self._on_died = on_died
        self._on_cleared = on_cleared
        self._phase = SpawnPhase.IDLE
        self._queue: deque[str] = deque()
        self._timer = 0.0
        self._clock = 0.0
        self._profile: SpawnProfile | None = None
        self._room: RoomInstance | None = None
        self._state: ActiveRoomState | None = None
        self._point_rng: SeededRNG | None = None
        self._delay_rng: SeededRNG | None = None

    @property
    def phase(self) -> SpawnPhase:
        return self._phase

    @property
    def pending(self) -> int:
        """Enemies queued but not spawned yet."""
        return len(self._queue)

    @property
    def clock(self) -> float:
        """Seconds elapsed since the current ``execute`` call."""
        return self._clock

    @property
    def active(self) -> bool:
        return self._phase in (SpawnPhase.INITIAL_DELAY, SpawnPhase.SPAWNING, SpawnPhase.AWAITING_CLEAR)

    @staticmethod
    def resolve_counts(profile: SpawnProfile, rng: SeededRNG) -> list[str]:
        """Draw a count per entry and expand into a flat spawn list."""
        to_spawn: list[str] = []
        for entry in profile.entries:
            if not entry.enemy:
                continue
            count = max(0, rng.next(entry.min_count, entry.max_count + 1))
            to_spawn.extend([entry.enemy] * count)
        return to_spawn

    def execute(
        self,
        profile: SpawnProfile,
        room: RoomInstance,
        state: ActiveRoomState,
        rng: DeterministicRNG,
    ) -> int:
        """Start populating ``room``.  Returns how many enemies were queued.

        A zero-yield profile unlocks the gate immediately and returns 0.
        """
        self.cancel()
        key = room.instance_id
        counts = self.resolve_counts(profile, rng.stream(Domain.SPAWN_COUNT, key))

        self._profile = profile
        self._room = room
        self._state = state
        self._point_rng = rng.stream(Domain.SPAWN_POINT, key)
        self._delay_rng = rng.stream(Domain.SPAWN_DELAY, key)
        self._queue = deque(counts)
        self._timer = 0.0
        self._clock = 0.0

        if not counts:
            logger.info("Spawn profile for '%s' produced 0 enemies; unlocking gate", room.name)
            self._finish()
            return 0

        logger.info(
            "Room '%s': spawning %d enemies (%s)",
            room.name, len(counts), "gradual" if profile.gradual else "instant",
        )
        if profile.gradual:
            self._phase = SpawnPhase.INITIAL_DELAY
            self._timer = max(0.0, profile.initial_delay)
        else:
            self._phase = SpawnPhase.SPAWNING
            while self._queue:
                self._spawn_one(self._queue.popleft())
            self._phase = SpawnPhase.AWAITING_CLEAR

        self._advance(0.0)
        return len(counts)

    def tick(self, dt: float) -> None:
        if not self.active:
            return
        self._advance(dt)

    def cancel(self) -> None:
        """Drop every pending wait and spawn.  Used when the room is torn down."""
        if self.active:
            logger.debug("Spawn sequence cancelled with %d enemies pending", len(self._queue))
            self._phase = SpawnPhase.CANCELLED
        self._queue.clear()
        self._profile = None
        self._room = None
        self._state = None

    # -- internals --

    def _advance(self, dt: float) -> None:
        start = self._clock
        self._clock += dt
        budget = dt

        while True:
            if self._phase == SpawnPhase.INITIAL_DELAY:
                if self._timer > budget:
                    self._timer -= budget
                    return
                budget -= self._timer
                self._timer = 0.0
                self._phase = SpawnPhase.SPAWNING
                continue

            if self._phase == SpawnPhase.SPAWNING:
                if self._timer > budget:
                    self._timer -= budget
                    return
                budget -= self._timer
                self._timer = 0.0
                if not self._queue:
                    self._phase = SpawnPhase.AWAITING_CLEAR
                    continue
                self._spawn_one(self._queue.popleft(), at=start + (dt - budget))
                self._timer = self._draw_delay()
                continue

            if self._phase == SpawnPhase.AWAITING_CLEAR:
                if self._state is not None and self._state.alive == 0:
                    self._finish()
                return

            return

    def _draw_delay(self) -> float:
        assert self._profile is not None and self._delay_rng is not None
        low, high = self._profile.per_spawn_delay_range
        return max(0.0, self._delay_rng.uniform(low, high))

    def _spawn_one(self, kind: str, at: float = 0.0) -> Enemy | None:
        assert self._room is not None and self._state is not None and self._point_rng is not None
        room = self._room
        state = self._state

        point = room.enemy_spawns[self._point_rng.next(0, len(room.enemy_spawns))]
        try:
            enemy = self._factory.create(kind, point, room)
        except UnknownEnemyError as exc:
            logger.error("Room '%s': %s; skipping spawn", room.name, exc)
            return None
        enemy.spawned_at = at
        if enemy.death_tracker is None:
            enemy.death_tracker = DeathTracker(enemy.id)

        on_died_hook = self._on_died
        enemy_id = enemy.id

        def _on_died(tracker: DeathTracker) -> None:
            tracker.unsubscribe(_on_died)
            state.record_death(enemy_id)
            if on_died_hook is not None:
                on_died_hook(enemy_id, state)

        enemy.death_tracker.subscribe(_on_died)
        room.add_enemy(enemy)
        state.record_spawn()
        logger.debug("Spawned %s #%d at %s (t=%.2f)", kind, enemy.id, point, at)
        if self._on_spawned is not None:
            self._on_spawned(enemy, state)
        return enemy

    def _finish(self) -> None:
        state = self._state
        self._phase = SpawnPhase.DONE
        if state is None:
            return
        state.cleared = True
        if state.gate is not None:
            state.gate.unlock()
        if self._on_cleared is not None:
            self._on_cleared(state)
