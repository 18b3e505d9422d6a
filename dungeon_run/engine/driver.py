"""HeadlessDriver — scripted stand-in for the player and combat systems.

Without a game attached nobody kills enemies or walks into gates, so the
headless loop uses this driver: every ``kill_interval_ticks`` it hits the
oldest living enemy, and once the gate has been unlocked for
``gate_delay_ticks`` it walks the player onto the gate.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dungeon_run.core.enums import GateState

if TYPE_CHECKING:
    from dungeon_run.config import RunConfig
    from dungeon_run.core.models import Enemy
    from dungeon_run.engine.room_lifecycle import RoomLifecycleManager

logger = logging.getLogger(__name__)


class HeadlessDriver:
    __slots__ = (
        "kill_interval_ticks",
        "damage_per_hit",
        "gate_delay_ticks",
        "_since_hit",
        "_unlocked_for",
        "_room_index",
        "_warned_no_gate",
        "hits",
        "gate_touches",
    )

    def __init__(
        self,
        kill_interval_ticks: int = 30,
        damage_per_hit: int = 100,
        gate_delay_ticks: int = 10,
    ) -> None:
        self.kill_interval_ticks = max(1, kill_interval_ticks)
        self.damage_per_hit = damage_per_hit
        self.gate_delay_ticks = max(0, gate_delay_ticks)
        self._since_hit = 0
        self._unlocked_for = 0
        self._room_index = -1
        self._warned_no_gate = False
        self.hits = 0
        self.gate_touches = 0

    @classmethod
    def from_config(cls, config: RunConfig) -> HeadlessDriver:
        return cls(
            kill_interval_ticks=config.driver_kill_interval_ticks,
            damage_per_hit=config.driver_damage_per_hit,
            gate_delay_ticks=config.driver_gate_delay_ticks,
        )

    def reset(self) -> None:
        self._since_hit = 0
        self._unlocked_for = 0
        self._room_index = -1
        self._warned_no_gate = False
        self.hits = 0
        self.gate_touches = 0

    def tick(self, manager: RoomLifecycleManager) -> None:
        """React to the current room once per loop tick."""
        state = manager.active
        if state is None or manager.complete or manager.transitioning:
            return

        if state.index != self._room_index:
            self._room_index = state.index
            self._since_hit = 0
            self._unlocked_for = 0
            self._warned_no_gate = False

        target = self._oldest_living(state.room.living_enemies())
        if target is not None:
            self._since_hit += 1
            if self._since_hit >= self.kill_interval_ticks:
                self._since_hit = 0
                self.hits += 1
                killed = target.take_damage(self.damage_per_hit)
                logger.debug(
                    "Driver hit %s #%d for %d%s",
                    target.kind, target.id, self.damage_per_hit, " (killed)" if killed else "",
                )
            return

        gate = state.gate
        if gate is None:
            if state.cleared and not self._warned_no_gate:
                logger.warning("Room %d is cleared but has no exit gate; run cannot advance", state.index + 1)
                self._warned_no_gate = True
            return
        if gate.state != GateState.UNLOCKED:
            return

        self._unlocked_for += 1
        if self._unlocked_for < self.gate_delay_ticks:
            return

        player = manager.player
        if player is None:
            return
        player.move_to(gate.pos)
        if gate.on_contact(player):
            self.gate_touches += 1

    @staticmethod
    def _oldest_living(enemies: list[Enemy]) -> Enemy | None:
        if not enemies:
            return None
        return min(enemies, key=lambda e: (e.spawned_at, e.id))
