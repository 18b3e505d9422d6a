"""Core data models: Vector2, Player, Enemy."""

from __future__ import annotations

import math
from dataclasses import dataclass

from dungeon_run.core.death_tracker import DeathTracker


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D position in room space."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def scaled(self, factor: float) -> Vector2:
        return Vector2(self.x * factor, self.y * factor)

    def distance(self, other: Vector2) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def __repr__(self) -> str:
        return f"({self.x:g}, {self.y:g})"


ORIGIN = Vector2(0.0, 0.0)


@dataclass(slots=True)
class Player:
    """The player actor.  Movement itself belongs to another system."""

    id: int = 0
    pos: Vector2 = ORIGIN
    kind: str = "player"

    def move_to(self, pos: Vector2) -> None:
        self.pos = pos


@dataclass(slots=True)
class Enemy:
    """A spawned enemy instance.

    Exposes the two capabilities the room needs from combat code:
    ``take_damage`` (Damageable) and ``death_tracker`` + ``destroy``
    (DeathNotifiable).  Only the latter is used by the orchestrator.
    """

    id: int
    kind: str
    pos: Vector2
    hp: int = 3
    max_hp: int = 3
    death_tracker: DeathTracker | None = None
    destroyed: bool = False
    spawned_at: float = 0.0

    @property
    def alive(self) -> bool:
        return self.hp > 0 and not self.destroyed

    def take_damage(self, amount: int) -> bool:
        """Apply damage.  Returns True if this hit killed the enemy."""
        if not self.alive or amount <= 0:
            return False
        self.hp = max(0, self.hp - amount)
        if self.hp == 0:
            self.die()
            return True
        return False

    def die(self) -> None:
        if self.destroyed:
            return
        self.hp = 0
        if self.death_tracker is not None:
            self.death_tracker.notify_died()
        self.destroy()

    def destroy(self) -> None:
        """Remove the enemy from the world, firing the death fallback."""
        if self.destroyed:
            return
        self.destroyed = True
        if self.death_tracker is not None:
            self.death_tracker.teardown()
