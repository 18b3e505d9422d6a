"""Static room data — spawn profiles, room blueprints, themes.

These are loaded once before a run and never mutated afterwards.  They are
pydantic dataclasses so theme files are validated on load and the API can
serialize them directly.

Key types:
  SpawnEntry     — one enemy kind with an inclusive [min_count, max_count]
  SpawnProfile   — what to spawn in a room and how (instant vs. staggered)
  RoomBlueprint  — static layout: anchors, enemy spawn points, profile
  Theme          — named pool of blueprints for one block of the run
"""

from __future__ import annotations

from pydantic import Field
from pydantic.dataclasses import dataclass as pydantic_dataclass

from dungeon_run.core.models import Vector2


@pydantic_dataclass(frozen=True)
class SpawnEntry:
    """One line of a spawn profile.  ``enemy=None`` entries are skipped."""

    enemy: str | None
    min_count: int = Field(default=1, ge=0)
    max_count: int = Field(default=3, ge=0)

    def __post_init__(self) -> None:
        if self.max_count < self.min_count:
            raise ValueError(
                f"max_count ({self.max_count}) is below min_count ({self.min_count})"
            )


@pydantic_dataclass(frozen=True)
class SpawnProfile:
    """Declarative spawn description for a room."""

    entries: tuple[SpawnEntry, ...] = ()
    gradual: bool = True
    initial_delay: float = Field(default=0.5, ge=0.0)
    # Only used when gradual; each draw is clamped to >= 0
    per_spawn_delay_range: tuple[float, float] = (0.4, 1.0)

    @property
    def max_yield(self) -> int:
        """Upper bound on the number of enemies this profile can produce."""
        return sum(e.max_count for e in self.entries if e.enemy)


@pydantic_dataclass(frozen=True)
class RoomBlueprint:
    """Static layout descriptor.  Anchors are offsets from the room origin."""

    name: str
    width: float = 120.0
    height: float = 80.0
    player_spawn: Vector2 | None = None
    exit_anchor: Vector2 | None = None
    enemy_spawns: tuple[Vector2, ...] = ()
    spawn_profile: SpawnProfile | None = None
    has_embedded_gate: bool = False


@pydantic_dataclass(frozen=True)
class Theme:
    """Named pool of room blueprints assigned to a block of plan slots."""

    name: str
    rooms: tuple[RoomBlueprint, ...] = ()

    @property
    def is_empty(self) -> bool:
        return len(self.rooms) == 0
