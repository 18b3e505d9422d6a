"""Room validation and auto-repair.

Two layers:
  - ``validate_blueprint`` / ``validate_themes`` inspect static data and
    report issues without changing anything (plan build, ``validate`` CLI).
  - ``RoomValidator.repair`` fixes a live room instance by synthesizing the
    anchors it is missing.  Every synthesized default is logged as a
    warning so authoring mistakes stay visible.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from dungeon_run.core.enums import RepairKind
from dungeon_run.core.models import Vector2
from dungeon_run.core.room import RepairNote, RoomInstance

if TYPE_CHECKING:
    from dungeon_run.config import RunConfig
    from dungeon_run.core.blueprints import RoomBlueprint, Theme

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BlueprintIssue:
    """A problem found in static room data."""

    theme: str
    blueprint: str
    message: str
    severity: str = "warning"


def validate_blueprint(blueprint: RoomBlueprint, theme_name: str = "") -> list[BlueprintIssue]:
    issues: list[BlueprintIssue] = []
    if blueprint.player_spawn is None:
        issues.append(BlueprintIssue(theme_name, blueprint.name, "has no player spawn point set"))
    if blueprint.exit_anchor is None and not blueprint.has_embedded_gate:
        issues.append(BlueprintIssue(theme_name, blueprint.name, "has no exit anchor set"))
    if not blueprint.enemy_spawns:
        issues.append(BlueprintIssue(theme_name, blueprint.name, "has no enemy spawn points set"))
    profile = blueprint.spawn_profile
    if profile is not None and profile.max_yield == 0:
        issues.append(BlueprintIssue(
            theme_name, blueprint.name, "has a spawn profile that can never spawn anything",
            severity="info",
        ))
    return issues


def validate_themes(themes: Iterable[Theme]) -> list[BlueprintIssue]:
    """Check every blueprint of every theme; empty pools are errors."""
    issues: list[BlueprintIssue] = []
    for theme in themes:
        if theme.is_empty:
            issues.append(BlueprintIssue(theme.name, "", "theme has no rooms assigned", severity="error"))
            continue
        for room in theme.rooms:
            issues.extend(validate_blueprint(room, theme.name))
    return issues


class RoomValidator:
    """Synthesizes missing anchors on a freshly instantiated room."""

    __slots__ = ("_spawn_count", "_spawn_radius", "_exit_offset")

    def __init__(
        self,
        spawn_count: int = 3,
        spawn_radius: float = 3.0,
        exit_offset: Vector2 = Vector2(5.0, 0.0),
    ) -> None:
        self._spawn_count = max(0, spawn_count)
        self._spawn_radius = spawn_radius
        self._exit_offset = exit_offset

    @classmethod
    def from_config(cls, config: RunConfig) -> RoomValidator:
        return cls(
            spawn_count=config.repair_enemy_spawn_count,
            spawn_radius=config.repair_enemy_spawn_radius,
            exit_offset=Vector2(config.repair_exit_offset_x, config.repair_exit_offset_y),
        )

    def repair(self, room: RoomInstance) -> list[RepairNote]:
        """Fill in missing anchors.  Returns the notes added to ``room.repairs``."""
        notes: list[RepairNote] = []
        center = room.center

        if room.player_spawn is None:
            room.player_spawn = center
            notes.append(RepairNote(
                RepairKind.PLAYER_SPAWN,
                f"Room '{room.name}' has no player spawn; using room center {center}",
            ))

        if room.exit_anchor is None:
            room.exit_anchor = center + self._exit_offset
            notes.append(RepairNote(
                RepairKind.EXIT_ANCHOR,
                f"Room '{room.name}' has no exit anchor; using {room.exit_anchor}",
            ))

        if not room.enemy_spawns and self._spawn_count > 0:
            room.enemy_spawns = self._radial_points(center)
            notes.append(RepairNote(
                RepairKind.ENEMY_SPAWNS,
                f"Room '{room.name}' has no enemy spawns; synthesized {self._spawn_count} radial points",
            ))

        for note in notes:
            logger.warning(note.message)
        room.repairs.extend(notes)
        return notes

    def _radial_points(self, center: Vector2) -> tuple[Vector2, ...]:
        step = 2.0 * math.pi / self._spawn_count
        return tuple(
            center + Vector2(math.cos(i * step) * self._spawn_radius,
                             math.sin(i * step) * self._spawn_radius)
            for i in range(self._spawn_count)
        )
