"""Theme registry — built-in themes and JSON theme files.

A theme file is a JSON object with a ``themes`` list; each theme has a
``name`` and a ``rooms`` list of room blueprints.  Positions are objects
with ``x`` and ``y``.  See ``DEFAULT_THEMES`` for the shape in Python.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Iterator

from pydantic import TypeAdapter

from dungeon_run.core.blueprints import RoomBlueprint, SpawnEntry, SpawnProfile, Theme
from dungeon_run.core.errors import ThemeLoadError
from dungeon_run.core.models import Vector2

logger = logging.getLogger(__name__)

_themes_ta = TypeAdapter(list[Theme])


class ThemeRegistry:
    """Ordered collection of themes.  Order defines the block order of a run."""

    __slots__ = ("_themes", "_by_name")

    def __init__(self, themes: list[Theme] | tuple[Theme, ...]) -> None:
        self._themes: tuple[Theme, ...] = tuple(themes)
        self._by_name: dict[str, Theme] = {t.name: t for t in self._themes}

    @property
    def themes(self) -> tuple[Theme, ...]:
        return self._themes

    def __len__(self) -> int:
        return len(self._themes)

    def __iter__(self) -> Iterator[Theme]:
        return iter(self._themes)

    def get(self, name: str) -> Theme | None:
        return self._by_name.get(name)

    def blueprint(self, name: str) -> RoomBlueprint | None:
        """Find a blueprint by name across all themes (first match wins)."""
        for theme in self._themes:
            for room in theme.rooms:
                if room.name == name:
                    return room
        return None

    def dump(self) -> list[dict]:
        return _themes_ta.dump_python(list(self._themes), mode="json")


def load_themes(path: str | Path) -> ThemeRegistry:
    """Read and validate a theme file.

    Raises ThemeLoadError when the file is unreadable or not JSON, and
    pydantic's ValidationError when the content is malformed.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ThemeLoadError(f"Cannot read theme file {path}: {exc}") from exc

    if not isinstance(raw, dict) or "themes" not in raw:
        raise ThemeLoadError(f"Theme file {path} has no top-level 'themes' list")

    themes = _themes_ta.validate_python(raw["themes"])
    logger.info("Loaded %d themes from %s", len(themes), path)
    return ThemeRegistry(themes)


# ---------------------------------------------------------------------------
# Built-in themes
# ---------------------------------------------------------------------------

def _ring(radius: float, count: int) -> tuple[Vector2, ...]:
    step = 360.0 / count
    return tuple(
        Vector2(round(math.cos(math.radians(i * step)) * radius, 3),
                round(math.sin(math.radians(i * step)) * radius, 3))
        for i in range(count)
    )


_SLIME_PACK = SpawnProfile(
    entries=(SpawnEntry("slime", 2, 4), SpawnEntry("bat", 0, 2)),
    gradual=True, initial_delay=0.5, per_spawn_delay_range=(0.4, 1.0),
)
_GOBLIN_AMBUSH = SpawnProfile(
    entries=(SpawnEntry("goblin", 2, 3),),
    gradual=False,
)
_UNDEAD_WAVE = SpawnProfile(
    entries=(SpawnEntry("skeleton", 1, 3), SpawnEntry("ghost", 1, 2)),
    gradual=True, initial_delay=1.0, per_spawn_delay_range=(0.3, 0.8),
)
_ORC_WARBAND = SpawnProfile(
    entries=(SpawnEntry("orc", 1, 2), SpawnEntry("goblin", 1, 3)),
    gradual=True, initial_delay=0.5, per_spawn_delay_range=(0.5, 1.2),
)

DEFAULT_THEMES: tuple[Theme, ...] = (
    Theme(name="Forest", rooms=(
        RoomBlueprint(
            name="forest_clearing",
            player_spawn=Vector2(-40, 0), exit_anchor=Vector2(40, 0),
            enemy_spawns=_ring(12.0, 4), spawn_profile=_SLIME_PACK,
        ),
        RoomBlueprint(
            name="forest_ambush",
            player_spawn=Vector2(-30, -10), exit_anchor=Vector2(35, 10),
            enemy_spawns=(Vector2(0, 10), Vector2(0, -10), Vector2(15, 0)),
            spawn_profile=_GOBLIN_AMBUSH,
        ),
        RoomBlueprint(
            name="forest_glade",
            player_spawn=Vector2(-20, 0), exit_anchor=Vector2(20, 0),
        ),
    )),
    Theme(name="Crypt", rooms=(
        RoomBlueprint(
            name="crypt_hall",
            player_spawn=Vector2(0, -30), exit_anchor=Vector2(0, 30),
            enemy_spawns=_ring(10.0, 6), spawn_profile=_UNDEAD_WAVE,
            has_embedded_gate=True,
        ),
        RoomBlueprint(
            name="crypt_ossuary",
            enemy_spawns=_ring(8.0, 3), spawn_profile=_UNDEAD_WAVE,
        ),
    )),
    Theme(name="Stronghold", rooms=(
        RoomBlueprint(
            name="stronghold_gate",
            player_spawn=Vector2(-45, 0), exit_anchor=Vector2(45, 0),
            enemy_spawns=_ring(15.0, 5), spawn_profile=_ORC_WARBAND,
        ),
        RoomBlueprint(
            name="stronghold_barracks",
            player_spawn=Vector2(-35, 5), exit_anchor=Vector2(35, 5),
            spawn_profile=_ORC_WARBAND,
        ),
    )),
)


def default_registry() -> ThemeRegistry:
    return ThemeRegistry(DEFAULT_THEMES)
