"""Tests for theme data: blueprint validation, JSON loading and the registry."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json

import pytest
from pydantic import ValidationError

from dungeon_run.config import RunConfig
from dungeon_run.core.blueprints import SpawnEntry, SpawnProfile
from dungeon_run.core.errors import ThemeLoadError
from dungeon_run.core.models import Vector2
from dungeon_run.core.themes import default_registry, load_themes
from dungeon_run.engine.context import RunContext

_THEME_FILE = {
    "themes": [
        {
            "name": "Caves",
            "rooms": [
                {
                    "name": "cave_mouth",
                    "player_spawn": {"x": -20, "y": 0},
                    "exit_anchor": {"x": 20, "y": 0},
                    "enemy_spawns": [{"x": 0, "y": 4}, {"x": 0, "y": -4}],
                    "spawn_profile": {
                        "entries": [{"enemy": "bat", "min_count": 1, "max_count": 2}],
                        "gradual": False,
                    },
                },
                {"name": "cave_pool"},
            ],
        },
        {"name": "Depths", "rooms": []},
    ]
}


def _write(tmp_path, payload) -> str:
    path = tmp_path / "themes.json"
    path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload, encoding="utf-8")
    return str(path)


class TestSpawnEntry:

    def test_inverted_range_rejected(self):
        with pytest.raises(ValueError):
            SpawnEntry("slime", 3, 1)

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            SpawnEntry("slime", -1, 2)

    def test_negative_initial_delay_rejected(self):
        with pytest.raises(ValidationError):
            SpawnProfile(initial_delay=-0.5)

    def test_max_yield_ignores_null_entries(self):
        profile = SpawnProfile(entries=(SpawnEntry("slime", 1, 4), SpawnEntry(None, 5, 5)))
        assert profile.max_yield == 4


class TestLoadThemes:

    def test_loads_valid_file(self, tmp_path):
        registry = load_themes(_write(tmp_path, _THEME_FILE))
        assert len(registry) == 2
        caves = registry.get("Caves")
        assert caves is not None
        mouth = caves.rooms[0]
        assert mouth.player_spawn == Vector2(-20, 0)
        assert mouth.enemy_spawns == (Vector2(0, 4), Vector2(0, -4))
        assert mouth.spawn_profile.entries[0].enemy == "bat"
        assert not mouth.spawn_profile.gradual
        assert caves.rooms[1].spawn_profile is None
        assert registry.get("Depths").is_empty

    def test_blueprint_lookup(self, tmp_path):
        registry = load_themes(_write(tmp_path, _THEME_FILE))
        assert registry.blueprint("cave_pool").name == "cave_pool"
        assert registry.blueprint("nope") is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ThemeLoadError):
            load_themes(str(tmp_path / "missing.json"))

    def test_not_json(self, tmp_path):
        with pytest.raises(ThemeLoadError):
            load_themes(_write(tmp_path, "{not json"))

    def test_missing_themes_key(self, tmp_path):
        with pytest.raises(ThemeLoadError):
            load_themes(_write(tmp_path, {"rooms": []}))

    def test_bad_content(self, tmp_path):
        payload = {"themes": [{"name": "X", "rooms": [{"name": "r", "enemy_spawns": [{"x": "far"}]}]}]}
        with pytest.raises(ValidationError):
            load_themes(_write(tmp_path, payload))

    def test_inverted_entry_in_file(self, tmp_path):
        payload = {"themes": [{"name": "X", "rooms": [{
            "name": "r",
            "spawn_profile": {"entries": [{"enemy": "bat", "min_count": 4, "max_count": 1}]},
        }]}]}
        with pytest.raises(ValueError):
            load_themes(_write(tmp_path, payload))


class TestRegistry:

    def test_default_registry_order(self):
        assert [t.name for t in default_registry()] == ["Forest", "Crypt", "Stronghold"]

    def test_dump_is_json_ready(self):
        dumped = default_registry().dump()
        json.dumps(dumped)
        assert dumped[0]["name"] == "Forest"

    def test_context_uses_themes_file(self, tmp_path):
        config = RunConfig(themes_file=_write(tmp_path, _THEME_FILE))
        context = RunContext.from_config(config)
        assert [t.name for t in context.themes] == ["Caves", "Depths"]

    def test_context_without_gate_template(self):
        context = RunContext.from_config(RunConfig(use_gate_template=False))
        assert context.gate_factory is None
        assert context.players.player() is not None
