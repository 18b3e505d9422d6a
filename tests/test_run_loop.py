"""End-to-end headless runs: RunLoop + HeadlessDriver over the built-in themes."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from dungeon_run.config import RunConfig
from dungeon_run.core.blueprints import RoomBlueprint, SpawnEntry, SpawnProfile, Theme
from dungeon_run.core.enums import GateState, RoomPhase
from dungeon_run.core.models import Player, Vector2
from dungeon_run.core.themes import ThemeRegistry
from dungeon_run.engine.context import DefaultEnemyFactory, RunContext, SinglePlayerLocator
from dungeon_run.engine.driver import HeadlessDriver
from dungeon_run.engine.room_lifecycle import RoomLifecycleManager
from dungeon_run.engine.run_loop import RunLoop


def _loop(config: RunConfig, context: RunContext | None = None) -> RunLoop:
    context = context or RunContext.from_config(config)
    manager = RoomLifecycleManager(config, context)
    return RunLoop(config, manager, HeadlessDriver.from_config(config))


class TestFullRun:

    @pytest.mark.slow
    def test_default_run_completes(self):
        config = RunConfig(seed=42, progress_log_interval=0)
        loop = _loop(config)
        snap = loop.run()

        assert snap.complete
        assert snap.phase == RoomPhase.COMPLETE
        assert snap.rooms_loaded == 10
        assert snap.total_spawned == snap.total_deaths
        assert snap.total_spawned > 0
        assert snap.tick < config.max_ticks

    @pytest.mark.slow
    def test_same_seed_same_run(self):
        def run():
            snap = _loop(RunConfig(seed=7, total_rooms=6, rooms_per_theme=2, progress_log_interval=0)).run()
            return snap.tick, snap.total_spawned, snap.rooms_cleared

        assert run() == run()

    def test_max_ticks_stops_loop(self):
        config = RunConfig(seed=42, max_ticks=50, progress_log_interval=0)
        loop = _loop(config)
        snap = loop.run()
        assert not snap.complete
        assert snap.tick == 50

    def test_tick_once_starts_run(self):
        loop = _loop(RunConfig(seed=3))
        assert loop.manager.plan is None
        assert loop.tick_once()
        assert loop.manager.plan is not None
        assert loop.manager.ticks == 1


class TestHeadlessDriver:

    def _manager(self, profile: SpawnProfile | None) -> RoomLifecycleManager:
        room = RoomBlueprint(
            name="arena", player_spawn=Vector2(-10, 0), exit_anchor=Vector2(10, 0),
            enemy_spawns=(Vector2(0, 5), Vector2(0, -5)), spawn_profile=profile,
        )
        themes = ThemeRegistry([Theme(name="T", rooms=(room,))])
        config = RunConfig(seed=1, total_rooms=2, rooms_per_theme=5)
        context = RunContext(
            themes=themes,
            players=SinglePlayerLocator(Player()),
            enemies=DefaultEnemyFactory(strict=False),
        )
        manager = RoomLifecycleManager(config, context)
        manager.start_run()
        return manager

    def test_hits_oldest_enemy_on_interval(self):
        profile = SpawnProfile(entries=(SpawnEntry("enemyX", 2, 2),), gradual=False)
        manager = self._manager(profile)
        driver = HeadlessDriver(kill_interval_ticks=3, damage_per_hit=100, gate_delay_ticks=0)
        oldest = min(manager.active.room.living_enemies(), key=lambda e: e.id)

        driver.tick(manager)
        driver.tick(manager)
        assert oldest.alive
        driver.tick(manager)
        assert not oldest.alive
        assert driver.hits == 1
        assert manager.alive_count == 1

    def test_walks_into_unlocked_gate(self):
        manager = self._manager(None)
        assert manager.gate_state == GateState.UNLOCKED
        driver = HeadlessDriver(kill_interval_ticks=1, damage_per_hit=100, gate_delay_ticks=2)

        driver.tick(manager)
        assert driver.gate_touches == 0
        driver.tick(manager)
        assert driver.gate_touches == 1
        assert manager.player.pos == Vector2(10, 0)
        assert manager.transitioning

        manager.tick(1.0 / 60.0)
        assert manager.room_index == 1
