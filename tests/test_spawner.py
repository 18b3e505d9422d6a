"""Tests for SpawnProfileExecutor — instant and staggered spawning, clear detection.

Covers:
- Instant profiles spawn synchronously; gate waits for every death
- Staggered profiles honour the initial delay and per-spawn delay range
- Large ticks carry leftover time into the next wait
- Zero-yield profiles and null entries
- Cancellation on teardown
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from dungeon_run.core.blueprints import RoomBlueprint, SpawnEntry, SpawnProfile
from dungeon_run.core.enums import GateState, SpawnPhase
from dungeon_run.core.errors import UnknownEnemyError
from dungeon_run.core.exit_gate import ExitGate
from dungeon_run.core.models import Vector2
from dungeon_run.core.room import ActiveRoomState, RoomInstance
from dungeon_run.engine.context import DefaultEnemyFactory
from dungeon_run.systems.rng import DeterministicRNG
from dungeon_run.systems.spawner import SpawnProfileExecutor

EPS = 1e-9


class _FakeRNG:
    """Always returns the top of the requested range."""

    def next(self, low: int, high_exclusive: int) -> int:
        return max(low, high_exclusive - 1)

    def uniform(self, a: float, b: float) -> float:
        return b


def _setup(profile: SpawnProfile, seed: int = 42, factory=None):
    bp = RoomBlueprint(
        name="arena",
        player_spawn=Vector2(-10, 0),
        exit_anchor=Vector2(10, 0),
        enemy_spawns=(Vector2(0, 5), Vector2(0, -5), Vector2(5, 0)),
        spawn_profile=profile,
    )
    room = RoomInstance(1, bp)
    state = ActiveRoomState(index=0, room=room, gate=ExitGate(room.exit_anchor))
    spawned = []
    cleared = []
    executor = SpawnProfileExecutor(
        factory or DefaultEnemyFactory(strict=False),
        on_spawned=lambda enemy, st: spawned.append(enemy),
        on_cleared=cleared.append,
    )
    return executor, room, state, spawned, cleared, DeterministicRNG(seed)


def _run(executor, seconds: float, dt: float = 0.01) -> None:
    for _ in range(int(round(seconds / dt))):
        executor.tick(dt)


class TestResolveCounts:

    def test_expands_entries(self):
        profile = SpawnProfile(entries=(SpawnEntry("slime", 1, 2), SpawnEntry("bat", 0, 3)))
        assert SpawnProfileExecutor.resolve_counts(profile, _FakeRNG()) == ["slime", "slime", "bat", "bat", "bat"]

    def test_null_entries_skipped(self):
        profile = SpawnProfile(entries=(SpawnEntry(None, 2, 2), SpawnEntry("slime", 1, 1)))
        assert SpawnProfileExecutor.resolve_counts(profile, _FakeRNG()) == ["slime"]


class TestInstantProfile:

    def test_spawns_synchronously_and_waits_for_deaths(self):
        profile = SpawnProfile(entries=(SpawnEntry("enemyX", 2, 2),), gradual=False)
        executor, room, state, spawned, cleared, rng = _setup(profile)

        assert executor.execute(profile, room, state, rng) == 2
        assert len(spawned) == 2
        assert all(e.kind == "enemyX" for e in spawned)
        assert state.alive == 2
        assert executor.phase == SpawnPhase.AWAITING_CLEAR
        assert state.gate.state == GateState.LOCKED

        spawned[0].take_damage(100)
        executor.tick(0.1)
        assert state.alive == 1
        assert state.gate.state == GateState.LOCKED

        spawned[1].take_damage(100)
        executor.tick(0.1)
        assert state.alive == 0
        assert state.gate.state == GateState.UNLOCKED
        assert executor.phase == SpawnPhase.DONE
        assert cleared == [state]
        assert state.cleared

    def test_spawn_points_come_from_room(self):
        profile = SpawnProfile(entries=(SpawnEntry("enemyX", 3, 3),), gradual=False)
        executor, room, state, spawned, _, rng = _setup(profile)
        executor.execute(profile, room, state, rng)
        assert all(e.pos in room.enemy_spawns for e in spawned)
        assert set(room.enemies) == {e.id for e in spawned}


class TestGradualProfile:

    def _profile(self):
        return SpawnProfile(
            entries=(SpawnEntry("enemyY", 1, 3),),
            gradual=True, initial_delay=0.5, per_spawn_delay_range=(0.4, 1.0),
        )

    @pytest.mark.parametrize("seed", list(range(1, 21)))
    def test_timing_bounds(self, seed):
        profile = self._profile()
        executor, room, state, spawned, _, rng = _setup(profile, seed=seed)

        queued = executor.execute(profile, room, state, rng)
        assert 1 <= queued <= 3
        assert spawned == []

        _run(executor, 5.0)
        assert len(spawned) == queued

        times = [e.spawned_at for e in spawned]
        assert times[0] >= 0.5 - EPS
        for earlier, later in zip(times, times[1:]):
            assert 0.4 - EPS <= later - earlier <= 1.0 + EPS

    def test_nothing_before_initial_delay(self):
        profile = self._profile()
        executor, room, state, spawned, _, rng = _setup(profile)
        executor.execute(profile, room, state, rng)
        _run(executor, 0.4)
        assert spawned == []
        assert executor.phase == SpawnPhase.INITIAL_DELAY

    def test_large_tick_carries_over(self):
        profile = SpawnProfile(
            entries=(SpawnEntry("enemyY", 3, 3),),
            gradual=True, initial_delay=0.5, per_spawn_delay_range=(0.5, 0.5),
        )
        executor, room, state, spawned, _, rng = _setup(profile)
        executor.execute(profile, room, state, rng)
        executor.tick(10.0)
        assert [e.spawned_at for e in spawned] == pytest.approx([0.5, 1.0, 1.5])
        assert executor.phase == SpawnPhase.AWAITING_CLEAR

    def test_same_seed_same_schedule(self):
        def schedule():
            profile = self._profile()
            executor, room, state, spawned, _, rng = _setup(profile, seed=77)
            executor.execute(profile, room, state, rng)
            _run(executor, 5.0)
            return [(e.pos, round(e.spawned_at, 6)) for e in spawned]

        assert schedule() == schedule()

    def test_kills_before_all_spawned_do_not_unlock(self):
        profile = SpawnProfile(
            entries=(SpawnEntry("enemyY", 2, 2),),
            gradual=True, initial_delay=0.0, per_spawn_delay_range=(1.0, 1.0),
        )
        executor, room, state, spawned, _, rng = _setup(profile)
        executor.execute(profile, room, state, rng)
        assert len(spawned) == 1
        spawned[0].take_damage(100)
        executor.tick(0.1)
        assert state.alive == 0
        assert state.gate.state == GateState.LOCKED

        _run(executor, 2.0, dt=0.1)
        assert len(spawned) == 2
        spawned[1].take_damage(100)
        executor.tick(0.1)
        assert state.gate.state == GateState.UNLOCKED


class TestZeroYield:

    def test_unlocks_immediately(self):
        profile = SpawnProfile(entries=(SpawnEntry("slime", 0, 0),))
        executor, room, state, spawned, cleared, rng = _setup(profile)
        assert executor.execute(profile, room, state, rng) == 0
        assert spawned == []
        assert state.gate.state == GateState.UNLOCKED
        assert executor.phase == SpawnPhase.DONE
        assert cleared == [state]

    def test_empty_entries(self):
        profile = SpawnProfile(entries=())
        executor, room, state, _, _, rng = _setup(profile)
        assert executor.execute(profile, room, state, rng) == 0
        assert state.gate.state == GateState.UNLOCKED


class TestCancel:

    def test_cancel_stops_pending_spawns(self):
        profile = SpawnProfile(
            entries=(SpawnEntry("enemyY", 3, 3),),
            gradual=True, initial_delay=0.5, per_spawn_delay_range=(1.0, 1.0),
        )
        executor, room, state, spawned, _, rng = _setup(profile)
        executor.execute(profile, room, state, rng)
        _run(executor, 0.6)
        assert len(spawned) == 1

        executor.cancel()
        assert executor.phase == SpawnPhase.CANCELLED
        assert executor.pending == 0
        _run(executor, 5.0)
        assert len(spawned) == 1
        assert state.gate.state == GateState.LOCKED


class TestDefaultEnemyFactory:

    def test_known_kind_gets_base_health(self):
        room = RoomInstance(1, RoomBlueprint(name="r"))
        enemy = DefaultEnemyFactory().create("orc", Vector2(1, 2), room)
        assert enemy.hp == enemy.max_hp == 8
        assert enemy.pos == Vector2(1, 2)

    def test_ids_increase(self):
        factory = DefaultEnemyFactory()
        room = RoomInstance(1, RoomBlueprint(name="r"))
        ids = [factory.create("slime", Vector2(0, 0), room).id for _ in range(3)]
        assert ids == [1, 2, 3]

    def test_unknown_kind_strict(self):
        room = RoomInstance(1, RoomBlueprint(name="r"))
        with pytest.raises(UnknownEnemyError) as exc:
            DefaultEnemyFactory().create("dragon", Vector2(0, 0), room)
        assert exc.value.kind == "dragon"


class TestUnknownEnemyKinds:

    def test_unknown_kind_skipped_and_logged(self, caplog):
        profile = SpawnProfile(entries=(SpawnEntry("slime", 1, 1), SpawnEntry("wolf", 1, 1)), gradual=False)
        executor, room, state, spawned, cleared, rng = _setup(profile, factory=DefaultEnemyFactory())

        with caplog.at_level("ERROR"):
            executor.execute(profile, room, state, rng)

        assert [e.kind for e in spawned] == ["slime"]
        assert state.alive == 1
        assert executor.phase == SpawnPhase.AWAITING_CLEAR
        assert "wolf" in caplog.text

        spawned[0].take_damage(100)
        executor.tick(0.1)
        assert state.gate.state == GateState.UNLOCKED
        assert cleared == [state]

    def test_only_unknown_kinds_unlocks(self):
        profile = SpawnProfile(
            entries=(SpawnEntry("wolf", 2, 2),),
            gradual=True, initial_delay=0.1, per_spawn_delay_range=(0.1, 0.1),
        )
        executor, room, state, spawned, _, rng = _setup(profile, factory=DefaultEnemyFactory())
        executor.execute(profile, room, state, rng)
        _run(executor, 1.0)
        assert spawned == []
        assert state.alive == 0
        assert executor.phase == SpawnPhase.DONE
        assert state.gate.state == GateState.UNLOCKED
