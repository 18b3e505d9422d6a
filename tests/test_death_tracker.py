"""Tests for DeathTracker and the Enemy death paths that drive it."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dungeon_run.core.death_tracker import DeathTracker
from dungeon_run.core.models import Enemy, Vector2


def _enemy(hp: int = 3) -> Enemy:
    e = Enemy(id=1, kind="slime", pos=Vector2(0, 0), hp=hp, max_hp=hp)
    e.death_tracker = DeathTracker(e.id)
    return e


class TestDeathTracker:

    def test_fires_once(self):
        tracker = DeathTracker(7)
        calls = []
        tracker.subscribe(calls.append)
        tracker.notify_died()
        tracker.notify_died()
        tracker.teardown()
        assert calls == [tracker]
        assert tracker.fired

    def test_teardown_fires_when_never_notified(self):
        tracker = DeathTracker(7)
        calls = []
        tracker.subscribe(calls.append)
        tracker.teardown()
        assert len(calls) == 1

    def test_self_unsubscribe_during_dispatch(self):
        tracker = DeathTracker()
        order = []

        def first(t):
            t.unsubscribe(first)
            order.append("first")

        tracker.subscribe(first)
        tracker.subscribe(lambda t: order.append("second"))
        tracker.notify_died()
        assert order == ["first", "second"]
        assert tracker.subscriber_count == 1

    def test_unsubscribe_unknown_is_noop(self):
        tracker = DeathTracker()
        tracker.unsubscribe(lambda t: None)
        assert tracker.subscriber_count == 0


class TestEnemyDeathPaths:

    def test_lethal_damage_notifies_once(self):
        enemy = _enemy(hp=3)
        calls = []
        enemy.death_tracker.subscribe(calls.append)

        assert enemy.take_damage(1) is False
        assert calls == []
        assert enemy.take_damage(5) is True
        assert len(calls) == 1
        assert enemy.destroyed
        assert not enemy.alive

    def test_damage_after_death_ignored(self):
        enemy = _enemy(hp=1)
        calls = []
        enemy.death_tracker.subscribe(calls.append)
        enemy.take_damage(1)
        assert enemy.take_damage(1) is False
        enemy.destroy()
        assert len(calls) == 1

    def test_destroy_without_notify_fires_fallback(self):
        """An enemy removed without a death notice still reports exactly once."""
        enemy = _enemy(hp=3)
        alive = {"count": 1}

        def on_died(tracker):
            tracker.unsubscribe(on_died)
            alive["count"] -= 1

        enemy.death_tracker.subscribe(on_died)
        enemy.destroy()
        enemy.destroy()
        assert alive["count"] == 0
        assert enemy.hp == 3

    def test_enemy_without_tracker(self):
        enemy = Enemy(id=2, kind="bat", pos=Vector2(0, 0), hp=1, max_hp=1)
        assert enemy.take_damage(1) is True
        assert enemy.destroyed

    def test_zero_damage_ignored(self):
        enemy = _enemy(hp=2)
        assert enemy.take_damage(0) is False
        assert enemy.hp == 2
