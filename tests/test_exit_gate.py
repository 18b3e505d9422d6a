"""Tests for ExitGate — lock state and contact forwarding."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dungeon_run.core.enums import GateState
from dungeon_run.core.exit_gate import ExitGate
from dungeon_run.core.models import Enemy, Player, Vector2


class _FakeOwner:
    def __init__(self, result: bool = True):
        self.calls = 0
        self.result = result

    def try_advance(self) -> bool:
        self.calls += 1
        return self.result


def _gate() -> tuple[ExitGate, _FakeOwner]:
    gate = ExitGate(Vector2(5, 0))
    owner = _FakeOwner()
    gate.init(owner)
    return gate, owner


class TestGateState:

    def test_init_locks(self):
        gate = ExitGate(Vector2(0, 0))
        gate.unlock()
        gate.init(_FakeOwner())
        assert gate.state == GateState.LOCKED
        assert gate.locked
        assert not gate.traversable

    def test_unlock_is_idempotent(self):
        gate, _ = _gate()
        gate.unlock()
        gate.unlock()
        assert gate.state == GateState.UNLOCKED
        assert gate.traversable


class TestContact:

    def test_locked_gate_ignores_player(self):
        gate, owner = _gate()
        assert gate.on_contact(Player()) is False
        assert owner.calls == 0

    def test_unlocked_gate_forwards_player(self):
        gate, owner = _gate()
        gate.unlock()
        assert gate.on_contact(Player()) is True
        assert owner.calls == 1

    def test_non_player_ignored(self):
        gate, owner = _gate()
        gate.unlock()
        assert gate.on_contact(Enemy(id=1, kind="slime", pos=Vector2(5, 0))) is False
        assert owner.calls == 0

    def test_every_contact_forwarded(self):
        """The gate does not debounce; the owner does."""
        gate, owner = _gate()
        gate.unlock()
        player = Player()
        gate.on_contact(player)
        gate.on_contact(player)
        assert owner.calls == 2

    def test_uninitialized_gate(self, caplog):
        gate = ExitGate(Vector2(0, 0))
        gate.unlock()
        with caplog.at_level("ERROR"):
            assert gate.on_contact(Player()) is False
        assert any("before init" in r.message for r in caplog.records)
