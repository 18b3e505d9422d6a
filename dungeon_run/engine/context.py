"""Collaborator interfaces and the injected run context.

The orchestrator never looks anything up globally.  Everything it needs
from the rest of the game (where the player is, how an enemy is built,
what a generic exit gate looks like, which RNG to use) comes in through a
``RunContext``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Protocol, runtime_checkable

from dungeon_run.core.errors import UnknownEnemyError
from dungeon_run.core.exit_gate import ExitGate
from dungeon_run.core.models import Enemy, Player, Vector2
from dungeon_run.core.themes import ThemeRegistry, default_registry, load_themes
from dungeon_run.systems.rng import DeterministicRNG

if TYPE_CHECKING:
    from dungeon_run.config import RunConfig
    from dungeon_run.core.death_tracker import DeathTracker
    from dungeon_run.core.room import RoomInstance

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------

@runtime_checkable
class Damageable(Protocol):
    def take_damage(self, amount: int) -> bool: ...


@runtime_checkable
class DeathNotifiable(Protocol):
    id: int
    death_tracker: DeathTracker | None

    def destroy(self) -> None: ...


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

class PlayerLocator(Protocol):
    def player(self) -> Player | None: ...


class EnemyFactory(Protocol):
    def create(self, kind: str, pos: Vector2, room: RoomInstance) -> Enemy: ...


GateFactory = Callable[[Vector2], ExitGate]
RNGFactory = Callable[[int], DeterministicRNG]


class SinglePlayerLocator:
    """Locator for a game with exactly one player actor."""

    __slots__ = ("_player",)

    def __init__(self, player: Player | None = None) -> None:
        self._player = player

    def player(self) -> Player | None:
        return self._player

    def set_player(self, player: Player | None) -> None:
        self._player = player


# Base health per enemy kind
ENEMY_HEALTH: dict[str, int] = {
    "slime": 3,
    "bat": 2,
    "goblin": 4,
    "ghost": 3,
    "skeleton": 5,
    "archer": 3,
    "orc": 8,
}


class DefaultEnemyFactory:
    """Builds plain ``Enemy`` instances with per-kind base health."""

    __slots__ = ("_health", "_next_id", "strict")

    def __init__(self, health: dict[str, int] | None = None, strict: bool = True) -> None:
        self._health = dict(ENEMY_HEALTH if health is None else health)
        self._next_id = 1
        self.strict = strict

    def create(self, kind: str, pos: Vector2, room: RoomInstance) -> Enemy:
        hp = self._health.get(kind)
        if hp is None:
            if self.strict:
                raise UnknownEnemyError(kind)
            hp = 1
        eid = self._next_id
        self._next_id += 1
        return Enemy(id=eid, kind=kind, pos=pos, hp=hp, max_hp=hp)


def default_gate_factory(pos: Vector2) -> ExitGate:
    return ExitGate(pos)


@dataclass
class RunContext:
    """Everything the orchestrator consumes from the outside world."""

    themes: ThemeRegistry
    players: PlayerLocator
    enemies: EnemyFactory = field(default_factory=DefaultEnemyFactory)
    gate_factory: GateFactory | None = default_gate_factory
    rng_factory: RNGFactory = DeterministicRNG

    @classmethod
    def from_config(cls, config: RunConfig, player: Player | None = None) -> RunContext:
        """Default wiring: themes from ``config.themes_file`` or the built-ins."""
        if config.themes_file:
            themes = load_themes(config.themes_file)
        else:
            themes = default_registry()
        return cls(
            themes=themes,
            players=SinglePlayerLocator(player if player is not None else Player()),
            gate_factory=default_gate_factory if config.use_gate_template else None,
        )
