"""ExitGate — the Locked/Unlocked gate guarding room-to-room progression."""

from __future__ import annotations

import logging
from typing import Protocol

from dungeon_run.core.enums import GateState
from dungeon_run.core.models import Player, Vector2

logger = logging.getLogger(__name__)


class GateOwner(Protocol):
    """The side of the orchestrator a gate talks to."""

    def try_advance(self) -> bool: ...


class ExitGate:
    """Two-state gate.  ``LOCKED -> UNLOCKED`` only; never re-locks on its own.

    The gate does not debounce repeated contact.  Every player contact while
    unlocked is forwarded to the owner, which coalesces duplicates.
    """

    __slots__ = ("pos", "embedded", "_state", "_owner")

    def __init__(self, pos: Vector2, embedded: bool = False) -> None:
        self.pos = pos
        self.embedded = embedded
        self._state = GateState.LOCKED
        self._owner: GateOwner | None = None

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def locked(self) -> bool:
        return self._state == GateState.LOCKED

    @property
    def traversable(self) -> bool:
        return self._state == GateState.UNLOCKED

    def init(self, owner: GateOwner) -> None:
        """Bind the gate to an orchestrator and put it in the locked state."""
        self._owner = owner
        self.lock()

    def lock(self) -> None:
        self._state = GateState.LOCKED

    def unlock(self) -> None:
        if self._state == GateState.UNLOCKED:
            return
        self._state = GateState.UNLOCKED
        logger.debug("Gate at %s unlocked", self.pos)

    def on_contact(self, actor: object) -> bool:
        """Handle an actor touching the gate.  Returns True if forwarded."""
        if self._state == GateState.LOCKED:
            return False
        if not isinstance(actor, Player):
            return False
        if self._owner is None:
            logger.error("Gate at %s touched before init(); ignoring", self.pos)
            return False
        self._owner.try_advance()
        return True
