"""DeathTracker — one-shot "this enemy has died" signal.

Enemies call ``notify_died()`` when their health runs out.  If an enemy is
removed some other way (room teardown, despawn, a collaborator destroying
it directly) ``teardown()`` fires the signal instead, so every tracked enemy
reports its death exactly once no matter how it stopped existing.
"""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)

DeathCallback = Callable[["DeathTracker"], None]


class DeathTracker:
    """Idempotent death signal with a subscriber list."""

    __slots__ = ("owner_id", "_fired", "_subscribers")

    def __init__(self, owner_id: int = 0) -> None:
        self.owner_id = owner_id
        self._fired = False
        self._subscribers: list[DeathCallback] = []

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: DeathCallback) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: DeathCallback) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            pass

    def notify_died(self) -> None:
        """Fire once; every later call is a no-op."""
        if self._fired:
            return
        self._fired = True
        # Copy: subscribers usually unsubscribe themselves while being called.
        for callback in list(self._subscribers):
            callback(self)

    def teardown(self) -> None:
        """Destruction fallback for owners that never called ``notify_died``."""
        if self._fired:
            return
        logger.debug("Enemy %d torn down without a death notice", self.owner_id)
        self.notify_died()
