"""RunLoop — fixed-timestep driver around the room lifecycle manager.

Each tick:
  1. Driver — scripted player/combat reacts to the current room
  2. Manager — deferred transition, or spawn executor advance
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dungeon_run.core.snapshot import RunSnapshot

if TYPE_CHECKING:
    from dungeon_run.config import RunConfig
    from dungeon_run.engine.driver import HeadlessDriver
    from dungeon_run.engine.room_lifecycle import RoomLifecycleManager

logger = logging.getLogger(__name__)


class RunLoop:
    """Steps one run at ``config.tick_seconds`` per tick until it completes."""

    __slots__ = ("_config", "_manager", "_driver")

    def __init__(
        self,
        config: RunConfig,
        manager: RoomLifecycleManager,
        driver: HeadlessDriver | None = None,
    ) -> None:
        self._config = config
        self._manager = manager
        self._driver = driver

    @property
    def manager(self) -> RoomLifecycleManager:
        return self._manager

    @property
    def driver(self) -> HeadlessDriver | None:
        return self._driver

    def tick_once(self) -> bool:
        """Execute a single tick. Returns False if the run should stop."""
        manager = self._manager
        tick = manager.ticks

        if manager.plan is None:
            manager.start_run()

        if manager.complete:
            logger.info("Tick %d: Run complete.", tick)
            return False

        if tick >= self._config.max_ticks:
            logger.info("Tick %d: Max ticks reached.", tick)
            return False

        if self._driver is not None:
            self._driver.tick(manager)
        manager.tick(self._config.tick_seconds)
        return True

    def create_snapshot(self) -> RunSnapshot:
        """Create an immutable snapshot of the current run state."""
        return RunSnapshot.from_manager(self._manager)

    def run(self) -> RunSnapshot:
        """Run until the plan is exhausted or ``max_ticks`` is hit."""
        manager = self._manager
        if manager.plan is None:
            manager.start_run()

        interval = self._config.progress_log_interval
        while self.tick_once():
            if interval > 0 and manager.ticks % interval == 0:
                logger.info(
                    "Tick %d: room %d/%d, %d alive, gate %s",
                    manager.ticks,
                    manager.room_index + 1,
                    len(manager.plan) if manager.plan else 0,
                    manager.alive_count,
                    manager.gate_state.name if manager.gate_state is not None else "none",
                )

        logger.info(
            "=== Run finished at tick %d (%.1fs simulated, %d/%d rooms cleared) ===",
            manager.ticks,
            manager.elapsed,
            manager.rooms_cleared,
            len(manager.plan) if manager.plan else 0,
        )
        return self.create_snapshot()
