"""Engine layer: room lifecycle, run loop, headless driver, run context."""

from dungeon_run.engine.context import RunContext
from dungeon_run.engine.driver import HeadlessDriver
from dungeon_run.engine.room_lifecycle import RoomLifecycleManager
from dungeon_run.engine.run_loop import RunLoop

__all__ = ["HeadlessDriver", "RoomLifecycleManager", "RunContext", "RunLoop"]
