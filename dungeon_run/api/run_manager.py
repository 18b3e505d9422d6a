"""RunManager — singleton wrapper that runs the RunLoop on a background thread.

The API reads from an atomically-swapped immutable RunSnapshot; the loop
mutates the room lifecycle exclusively on its own thread.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from dungeon_run.engine.context import RunContext
from dungeon_run.engine.driver import HeadlessDriver
from dungeon_run.engine.room_lifecycle import RoomLifecycleManager
from dungeon_run.engine.run_loop import RunLoop

if TYPE_CHECKING:
    from dungeon_run.config import RunConfig
    from dungeon_run.core.snapshot import RunSnapshot
    from dungeon_run.systems.run_plan import RunPlan
    from dungeon_run.utils.event_log import EventLog

logger = logging.getLogger(__name__)


class RunManager:
    """Manages one dungeon run on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - event log (lock-guarded ring buffer owned by the lifecycle manager)
      - control commands (start / pause / resume / step / reset)
    """

    def __init__(self, config: RunConfig) -> None:
        self.config = config
        self._tick_rate: float = 0.05  # seconds between ticks (20 tps default)

        # Run components (built in _build)
        self._lifecycle: RoomLifecycleManager | None = None
        self._loop: RunLoop | None = None

        # Thread-safe shared state
        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: RunSnapshot | None = None
        self._plan: RunPlan | None = None

        # Control
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._stop_requested = threading.Event()
        self._finished = False

        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.01, min(value, 2.0))

    @property
    def event_log(self) -> EventLog:
        assert self._lifecycle is not None
        return self._lifecycle.events

    @property
    def plan(self) -> RunPlan | None:
        return self._plan

    # -- snapshot access --

    def get_snapshot(self) -> RunSnapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="run-loop", daemon=True)
        self._thread.start()
        logger.info("RunManager started (tick_rate=%.3fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("RunManager paused at tick %d", self._current_tick())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("RunManager resumed at tick %d", self._current_tick())

    def step(self) -> bool:
        """Execute exactly one tick.

        With the loop thread running the tick is handed to it (and the run is
        paused first); otherwise it runs synchronously on the caller's thread.
        Returns False if the run had already ended.
        """
        if self._running.is_set():
            if not self._paused.is_set():
                self.pause()
            self._step_requested.set()
            return not self._finished
        return self._tick()

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        logger.info("RunManager stopped.")

    def reset(self) -> None:
        """Stop, rebuild, and leave stopped and ready to start."""
        self.stop()
        self._build()
        logger.info("RunManager reset.")

    # -- internals --

    def _build(self) -> None:
        """Construct the run components from config and load the first room."""
        cfg = self.config
        context = RunContext.from_config(cfg)
        self._lifecycle = RoomLifecycleManager(cfg, context)
        self._loop = RunLoop(cfg, self._lifecycle, HeadlessDriver.from_config(cfg))
        self._plan = self._lifecycle.start_run()
        self._finished = self._lifecycle.complete
        self._publish_snapshot()

    def _tick(self) -> bool:
        assert self._loop is not None
        if self._finished:
            return False
        can_continue = self._loop.tick_once()
        if not can_continue:
            self._finished = True
        self._publish_snapshot()
        return can_continue

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Run thread started.")

        while not self._stop_requested.is_set():
            # Handle pause
            if self._paused.is_set() and not self._step_requested.is_set():
                time.sleep(0.01)
                continue

            single_step = self._step_requested.is_set()
            if single_step:
                self._step_requested.clear()

            if not self._tick():
                logger.info("Run ended at tick %d.", self._current_tick())
                break

            # Rate limiting
            if not single_step:
                time.sleep(self._tick_rate)

        self._running.clear()
        logger.info("Run thread exited.")

    def _publish_snapshot(self) -> None:
        assert self._loop is not None
        snap = self._loop.create_snapshot()
        with self._snapshot_lock:
            self._latest_snapshot = snap

    def _current_tick(self) -> int:
        if self._lifecycle:
            return self._lifecycle.ticks
        return 0
