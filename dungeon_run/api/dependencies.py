"""FastAPI dependency injection — provides the RunManager singleton."""

from __future__ import annotations

from dungeon_run.api.run_manager import RunManager

_run_manager: RunManager | None = None


def set_run_manager(manager: RunManager | None) -> None:
    global _run_manager
    _run_manager = manager


def get_run_manager() -> RunManager:
    if _run_manager is None:
        raise RuntimeError("RunManager not initialized — server not started correctly.")
    return _run_manager
