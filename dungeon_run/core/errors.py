"""Exception hierarchy for the dungeon run orchestrator."""

from __future__ import annotations


class DungeonRunError(Exception):
    """Base class for every error raised by this package."""


class PlanConfigError(DungeonRunError):
    """Raised when run plan parameters cannot produce any plan at all."""


class ThemeLoadError(DungeonRunError):
    """Raised when a theme file cannot be read or parsed."""


class UnknownEnemyError(DungeonRunError):
    """Raised by the default enemy factory for an unregistered enemy kind."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Unknown enemy kind: {kind!r}")
        self.kind = kind


class RunNotStartedError(DungeonRunError):
    """Raised when a room is requested before ``start_run()`` built a plan."""
