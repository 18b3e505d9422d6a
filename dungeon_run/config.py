"""Run configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RunConfig:
    """Immutable configuration for one dungeon run."""

    # Plan
    seed: int = 0                          # 0 = draw a random seed at run start
    total_rooms: int = 10
    rooms_per_theme: int = 5
    start_at_room_index: int = 0           # Debug: skip straight to a later room

    # Fixed sequence (ignores themes, cycles through the named blueprints)
    use_fixed_sequence: bool = False
    fixed_sequence: tuple[str, ...] = ()

    # Timing
    tick_seconds: float = 1.0 / 60.0
    max_ticks: int = 100_000

    # Auto-repair defaults for malformed rooms
    repair_enemy_spawn_count: int = 3
    repair_enemy_spawn_radius: float = 3.0
    repair_exit_offset_x: float = 5.0
    repair_exit_offset_y: float = 0.0

    # Generic exit gate template (spawned at the exit anchor when the room has none)
    use_gate_template: bool = True

    # Headless driver (stands in for player + combat collaborators)
    driver_kill_interval_ticks: int = 30
    driver_damage_per_hit: int = 100
    driver_gate_delay_ticks: int = 10

    # Data
    themes_file: str | None = None

    # Logging
    log_level: str = "INFO"
    progress_log_interval: int = 600
    event_log_capacity: int = 2000
