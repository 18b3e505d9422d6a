"""Pydantic response models for the run API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PointSchema(BaseModel):
    x: float
    y: float


class EnemySchema(BaseModel):
    id: int
    kind: str
    x: float
    y: float
    hp: int
    max_hp: int


class EventSchema(BaseModel):
    tick: int
    category: str
    message: str
    room_index: int = -1
    entity_ids: list[int] = Field(default_factory=list)


# --- State ---

class RunStateResponse(BaseModel):
    tick: int
    elapsed: float
    seed: int
    phase: str
    complete: bool
    room_index: int
    room_count: int
    blueprint: str | None = None
    theme: str | None = None
    gate_state: str | None = None
    gate_pos: PointSchema | None = None
    alive_count: int
    spawn_phase: str
    spawn_pending: int
    player_pos: PointSchema | None = None
    enemies: list[EnemySchema] = Field(default_factory=list)
    events: list[EventSchema] = Field(default_factory=list)


class RunStats(BaseModel):
    tick: int
    rooms_loaded: int
    rooms_cleared: int
    total_spawned: int
    total_deaths: int
    running: bool
    paused: bool
    finished: bool


# --- Plan ---

class PlanEntrySchema(BaseModel):
    slot: int
    theme: str
    pool_index: int
    blueprint: str
    has_spawn_profile: bool
    has_embedded_gate: bool


class RunPlanResponse(BaseModel):
    seed: int
    requested: int
    fixed: bool
    entries: list[PlanEntrySchema]
    skipped_slots: list[int] = Field(default_factory=list)


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int = 0


# --- Config ---

class RunConfigResponse(BaseModel):
    seed: int
    total_rooms: int
    rooms_per_theme: int
    start_at_room_index: int
    use_fixed_sequence: bool
    fixed_sequence: list[str]
    tick_seconds: float
    max_ticks: int
    use_gate_template: bool
    repair_enemy_spawn_count: int
    repair_enemy_spawn_radius: float
    themes_file: str | None = None
    tick_rate: float
