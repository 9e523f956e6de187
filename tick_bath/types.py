"""Core data types for the bath comfort simulation."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


class GameStatus(str, Enum):
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    SUCCESS = "success"
    FAILURE = "failure"

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.SUCCESS, GameStatus.FAILURE)

    @property
    def accepts_input(self) -> bool:
        return self in (GameStatus.READY, GameStatus.PLAYING)


class InterferenceKind(str, Enum):
    CONTROLS_REVERSED = "controls_reversed"
    ELECTRIC_LEAKAGE = "electric_leakage"
    BUBBLE_OBSTRUCTION = "bubble_obstruction"
    FALLING_ITEMS = "falling_items"
    COLD_WIND = "cold_wind"


class FallingItemKind(str, Enum):
    RUBBER_DUCK = "rubber_duck"
    FISH = "fish"
    COMB = "comb"
    GRIME_GOBLIN = "grime_goblin"
    ALARM_CLOCK = "alarm_clock"


# Signed comfort change applied when an item is caught.
FALLING_ITEM_EFFECTS: dict[FallingItemKind, float] = {
    FallingItemKind.RUBBER_DUCK: 0.15,
    FallingItemKind.FISH: 0.1,
    FallingItemKind.COMB: 0.05,
    FallingItemKind.GRIME_GOBLIN: -0.2,
    FallingItemKind.ALARM_CLOCK: -0.15,
}


class WindDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class WindPhase(str, Enum):
    FADE_IN = "fade_in"
    MOVING = "moving"
    FADE_OUT = "fade_out"


@dataclass
class InterferenceEvent:
    """A running interference. Removed once remaining_time reaches 0."""

    kind: InterferenceKind
    remaining_time: float
    duration: float = 0.0

    @property
    def is_indefinite(self) -> bool:
        return math.isinf(self.remaining_time)


@dataclass
class Bubble:
    """Obstruction particle. Falls, drifts and sways; recycled at the top."""

    id: int
    x: float
    y: float
    size: float
    opacity: float
    speed: float
    horizontal_speed: float
    sway_amplitude: float
    sway_frequency: float
    phase: float


@dataclass
class FallingObject:
    id: int
    kind: FallingItemKind
    x: float
    y: float
    comfort_effect: float


@dataclass
class WindPuff:
    id: int
    x: float
    y: float
    direction: WindDirection  # direction of travel
    speed: float
    opacity: float = 0.0
    phase: WindPhase = WindPhase.FADE_IN


@dataclass
class GameState:
    """Authoritative simulation record. Replaced wholesale on every operation."""

    current_temperature: float
    target_zone: int
    current_comfort: float
    game_timer: float = 0.0
    game_status: GameStatus = GameStatus.READY
    difficulty_level: int = 1
    interference_events: list[InterferenceEvent] = field(default_factory=list)
    is_controls_reversed: bool = False
    temperature_offset: float = 0.0
    bubble_field: list[Bubble] = field(default_factory=list)
    falling_objects: list[FallingObject] = field(default_factory=list)
    wind_field: list[WindPuff] = field(default_factory=list)
    tap_rotation: float = 0.0
    tap_animation_counter: int = 0
    interference_timer: float = 0.0
    difficulty_timer: float = 0.0
    cooling_multiplier: float = 1.0
    electric_refresh_timer: float = 0.0
    falling_spawn_timer: float = 0.0
    wind_spawn_timer: float = 0.0
    success_hold_timer: float = 0.0
    next_entity_id: int = 0

    def active_kinds(self) -> set[InterferenceKind]:
        return {event.kind for event in self.interference_events}

    def has_active(self, kind: InterferenceKind) -> bool:
        return any(event.kind is kind for event in self.interference_events)

    def take_entity_id(self) -> int:
        eid = self.next_entity_id
        self.next_entity_id += 1
        return eid


class SnapshotError(Exception):
    """Raised on restore failures (version mismatch, unknown enum value)."""
