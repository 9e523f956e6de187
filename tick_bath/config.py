"""Simulation configuration dataclasses."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DifficultyLevel:
    """Spawn interval range (seconds) and concurrency cap for one level."""

    min_interval: float
    max_interval: float
    max_events: int


DEFAULT_DIFFICULTY: tuple[DifficultyLevel, ...] = (
    DifficultyLevel(8.0, 12.0, 1),
    DifficultyLevel(6.0, 10.0, 1),
    DifficultyLevel(5.0, 8.0, 2),
    DifficultyLevel(4.0, 7.0, 2),
    DifficultyLevel(3.0, 5.0, 3),
)


# Intervals and durations that sub-step loops divide by or count down from.
_POSITIVE_FIELDS = (
    "decay_interval",
    "comfort_interval",
    "macro_interval",
    "zone_interval",
    "difficulty_interval",
    "electric_refresh_interval",
    "interference_duration",
    "controls_reversed_duration",
    "falling_items_duration",
)


@dataclass(frozen=True)
class BathConfig:
    """Immutable tuning for the bath simulation.

    Attributes:
        temperature_step: Temperature change per button press.
        decay_step: Temperature lost on each decay step.
        cold_wind_multiplier: Decay multiplier while cold wind blows.
        comfort_step: Comfort gained or lost on each comfort step.
        bubble_clear_bonus: Comfort granted for popping the bubbles.
        dead_band: Width of the no-comfort band at each end of [0, 1].
        decay_interval: Seconds between temperature decay steps.
        comfort_interval: Seconds between comfort steps.
        macro_interval: Seconds between heartbeat steps.
        zone_interval: Seconds between comfort zone rotations.
        difficulty_interval: Event-free seconds needed to raise difficulty.
        grace_period: Seconds of play during which comfort cannot fail.
        grace_comfort_floor: Comfort restored when it bottoms out in grace.
        interference_duration: Default event duration in seconds.
        controls_reversed_duration: Duration of reversed controls.
        falling_items_duration: Spawn window of the falling items event.
        electric_offset_range: Displayed offset is drawn from +/- this value.
        electric_refresh_interval: Seconds between offset re-rolls.
        playfield_width: Width of the board in layout units.
        playfield_height: Height of the board in layout units.
        catch_band_top: Upper edge of the falling-item catch band.
        catch_band_bottom: Lower edge of the falling-item catch band.
        success_hold_time: Seconds at full comfort that win the game.
            ``None`` plays endless endurance mode.
        immortal: Never fail from comfort running out.
        difficulty: Difficulty table, level 1 first.
    """

    temperature_step: float = 0.05
    decay_step: float = 0.006
    cold_wind_multiplier: float = 3.0
    comfort_step: float = 0.012
    bubble_clear_bonus: float = 0.05
    dead_band: float = 0.08
    decay_interval: float = 0.04
    comfort_interval: float = 0.08
    macro_interval: float = 1.0
    zone_interval: float = 15.0
    difficulty_interval: float = 30.0
    grace_period: float = 1.0
    grace_comfort_floor: float = 0.01
    interference_duration: float = 8.0
    controls_reversed_duration: float = 5.0
    falling_items_duration: float = 10.0
    electric_offset_range: float = 0.1
    electric_refresh_interval: float = 1.0
    playfield_width: float = 724.0
    playfield_height: float = 584.0
    catch_band_top: float = 480.0
    catch_band_bottom: float = 560.0
    success_hold_time: float | None = None
    immortal: bool = False
    difficulty: tuple[DifficultyLevel, ...] = DEFAULT_DIFFICULTY

    def __post_init__(self) -> None:
        for name in _POSITIVE_FIELDS:
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if not self.difficulty:
            raise ValueError("difficulty table must not be empty")
        for index, level in enumerate(self.difficulty, start=1):
            if not 0 < level.min_interval <= level.max_interval:
                raise ValueError(f"level {index}: invalid interval range")
            if level.max_events < 1:
                raise ValueError(f"level {index}: max_events must be >= 1")
        if self.success_hold_time is not None and self.success_hold_time <= 0:
            raise ValueError("success_hold_time must be positive or None")

    @property
    def max_level(self) -> int:
        return len(self.difficulty)

    def level(self, number: int) -> DifficultyLevel:
        """Look up a difficulty level, clamping out-of-range numbers."""
        index = max(1, min(number, self.max_level)) - 1
        return self.difficulty[index]
