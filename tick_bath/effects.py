"""Per-kind effect math: offsets and motion of bubbles, falling items and wind.

Motion functions mutate the entity they are given. The orchestrator only
ever hands them entities that belong to its private working copy.
"""
from __future__ import annotations

import math
import random as _random

from tick_bath.types import Bubble, FallingObject, WindDirection, WindPhase, WindPuff

# Falling items, in layout units per second.
FALL_SPEED = 200.0
FALLING_EXIT_Y = 600.0
FALLING_SPAWN_MARGIN = 60.0

# Sway is 10% of amplitude per frame at 60 fps.
BUBBLE_SWAY_SCALE = 6.0

WIND_WIDTH = 120.0
WIND_FADE_RATE = 3.0


def electric_offset(rng: _random.Random, offset_range: float) -> float:
    """Displayed temperature jitter in [-offset_range, offset_range]."""
    return (rng.random() - 0.5) * 2.0 * offset_range


def move_bubble(
    bubble: Bubble, dt: float, width: float, height: float, rng: _random.Random
) -> None:
    """Fall, drift and sway. Past the bottom, respawn above the top at a fresh x."""
    bubble.phase += bubble.sway_frequency * dt
    bubble.y += bubble.speed * dt
    sway = math.sin(bubble.phase) * bubble.sway_amplitude * BUBBLE_SWAY_SCALE * dt
    x = bubble.x + bubble.horizontal_speed * dt + sway
    half = bubble.size / 2.0
    bubble.x = max(half, min(width - half, x))
    if bubble.y > height + bubble.size:
        bubble.y = -bubble.size
        bubble.x = half + rng.random() * (width - bubble.size)


def bubbles_overlap(x: float, y: float, size: float, others: list[Bubble]) -> bool:
    """True if a bubble at (x, y) would crowd any existing bubble."""
    min_distance = 80.0 + size / 2.0
    for other in others:
        distance = math.hypot(x - other.x, y - other.y)
        if distance < min_distance + other.size / 2.0:
            return True
    return False


def move_falling_objects(
    objects: list[FallingObject], dt: float, exit_y: float = FALLING_EXIT_Y
) -> list[FallingObject]:
    """Advance every object and drop the ones that left the bottom."""
    for obj in objects:
        obj.y += FALL_SPEED * dt
    return [obj for obj in objects if obj.y < exit_y]


def in_catch_band(obj: FallingObject, top: float, bottom: float) -> bool:
    return top <= obj.y <= bottom


def wind_speed(width: float, crossing_time: float) -> float:
    """Speed that carries a puff across the board plus both margins."""
    return (width + 2.0 * WIND_WIDTH) / crossing_time


def move_wind_puff(puff: WindPuff, dt: float, width: float) -> None:
    travelling_right = puff.direction is WindDirection.RIGHT
    puff.x += puff.speed * dt if travelling_right else -puff.speed * dt

    if puff.phase is WindPhase.FADE_IN:
        puff.opacity = min(1.0, puff.opacity + WIND_FADE_RATE * dt)
        if puff.opacity >= 1.0:
            puff.phase = WindPhase.MOVING
    elif puff.phase is WindPhase.MOVING:
        if travelling_right and puff.x > width * 0.8:
            puff.phase = WindPhase.FADE_OUT
        elif not travelling_right and puff.x < width * 0.2 - WIND_WIDTH:
            puff.phase = WindPhase.FADE_OUT
    else:
        puff.opacity = max(0.0, puff.opacity - WIND_FADE_RATE * dt)


def wind_puff_gone(puff: WindPuff, width: float) -> bool:
    """Faded out and past the edge opposite its spawn side."""
    if puff.opacity > 0.0:
        return False
    if puff.direction is WindDirection.RIGHT:
        return puff.x > width + WIND_WIDTH
    return puff.x < -2.0 * WIND_WIDTH
