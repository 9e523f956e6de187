"""Display helpers for the presentation layer: timers, mood and banners."""
from __future__ import annotations

import math
from dataclasses import dataclass

from tick_bath.config import BathConfig
from tick_bath.types import GameState, InterferenceKind


@dataclass(frozen=True)
class InterferenceContent:
    icon: str
    title: str
    description: str


_CONTENT: dict[InterferenceKind, InterferenceContent] = {
    InterferenceKind.BUBBLE_OBSTRUCTION: InterferenceContent(
        "🫧", "Bubble Time!", "Bubbles are everywhere! Tap to pop them."
    ),
    InterferenceKind.COLD_WIND: InterferenceContent(
        "🌨️", "Cold Wind Incoming!", "A cold wind is cooling the bath fast!"
    ),
    InterferenceKind.CONTROLS_REVERSED: InterferenceContent(
        "🔄", "Controls Reversed!", "The + and - buttons are swapped!"
    ),
    InterferenceKind.ELECTRIC_LEAKAGE: InterferenceContent(
        "⚡", "Electric Leakage!", "The thermometer can't be trusted!"
    ),
    InterferenceKind.FALLING_ITEMS: InterferenceContent(
        "🎁", "Surprise Drop!", "Catch the good stuff, dodge the rest!"
    ),
}


def interference_content(kind: InterferenceKind) -> InterferenceContent:
    return _CONTENT[kind]


def format_time(seconds: float) -> str:
    """Format seconds as MM:SS, truncating fractions."""
    total = max(0, int(seconds))
    mins, secs = divmod(total, 60)
    return f"{mins:02d}:{secs:02d}"


def endurance_duration(game_timer: float) -> int:
    """Whole seconds survived. This is the score."""
    return max(0, math.floor(game_timer))


def comfort_description(comfort: float) -> str:
    if comfort >= 0.8:
        return "Very Happy"
    if comfort >= 0.6:
        return "Happy"
    if comfort >= 0.4:
        return "Neutral"
    if comfort >= 0.2:
        return "Uncomfortable"
    return "Very Unhappy"


def remaining_success_time(state: GameState, config: BathConfig) -> int | None:
    """Seconds of full comfort still needed to win, or None in endurance mode."""
    if config.success_hold_time is None:
        return None
    return max(0, math.ceil(config.success_hold_time - state.success_hold_timer))
