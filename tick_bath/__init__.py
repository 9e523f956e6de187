"""tick-bath - Tick-driven simulation core for a bath comfort arcade game."""
from __future__ import annotations

from tick_bath.clock import Accumulator
from tick_bath.config import DEFAULT_DIFFICULTY, BathConfig, DifficultyLevel
from tick_bath.director import InterferenceDirector, KindPolicy
from tick_bath.game import BathGame
from tick_bath.snapshot import restore, snapshot
from tick_bath.types import (
    Bubble,
    FallingItemKind,
    FallingObject,
    GameState,
    GameStatus,
    InterferenceEvent,
    InterferenceKind,
    SnapshotError,
    WindDirection,
    WindPhase,
    WindPuff,
)

__all__ = [
    "Accumulator",
    "BathConfig",
    "BathGame",
    "Bubble",
    "DEFAULT_DIFFICULTY",
    "DifficultyLevel",
    "FallingItemKind",
    "FallingObject",
    "GameState",
    "GameStatus",
    "InterferenceDirector",
    "InterferenceEvent",
    "InterferenceKind",
    "KindPolicy",
    "SnapshotError",
    "WindDirection",
    "WindPhase",
    "WindPuff",
    "restore",
    "snapshot",
]
