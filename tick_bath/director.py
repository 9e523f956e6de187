"""InterferenceDirector: spawning, per-tick upkeep and cleanup of interference."""
from __future__ import annotations

import logging
import math
import random as _random_mod
from dataclasses import dataclass
from typing import Iterable

from tick_bath import effects
from tick_bath.config import BathConfig
from tick_bath.types import (
    FALLING_ITEM_EFFECTS,
    Bubble,
    FallingItemKind,
    FallingObject,
    GameState,
    InterferenceEvent,
    InterferenceKind,
    WindDirection,
    WindPuff,
)

logger = logging.getLogger(__name__)

MIN_WIND_PUFFS = 2
MAX_WIND_PUFFS = 5


@dataclass(frozen=True)
class KindPolicy:
    """Static rules for one interference kind."""

    duration: float
    click_clearable: bool = False
    single_instance: bool = False


def make_kind_policies(config: BathConfig) -> dict[InterferenceKind, KindPolicy]:
    """Total mapping from every kind to its policy."""
    return {
        InterferenceKind.CONTROLS_REVERSED: KindPolicy(
            duration=config.controls_reversed_duration, click_clearable=True
        ),
        InterferenceKind.ELECTRIC_LEAKAGE: KindPolicy(
            duration=config.interference_duration, click_clearable=True
        ),
        InterferenceKind.BUBBLE_OBSTRUCTION: KindPolicy(
            duration=math.inf, single_instance=True
        ),
        InterferenceKind.FALLING_ITEMS: KindPolicy(
            duration=config.falling_items_duration
        ),
        InterferenceKind.COLD_WIND: KindPolicy(duration=config.interference_duration),
    }


class InterferenceDirector:
    """Builds, advances and tears down interference effects on a GameState.

    Holds no per-game data. Every timer the effects need lives on the state,
    so the same director serves any number of games.
    """

    def __init__(self, config: BathConfig, rng: _random_mod.Random) -> None:
        self._config = config
        self._rng = rng
        self._policies = make_kind_policies(config)

    # --- Queries ---

    def policy(self, kind: InterferenceKind) -> KindPolicy:
        return self._policies[kind]

    def is_click_clearable(self, kind: InterferenceKind) -> bool:
        return self._policies[kind].click_clearable

    def pick_random_kind(
        self, exclude: Iterable[InterferenceKind] = ()
    ) -> InterferenceKind | None:
        """Uniform choice over all kinds not excluded. None if none remain."""
        excluded = set(exclude)
        candidates = [kind for kind in InterferenceKind if kind not in excluded]
        if not candidates:
            return None
        return self._rng.choice(candidates)

    def blocked_kinds(self, state: GameState) -> set[InterferenceKind]:
        """Single-instance kinds that are already running."""
        return {
            kind
            for kind in state.active_kinds()
            if self._policies[kind].single_instance
        }

    def next_interval(self, level: int) -> float:
        tier = self._config.level(level)
        return self._rng.uniform(tier.min_interval, tier.max_interval)

    def create_event(self, kind: InterferenceKind) -> InterferenceEvent:
        duration = self._policies[kind].duration
        return InterferenceEvent(kind=kind, remaining_time=duration, duration=duration)

    # --- Lifecycle ---

    def activate(self, kind: InterferenceKind, state: GameState) -> None:
        """Apply a kind's setup side effects to the working state."""
        cfg = self._config
        if kind is InterferenceKind.CONTROLS_REVERSED:
            state.is_controls_reversed = True
        elif kind is InterferenceKind.ELECTRIC_LEAKAGE:
            state.temperature_offset = effects.electric_offset(
                self._rng, cfg.electric_offset_range
            )
            state.electric_refresh_timer = cfg.electric_refresh_interval
        elif kind is InterferenceKind.BUBBLE_OBSTRUCTION:
            state.bubble_field = self._build_bubble_field(state)
        elif kind is InterferenceKind.FALLING_ITEMS:
            state.falling_spawn_timer = self._falling_delay()
        elif kind is InterferenceKind.COLD_WIND:
            state.cooling_multiplier = cfg.cold_wind_multiplier
            state.wind_field = [
                self._spawn_wind_puff(state) for _ in range(self._rng.randint(2, 4))
            ]
            state.wind_spawn_timer = self._wind_delay()

    def expire(self, kind: InterferenceKind, state: GameState) -> None:
        """Cleanup for one event that has just left the active list."""
        if kind is InterferenceKind.BUBBLE_OBSTRUCTION:
            state.bubble_field = []
            return
        if not state.has_active(kind):
            self.deactivate(kind, state)

    def deactivate(self, kind: InterferenceKind, state: GameState) -> None:
        """Undo a kind's effect. Only valid once no event of the kind remains."""
        if kind is InterferenceKind.CONTROLS_REVERSED:
            state.is_controls_reversed = False
        elif kind is InterferenceKind.ELECTRIC_LEAKAGE:
            state.temperature_offset = 0.0
            state.electric_refresh_timer = 0.0
        elif kind is InterferenceKind.BUBBLE_OBSTRUCTION:
            state.bubble_field = []
        elif kind is InterferenceKind.COLD_WIND:
            state.wind_field = []
            state.cooling_multiplier = 1.0
            state.wind_spawn_timer = 0.0
        # Falling items finish their fall on their own.

    def tick(self, state: GameState, dt: float) -> None:
        """Advance every continuous effect by dt."""
        active = state.active_kinds()
        if InterferenceKind.ELECTRIC_LEAKAGE in active:
            self._tick_electric(state, dt)
        if InterferenceKind.BUBBLE_OBSTRUCTION in active:
            cfg = self._config
            for bubble in state.bubble_field:
                effects.move_bubble(
                    bubble,
                    dt,
                    cfg.playfield_width,
                    cfg.playfield_height,
                    self._rng,
                )
        self._tick_falling(state, dt, InterferenceKind.FALLING_ITEMS in active)
        if InterferenceKind.COLD_WIND in active:
            self._tick_wind(state, dt)

    # --- Electric leakage ---

    def _tick_electric(self, state: GameState, dt: float) -> None:
        cfg = self._config
        state.electric_refresh_timer -= dt
        while state.electric_refresh_timer <= 0.0:
            state.temperature_offset = effects.electric_offset(
                self._rng, cfg.electric_offset_range
            )
            state.electric_refresh_timer += cfg.electric_refresh_interval

    # --- Bubble field ---

    def _build_bubble_field(self, state: GameState) -> list[Bubble]:
        rng = self._rng
        width = self._config.playfield_width
        bubbles: list[Bubble] = []
        for i in range(rng.randint(5, 8)):
            if rng.random() < 0.7:
                size = rng.uniform(120.0, 150.0)
            else:
                size = rng.uniform(50.0, 70.0)

            placed = False
            for _ in range(10):
                x = size / 2.0 + rng.random() * (width - size)
                y = -size - rng.random() * 200.0
                if not effects.bubbles_overlap(x, y, size, bubbles):
                    placed = True
                    break
            if not placed:
                logger.debug("Bubble %d fell back to grid placement", i)
                # Fall back to a 3x3 grid above the board.
                x = (i % 3) * (width / 3.0) + size / 2.0
                y = -size - (i // 3) * (200.0 / 3.0)

            bubbles.append(
                Bubble(
                    id=state.take_entity_id(),
                    x=x,
                    y=y,
                    size=size,
                    opacity=rng.uniform(0.6, 1.0),
                    speed=rng.uniform(150.0, 270.0),
                    horizontal_speed=(rng.random() - 0.5) * 90.0,
                    sway_amplitude=rng.uniform(20.0, 60.0),
                    sway_frequency=rng.uniform(0.6, 1.8),
                    phase=rng.random() * math.tau,
                )
            )
        return bubbles

    # --- Falling items ---

    def _falling_delay(self) -> float:
        return self._rng.uniform(1.5, 3.0)

    def spawn_falling_object(self, state: GameState) -> FallingObject:
        kind = self._rng.choice(list(FallingItemKind))
        usable = self._config.playfield_width - effects.FALLING_SPAWN_MARGIN
        return FallingObject(
            id=state.take_entity_id(),
            kind=kind,
            x=self._rng.random() * usable,
            y=0.0,
            comfort_effect=FALLING_ITEM_EFFECTS[kind],
        )

    def _tick_falling(self, state: GameState, dt: float, spawning: bool) -> None:
        state.falling_objects = effects.move_falling_objects(state.falling_objects, dt)
        if not spawning:
            return
        state.falling_spawn_timer -= dt
        if state.falling_spawn_timer <= 0.0:
            obj = self.spawn_falling_object(state)
            state.falling_objects.append(obj)
            state.falling_spawn_timer = self._falling_delay()
            logger.debug("Dropped %s at x=%.0f", obj.kind.value, obj.x)

    def catch_falling_objects(self, state: GameState) -> list[FallingObject]:
        """Remove and return every object inside the catch band."""
        cfg = self._config
        caught: list[FallingObject] = []
        remaining: list[FallingObject] = []
        for obj in state.falling_objects:
            if effects.in_catch_band(obj, cfg.catch_band_top, cfg.catch_band_bottom):
                caught.append(obj)
            else:
                remaining.append(obj)
        state.falling_objects = remaining
        return caught

    # --- Cold wind ---

    def _wind_delay(self) -> float:
        return self._rng.uniform(3.0, 8.0)

    def _spawn_wind_puff(self, state: GameState) -> WindPuff:
        rng = self._rng
        cfg = self._config
        direction = WindDirection.RIGHT if rng.random() > 0.5 else WindDirection.LEFT
        if direction is WindDirection.RIGHT:
            x = -effects.WIND_WIDTH
        else:
            x = cfg.playfield_width + effects.WIND_WIDTH
        return WindPuff(
            id=state.take_entity_id(),
            x=x,
            y=cfg.playfield_height * rng.uniform(0.1, 0.7),
            direction=direction,
            speed=effects.wind_speed(cfg.playfield_width, rng.uniform(3.0, 8.0)),
        )

    def _tick_wind(self, state: GameState, dt: float) -> None:
        width = self._config.playfield_width
        for puff in state.wind_field:
            effects.move_wind_puff(puff, dt, width)
        state.wind_field = [
            puff for puff in state.wind_field if not effects.wind_puff_gone(puff, width)
        ]

        state.wind_spawn_timer -= dt
        if state.wind_spawn_timer <= 0.0:
            if len(state.wind_field) < MAX_WIND_PUFFS:
                state.wind_field.append(self._spawn_wind_puff(state))
            state.wind_spawn_timer = self._wind_delay()
        while len(state.wind_field) < MIN_WIND_PUFFS:
            state.wind_field.append(self._spawn_wind_puff(state))
