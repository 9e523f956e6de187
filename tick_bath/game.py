"""BathGame - tick-driven state machine, input handling and lifecycle."""
from __future__ import annotations

import copy
import logging
import os
import random
from dataclasses import replace
from typing import Any, Callable

from tick_bath import rules
from tick_bath.clock import Accumulator, drain
from tick_bath.config import BathConfig
from tick_bath.director import InterferenceDirector
from tick_bath.snapshot import (
    _SNAPSHOT_VERSION,
    deserialize_rng_state,
    serialize_rng_state,
)
from tick_bath.snapshot import restore as restore_state
from tick_bath.snapshot import snapshot as snapshot_state
from tick_bath.types import GameState, GameStatus, InterferenceKind, SnapshotError

logger = logging.getLogger(__name__)

TAP_ROTATION_STEP = 90.0
INITIAL_ZONE = 1
INITIAL_COMFORT = 0.5

InterferenceHook = Callable[[GameState, InterferenceKind], None]
ZoneHook = Callable[[GameState, int, int], None]
StatusHook = Callable[[GameState, GameStatus, GameStatus], None]


class BathGame:
    """Owns the sub-step accumulators and every state transition.

    All public operations take a GameState and return a new one; the input
    is never mutated. The optional hooks fire synchronously from inside the
    operation that caused them.
    """

    def __init__(
        self,
        config: BathConfig | None = None,
        seed: int | None = None,
        *,
        on_interference_start: InterferenceHook | None = None,
        on_interference_end: InterferenceHook | None = None,
        on_zone_change: ZoneHook | None = None,
        on_status_change: StatusHook | None = None,
    ) -> None:
        self._config = config if config is not None else BathConfig()

        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._seed = seed
        self._rng = random.Random(seed)
        self._director = InterferenceDirector(self._config, self._rng)

        cfg = self._config
        self._decay_acc = Accumulator(cfg.decay_interval)
        self._comfort_acc = Accumulator(cfg.comfort_interval)
        self._macro_acc = Accumulator(cfg.macro_interval)
        self._zone_acc = Accumulator(cfg.zone_interval)

        self._on_interference_start = on_interference_start
        self._on_interference_end = on_interference_end
        self._on_zone_change = on_zone_change
        self._on_status_change = on_status_change

    @property
    def config(self) -> BathConfig:
        return self._config

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def director(self) -> InterferenceDirector:
        return self._director

    # --- Lifecycle ---

    def create_initial_state(self) -> GameState:
        return GameState(
            current_temperature=rules.zone_center(INITIAL_ZONE),
            target_zone=INITIAL_ZONE,
            current_comfort=INITIAL_COMFORT,
            difficulty_level=1,
            interference_timer=self._director.next_interval(1),
        )

    def reset_game(self) -> GameState:
        self._reset_accumulators()
        return self.create_initial_state()

    def start_game(self, state: GameState) -> GameState:
        if state.game_status is not GameStatus.READY:
            logger.warning(
                "start_game ignored: status is %s, expected ready",
                state.game_status.value,
            )
            return state
        self._reset_accumulators()
        new_state = replace(state, game_status=GameStatus.PLAYING)
        self._notify_status(new_state, state.game_status)
        return new_state

    def pause_game(self, state: GameState) -> GameState:
        if state.game_status is not GameStatus.PLAYING:
            logger.warning("pause_game ignored: status is %s", state.game_status.value)
            return state
        new_state = replace(state, game_status=GameStatus.PAUSED)
        self._notify_status(new_state, state.game_status)
        return new_state

    def resume_game(self, state: GameState) -> GameState:
        if state.game_status is not GameStatus.PAUSED:
            logger.warning("resume_game ignored: status is %s", state.game_status.value)
            return state
        new_state = replace(state, game_status=GameStatus.PLAYING)
        self._notify_status(new_state, state.game_status)
        return new_state

    # --- Snapshot ---

    def snapshot(self, state: GameState) -> dict[str, Any]:
        """Capture state plus the RNG and banked sub-step time.

        Restoring the result into any BathGame with the same config
        continues the exact same game.
        """
        return {
            "version": _SNAPSHOT_VERSION,
            "seed": self._seed,
            "rng_state": serialize_rng_state(self._rng.getstate()),
            "accumulators": {
                name: {"banked": acc.banked, "fired": acc.fired}
                for name, acc in self._accumulators().items()
            },
            "game": snapshot_state(state),
        }

    def restore(self, data: dict[str, Any]) -> GameState:
        version = data.get("version")
        if version != _SNAPSHOT_VERSION:
            raise SnapshotError(
                f"Unsupported snapshot version {version!r}, expected {_SNAPSHOT_VERSION}"
            )
        if "game" not in data:
            raise SnapshotError("Snapshot is missing field 'game'")
        state = restore_state(data["game"])
        try:
            seed = data["seed"]
            rng_state = deserialize_rng_state(data["rng_state"])
            banks = {
                name: (float(saved["banked"]), int(saved["fired"]))
                for name, saved in data["accumulators"].items()
            }
            if any(banked < 0 for banked, _ in banks.values()):
                raise ValueError("banked time must not be negative")
        except KeyError as exc:
            raise SnapshotError(f"Snapshot is missing field {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise SnapshotError(f"Invalid snapshot value: {exc}") from exc

        accumulators = self._accumulators()
        if set(banks) != set(accumulators):
            raise SnapshotError(
                f"Accumulator mismatch: snapshot has {sorted(banks)}, "
                f"game has {sorted(accumulators)}"
            )
        try:
            self._rng.setstate(rng_state)
        except (TypeError, ValueError) as exc:
            raise SnapshotError(f"Invalid snapshot value: {exc}") from exc
        self._seed = seed
        for name, (banked, fired) in banks.items():
            accumulators[name].restore(banked, fired)
        return state

    # --- Tick ---

    def advance(self, state: GameState, delta_time: float) -> GameState:
        """Run one tick of delta_time seconds.

        Tick execution order:
        1. Bank delta_time into the decay, comfort, macro and zone accumulators
        2. Advance the game timer and the spawn countdown
        3. Bank event-free time toward the next difficulty level
        4. Temperature decay steps
        5. Zone rotation steps
        6. Comfort steps (plus macro heartbeat)
        7. Count down events, clean up expired ones, tick continuous effects
        8. Spawn a new event if the countdown ran out and the cap allows
        9. Resolve failure (with grace period), then the optional success rule
        """
        if state.game_status is not GameStatus.PLAYING or delta_time <= 0:
            return state

        cfg = self._config
        director = self._director
        s = copy.deepcopy(state)

        # 1. Accumulators
        decay_steps = self._decay_acc.add(delta_time)
        comfort_steps = self._comfort_acc.add(delta_time)
        macro_steps = self._macro_acc.add(delta_time)
        zone_steps = self._zone_acc.add(delta_time)

        # 2. Timers
        s.game_timer += delta_time
        s.interference_timer -= delta_time

        # 3. Difficulty, paused while anything interferes
        if not s.interference_events:
            levels, s.difficulty_timer = drain(
                s.difficulty_timer + delta_time, cfg.difficulty_interval
            )
            for _ in range(levels):
                self._raise_difficulty(s)

        # 4. Temperature decay
        for _ in range(decay_steps):
            s.current_temperature = rules.decay_temperature(
                s.current_temperature, cfg.decay_step, s.cooling_multiplier
            )

        # 5. Zone rotation
        for _ in range(zone_steps):
            old_zone = s.target_zone
            s.target_zone = rules.next_zone(old_zone)
            logger.info("Comfort zone rotated %d -> %d", old_zone, s.target_zone)
            if self._on_zone_change is not None:
                self._on_zone_change(s, old_zone, s.target_zone)

        # 6. Comfort
        for _ in range(comfort_steps):
            in_zone = rules.is_in_comfort_zone(
                s.current_temperature, s.target_zone, cfg.dead_band
            )
            s.current_comfort = rules.update_comfort(
                s.current_comfort, in_zone, cfg.comfort_step
            )
        for _ in range(macro_steps):
            logger.debug(
                "t=%.1f temp=%.3f comfort=%.3f zone=%d level=%d events=%d",
                s.game_timer,
                s.current_temperature,
                s.current_comfort,
                s.target_zone,
                s.difficulty_level,
                len(s.interference_events),
            )

        # 7. Interference upkeep
        expired = []
        for event in s.interference_events:
            event.remaining_time -= delta_time
            if event.remaining_time <= 0:
                expired.append(event)
        if expired:
            s.interference_events = [
                event for event in s.interference_events if event.remaining_time > 0
            ]
            for event in expired:
                director.expire(event.kind, s)
                self._notify_interference_end(s, event.kind)
        director.tick(s, delta_time)

        # 8. Spawn
        cap = cfg.level(s.difficulty_level).max_events
        if s.interference_timer <= 0 and len(s.interference_events) < cap:
            kind = director.pick_random_kind(exclude=director.blocked_kinds(s))
            if kind is not None:
                self._start_interference(s, kind)
            s.interference_timer = director.next_interval(s.difficulty_level)

        # 9. Win/lose
        if s.current_comfort <= 0.0:
            if s.game_timer <= cfg.grace_period:
                s.current_comfort = cfg.grace_comfort_floor
            elif not cfg.immortal:
                s.game_status = GameStatus.FAILURE
                self._notify_status(s, GameStatus.PLAYING)
                return s

        if cfg.success_hold_time is not None:
            if s.current_comfort >= 1.0:
                s.success_hold_timer += delta_time
                if s.success_hold_timer >= cfg.success_hold_time:
                    s.game_status = GameStatus.SUCCESS
                    self._notify_status(s, GameStatus.PLAYING)
            else:
                s.success_hold_timer = 0.0

        return s

    # --- Player input ---

    def apply_temp_increase(self, state: GameState) -> GameState:
        return self._apply_temp_step(state, 1.0)

    def apply_temp_decrease(self, state: GameState) -> GameState:
        return self._apply_temp_step(state, -1.0)

    def apply_center_action(self, state: GameState) -> GameState:
        """Resolve interference: pop bubbles, catch items, or clear clicks.

        Ignored while paused or after the game has ended.
        """
        if not state.game_status.accepts_input:
            return state

        cfg = self._config
        director = self._director
        s = copy.deepcopy(state)

        if s.has_active(InterferenceKind.BUBBLE_OBSTRUCTION):
            s.interference_events = [
                event
                for event in s.interference_events
                if event.kind is not InterferenceKind.BUBBLE_OBSTRUCTION
            ]
            director.deactivate(InterferenceKind.BUBBLE_OBSTRUCTION, s)
            s.current_comfort = rules.apply_comfort_delta(
                s.current_comfort, cfg.bubble_clear_bonus
            )
            s.interference_timer = director.next_interval(s.difficulty_level)
            logger.debug("Bubbles cleared, comfort now %.3f", s.current_comfort)
            self._notify_interference_end(s, InterferenceKind.BUBBLE_OBSTRUCTION)
            return s

        if s.has_active(InterferenceKind.FALLING_ITEMS):
            for obj in director.catch_falling_objects(s):
                s.current_comfort = rules.apply_comfort_delta(
                    s.current_comfort, obj.comfort_effect
                )
                logger.debug(
                    "Caught %s (%+.2f comfort)", obj.kind.value, obj.comfort_effect
                )
            return s

        cleared = {
            event.kind
            for event in s.interference_events
            if director.is_click_clearable(event.kind)
        }
        if not cleared:
            return state
        s.interference_events = [
            event for event in s.interference_events if event.kind not in cleared
        ]
        for kind in sorted(cleared, key=lambda k: k.value):
            director.deactivate(kind, s)
            self._notify_interference_end(s, kind)
        return s

    def press_left(self, state: GameState) -> GameState:
        """Left button: cooler, or warmer while controls are reversed."""
        state = self._auto_start(state)
        if state.is_controls_reversed:
            return self.apply_temp_increase(state)
        return self.apply_temp_decrease(state)

    def press_right(self, state: GameState) -> GameState:
        """Right button: warmer, or cooler while controls are reversed."""
        state = self._auto_start(state)
        if state.is_controls_reversed:
            return self.apply_temp_decrease(state)
        return self.apply_temp_increase(state)

    def press_center(self, state: GameState) -> GameState:
        return self.apply_center_action(self._auto_start(state))

    def trigger_interference(
        self, state: GameState, kind: InterferenceKind
    ) -> GameState:
        """Start a specific interference now, subject to the usual limits."""
        if state.game_status is not GameStatus.PLAYING:
            logger.warning(
                "trigger_interference ignored: status is %s", state.game_status.value
            )
            return state
        if kind in self._director.blocked_kinds(state):
            logger.warning("trigger_interference ignored: %s already active", kind.value)
            return state
        cap = self._config.level(state.difficulty_level).max_events
        if len(state.interference_events) >= cap:
            logger.warning(
                "trigger_interference ignored: %d/%d events active",
                len(state.interference_events),
                cap,
            )
            return state
        s = copy.deepcopy(state)
        self._start_interference(s, kind)
        return s

    # --- Internal ---

    def _apply_temp_step(self, state: GameState, sign: float) -> GameState:
        if not state.game_status.accepts_input:
            return state
        return replace(
            state,
            current_temperature=rules.clamp(
                state.current_temperature + sign * self._config.temperature_step
            ),
            tap_rotation=state.tap_rotation + sign * TAP_ROTATION_STEP,
            tap_animation_counter=state.tap_animation_counter + 1,
        )

    def _auto_start(self, state: GameState) -> GameState:
        if state.game_status is GameStatus.READY:
            return self.start_game(state)
        return state

    def _accumulators(self) -> dict[str, Accumulator]:
        return {
            "decay": self._decay_acc,
            "comfort": self._comfort_acc,
            "macro": self._macro_acc,
            "zone": self._zone_acc,
        }

    def _reset_accumulators(self) -> None:
        self._decay_acc.reset()
        self._comfort_acc.reset()
        self._macro_acc.reset()
        self._zone_acc.reset()

    def _raise_difficulty(self, s: GameState) -> None:
        max_level = self._config.max_level
        if s.difficulty_level < max_level:
            s.difficulty_level += 1
            logger.info("Difficulty increased to level %d", s.difficulty_level)
        s.interference_timer = self._director.next_interval(s.difficulty_level)

    def _start_interference(self, s: GameState, kind: InterferenceKind) -> None:
        s.interference_events.append(self._director.create_event(kind))
        self._director.activate(kind, s)
        logger.info(
            "Interference started: %s (%d active)", kind.value, len(s.interference_events)
        )
        if self._on_interference_start is not None:
            self._on_interference_start(s, kind)

    def _notify_interference_end(self, s: GameState, kind: InterferenceKind) -> None:
        logger.info("Interference ended: %s", kind.value)
        if self._on_interference_end is not None:
            self._on_interference_end(s, kind)

    def _notify_status(self, s: GameState, old: GameStatus) -> None:
        logger.info("Game status %s -> %s", old.value, s.game_status.value)
        if self._on_status_change is not None:
            self._on_status_change(s, old, s.game_status)
