"""Tests for InterferenceDirector activation, upkeep and cleanup per kind."""
from __future__ import annotations

import math
import random

import pytest
from tick_bath.config import BathConfig
from tick_bath.director import MAX_WIND_PUFFS, MIN_WIND_PUFFS, InterferenceDirector
from tick_bath.types import GameState, InterferenceKind


def _setup(seed: int = 42) -> tuple[InterferenceDirector, GameState, BathConfig]:
    config = BathConfig()
    director = InterferenceDirector(config, random.Random(seed))
    state = GameState(current_temperature=0.5, target_zone=1, current_comfort=0.5)
    return director, state, config


def _start(director: InterferenceDirector, state: GameState, kind: InterferenceKind) -> None:
    state.interference_events.append(director.create_event(kind))
    director.activate(kind, state)


def _stop_one(director: InterferenceDirector, state: GameState, kind: InterferenceKind) -> None:
    for i, event in enumerate(state.interference_events):
        if event.kind is kind:
            del state.interference_events[i]
            break
    director.expire(kind, state)


class TestPolicies:
    def test_durations(self) -> None:
        director, _, config = _setup()
        assert director.create_event(InterferenceKind.CONTROLS_REVERSED).remaining_time == 5.0
        assert director.create_event(InterferenceKind.FALLING_ITEMS).remaining_time == 10.0
        assert director.create_event(InterferenceKind.ELECTRIC_LEAKAGE).remaining_time == 8.0
        assert director.create_event(InterferenceKind.COLD_WIND).remaining_time == 8.0
        bubbles = director.create_event(InterferenceKind.BUBBLE_OBSTRUCTION)
        assert math.isinf(bubbles.remaining_time)
        assert bubbles.is_indefinite

    def test_click_clearable_kinds(self) -> None:
        director, _, _ = _setup()
        clearable = {k for k in InterferenceKind if director.is_click_clearable(k)}
        assert clearable == {
            InterferenceKind.CONTROLS_REVERSED,
            InterferenceKind.ELECTRIC_LEAKAGE,
        }

    def test_every_kind_has_a_policy(self) -> None:
        director, _, _ = _setup()
        for kind in InterferenceKind:
            assert director.policy(kind).duration > 0


class TestPicking:
    def test_pick_covers_all_kinds(self) -> None:
        director, _, _ = _setup()
        seen = {director.pick_random_kind() for _ in range(300)}
        assert seen == set(InterferenceKind)

    def test_pick_respects_exclude(self) -> None:
        director, _, _ = _setup()
        keep = InterferenceKind.COLD_WIND
        exclude = [k for k in InterferenceKind if k is not keep]
        for _ in range(20):
            assert director.pick_random_kind(exclude=exclude) is keep

    def test_pick_with_everything_excluded(self) -> None:
        director, _, _ = _setup()
        assert director.pick_random_kind(exclude=list(InterferenceKind)) is None

    def test_next_interval_uses_level_range(self) -> None:
        director, _, config = _setup()
        for level in range(1, config.max_level + 1):
            tier = config.level(level)
            for _ in range(50):
                assert tier.min_interval <= director.next_interval(level) <= tier.max_interval

    def test_next_interval_clamps_out_of_range_level(self) -> None:
        director, _, config = _setup()
        top = config.level(config.max_level)
        for _ in range(50):
            assert top.min_interval <= director.next_interval(99) <= top.max_interval

    def test_bubbles_block_themselves(self) -> None:
        director, state, _ = _setup()
        assert director.blocked_kinds(state) == set()
        _start(director, state, InterferenceKind.BUBBLE_OBSTRUCTION)
        assert director.blocked_kinds(state) == {InterferenceKind.BUBBLE_OBSTRUCTION}


class TestControlsReversed:
    def test_activate_and_expire(self) -> None:
        director, state, _ = _setup()
        _start(director, state, InterferenceKind.CONTROLS_REVERSED)
        assert state.is_controls_reversed
        _stop_one(director, state, InterferenceKind.CONTROLS_REVERSED)
        assert not state.is_controls_reversed

    def test_flag_held_while_another_instance_remains(self) -> None:
        director, state, _ = _setup()
        _start(director, state, InterferenceKind.CONTROLS_REVERSED)
        _start(director, state, InterferenceKind.CONTROLS_REVERSED)
        _stop_one(director, state, InterferenceKind.CONTROLS_REVERSED)
        assert state.is_controls_reversed
        _stop_one(director, state, InterferenceKind.CONTROLS_REVERSED)
        assert not state.is_controls_reversed


class TestElectricLeakage:
    def test_activation_sets_offset_and_timer(self) -> None:
        director, state, config = _setup()
        _start(director, state, InterferenceKind.ELECTRIC_LEAKAGE)
        assert -0.1 <= state.temperature_offset <= 0.1
        assert state.electric_refresh_timer == config.electric_refresh_interval

    def test_offset_refreshes_every_second(self) -> None:
        director, state, _ = _setup()
        _start(director, state, InterferenceKind.ELECTRIC_LEAKAGE)
        director.tick(state, 0.5)
        assert state.electric_refresh_timer == pytest.approx(0.5)
        director.tick(state, 0.6)
        assert state.electric_refresh_timer == pytest.approx(0.9)
        assert -0.1 <= state.temperature_offset <= 0.1

    def test_expire_zeroes_offset(self) -> None:
        director, state, _ = _setup()
        _start(director, state, InterferenceKind.ELECTRIC_LEAKAGE)
        _stop_one(director, state, InterferenceKind.ELECTRIC_LEAKAGE)
        assert state.temperature_offset == 0.0


class TestBubbles:
    def test_field_size_and_placement(self) -> None:
        for seed in range(10):
            director, state, config = _setup(seed)
            _start(director, state, InterferenceKind.BUBBLE_OBSTRUCTION)
            bubbles = state.bubble_field
            assert 5 <= len(bubbles) <= 8
            assert len({b.id for b in bubbles}) == len(bubbles)
            for b in bubbles:
                assert b.y < 0
                assert b.size / 2 <= b.x <= config.playfield_width - b.size / 2
                assert 0.6 <= b.opacity <= 1.0

    def test_bubbles_move_while_active(self) -> None:
        director, state, _ = _setup()
        _start(director, state, InterferenceKind.BUBBLE_OBSTRUCTION)
        before = [b.y for b in state.bubble_field]
        director.tick(state, 0.1)
        after = [b.y for b in state.bubble_field]
        assert after != before

    def test_expire_clears_field(self) -> None:
        director, state, _ = _setup()
        _start(director, state, InterferenceKind.BUBBLE_OBSTRUCTION)
        _stop_one(director, state, InterferenceKind.BUBBLE_OBSTRUCTION)
        assert state.bubble_field == []


class TestFallingItems:
    def test_spawn_timer_armed(self) -> None:
        director, state, _ = _setup()
        _start(director, state, InterferenceKind.FALLING_ITEMS)
        assert 1.5 <= state.falling_spawn_timer <= 3.0

    def test_items_spawn_inside_board(self) -> None:
        director, state, config = _setup()
        _start(director, state, InterferenceKind.FALLING_ITEMS)
        for _ in range(160):
            director.tick(state, 0.02)
        assert state.falling_objects
        for obj in state.falling_objects:
            assert 0 <= obj.x <= config.playfield_width - 60

    def test_items_finish_falling_after_event_ends(self) -> None:
        director, state, _ = _setup()
        _start(director, state, InterferenceKind.FALLING_ITEMS)
        for _ in range(160):
            director.tick(state, 0.02)
        _stop_one(director, state, InterferenceKind.FALLING_ITEMS)
        assert state.falling_objects  # not cleared on expiry

        ids = {obj.id for obj in state.falling_objects}
        director.tick(state, 0.1)
        assert {obj.id for obj in state.falling_objects} <= ids  # no new spawns
        for _ in range(40):
            director.tick(state, 0.1)
        assert state.falling_objects == []

    def test_catch_removes_only_items_in_band(self) -> None:
        director, state, _ = _setup()
        low = director.spawn_falling_object(state)
        high = director.spawn_falling_object(state)
        low.y = 500.0
        high.y = 100.0
        state.falling_objects = [low, high]
        caught = director.catch_falling_objects(state)
        assert caught == [low]
        assert state.falling_objects == [high]


class TestColdWind:
    def test_activation_seeds_puffs_and_multiplier(self) -> None:
        director, state, config = _setup()
        _start(director, state, InterferenceKind.COLD_WIND)
        assert 2 <= len(state.wind_field) <= 4
        assert state.cooling_multiplier == config.cold_wind_multiplier

    def test_puff_count_stays_in_band(self) -> None:
        director, state, _ = _setup(7)
        _start(director, state, InterferenceKind.COLD_WIND)
        for _ in range(60 * 30):
            director.tick(state, 1 / 60)
            assert MIN_WIND_PUFFS <= len(state.wind_field) <= MAX_WIND_PUFFS

    def test_expire_clears_wind(self) -> None:
        director, state, _ = _setup()
        _start(director, state, InterferenceKind.COLD_WIND)
        _stop_one(director, state, InterferenceKind.COLD_WIND)
        assert state.wind_field == []
        assert state.cooling_multiplier == 1.0
