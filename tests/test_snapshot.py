"""Tests for snapshot/restore of game state."""

import json

import pytest
from tick_bath import BathConfig, BathGame, GameStatus, InterferenceKind, SnapshotError
from tick_bath import restore, snapshot


def _busy_state():
    game = BathGame(BathConfig(immortal=True), seed=5)
    state = game.start_game(game.create_initial_state())
    state.difficulty_level = 3
    for kind in (InterferenceKind.BUBBLE_OBSTRUCTION, InterferenceKind.COLD_WIND):
        state = game.trigger_interference(state, kind)
    for _ in range(10):
        state = game.advance(state, 0.1)
    return game, state


class TestSnapshot:
    def test_survives_json(self) -> None:
        _, state = _busy_state()
        data = json.loads(json.dumps(snapshot(state)))
        restored = restore(data)
        assert restored == state
        assert restored.game_status is GameStatus.PLAYING

    def test_restored_state_keeps_playing(self) -> None:
        game, state = _busy_state()
        restored = restore(json.loads(json.dumps(snapshot(state))))
        after = game.advance(restored, 0.1)
        assert after.game_timer == pytest.approx(state.game_timer + 0.1)
        assert after.has_active(InterferenceKind.BUBBLE_OBSTRUCTION)

    def test_wrong_version_raises(self) -> None:
        _, state = _busy_state()
        data = snapshot(state)
        data["version"] = 99
        with pytest.raises(SnapshotError, match="version"):
            restore(data)

    def test_bad_enum_value_raises(self) -> None:
        _, state = _busy_state()
        data = snapshot(state)
        data["state"]["game_status"] = "sleeping"
        with pytest.raises(SnapshotError, match="Invalid"):
            restore(data)

    def test_missing_field_raises(self) -> None:
        _, state = _busy_state()
        data = snapshot(state)
        del data["state"]["wind_field"]
        with pytest.raises(SnapshotError, match="missing"):
            restore(data)


def _play(game: BathGame, state, seconds: float, dt: float = 0.05):
    for _ in range(round(seconds / dt)):
        state = game.advance(state, dt)
    return state


class TestGameSnapshot:
    def _config(self) -> BathConfig:
        return BathConfig(immortal=True, difficulty_interval=5.0)

    def test_restored_game_continues_identically(self) -> None:
        game = BathGame(self._config(), seed=8)
        state = game.start_game(game.create_initial_state())
        state = _play(game, state, 14.9)
        data = json.loads(json.dumps(game.snapshot(state)))

        expected = _play(game, state, 0.2)
        assert expected.target_zone == 2

        other = BathGame(self._config(), seed=999)
        resumed = _play(other, other.restore(data), 0.2)
        assert resumed == expected
        assert other.seed == 8

    def test_rng_restored_for_later_spawns(self) -> None:
        game = BathGame(self._config(), seed=3)
        state = game.start_game(game.create_initial_state())
        state = _play(game, state, 20.0)
        data = game.snapshot(state)

        expected = _play(game, state, 30.0)
        other = BathGame(self._config(), seed=4)
        assert _play(other, other.restore(data), 30.0) == expected

    def test_wrong_version_raises(self) -> None:
        game = BathGame(self._config(), seed=1)
        data = game.snapshot(game.create_initial_state())
        data["version"] = 2
        with pytest.raises(SnapshotError, match="version"):
            game.restore(data)

    def test_missing_rng_state_raises(self) -> None:
        game = BathGame(self._config(), seed=1)
        data = game.snapshot(game.create_initial_state())
        del data["rng_state"]
        with pytest.raises(SnapshotError, match="missing"):
            game.restore(data)

    def test_unknown_accumulator_raises(self) -> None:
        game = BathGame(self._config(), seed=1)
        data = game.snapshot(game.create_initial_state())
        data["accumulators"]["tide"] = {"banked": 0.0, "fired": 0}
        with pytest.raises(SnapshotError, match="Accumulator mismatch"):
            game.restore(data)

    def test_failed_restore_leaves_game_untouched(self) -> None:
        game = BathGame(self._config(), seed=1)
        state = game.start_game(game.create_initial_state())
        state = game.advance(state, 0.5)
        banked = game._zone_acc.banked
        data = game.snapshot(state)
        data["accumulators"]["zone"]["banked"] = -1.0
        with pytest.raises(SnapshotError, match="Invalid"):
            game.restore(data)
        assert game._zone_acc.banked == banked
        assert game.seed == 1
