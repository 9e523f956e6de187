"""Snapshot and restore a GameState as JSON-compatible data."""
from __future__ import annotations

from dataclasses import asdict, fields
from typing import Any

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

_SNAPSHOT_VERSION = 1

_LIST_FIELDS = ("interference_events", "bubble_field", "falling_objects", "wind_field")


def snapshot(state: GameState) -> dict[str, Any]:
    """Serialize a state. Enum members become their string values."""
    data = asdict(state)
    data["game_status"] = state.game_status.value
    for event in data["interference_events"]:
        event["kind"] = event["kind"].value
    for obj in data["falling_objects"]:
        obj["kind"] = obj["kind"].value
    for puff in data["wind_field"]:
        puff["direction"] = puff["direction"].value
        puff["phase"] = puff["phase"].value
    return {"version": _SNAPSHOT_VERSION, "state": data}


def restore(data: dict[str, Any]) -> GameState:
    version = data.get("version")
    if version != _SNAPSHOT_VERSION:
        raise SnapshotError(
            f"Unsupported snapshot version {version!r}, expected {_SNAPSHOT_VERSION}"
        )

    try:
        raw = dict(data["state"])
        events = [
            InterferenceEvent(
                kind=InterferenceKind(e["kind"]),
                remaining_time=e["remaining_time"],
                duration=e["duration"],
            )
            for e in raw["interference_events"]
        ]
        objects = [
            FallingObject(**{**o, "kind": FallingItemKind(o["kind"])})
            for o in raw["falling_objects"]
        ]
        puffs = [
            WindPuff(
                **{
                    **p,
                    "direction": WindDirection(p["direction"]),
                    "phase": WindPhase(p["phase"]),
                }
            )
            for p in raw["wind_field"]
        ]
        status = GameStatus(raw["game_status"])
    except KeyError as exc:
        raise SnapshotError(f"Snapshot is missing field {exc}") from exc
    except ValueError as exc:
        raise SnapshotError(f"Invalid snapshot value: {exc}") from exc

    known = {f.name for f in fields(GameState)}
    scalars = {k: v for k, v in raw.items() if k in known and k not in _LIST_FIELDS}
    scalars["game_status"] = status
    return GameState(
        **scalars,
        interference_events=events,
        bubble_field=[Bubble(**b) for b in raw["bubble_field"]],
        falling_objects=objects,
        wind_field=puffs,
    )


def serialize_rng_state(state: tuple[int, tuple[int, ...], float | None]) -> list[Any]:
    """Convert Random.getstate() to a JSON-compatible list."""
    version, internalstate, gauss_next = state
    return [version, list(internalstate), gauss_next]


def deserialize_rng_state(data: list[Any]) -> tuple[int, tuple[int, ...], float | None]:
    """Convert a JSON list back to a Random.setstate() tuple."""
    version, internalstate, gauss_next = data
    return (version, tuple(internalstate), gauss_next)
