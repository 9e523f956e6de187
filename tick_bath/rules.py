"""Pure temperature and comfort rules."""
from __future__ import annotations

ZONE_COUNT = 4
_ZONE_WIDTH = 1.0 / ZONE_COUNT


def clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


def zone_bounds(zone_index: int) -> tuple[float, float]:
    """Return the [min, max] quartile for a zone index (wrapped mod 4)."""
    index = zone_index % ZONE_COUNT
    return index * _ZONE_WIDTH, (index + 1) * _ZONE_WIDTH


def zone_center(zone_index: int) -> float:
    lo, hi = zone_bounds(zone_index)
    return (lo + hi) / 2.0


def next_zone(zone_index: int) -> int:
    return (zone_index + 1) % ZONE_COUNT


def is_in_comfort_zone(
    temperature: float, zone_index: int, dead_band: float = 0.08
) -> bool:
    """Strictly inside the zone's quartile and clear of both edge dead bands."""
    lo, hi = zone_bounds(zone_index)
    if not lo < temperature < hi:
        return False
    return dead_band < temperature < 1.0 - dead_band


def decay_temperature(temperature: float, step: float, multiplier: float = 1.0) -> float:
    return clamp(temperature - step * multiplier)


def apply_comfort_delta(comfort: float, delta: float) -> float:
    return clamp(comfort + delta)


def update_comfort(comfort: float, in_zone: bool, step: float) -> float:
    return apply_comfort_delta(comfort, step if in_zone else -step)
