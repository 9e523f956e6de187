"""Accumulator for turning variable frame deltas into fixed sub-steps."""

_EPSILON = 1e-9


def drain(banked: float, interval: float) -> tuple[int, float]:
    """Split banked time into (whole intervals, remainder).

    Tolerates float drift so that e.g. 150 x 0.1 completes 15.0 exactly once.
    """
    count = 0
    while banked >= interval - _EPSILON:
        banked -= interval
        count += 1
    return count, max(banked, 0.0)


class Accumulator:
    def __init__(self, interval: float) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._interval = interval
        self._banked = 0.0
        self._fired = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def banked(self) -> float:
        return self._banked

    @property
    def fired(self) -> int:
        return self._fired

    def add(self, dt: float) -> int:
        """Bank dt and return how many whole intervals completed."""
        count, self._banked = drain(self._banked + dt, self._interval)
        self._fired += count
        return count

    def reset(self) -> None:
        self._banked = 0.0
        self._fired = 0

    def restore(self, banked: float, fired: int = 0) -> None:
        if banked < 0:
            raise ValueError("banked time must not be negative")
        self._banked = banked
        self._fired = fired
