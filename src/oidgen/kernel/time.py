"""
Clocks for identifier generation

ObjectIds only carry whole seconds, so everything here ends up as an
integer epoch value via ``to_epoch_seconds``. The generator reads the clock
through a ``TimeProvider`` so tests can freeze the timestamp field.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol


class TimeProvider(Protocol):
    def now(self) -> datetime:
        """Current time as an aware UTC datetime"""
        ...


class RealTimeProvider:
    """System clock"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class TestTimeProvider:
    """
    Frozen clock that only moves when told to

    Starts at the Unix epoch unless given a start time. Moving it forward
    one second is enough to change the timestamp field of the next id.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, initial_time: datetime | None = None) -> None:
        self._current_time = initial_time or datetime(1970, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._current_time

    def set_time(self, dt: datetime) -> None:
        self._current_time = dt

    def advance_seconds(self, seconds: int) -> None:
        self._current_time += timedelta(seconds=seconds)


def to_epoch_seconds(value: datetime | int | float) -> int:
    """
    Convert a point in time to whole seconds since the Unix epoch

    Naive datetimes are interpreted as UTC. Fractions are truncated.

    Args:
        value: datetime or numeric seconds

    Returns:
        Integer seconds since 1970-01-01T00:00:00Z
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())
    return int(value)


# Used by a Generator built without an explicit clock
default_time_provider: TimeProvider = RealTimeProvider()
