from __future__ import annotations
from datetime import datetime, timedelta, timezone as dt_tz
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(dt_tz.utc)


class FrozenClock:
    """Manually advanced clock. Used by tests and by scripted replays of a game."""

    def __init__(self, start: datetime):
        if start.tzinfo is None:
            raise ValueError("FrozenClock needs a timezone-aware start")
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> datetime:
        self._now = self._now + timedelta(**kwargs)
        return self._now

    def set(self, when: datetime) -> None:
        self._now = when


_system_clock = SystemClock()

def get_clock() -> Clock:
    # FastAPI dependency; tests swap it through app.dependency_overrides
    return _system_clock
