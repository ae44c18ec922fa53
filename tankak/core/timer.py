"""Countdown for fixed-duration tests, independent of any event loop."""

from __future__ import annotations

from typing import Optional


class CountdownTimer:
    """Whole-second countdown advanced by :meth:`tick`.

    Whatever schedules the ticks (a ``QTimer``, a test loop) must call
    ``tick()`` once per second while :attr:`is_active` and stop scheduling
    when it returns ``True`` or the timer is stopped or reset.
    """

    def __init__(self, duration: int) -> None:
        if duration < 0:
            raise ValueError(f"duration must be non-negative, got {duration}")
        self._duration = int(duration)
        self._time_remaining = self._duration
        self._is_active = False
        self._is_complete = False

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def time_remaining(self) -> int:
        return self._time_remaining

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def is_complete(self) -> bool:
        return self._is_complete

    @property
    def elapsed(self) -> int:
        return self._duration - self._time_remaining

    def start(self) -> None:
        self._time_remaining = self._duration
        self._is_active = True
        self._is_complete = False

    def stop(self) -> None:
        """Pause without completing."""
        self._is_active = False

    def reset(self, duration: Optional[int] = None) -> None:
        """Restore the full duration (optionally a new one) and go idle."""
        if duration is not None:
            if duration < 0:
                raise ValueError(f"duration must be non-negative, got {duration}")
            self._duration = int(duration)
        self._time_remaining = self._duration
        self._is_active = False
        self._is_complete = False

    def tick(self) -> bool:
        """Advance one second. Returns True only on the tick that finishes."""
        if not self._is_active or self._is_complete:
            return False
        if self._time_remaining <= 1:
            self._time_remaining = 0
            self._is_active = False
            self._is_complete = True
            return True
        self._time_remaining -= 1
        return False
