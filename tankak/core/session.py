from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from tankak.core.metrics import TypingMetrics

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    ENDED = "ended"


@dataclass
class SessionRecord:
    """Outcome of one finished attempt, as handed to progress tracking."""

    session_id: str
    lesson_id: str
    start_time: float
    end_time: float
    metrics: TypingMetrics
    passed: bool


class TypingSession:
    """Lifecycle of one attempt at a lesson: idle, running, ended.

    Pass/fail is decided by the caller and handed to :meth:`end`; the session
    only records it. Calling :meth:`start` while running restarts the attempt.
    """

    def __init__(self, lesson_id: str, clock: Callable[[], float] = time.time) -> None:
        self._lesson_id = lesson_id
        self._clock = clock
        self._session_id = self._new_session_id()
        self._start_time: Optional[float] = None
        self._end_time: Optional[float] = None
        self._metrics: Optional[TypingMetrics] = None
        self._passed = False

    @staticmethod
    def _new_session_id() -> str:
        return f"session-{uuid.uuid4().hex}"

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def lesson_id(self) -> str:
        return self._lesson_id

    @property
    def start_time(self) -> Optional[float]:
        return self._start_time

    @property
    def end_time(self) -> Optional[float]:
        return self._end_time

    @property
    def metrics(self) -> Optional[TypingMetrics]:
        return self._metrics

    @property
    def passed(self) -> bool:
        return self._passed

    @property
    def state(self) -> SessionState:
        if self._start_time is None:
            return SessionState.IDLE
        if self._end_time is None:
            return SessionState.RUNNING
        return SessionState.ENDED

    def start(self) -> None:
        """Begin (or restart) the attempt with a fresh start time."""
        if self.state is SessionState.RUNNING:
            logger.debug("Restarting running session %s", self._session_id)
        self._start_time = self._clock()
        self._end_time = None
        self._metrics = None
        self._passed = False

    def end(self, metrics: TypingMetrics, passed: bool = False) -> Optional[SessionRecord]:
        """Finish a running attempt and return its record.

        Returns ``None`` (and changes nothing) unless the session is running.
        """
        if self.state is not SessionState.RUNNING:
            logger.debug("Ignoring end() for session %s in state %s", self._session_id, self.state.value)
            return None
        self._end_time = self._clock()
        self._metrics = metrics
        self._passed = passed
        return SessionRecord(
            session_id=self._session_id,
            lesson_id=self._lesson_id,
            start_time=self._start_time,
            end_time=self._end_time,
            metrics=metrics,
            passed=passed,
        )

    def reset(self) -> None:
        """Discard the attempt and return to idle."""
        self._start_time = None
        self._end_time = None
        self._metrics = None
        self._passed = False
