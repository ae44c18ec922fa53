"""Runs one lesson attempt: input gating, auto start/finish, pass/fail and progress."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from tankak.core.content_filter import ContentFilter, default_filter
from tankak.core.layout import KeyboardLayout
from tankak.core.lessons import Lesson
from tankak.core.metrics import TypingMetrics, calculate_metrics, smart_suggestions
from tankak.core.progress import ProgressTracker
from tankak.core.session import SessionState, TypingSession
from tankak.core.timer import CountdownTimer
from tankak.core.transliteration import resolve_key_symbol, transliterate_key

logger = logging.getLogger(__name__)


class PracticeMode(Enum):
    LESSON = "lesson"
    ONE_MINUTE = "1min"
    THREE_MINUTES = "3min"
    FIVE_MINUTES = "5min"

    @property
    def duration(self) -> int:
        return MODE_DURATIONS[self]

    @property
    def is_timed(self) -> bool:
        return self is not PracticeMode.LESSON


MODE_DURATIONS = {
    PracticeMode.LESSON: 300,
    PracticeMode.ONE_MINUTE: 60,
    PracticeMode.THREE_MINUTES: 180,
    PracticeMode.FIVE_MINUTES: 300,
}

# Keys that never produce text; the widget handles them itself.
IGNORED_KEYS = frozenset(
    {
        "Enter",
        "Tab",
        "ArrowUp",
        "ArrowDown",
        "ArrowLeft",
        "ArrowRight",
        "Home",
        "End",
        "Control",
        "Shift",
        "Alt",
        "Meta",
        "CapsLock",
        "Escape",
    }
)


@dataclass(frozen=True)
class LessonResult:
    lesson_id: str
    metrics: TypingMetrics
    passed: bool
    timestamp: datetime

    @property
    def suggestions(self) -> List[str]:
        return smart_suggestions(self.metrics.wpm, self.metrics.accuracy)


@dataclass(frozen=True)
class InputOutcome:
    """What happened to one edit: the text now in the box and any warning."""

    accepted: bool
    text: str
    warning: str = ""
    result: Optional[LessonResult] = field(default=None)


class PracticeController:
    """Owns the state of one practice view.

    Input is checked against the content filter before it is accepted. The
    attempt starts on the first accepted character and finishes when the
    typed text reaches the target length, when a timed test runs out, or on
    :meth:`complete`. Pass/fail uses the lesson's thresholds and every
    finished attempt is recorded in the progress tracker.
    """

    def __init__(
        self,
        lesson: Lesson,
        mode: PracticeMode = PracticeMode.LESSON,
        tracker: Optional[ProgressTracker] = None,
        layout: Optional[KeyboardLayout] = None,
        content_filter: Optional[ContentFilter] = None,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._tracker = tracker if tracker is not None else ProgressTracker()
        self._layout = layout
        self._filter = content_filter or default_filter()
        self._clock = clock
        self._rng = rng or random.Random()
        self._mode = mode
        self._timer = CountdownTimer(mode.duration)
        self._lesson = lesson
        self._session = TypingSession(lesson.key, clock=clock)
        self._target_text = ""
        self._typed_text = ""
        self._result: Optional[LessonResult] = None
        self.load_lesson(lesson)

    @property
    def lesson(self) -> Lesson:
        return self._lesson

    @property
    def mode(self) -> PracticeMode:
        return self._mode

    @property
    def layout(self) -> Optional[KeyboardLayout]:
        return self._layout

    @property
    def target_text(self) -> str:
        return self._target_text

    @property
    def typed_text(self) -> str:
        return self._typed_text

    @property
    def session(self) -> TypingSession:
        return self._session

    @property
    def timer(self) -> CountdownTimer:
        return self._timer

    @property
    def tracker(self) -> ProgressTracker:
        return self._tracker

    @property
    def result(self) -> Optional[LessonResult]:
        return self._result

    @property
    def is_active(self) -> bool:
        return self._session.state is SessionState.RUNNING

    def load_lesson(self, lesson: Lesson, text: Optional[str] = None) -> None:
        """Switch to *lesson* with *text* or a randomly chosen one of its texts."""
        self._lesson = lesson
        self._session = TypingSession(lesson.key, clock=self._clock)
        self._target_text = text if text is not None else self._rng.choice(lesson.texts)
        self.reset()

    def set_mode(self, mode: PracticeMode) -> None:
        self._mode = mode
        self.reset()

    def set_layout(self, layout: Optional[KeyboardLayout]) -> None:
        self._layout = layout
        self.reset()

    def reset(self) -> None:
        """Clear the typed text and the attempt, keeping lesson and mode."""
        self._typed_text = ""
        self._result = None
        self._session.reset()
        self._timer.reset(self._mode.duration)

    def start(self) -> None:
        self._session.start()
        if self._mode.is_timed:
            self._timer.start()
        logger.debug("Started %s attempt at %s", self._mode.value, self._lesson.key)

    def current_metrics(self, now: Optional[float] = None) -> TypingMetrics:
        if self._result is not None:
            return self._result.metrics
        return calculate_metrics(
            self._target_text,
            self._typed_text,
            self._session.start_time,
            now if now is not None else self._clock(),
        )

    def handle_key(self, key: str, shift: bool = False, code: Optional[str] = None) -> InputOutcome:
        """Apply one key press, transliterating it when a layout is set."""
        if key in IGNORED_KEYS:
            return InputOutcome(accepted=False, text=self._typed_text)
        if key in ("Backspace", "Delete"):
            if not self._typed_text:
                return InputOutcome(accepted=False, text=self._typed_text)
            return self.handle_text(self._typed_text[:-1])

        if self._layout is not None and resolve_key_symbol(key, code, self._layout) is not None:
            produced = transliterate_key(key, shift, code, self._layout)
        elif len(key) == 1:
            produced = key
        else:
            # named keys such as F5 or PageUp
            return InputOutcome(accepted=False, text=self._typed_text)
        return self.handle_text(self._typed_text + produced)

    def handle_text(self, value: str) -> InputOutcome:
        """Replace the typed text with *value* if it passes the content filter."""
        if self._result is not None:
            return InputOutcome(accepted=False, text=self._typed_text, result=self._result)

        validation = self._filter.validate_typing_input(value)
        if not validation.is_valid:
            return InputOutcome(accepted=False, text=self._typed_text, warning=validation.warning)

        self._typed_text = value
        if self._session.state is SessionState.IDLE and value:
            self.start()

        result = None
        if self._target_text and len(value) >= len(self._target_text):
            result = self.complete()
        return InputOutcome(accepted=True, text=self._typed_text, result=result)

    def tick(self) -> Optional[LessonResult]:
        """Advance the countdown one second; finishes the attempt when time runs out."""
        if self._timer.tick():
            logger.debug("Time is up for %s", self._lesson.key)
            return self.complete()
        return None

    def complete(self) -> Optional[LessonResult]:
        """Finish the running attempt, score it and record progress."""
        if self._session.state is not SessionState.RUNNING:
            return None
        if self._mode.is_timed:
            self._timer.stop()

        metrics = self.current_metrics()
        passed = self._lesson.passes(metrics)
        self._session.end(metrics, passed)
        self._tracker.update_progress(self._lesson.key, metrics.wpm, metrics.accuracy, passed)
        self._result = LessonResult(
            lesson_id=self._lesson.key,
            metrics=metrics,
            passed=passed,
            timestamp=datetime.now(),
        )
        logger.info(
            "Finished %s: %d WPM, %d%% accuracy, %s",
            self._lesson.key,
            metrics.wpm,
            metrics.accuracy,
            "passed" if passed else "not passed",
        )
        return self._result
