"""Tests for tankak.core.practice – running a lesson attempt end to end."""

from __future__ import annotations

import random

import pytest

from tankak.core.layout import get_layout
from tankak.core.lessons import Lesson
from tankak.core.metrics import TypingMetrics
from tankak.core.practice import MODE_DURATIONS, PracticeController, PracticeMode
from tankak.core.progress import ProgressTracker
from tankak.core.session import SessionState


def _lesson(text: str = "the cat sat", key: str = "lesson1", min_wpm: int = 10, min_accuracy: int = 90) -> Lesson:
    return Lesson(
        key=key, title="Test", language="english", level="beginner",
        texts=(text,), min_wpm=min_wpm, min_accuracy=min_accuracy,
    )


@pytest.fixture()
def controller(clock) -> PracticeController:
    return PracticeController(_lesson(), clock=clock)


# ---------------------------------------------------------------------------
# PracticeMode
# ---------------------------------------------------------------------------

class TestPracticeMode:
    def test_durations(self):
        assert MODE_DURATIONS == {
            PracticeMode.LESSON: 300,
            PracticeMode.ONE_MINUTE: 60,
            PracticeMode.THREE_MINUTES: 180,
            PracticeMode.FIVE_MINUTES: 300,
        }

    def test_only_lesson_is_untimed(self):
        assert not PracticeMode.LESSON.is_timed
        assert PracticeMode.ONE_MINUTE.is_timed

    def test_values(self):
        assert PracticeMode("3min") is PracticeMode.THREE_MINUTES


# ---------------------------------------------------------------------------
# initial state
# ---------------------------------------------------------------------------

class TestInitialState:
    def test_target_and_idle(self, controller: PracticeController):
        assert controller.target_text == "the cat sat"
        assert controller.typed_text == ""
        assert not controller.is_active
        assert controller.result is None

    def test_metrics_zero_before_start(self, controller: PracticeController):
        assert controller.current_metrics() == TypingMetrics()

    def test_complete_when_idle(self, controller: PracticeController):
        assert controller.complete() is None
        assert len(controller.tracker) == 0

    def test_random_text_choice(self, clock):
        lesson = Lesson("l", "T", "english", "beginner", ("one", "two", "three"), 0, 0)
        c = PracticeController(lesson, clock=clock, rng=random.Random(3))
        assert c.target_text in lesson.texts

    def test_explicit_text(self, controller: PracticeController):
        controller.load_lesson(_lesson("abc"), text="custom")
        assert controller.target_text == "custom"
        assert controller.lesson.key == "lesson1"


# ---------------------------------------------------------------------------
# handle_text – plain input
# ---------------------------------------------------------------------------

class TestHandleText:
    def test_first_input_starts_attempt(self, controller: PracticeController, clock):
        outcome = controller.handle_text("t")
        assert outcome.accepted
        assert controller.is_active
        assert controller.session.start_time == clock.now

    def test_empty_input_does_not_start(self, controller: PracticeController):
        controller.handle_text("")
        assert controller.session.state is SessionState.IDLE

    def test_live_metrics(self, controller: PracticeController, clock):
        controller.handle_text("t")
        clock.advance(6)
        controller.handle_text("the cat")
        m = controller.current_metrics()
        assert m.correct_chars == 7
        assert m.wpm == 20

    def test_finishes_at_target_length(self, controller: PracticeController, clock):
        controller.handle_text("t")
        clock.advance(6)
        outcome = controller.handle_text("the cat sit")
        result = outcome.result
        assert result is not None
        assert result.lesson_id == "lesson1"
        assert result.metrics.wpm == 30
        assert result.metrics.accuracy == 91
        assert result.passed is True
        assert controller.session.state is SessionState.ENDED
        assert controller.session.passed is True

    def test_progress_recorded(self, controller: PracticeController, clock):
        controller.handle_text("t")
        clock.advance(6)
        controller.handle_text("the cat sit")
        lp = controller.tracker.get_lesson_progress("lesson1")
        assert (lp.attempts, lp.best_wpm, lp.best_accuracy, lp.completed) == (1, 30, 91, True)

    def test_failing_attempt(self, clock):
        c = PracticeController(_lesson(min_accuracy=95), clock=clock)
        c.handle_text("t")
        clock.advance(6)
        result = c.handle_text("the cat sit").result
        assert result.passed is False
        assert c.tracker.get_lesson_progress("lesson1").completed is False

    def test_input_after_finish_ignored(self, controller: PracticeController):
        controller.handle_text("the cat sat")
        outcome = controller.handle_text("the cat sat!")
        assert not outcome.accepted
        assert controller.typed_text == "the cat sat"
        assert outcome.result is controller.result

    def test_blocked_input_keeps_previous_text(self, controller: PracticeController):
        controller.handle_text("the")
        outcome = controller.handle_text("the shit")
        assert not outcome.accepted
        assert outcome.text == "the"
        assert outcome.warning.endswith("shit")
        assert controller.typed_text == "the"

    def test_blocked_first_input_does_not_start(self, controller: PracticeController):
        controller.handle_text("porn")
        assert controller.session.state is SessionState.IDLE

    def test_shared_tracker(self, clock):
        tracker = ProgressTracker()
        c = PracticeController(_lesson("ab"), tracker=tracker, clock=clock)
        c.handle_text("ab")
        c.reset()
        c.handle_text("ab")
        assert tracker.get_lesson_progress("lesson1").attempts == 2


# ---------------------------------------------------------------------------
# handle_key – transliterated and plain key presses
# ---------------------------------------------------------------------------

class TestHandleKey:
    @pytest.fixture()
    def hindi(self, clock) -> PracticeController:
        lesson = Lesson("hi", "T", "hindi", "beginner", ("कतड",), 0, 0)
        return PracticeController(lesson, layout=get_layout(), clock=clock)

    def test_transliterates(self, hindi: PracticeController):
        hindi.handle_key("k")
        hindi.handle_key("l")
        assert hindi.typed_text == "कत"
        assert hindi.is_active

    def test_shifted_punctuation_by_position(self, hindi: PracticeController):
        hindi.handle_key("{", shift=True, code="BracketLeft")
        assert hindi.typed_text == "ड"

    def test_completes_with_keys(self, hindi: PracticeController):
        hindi.handle_key("k")
        hindi.handle_key("l")
        outcome = hindi.handle_key("{", shift=True, code="BracketLeft")
        assert outcome.result is not None
        assert outcome.result.metrics.accuracy == 100

    def test_backspace(self, hindi: PracticeController):
        hindi.handle_key("k")
        hindi.handle_key("Backspace")
        assert hindi.typed_text == ""

    def test_backspace_on_empty(self, hindi: PracticeController):
        assert not hindi.handle_key("Backspace").accepted

    def test_ignored_keys(self, hindi: PracticeController):
        for key in ("Enter", "Tab", "Shift", "ArrowLeft"):
            assert not hindi.handle_key(key).accepted
        assert hindi.typed_text == ""
        assert not hindi.is_active

    def test_named_keys_ignored(self, hindi: PracticeController):
        assert not hindi.handle_key("F5", code="F5").accepted

    def test_unmapped_character_passes_through(self, hindi: PracticeController):
        hindi.handle_key("€")
        assert hindi.typed_text == "€"

    def test_plain_layout_types_key(self, controller: PracticeController):
        controller.handle_key("t")
        controller.handle_key("H", shift=True)
        assert controller.typed_text == "tH"

    def test_set_layout_resets(self, hindi: PracticeController):
        hindi.handle_key("k")
        hindi.set_layout(None)
        assert hindi.typed_text == ""
        hindi.handle_key("k")
        assert hindi.typed_text == "k"


# ---------------------------------------------------------------------------
# timed modes
# ---------------------------------------------------------------------------

class TestTimedMode:
    def test_timer_starts_with_first_input(self, clock):
        c = PracticeController(_lesson(), mode=PracticeMode.ONE_MINUTE, clock=clock)
        assert c.timer.duration == 60
        c.handle_text("t")
        assert c.timer.is_active

    def test_time_up_finishes_attempt(self, clock):
        c = PracticeController(_lesson(), mode=PracticeMode.ONE_MINUTE, clock=clock)
        c.handle_text("the")
        results = []
        for _ in range(60):
            clock.advance(1)
            results.append(c.tick())
        assert all(r is None for r in results[:-1])
        assert results[-1] is not None
        assert results[-1].metrics.wpm == 1
        assert c.timer.is_complete
        assert c.timer.time_remaining == 0
        assert c.tick() is None

    def test_finishing_text_stops_timer(self, clock):
        c = PracticeController(_lesson("ab"), mode=PracticeMode.ONE_MINUTE, clock=clock)
        c.handle_text("ab")
        assert not c.timer.is_active
        assert not c.timer.is_complete

    def test_lesson_mode_does_not_count_down(self, controller: PracticeController):
        controller.handle_text("t")
        assert not controller.timer.is_active
        assert controller.tick() is None
        assert controller.timer.time_remaining == 300

    def test_set_mode_resets(self, controller: PracticeController):
        controller.handle_text("the")
        controller.set_mode(PracticeMode.THREE_MINUTES)
        assert controller.typed_text == ""
        assert controller.timer.duration == 180
        assert not controller.is_active

    def test_reset(self, clock):
        c = PracticeController(_lesson(), mode=PracticeMode.ONE_MINUTE, clock=clock)
        c.handle_text("the")
        c.tick()
        c.reset()
        assert c.typed_text == ""
        assert c.timer.time_remaining == 60
        assert not c.timer.is_active
        assert c.session.state is SessionState.IDLE
