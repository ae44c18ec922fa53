from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, Optional

from tankak.core.metrics import round_half_up

logger = logging.getLogger(__name__)


@dataclass
class LessonProgress:
    lesson_id: str
    attempts: int = 0
    best_wpm: int = 0
    best_accuracy: int = 0
    completed: bool = False
    completed_date: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "attempts": self.attempts,
            "best_wpm": self.best_wpm,
            "best_accuracy": self.best_accuracy,
            "completed": self.completed,
            "completed_date": self.completed_date.isoformat() if self.completed_date else None,
        }

    @classmethod
    def from_dict(cls, lesson_id: str, value: dict) -> "LessonProgress":
        raw_date = value.get("completed_date")
        completed_date = None
        if raw_date:
            try:
                completed_date = datetime.fromisoformat(str(raw_date))
            except ValueError:
                logger.warning("Ignoring invalid completed_date %r for %s", raw_date, lesson_id)
        return cls(
            lesson_id=lesson_id,
            attempts=int(value.get("attempts", 0)),
            best_wpm=int(value.get("best_wpm", 0)),
            best_accuracy=int(value.get("best_accuracy", 0)),
            completed=bool(value.get("completed", False)),
            completed_date=completed_date,
        )


class ProgressTracker:
    """Best scores and completion per lesson, for one learner and language.

    Records are created on the first attempt at a lesson and never removed
    until :meth:`reset`. Best values only ever go up and a completed lesson
    stays completed; the completion date is the date of the first pass.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self._progress: Dict[str, LessonProgress] = {}

    def __iter__(self) -> Iterator[LessonProgress]:
        return iter(self._progress.values())

    def __len__(self) -> int:
        return len(self._progress)

    def update_progress(self, lesson_id: str, wpm: int, accuracy: int, passed: bool) -> LessonProgress:
        current = self._progress.get(lesson_id)
        if current is None:
            current = LessonProgress(lesson_id=lesson_id)
            self._progress[lesson_id] = current

        current.attempts += 1
        current.best_wpm = max(current.best_wpm, wpm)
        current.best_accuracy = max(current.best_accuracy, accuracy)
        if passed and not current.completed:
            current.completed_date = self._clock()
        current.completed = current.completed or passed
        return current

    def get_lesson_progress(self, lesson_id: str) -> Optional[LessonProgress]:
        return self._progress.get(lesson_id)

    def get_progress_percentage(self, total_lessons: int, lesson_ids: Optional[Iterable[str]] = None) -> int:
        """Completed lessons as a whole percentage of *total_lessons*.

        With *lesson_ids*, only completions of those lessons are counted, so a
        level's percentage is not moved by lessons from other levels.
        """
        if total_lessons <= 0:
            return 0
        records = self._progress.values()
        if lesson_ids is not None:
            wanted = set(lesson_ids)
            records = [p for p in records if p.lesson_id in wanted]
        completed = sum(1 for p in records if p.completed)
        return round_half_up(completed / total_lessons * 100)

    def restore(self, record: LessonProgress) -> None:
        """Put a previously saved record back (used when loading from disk)."""
        self._progress[record.lesson_id] = record

    def reset(self) -> None:
        self._progress = {}


class ProgressStore:
    """Saves lesson progress per language. Persists to disk across app restarts.
    File: ~/.tankak/progress.json unless another path is given."""

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = Path(file_path) if file_path else Path.home() / ".tankak" / "progress.json"
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._languages = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load_tracker(self, language: str, clock: Callable[[], datetime] = datetime.now) -> ProgressTracker:
        """Build a tracker pre-filled with the saved records for *language*."""
        tracker = ProgressTracker(clock=clock)
        for lesson_id, value in self._languages.get(language, {}).items():
            try:
                tracker.restore(LessonProgress.from_dict(lesson_id, value))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping unreadable progress for %s/%s: %s", language, lesson_id, e)
        return tracker

    def save_tracker(self, language: str, tracker: ProgressTracker) -> None:
        self._languages[language] = {p.lesson_id: p.to_dict() for p in tracker}
        self._save()

    def reset(self, language: Optional[str] = None) -> None:
        """Clear one language, or everything when *language* is None."""
        if language is None:
            self._languages = {}
        else:
            self._languages.pop(language, None)
        self._save()

    def _load(self) -> Dict[str, Dict[str, dict]]:
        languages: Dict[str, Dict[str, dict]] = {}
        if not self._file_path.exists():
            return languages
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return languages

        raw = payload.get("languages", {}) if isinstance(payload, dict) else {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed progress file %s", self._file_path)
            return languages
        for language, lessons in raw.items():
            if isinstance(lessons, dict):
                languages[language] = {
                    key: value for key, value in lessons.items() if isinstance(value, dict)
                }
        return languages

    def _save(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"languages": self._languages}
        try:
            self._file_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)
