from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from tankak.core.metrics import TypingMetrics
from tankak.core.resources import load_yaml_mapping, resolve_data_path

logger = logging.getLogger(__name__)

LEVELS: Tuple[str, ...] = ("beginner", "intermediate", "advanced")


@dataclass(frozen=True)
class Lesson:
    key: str
    title: str
    language: str
    level: str
    texts: Tuple[str, ...]
    min_wpm: int
    min_accuracy: int

    def passes(self, metrics: TypingMetrics) -> bool:
        """True when an attempt meets both the speed and accuracy thresholds."""
        return metrics.wpm >= self.min_wpm and metrics.accuracy >= self.min_accuracy


class LessonRepository:
    """Lessons loaded from ``data/lessons/<language>.yaml``, in file order."""

    def __init__(self, lessons_dir: Optional[Path] = None) -> None:
        self._lessons_dir = resolve_data_path(lessons_dir, "lessons")
        self._lessons = self._load_lessons()

    def all(self) -> List[Lesson]:
        return list(self._lessons.values())

    def get(self, key: str) -> Lesson:
        return self._lessons[key]

    def languages(self) -> List[str]:
        seen: List[str] = []
        for lesson in self._lessons.values():
            if lesson.language not in seen:
                seen.append(lesson.language)
        return seen

    def by_language(self, language: str) -> List[Lesson]:
        return [lesson for lesson in self._lessons.values() if lesson.language == language]

    def by_language_and_level(self, language: str, level: str) -> List[Lesson]:
        return [lesson for lesson in self.by_language(language) if lesson.level == level]

    def _load_lessons(self) -> Dict[str, Lesson]:
        if not self._lessons_dir.exists():
            raise FileNotFoundError(f"Lessons directory not found: {self._lessons_dir}")

        lessons: Dict[str, Lesson] = {}
        for path in sorted(self._lessons_dir.glob("*.yaml")):
            raw = load_yaml_mapping(path, required=("lessons",))
            language = str(raw.get("language") or path.stem).strip()
            entries = raw["lessons"]
            if not isinstance(entries, list) or not entries:
                raise ValueError(f"{path.name}: 'lessons' must be a non-empty list")
            for entry in entries:
                lesson = self._parse_lesson(path.name, language, entry)
                if lesson.key in lessons:
                    raise ValueError(f"{path.name}: duplicate lesson key '{lesson.key}'")
                lessons[lesson.key] = lesson
            logger.info("Loaded %d %s lessons from %s", len(entries), language, path.name)

        if not lessons:
            raise ValueError(f"No lesson files (*.yaml) found in {self._lessons_dir}")
        return lessons

    @staticmethod
    def _parse_lesson(file_name: str, language: str, entry: object) -> Lesson:
        if not isinstance(entry, dict):
            raise ValueError(f"{file_name}: each lesson must be a mapping")
        key = entry.get("key")
        title = entry.get("title")
        if not key or not isinstance(key, str) or not re.match(r"^[\w-]+$", key):
            raise ValueError(f"{file_name}: missing or invalid lesson 'key'")
        if not title or not isinstance(title, str):
            raise ValueError(f"{file_name}: lesson '{key}' has missing or invalid 'title'")

        level = str(entry.get("level", "beginner")).strip().lower()
        if level not in LEVELS:
            raise ValueError(f"{file_name}: lesson '{key}' has unknown level '{level}'")

        content = entry.get("texts")
        if content is None:
            raise ValueError(f"{file_name}: lesson '{key}' is missing 'texts'")
        if isinstance(content, list):
            texts = [str(item).strip() for item in content if str(item).strip()]
        else:
            # allow texts as a multiline string, one text per line
            texts = [line.strip() for line in str(content).splitlines() if line.strip()]
        if not texts:
            raise ValueError(f"{file_name}: lesson '{key}' has no texts")

        try:
            min_wpm = int(entry.get("min_wpm", 0))
            min_accuracy = int(entry.get("min_accuracy", 0))
        except (TypeError, ValueError):
            raise ValueError(f"{file_name}: lesson '{key}' has non-numeric thresholds") from None
        if min_wpm < 0 or not 0 <= min_accuracy <= 100:
            raise ValueError(f"{file_name}: lesson '{key}' has out-of-range thresholds")

        return Lesson(
            key=key,
            title=title.strip(),
            language=language,
            level=level,
            texts=tuple(texts),
            min_wpm=min_wpm,
            min_accuracy=min_accuracy,
        )
