"""Tests for tankak.core.lessons – YAML-based lesson loading."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from tankak.core.content_filter import contains_prohibited_words
from tankak.core.lessons import LEVELS, Lesson, LessonRepository
from tankak.core.metrics import TypingMetrics


@pytest.fixture()
def lessons_dir(tmp_path: Path) -> Path:
    d = tmp_path / "lessons"
    d.mkdir()
    return d


def _write(directory: Path, name: str, body: str) -> None:
    (directory / name).write_text(textwrap.dedent(body), encoding="utf-8")


# ---------------------------------------------------------------------------
# Lesson dataclass
# ---------------------------------------------------------------------------

class TestLesson:
    @pytest.fixture()
    def lesson(self) -> Lesson:
        return Lesson(
            key="l1", title="Basics", language="english", level="beginner",
            texts=("abc",), min_wpm=20, min_accuracy=90,
        )

    def test_passes_when_both_thresholds_met(self, lesson: Lesson):
        assert lesson.passes(TypingMetrics(wpm=20, accuracy=90))

    def test_fails_on_speed(self, lesson: Lesson):
        assert not lesson.passes(TypingMetrics(wpm=19, accuracy=100))

    def test_fails_on_accuracy(self, lesson: Lesson):
        assert not lesson.passes(TypingMetrics(wpm=80, accuracy=89))


# ---------------------------------------------------------------------------
# bundled lessons
# ---------------------------------------------------------------------------

class TestBundledLessons:
    @pytest.fixture(scope="class")
    def repo(self) -> LessonRepository:
        return LessonRepository()

    def test_languages(self, repo: LessonRepository):
        assert repo.languages() == ["english", "hindi"]

    def test_every_level_has_lessons(self, repo: LessonRepository):
        for language in repo.languages():
            for level in LEVELS:
                assert repo.by_language_and_level(language, level), (language, level)

    def test_get(self, repo: LessonRepository):
        lesson = repo.get("en-beginner-1")
        assert lesson.language == "english"
        assert lesson.level == "beginner"

    def test_get_unknown(self, repo: LessonRepository):
        with pytest.raises(KeyError):
            repo.get("nope")

    def test_by_language_keeps_file_order(self, repo: LessonRepository):
        keys = [lesson.key for lesson in repo.by_language("english")]
        assert keys[0] == "en-beginner-1"
        assert keys == [lesson.key for lesson in repo.all() if lesson.language == "english"]

    def test_texts_are_typeable(self, repo: LessonRepository):
        # a lesson text that trips the content filter could never be finished
        for lesson in repo.all():
            for text in lesson.texts:
                assert not contains_prohibited_words(text).is_blocked, (lesson.key, text)


# ---------------------------------------------------------------------------
# loading from a custom directory
# ---------------------------------------------------------------------------

class TestLoadLessons:
    def test_minimal_file(self, lessons_dir: Path):
        _write(lessons_dir, "english.yaml", """
            lessons:
              - key: a1
                title: First
                texts: [one, two]
        """)
        repo = LessonRepository(lessons_dir)
        lesson = repo.get("a1")
        assert lesson.language == "english"
        assert lesson.level == "beginner"
        assert lesson.texts == ("one", "two")
        assert (lesson.min_wpm, lesson.min_accuracy) == (0, 0)

    def test_multiline_texts(self, lessons_dir: Path):
        _write(lessons_dir, "english.yaml", """
            lessons:
              - key: a1
                title: First
                texts: |
                  first line

                  second line
        """)
        assert LessonRepository(lessons_dir).get("a1").texts == ("first line", "second line")

    def test_language_key_overrides_file_name(self, lessons_dir: Path):
        _write(lessons_dir, "extra.yaml", """
            language: hindi
            lessons:
              - key: h1
                title: पहला
                texts: [कत]
        """)
        assert LessonRepository(lessons_dir).by_language("hindi")[0].key == "h1"

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            LessonRepository(tmp_path / "missing")

    def test_no_files(self, lessons_dir: Path):
        with pytest.raises(ValueError, match="No lesson files"):
            LessonRepository(lessons_dir)

    def test_lessons_not_list(self, lessons_dir: Path):
        _write(lessons_dir, "english.yaml", "lessons: nope\n")
        with pytest.raises(ValueError, match="non-empty list"):
            LessonRepository(lessons_dir)

    def test_missing_title(self, lessons_dir: Path):
        _write(lessons_dir, "english.yaml", """
            lessons:
              - key: a1
                texts: [one]
        """)
        with pytest.raises(ValueError, match="'title'"):
            LessonRepository(lessons_dir)

    def test_invalid_key(self, lessons_dir: Path):
        _write(lessons_dir, "english.yaml", """
            lessons:
              - key: "has space"
                title: T
                texts: [one]
        """)
        with pytest.raises(ValueError, match="'key'"):
            LessonRepository(lessons_dir)

    def test_unknown_level(self, lessons_dir: Path):
        _write(lessons_dir, "english.yaml", """
            lessons:
              - key: a1
                title: T
                level: expert
                texts: [one]
        """)
        with pytest.raises(ValueError, match="unknown level"):
            LessonRepository(lessons_dir)

    def test_no_texts(self, lessons_dir: Path):
        _write(lessons_dir, "english.yaml", """
            lessons:
              - key: a1
                title: T
                texts: ["", "  "]
        """)
        with pytest.raises(ValueError, match="no texts"):
            LessonRepository(lessons_dir)

    def test_missing_texts(self, lessons_dir: Path):
        _write(lessons_dir, "english.yaml", """
            lessons:
              - key: a1
                title: T
        """)
        with pytest.raises(ValueError, match="missing 'texts'"):
            LessonRepository(lessons_dir)

    def test_out_of_range_accuracy(self, lessons_dir: Path):
        _write(lessons_dir, "english.yaml", """
            lessons:
              - key: a1
                title: T
                min_accuracy: 120
                texts: [one]
        """)
        with pytest.raises(ValueError, match="out-of-range"):
            LessonRepository(lessons_dir)

    def test_non_numeric_threshold(self, lessons_dir: Path):
        _write(lessons_dir, "english.yaml", """
            lessons:
              - key: a1
                title: T
                min_wpm: fast
                texts: [one]
        """)
        with pytest.raises(ValueError, match="non-numeric"):
            LessonRepository(lessons_dir)

    def test_duplicate_keys(self, lessons_dir: Path):
        _write(lessons_dir, "english.yaml", """
            lessons:
              - key: a1
                title: T
                texts: [one]
              - key: a1
                title: U
                texts: [two]
        """)
        with pytest.raises(ValueError, match="duplicate"):
            LessonRepository(lessons_dir)
