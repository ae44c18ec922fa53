"""Live typing metrics for a target text and what has been typed so far."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class TypingMetrics:
    """Snapshot of a typing attempt.

    * **wpm** – whitespace-delimited words typed per elapsed minute.
    * **accuracy** – correct characters / typed characters, whole percent.
    * **errors** – mismatches plus anything typed past the end of the target.
    * **characters_per_second** – correct characters per second, 2 decimals.
    """

    wpm: int = 0
    accuracy: int = 0
    errors: int = 0
    total_chars: int = 0
    correct_chars: int = 0
    elapsed_time: int = 0
    characters_per_second: float = 0.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (``round`` would go to even)."""
    return int(math.floor(value + 0.5))


def count_correct(target_text: str, typed_text: str) -> tuple[int, int]:
    """Return ``(correct, errors)`` comparing *typed_text* position by position."""
    correct = sum(1 for a, b in zip(typed_text, target_text) if a == b)
    return correct, len(typed_text) - correct


def calculate_metrics(
    target_text: str,
    typed_text: str,
    start_time: Optional[float],
    now: Optional[float] = None,
) -> TypingMetrics:
    """Compute a :class:`TypingMetrics` snapshot.

    *start_time* and *now* are epoch seconds; *now* defaults to the current
    time. Before the attempt has started every value is zero. Elapsed time is
    floored at one second so a fresh attempt never reports infinite speed.
    """
    if start_time is None:
        return TypingMetrics()

    if now is None:
        now = time.time()
    elapsed_seconds = max(1.0, now - start_time)

    correct, errors = count_correct(target_text, typed_text)
    total = len(typed_text)

    total_words = max(1, len(typed_text.split()))
    wpm = round_half_up(total_words / elapsed_seconds * 60)
    accuracy = max(0, round_half_up(correct / total * 100)) if total > 0 else 0
    cps = round(correct / elapsed_seconds, 2)

    return TypingMetrics(
        wpm=wpm,
        accuracy=accuracy,
        errors=errors,
        total_chars=total,
        correct_chars=correct,
        elapsed_time=math.floor(elapsed_seconds),
        characters_per_second=cps,
    )


def smart_suggestions(wpm: float, accuracy: float) -> List[str]:
    """Three coaching tips for a finished attempt.

    The first two tips come from the speed band and the third is the first tip
    of the accuracy band, so every result carries one accuracy tip even when
    the speed band has three to offer.
    """
    if wpm < 20:
        speed = [
            "Focus on accuracy first, speed will follow",
            "Try practicing with simpler lessons",
            "Take more time between typing sessions",
        ]
    elif wpm < 40:
        speed = [
            "Great progress! Keep practicing regularly",
            "Work on finger positioning for better flow",
            "Challenge yourself with harder lessons",
        ]
    else:
        speed = [
            "Excellent speed! Maintain consistency",
            "Focus on minimizing errors for perfection",
            "Try advanced lessons to push your limits",
        ]

    if accuracy < 90:
        precision = [
            "Reduce typing errors by slowing down slightly",
            "Focus on reading before typing each word",
        ]
    elif accuracy < 98:
        precision = ["Accuracy is good, strive for 98%+ for excellence"]
    else:
        precision = ["Outstanding accuracy! You're mastering touch typing"]

    return speed[:2] + precision[:1]


def format_time(seconds: int) -> str:
    """Format whole seconds as ``m:ss``."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"
