"""Blocks typed text containing words the ad network does not allow."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from tankak.core.resources import load_yaml_mapping, resolve_data_path

logger = logging.getLogger(__name__)

WARNING_PREFIX = "Please avoid typing inappropriate words. Found: "


@dataclass(frozen=True)
class FilterResult:
    is_blocked: bool
    matched_words: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    warning: str = ""


class ContentFilter:
    """Case-insensitive matcher over a fixed list of prohibited terms.

    A term matches when it occurs anywhere in the text or as a whole word.
    Terms that differ only by case are reported once, under the spelling
    that appears first in the list.
    """

    def __init__(self, terms: Sequence[str]) -> None:
        self._terms: Tuple[Tuple[str, str, re.Pattern], ...] = tuple(
            (term, term.lower(), re.compile(rf"\b{re.escape(term.lower())}\b", re.IGNORECASE))
            for term in terms
            if term and term.strip()
        )

    @property
    def terms(self) -> Tuple[str, ...]:
        return tuple(term for term, _, _ in self._terms)

    def contains_prohibited_words(self, text: str) -> FilterResult:
        lower_text = text.lower()
        matched: List[str] = []
        seen = set()
        for term, lower_term, pattern in self._terms:
            if lower_term in seen:
                continue
            if lower_term in lower_text or pattern.search(lower_text):
                matched.append(term)
                seen.add(lower_term)
        return FilterResult(is_blocked=bool(matched), matched_words=matched)

    def validate_typing_input(self, text: str) -> ValidationResult:
        result = self.contains_prohibited_words(text)
        if result.is_blocked:
            logger.warning("Blocked typing input containing %d prohibited term(s)", len(result.matched_words))
            return ValidationResult(
                is_valid=False,
                warning=WARNING_PREFIX + ", ".join(result.matched_words),
            )
        return ValidationResult(is_valid=True, warning="")


def load_prohibited_words(path: Optional[Path] = None) -> List[str]:
    """Read the term list: every list under the file's top-level keys, in order."""
    path = resolve_data_path(path, "prohibited_words.yaml")
    raw = load_yaml_mapping(path)
    terms: List[str] = []
    for group, words in raw.items():
        if not isinstance(words, list):
            raise ValueError(f"{path.name}: '{group}' must be a list of words")
        terms.extend(str(word).strip() for word in words if str(word).strip())
    if not terms:
        raise ValueError(f"{path.name}: no prohibited words defined")
    logger.info("Loaded %d prohibited terms from %s", len(terms), path.name)
    return terms


@lru_cache(maxsize=None)
def default_filter() -> ContentFilter:
    """Filter built from the bundled word list, created once per process."""
    return ContentFilter(load_prohibited_words())


def contains_prohibited_words(text: str) -> FilterResult:
    return default_filter().contains_prohibited_words(text)


def validate_typing_input(text: str) -> ValidationResult:
    return default_filter().validate_typing_input(text)
