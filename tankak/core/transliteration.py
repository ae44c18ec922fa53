"""Turning QWERTY key presses into Devanagari text."""

from __future__ import annotations

import re
from typing import Optional

from tankak.core.layout import PHYSICAL_KEY_CODES, KeyboardLayout, get_layout

_DEVANAGARI_RE = re.compile(r"[\u0900-\u097F]")


def resolve_key_symbol(
    key: str,
    code: Optional[str] = None,
    layout: Optional[KeyboardLayout] = None,
) -> Optional[str]:
    """Find the layout symbol for a key press, or ``None`` if it has none.

    The physical key code wins when it names a known position that the
    layout maps; otherwise the logical key is used, lowercased when it is a
    single letter (Shift is carried separately, not by letter case).
    """
    if layout is None:
        layout = get_layout()
    if code:
        symbol = PHYSICAL_KEY_CODES.get(code)
        if symbol is not None and symbol in layout:
            return symbol
    if len(key) == 1 and key.isalpha():
        key = key.lower()
    if key in layout:
        return key
    return None


def transliterate_key(
    key: str,
    shift: bool,
    code: Optional[str] = None,
    layout: Optional[KeyboardLayout] = None,
) -> str:
    """Return the string a single key press produces."""
    if layout is None:
        layout = get_layout()
    symbol = resolve_key_symbol(key, code, layout)
    if symbol is None:
        return key
    return layout.keys[symbol].select(shift)


def map_key_press(
    text: str,
    key: str,
    shift: bool,
    code: Optional[str] = None,
    layout: Optional[KeyboardLayout] = None,
) -> str:
    """Append the output of one key press to *text*.

    Unmapped keys are appended unchanged. Editing keys such as Enter or
    Backspace are expected to be handled by the caller before this point.
    """
    return text + transliterate_key(key, shift, code, layout)


def map_qwerty_to_hindi(text: str, layout: Optional[KeyboardLayout] = None) -> str:
    """Convert already-typed QWERTY text using each key's unshifted output."""
    if not text:
        return ""
    if layout is None:
        layout = get_layout()
    out = []
    for ch in text:
        mapping = layout.get(ch.lower())
        out.append(mapping.normal if mapping else ch)
    return "".join(out)


def is_devanagari(text: str) -> bool:
    """True if *text* contains at least one Devanagari code point."""
    return bool(_DEVANAGARI_RE.search(text))


def count_words(text: str) -> int:
    return len(text.split())
