"""Translating Qt key events into the (key, shift, code) triple the engine uses."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional, Tuple

from PySide6.QtCore import Qt

if TYPE_CHECKING:
    from PySide6.QtGui import QKeyEvent


def _build_physical_codes() -> Dict[int, str]:
    codes: Dict[int, str] = {}
    for c in "ABCDEFGHIJKLMNOPQRSTUVWXYZ":
        codes[int(getattr(Qt.Key, f"Key_{c}"))] = f"Key{c}"
    for d in "0123456789":
        codes[int(getattr(Qt.Key, f"Key_{d}"))] = f"Digit{d}"

    # Qt reports the shifted symbol for punctuation, so both variants of a
    # US-QWERTY key point at the same position.
    pairs = {
        "Backquote": ("Key_QuoteLeft", "Key_AsciiTilde"),
        "Digit1": ("Key_Exclam",),
        "Digit2": ("Key_At",),
        "Digit3": ("Key_NumberSign",),
        "Digit4": ("Key_Dollar",),
        "Digit5": ("Key_Percent",),
        "Digit6": ("Key_AsciiCircum",),
        "Digit7": ("Key_Ampersand",),
        "Digit8": ("Key_Asterisk",),
        "Digit9": ("Key_ParenLeft",),
        "Digit0": ("Key_ParenRight",),
        "Minus": ("Key_Minus", "Key_Underscore"),
        "Equal": ("Key_Equal", "Key_Plus"),
        "BracketLeft": ("Key_BracketLeft", "Key_BraceLeft"),
        "BracketRight": ("Key_BracketRight", "Key_BraceRight"),
        "Backslash": ("Key_Backslash", "Key_Bar"),
        "Semicolon": ("Key_Semicolon", "Key_Colon"),
        "Quote": ("Key_Apostrophe", "Key_QuoteDbl"),
        "Comma": ("Key_Comma", "Key_Less"),
        "Period": ("Key_Period", "Key_Greater"),
        "Slash": ("Key_Slash", "Key_Question"),
        "Space": ("Key_Space",),
    }
    for code, names in pairs.items():
        for name in names:
            codes[int(getattr(Qt.Key, name))] = code
    return codes


def _build_key_names() -> Dict[int, str]:
    names = {
        "Key_Backspace": "Backspace",
        "Key_Delete": "Delete",
        "Key_Return": "Enter",
        "Key_Enter": "Enter",
        "Key_Tab": "Tab",
        "Key_Backtab": "Tab",
        "Key_Up": "ArrowUp",
        "Key_Down": "ArrowDown",
        "Key_Left": "ArrowLeft",
        "Key_Right": "ArrowRight",
        "Key_Home": "Home",
        "Key_End": "End",
        "Key_Shift": "Shift",
        "Key_Control": "Control",
        "Key_Alt": "Alt",
        "Key_Meta": "Meta",
        "Key_CapsLock": "CapsLock",
        "Key_Escape": "Escape",
    }
    return {int(getattr(Qt.Key, qt_name)): name for qt_name, name in names.items()}


_PHYSICAL_CODES = _build_physical_codes()
_KEY_NAMES = _build_key_names()


def physical_code_for(qt_key: int) -> Optional[str]:
    """Physical key identifier (``"BracketLeft"``) for a Qt key, assuming US-QWERTY."""
    return _PHYSICAL_CODES.get(int(qt_key))


def logical_key_for(qt_key: int, text: str) -> str:
    """Named key (``"Backspace"``) for editing/navigation keys, else the typed text."""
    name = _KEY_NAMES.get(int(qt_key))
    if name is not None:
        return name
    return text


def key_event_args(event: QKeyEvent) -> Tuple[str, bool, Optional[str]]:
    """Return ``(key, shift, code)`` for :meth:`PracticeController.handle_key`."""
    qt_key = event.key()
    shift = bool(event.modifiers() & Qt.KeyboardModifier.ShiftModifier)
    return logical_key_for(qt_key, event.text()), shift, physical_code_for(qt_key)
