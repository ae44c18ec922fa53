"""Keyboard layouts: physical key positions and their transliterated output."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from tankak.core.resources import load_yaml_mapping, resolve_data_path

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT = "hindi_inscript"


@dataclass(frozen=True)
class KeyMapping:
    """Characters produced by one physical key without and with Shift."""

    normal: str
    shift: str

    def select(self, shift: bool) -> str:
        return self.shift if shift else self.normal


@dataclass(frozen=True)
class KeyboardLayout:
    """Read-only table from canonical key symbol to :class:`KeyMapping`.

    The canonical symbol of a key is what it prints on a US-QWERTY keyboard
    with no modifier held (``"a"``, ``"["``, ``"1"``, ``" "``).
    """

    name: str
    title: str
    keys: Mapping[str, KeyMapping]

    def get(self, symbol: str) -> Optional[KeyMapping]:
        return self.keys.get(symbol)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.keys

    def __len__(self) -> int:
        return len(self.keys)


# Physical key identifiers (``KeyboardEvent.code`` names) -> canonical symbol.
# Shifted punctuation reports a different logical key ("{" for "["), so the
# position is the only reliable way to find the table entry.
PHYSICAL_KEY_CODES: Mapping[str, str] = MappingProxyType(
    {
        **{f"Key{c.upper()}": c for c in "abcdefghijklmnopqrstuvwxyz"},
        **{f"Digit{d}": d for d in "0123456789"},
        "Backquote": "`",
        "Minus": "-",
        "Equal": "=",
        "BracketLeft": "[",
        "BracketRight": "]",
        "Backslash": "\\",
        "IntlBackslash": "\\",
        "Semicolon": ";",
        "Quote": "'",
        "Comma": ",",
        "Period": ".",
        "Slash": "/",
        "Space": " ",
    }
)


def _parse_mapping(file_name: str, symbol: str, value: object) -> KeyMapping:
    if not isinstance(value, dict):
        raise ValueError(f"{file_name}: key {symbol!r} must map to 'normal' and 'shift'")
    normal = value.get("normal")
    shift = value.get("shift")
    if not isinstance(normal, str) or not normal:
        raise ValueError(f"{file_name}: key {symbol!r} has missing or invalid 'normal'")
    if not isinstance(shift, str) or not shift:
        raise ValueError(f"{file_name}: key {symbol!r} has missing or invalid 'shift'")
    return KeyMapping(normal=normal, shift=shift)


def load_layout(path: Path) -> KeyboardLayout:
    """Load a layout definition (``name``, ``title``, ``keys``) from YAML."""
    raw = load_yaml_mapping(path, required=("keys",))
    keys_raw = raw["keys"]
    if not isinstance(keys_raw, dict) or not keys_raw:
        raise ValueError(f"{path.name}: 'keys' must be a non-empty mapping")

    keys = {}
    for symbol, value in keys_raw.items():
        symbol = str(symbol)
        if len(symbol) != 1:
            raise ValueError(f"{path.name}: key {symbol!r} must be a single character")
        keys[symbol] = _parse_mapping(path.name, symbol, value)

    name = str(raw.get("name") or path.stem)
    title = str(raw.get("title") or name)
    logger.info("Loaded keyboard layout %s (%d keys)", name, len(keys))
    return KeyboardLayout(name=name, title=title, keys=MappingProxyType(keys))


@lru_cache(maxsize=None)
def get_layout(name: str = DEFAULT_LAYOUT) -> KeyboardLayout:
    """Return a bundled layout by name, loading it once per process."""
    return load_layout(resolve_data_path(None, "layouts", f"{name}.yaml"))


# Languages typed through a transliteration layout; others use plain input.
LANGUAGE_LAYOUTS: Mapping[str, str] = MappingProxyType({"hindi": DEFAULT_LAYOUT})


def layout_for_language(language: str) -> Optional[KeyboardLayout]:
    """The bundled layout for *language*, or ``None`` for direct input."""
    name = LANGUAGE_LAYOUTS.get(language)
    return get_layout(name) if name else None
