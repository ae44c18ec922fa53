"""Locating and reading the YAML data files shipped in ``tankak/data``."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml


def data_dir() -> Path:
    """Directory holding the bundled layouts, lessons and word lists."""
    return Path(__file__).resolve().parent.parent / "data"


def load_yaml_mapping(path: Path, required: tuple[str, ...] = ()) -> Dict[str, Any]:
    """Read *path* and return its top-level mapping.

    Raises ``FileNotFoundError`` when the file is missing and ``ValueError``
    (prefixed with the file name) when it is not a mapping or lacks one of
    the *required* keys.
    """
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"{path.name}: expected a YAML mapping")
    for key in required:
        if key not in raw:
            raise ValueError(f"{path.name}: missing '{key}'")
    return raw


def resolve_data_path(path: Optional[Path], *default_parts: str) -> Path:
    """Return *path* when given, else the bundled file under :func:`data_dir`."""
    if path is not None:
        return Path(path)
    return data_dir().joinpath(*default_parts)
