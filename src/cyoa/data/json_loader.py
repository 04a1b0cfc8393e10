"""Low-level JSON helpers for repositories and codecs."""
from __future__ import annotations

import json
from pathlib import Path

from .errors import DataLoadError, ParseError


def loads_json(text: str, *, source: str = "<string>") -> object:
    """Parse JSON text and raise ParseError on failure."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON in {source}: {exc}") from exc


def load_json(path: Path) -> object:
    """Load JSON from disk and raise DataLoadError on failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"File not found: {path}") from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read file: {path}") from exc
    return loads_json(text, source=str(path))


def dump_json(payload: object, path: Path) -> None:
    """Write a JSON payload with the indentation story files use."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
