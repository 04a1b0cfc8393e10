"""Library manifest structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True, slots=True)
class ManifestEntryDef:
    """One story listed in the library manifest."""

    id: str
    title: str
    author: str
    description: str
    file: str
    cover: str | None = None
    tags: List[str] = field(default_factory=list)
