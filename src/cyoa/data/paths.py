"""Helpers for resolving story library locations."""
from __future__ import annotations

from pathlib import Path

MANIFEST_FILE = "manifest.json"
STORY_FILE_SUFFIX = ".adventure.json"


def get_repo_root() -> Path:
    """Return the repository root."""
    return Path(__file__).resolve().parents[3]


def get_stories_path(base_path: Path | str | None = None) -> Path:
    """Return the directory containing the manifest and story files."""
    if base_path is not None:
        return Path(base_path)
    return get_repo_root() / "stories"


def get_manifest_path(base_path: Path | str | None = None) -> Path:
    return get_stories_path(base_path) / MANIFEST_FILE


def story_filename(story_id: str) -> str:
    """Conventional file name for a story document."""
    return f"{story_id}{STORY_FILE_SUFFIX}"
