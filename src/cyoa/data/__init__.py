"""Data layer utilities for loading and encoding story files."""

from .errors import DataError, DataLoadError, ParseError, SchemaError
from .paths import get_manifest_path, get_repo_root, get_stories_path, story_filename

__all__ = [
    "DataError",
    "DataLoadError",
    "ParseError",
    "SchemaError",
    "get_manifest_path",
    "get_repo_root",
    "get_stories_path",
    "story_filename",
]
