"""Repository exports."""

from .manifest_repo import ManifestRepository
from .story_repo import StoryRepository

__all__ = [
    "ManifestRepository",
    "StoryRepository",
]
