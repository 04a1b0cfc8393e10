"""Repository for story documents listed in the library manifest."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

from cyoa.data.errors import SchemaError
from cyoa.data.repositories.manifest_repo import ManifestRepository
from cyoa.data.story_codec import load_story_file
from cyoa.domain.defs import StoryDef

logger = logging.getLogger(__name__)


class StoryRepository:
    """Loads story files on demand and caches them by story id."""

    def __init__(
        self,
        base_path: Path | str | None = None,
        *,
        manifest_repo: ManifestRepository | None = None,
    ) -> None:
        self._manifest_repo = manifest_repo or ManifestRepository(base_path)
        self._stories: Dict[str, StoryDef] = {}

    @property
    def manifest(self) -> ManifestRepository:
        return self._manifest_repo

    def get(self, story_id: str) -> StoryDef:
        """Return the story listed under ``story_id`` (KeyError if unlisted)."""
        if story_id not in self._stories:
            self._stories[story_id] = self.load_path(self._manifest_repo.story_path(story_id))
        return self._stories[story_id]

    def ids(self) -> list[str]:
        return [entry.id for entry in self._manifest_repo.all()]

    @staticmethod
    def load_path(path: Path) -> StoryDef:
        """Load a story file and apply the loader-level checks.

        A start passage missing from ``passages`` makes the file unusable and
        raises SchemaError; dangling choice targets are only logged.
        """
        story = load_story_file(path)
        if story.start not in story.passages:
            raise SchemaError(f'{path}: start passage "{story.start}" not found in passages.')
        for passage_id, passage in story.passages.items():
            for choice in passage.playable_choices():
                if choice.goto not in story.passages:
                    logger.warning(
                        "Story %r passage %r links to missing passage %r",
                        story.id,
                        passage_id,
                        choice.goto,
                    )
        return story
