"""Repository for the story library manifest."""
from __future__ import annotations

from pathlib import Path
from typing import Dict

from cyoa.data.errors import SchemaError
from cyoa.data.paths import MANIFEST_FILE
from cyoa.data.repositories.base import JsonFileRepository
from cyoa.data.story_codec import parse_manifest
from cyoa.domain.defs import ManifestEntryDef


class ManifestRepository(JsonFileRepository[ManifestEntryDef]):
    """Loads ``manifest.json`` and indexes its entries by story id."""

    filename = MANIFEST_FILE

    def decode(self, raw: object) -> Dict[str, ManifestEntryDef]:
        try:
            entries = parse_manifest(raw)
        except SchemaError as exc:
            raise SchemaError(f"{self.path}: {exc}") from exc
        definitions: Dict[str, ManifestEntryDef] = {}
        for entry in entries:
            if entry.id in definitions:
                raise SchemaError(f"Duplicate story id '{entry.id}' in {self.path}.")
            definitions[entry.id] = entry
        return definitions

    def story_path(self, story_id: str) -> Path:
        """Absolute path of the story file listed for ``story_id``."""
        return self.stories_dir / self.get(story_id).file
