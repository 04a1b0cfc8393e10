"""Lazily decoded JSON files in the story library."""
from __future__ import annotations

import logging
from functools import cached_property
from pathlib import Path
from typing import Dict, Generic, TypeVar

from cyoa.data import paths
from cyoa.data.json_loader import load_json

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JsonFileRepository(Generic[T]):
    """One JSON file under the stories directory, decoded on first access.

    Subclasses set ``filename`` and implement ``decode``, which turns the raw
    JSON value into definitions keyed by id.
    """

    filename: str = ""

    def __init__(self, base_path: Path | str | None = None) -> None:
        self.stories_dir = paths.get_stories_path(base_path)

    @property
    def path(self) -> Path:
        return self.stories_dir / self.filename

    @cached_property
    def definitions(self) -> Dict[str, T]:
        definitions = self.decode(load_json(self.path))
        logger.debug("Loaded %d entries from %s", len(definitions), self.path)
        return definitions

    def decode(self, raw: object) -> Dict[str, T]:
        raise NotImplementedError

    def reload(self) -> None:
        """Forget decoded entries so the next access rereads the file."""
        self.__dict__.pop("definitions", None)

    def __contains__(self, def_id: object) -> bool:
        return def_id in self.definitions

    def get(self, def_id: str) -> T:
        if def_id not in self.definitions:
            raise KeyError(f"'{def_id}' is not listed in {self.path}")
        return self.definitions[def_id]

    def all(self) -> list[T]:
        """Entries in file order."""
        return list(self.definitions.values())
