"""Summary figures and library entries for story documents."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from cyoa.core.types import EndingType
from cyoa.data.paths import story_filename
from cyoa.domain.defs import ManifestEntryDef, StoryDef


@dataclass(frozen=True, slots=True)
class StoryStats:
    passages: int
    endings: int
    choices: int
    ending_list: List[Tuple[str, EndingType | None]] = field(default_factory=list)


def find_endings(story: StoryDef) -> List[str]:
    return [passage_id for passage_id, passage in story.passages.items() if passage.is_ending]


def count_passages(story: StoryDef) -> int:
    return len(story.passages)


def story_stats(story: StoryDef) -> StoryStats:
    """Count passages, endings and choices; endings are listed with their type."""
    ending_list = [
        (passage_id, passage.ending_type)
        for passage_id, passage in story.passages.items()
        if passage.is_ending
    ]
    return StoryStats(
        passages=count_passages(story),
        endings=len(ending_list),
        choices=sum(len(passage.playable_choices()) for passage in story.passages.values()),
        ending_list=ending_list,
    )


def make_manifest_entry(story: StoryDef, tags: List[str] | None = None) -> ManifestEntryDef:
    return ManifestEntryDef(
        id=story.id,
        title=story.title,
        author=story.author,
        description=story.description,
        file=story_filename(story.id),
        cover=story.cover,
        tags=list(tags or []),
    )
