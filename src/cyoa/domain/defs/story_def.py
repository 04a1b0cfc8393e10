"""Story document structures consumed by playback, validation and the builder."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List

from cyoa.core.types import EndingType, Scalar

_PARAGRAPH_BREAK = re.compile(r"\n\n+")


@dataclass(frozen=True, slots=True)
class ChoiceDef:
    """A labelled edge from one passage to another."""

    text: str
    goto: str
    set_state: Dict[str, Scalar] = field(default_factory=dict)
    condition: Dict[str, Scalar] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class PassageDef:
    """A node of the story graph."""

    text: str
    choices: List[ChoiceDef] = field(default_factory=list)
    is_ending: bool = False
    ending_type: EndingType | None = None

    def paragraphs(self) -> list[str]:
        """Split the text on blank lines, dropping empty paragraphs."""
        return [part for part in _PARAGRAPH_BREAK.split(self.text) if part.strip()]

    def playable_choices(self) -> List[ChoiceDef]:
        """Choices that take part in navigation; endings never offer any."""
        if self.is_ending:
            return []
        return list(self.choices)


@dataclass(frozen=True, slots=True)
class StoryDef:
    """Fully parsed story document. Treated as read-only once loaded."""

    id: str
    title: str
    author: str
    start: str
    passages: Dict[str, PassageDef] = field(default_factory=dict)
    description: str = ""
    version: str = "1.0"
    initial_state: Dict[str, Scalar] = field(default_factory=dict)
    cover: str | None = None

    def get_passage(self, passage_id: str) -> PassageDef | None:
        return self.passages.get(passage_id)
