"""Playback of story documents: position, history and state vector."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal

from cyoa.core.types import EndingType, StateVector
from cyoa.domain.conditions import apply_state_change, is_available
from cyoa.domain.defs import ChoiceDef, PassageDef, StoryDef
from cyoa.domain.state import PlaybackState
from cyoa.services.errors import InvalidStartReference, SessionNotLoadedError

logger = logging.getLogger(__name__)

SessionStatus = Literal["unloaded", "active", "ended", "missing_passage"]


@dataclass(slots=True)
class PassageView:
    """Data returned to the presentation layer for rendering."""

    passage_id: str
    text: str
    paragraphs: List[str]
    choices: List[ChoiceDef] = field(default_factory=list)
    is_ending: bool = False
    ending_type: EndingType | None = None
    missing: bool = False
    can_go_back: bool = False


class PlaybackSession:
    """State machine that walks one reader through one story.

    The story document is only read; the session owns its history and state
    vector. ``go_back`` restores the position but keeps the state vector.
    """

    def __init__(self) -> None:
        self._story: StoryDef | None = None
        self._state: PlaybackState | None = None

    def load_story(self, story: StoryDef) -> None:
        """Start a session at ``story.start`` with a copy of the initial state."""
        if story.start not in story.passages:
            raise InvalidStartReference(story.start)
        self._story = story
        self._state = PlaybackState(
            current_passage_id=story.start,
            variables=dict(story.initial_state),
        )
        logger.debug("Loaded story %r at passage %r", story.id, story.start)

    def restart(self) -> None:
        story = self._require_story()
        self.load_story(story)

    def reset(self) -> None:
        """Drop the loaded story and return to the unloaded state."""
        self._story = None
        self._state = None
        logger.debug("Playback session reset")

    @property
    def story(self) -> StoryDef | None:
        return self._story

    @property
    def is_loaded(self) -> bool:
        return self._story is not None

    @property
    def current_passage_id(self) -> str | None:
        return self._state.current_passage_id if self._state else None

    @property
    def current_passage(self) -> PassageDef | None:
        if self._story is None or self._state is None:
            return None
        return self._story.get_passage(self._state.current_passage_id)

    @property
    def history(self) -> List[str]:
        return list(self._state.history) if self._state else []

    @property
    def state(self) -> StateVector:
        return dict(self._state.variables) if self._state else {}

    @property
    def is_ending(self) -> bool:
        passage = self.current_passage
        return passage is not None and passage.is_ending

    @property
    def ending_type(self) -> EndingType | None:
        passage = self.current_passage
        if passage is None or not passage.is_ending:
            return None
        return passage.ending_type

    @property
    def can_go_back(self) -> bool:
        return bool(self._state and self._state.history)

    @property
    def status(self) -> SessionStatus:
        if self._story is None:
            return "unloaded"
        passage = self.current_passage
        if passage is None:
            return "missing_passage"
        return "ended" if passage.is_ending else "active"

    def get_available_choices(self) -> List[ChoiceDef]:
        """Choices of the current passage whose conditions hold, in document order."""
        state = self._require_state()
        passage = self.current_passage
        if passage is None:
            return []
        return [choice for choice in passage.playable_choices() if is_available(choice, state.variables)]

    def make_choice(self, choice: ChoiceDef) -> None:
        """Take ``choice`` from the current passage.

        Availability is not re-checked, and a ``goto`` outside the story is
        accepted; the session then reports a missing passage.
        """
        state = self._require_state()
        state.history.append(state.current_passage_id)
        state.variables = apply_state_change(state.variables, choice.set_state)
        state.current_passage_id = choice.goto
        if self.current_passage is None:
            logger.warning("Choice %r leads to missing passage %r", choice.text, choice.goto)
        else:
            logger.debug("Moved to passage %r", choice.goto)

    def choose(self, index: int) -> ChoiceDef:
        """Take the available choice at ``index`` (0-based) and return it."""
        choices = self.get_available_choices()
        try:
            choice = choices[index]
        except IndexError as exc:
            raise IndexError(
                f"Choice index {index} is invalid for passage '{self.current_passage_id}'."
            ) from exc
        self.make_choice(choice)
        return choice

    def go_back(self) -> None:
        state = self._require_state()
        if not state.history:
            return
        state.current_passage_id = state.history.pop()
        logger.debug("Went back to passage %r", state.current_passage_id)

    def view(self) -> PassageView:
        """Return the view model for the current passage."""
        state = self._require_state()
        passage = self.current_passage
        if passage is None:
            return PassageView(
                passage_id=state.current_passage_id,
                text="",
                paragraphs=[],
                missing=True,
                can_go_back=self.can_go_back,
            )
        return PassageView(
            passage_id=state.current_passage_id,
            text=passage.text,
            paragraphs=passage.paragraphs(),
            choices=self.get_available_choices(),
            is_ending=passage.is_ending,
            ending_type=passage.ending_type if passage.is_ending else None,
            can_go_back=self.can_go_back,
        )

    def _require_story(self) -> StoryDef:
        if self._story is None:
            raise SessionNotLoadedError("No story is loaded.")
        return self._story

    def _require_state(self) -> PlaybackState:
        if self._state is None:
            raise SessionNotLoadedError("No story is loaded.")
        return self._state
