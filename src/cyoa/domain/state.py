"""Playback session state tracking."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from cyoa.core.types import StateVector


@dataclass
class PlaybackState:
    """Position, history stack and state vector of one playback session."""

    current_passage_id: str
    history: List[str] = field(default_factory=list)
    variables: StateVector = field(default_factory=dict)
