"""Builder graph node payloads.

Each node kind carries its own payload class; ``BuilderNodeData`` is the union
of them and ``node_type_of`` maps a payload back to its type tag.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Union

from cyoa.core.types import ConditionOperator, EndingType, NodeType, Scalar


@dataclass(slots=True)
class StateEntry:
    """Key/value pair edited in the builder (initial state or state change)."""

    key: str
    value: Scalar = ""


@dataclass(slots=True)
class ConditionEntry:
    key: str
    value: Scalar = ""
    operator: ConditionOperator = "=="


@dataclass(slots=True)
class BuilderChoice:
    """Choice row on a passage node; its output handle is ``choice-<id>``."""

    id: str
    text: str = "Continue"
    set_state: Dict[str, Scalar] = field(default_factory=dict)
    condition: Dict[str, Scalar] = field(default_factory=dict)

    @property
    def handle(self) -> str:
        return choice_handle(self.id)


@dataclass(slots=True)
class StartNodeData:
    label: str = "Story Start"
    initial_state: List[StateEntry] = field(default_factory=list)


@dataclass(slots=True)
class PassageNodeData:
    passage_id: str
    text: str = ""
    choices: List[BuilderChoice] = field(default_factory=list)


@dataclass(slots=True)
class EndingNodeData:
    passage_id: str
    text: str = ""
    ending_type: EndingType | None = None


@dataclass(slots=True)
class StateNodeData:
    state_changes: List[StateEntry] = field(default_factory=list)


@dataclass(slots=True)
class ConditionNodeData:
    conditions: List[ConditionEntry] = field(default_factory=list)


BuilderNodeData = Union[
    StartNodeData,
    PassageNodeData,
    EndingNodeData,
    StateNodeData,
    ConditionNodeData,
]

_TYPE_BY_PAYLOAD: Dict[type, NodeType] = {
    StartNodeData: "start",
    PassageNodeData: "passage",
    EndingNodeData: "ending",
    StateNodeData: "state",
    ConditionNodeData: "condition",
}

TRUE_HANDLE = "true"
FALSE_HANDLE = "false"


def choice_handle(choice_id: str) -> str:
    return f"choice-{choice_id}"


def node_type_of(data: BuilderNodeData) -> NodeType:
    """Return the type tag for a node payload."""
    try:
        return _TYPE_BY_PAYLOAD[type(data)]
    except KeyError as exc:
        raise TypeError(f"Unsupported builder node payload: {type(data).__name__}") from exc


@dataclass(slots=True)
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass(slots=True)
class BuilderNode:
    id: str
    data: BuilderNodeData
    position: Position = field(default_factory=Position)

    @property
    def type(self) -> NodeType:
        return node_type_of(self.data)

    @property
    def passage_id(self) -> str | None:
        """Declared passage id for passage/ending nodes, falling back to the node id."""
        if isinstance(self.data, (PassageNodeData, EndingNodeData)):
            return self.data.passage_id or self.id
        return None


@dataclass(slots=True)
class BuilderEdge:
    id: str
    source: str
    target: str
    source_handle: str | None = None


@dataclass(slots=True)
class StoryMetadata:
    id: str = ""
    title: str = "Untitled Story"
    author: str = ""
    description: str = ""
    version: str = "1.0"
