"""Domain definition exports."""

from .builder_def import (
    FALSE_HANDLE,
    TRUE_HANDLE,
    BuilderChoice,
    BuilderEdge,
    BuilderNode,
    BuilderNodeData,
    ConditionEntry,
    ConditionNodeData,
    EndingNodeData,
    PassageNodeData,
    Position,
    StartNodeData,
    StateEntry,
    StateNodeData,
    StoryMetadata,
    choice_handle,
    node_type_of,
)
from .manifest_def import ManifestEntryDef
from .story_def import ChoiceDef, PassageDef, StoryDef

__all__ = [
    "FALSE_HANDLE",
    "TRUE_HANDLE",
    "BuilderChoice",
    "BuilderEdge",
    "BuilderNode",
    "BuilderNodeData",
    "ChoiceDef",
    "ConditionEntry",
    "ConditionNodeData",
    "EndingNodeData",
    "ManifestEntryDef",
    "PassageDef",
    "PassageNodeData",
    "Position",
    "StartNodeData",
    "StateEntry",
    "StateNodeData",
    "StoryDef",
    "StoryMetadata",
    "choice_handle",
    "node_type_of",
]
