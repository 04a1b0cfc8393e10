"""Shared type aliases for the core and domain layers."""
from typing import Dict, Literal, Union

Scalar = Union[bool, int, float, str]
StateVector = Dict[str, Scalar]
EndingType = Literal["good", "bad", "neutral"]
NodeType = Literal["start", "passage", "ending", "state", "condition"]
Severity = Literal["ERROR", "WARN"]
ConditionOperator = Literal["==", "!=", ">", "<", ">=", "<="]

ENDING_TYPES: tuple[EndingType, ...] = ("good", "bad", "neutral")
NODE_TYPES: tuple[NodeType, ...] = ("start", "passage", "ending", "state", "condition")
CONDITION_OPERATORS: tuple[ConditionOperator, ...] = ("==", "!=", ">", "<", ">=", "<=")

__all__ = [
    "CONDITION_OPERATORS",
    "ConditionOperator",
    "ENDING_TYPES",
    "EndingType",
    "NODE_TYPES",
    "NodeType",
    "Scalar",
    "Severity",
    "StateVector",
]
