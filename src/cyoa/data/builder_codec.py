"""Conversion between builder graphs and their JSON draft form.

The draft shape mirrors what the visual editor exchanges::

    {"metadata": {...}, "nodes": [{"id", "type", "position", "data"}], "edges": [...]}
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping

from cyoa.core.ids import CounterIdGenerator, IdGenerator
from cyoa.core.types import CONDITION_OPERATORS, ENDING_TYPES, Scalar
from cyoa.data.errors import SchemaError
from cyoa.domain.builder_graph import BuilderGraph
from cyoa.domain.defs import (
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
)

GraphPayload = Dict[str, Any]

_ID_COUNTER = re.compile(r"-(\d+)$")


def parse_builder_graph(raw: object, id_generator: IdGenerator | None = None) -> BuilderGraph:
    """Build a BuilderGraph from a decoded draft payload.

    When no generator is supplied, a counter is created and moved past every
    numeric suffix already in use so new ids cannot collide with loaded ones.
    """
    payload = _require_mapping(raw, "graph")
    metadata = _parse_metadata(payload.get("metadata"))
    nodes = [
        _parse_node(entry, f"graph nodes[{index}]")
        for index, entry in enumerate(_require_list(payload.get("nodes", []), "graph nodes"))
    ]
    edges = [
        _parse_edge(entry, f"graph edges[{index}]")
        for index, entry in enumerate(_require_list(payload.get("edges", []), "graph edges"))
    ]
    if id_generator is None:
        counter = CounterIdGenerator()
        for used_id in _used_ids(nodes, edges):
            match = _ID_COUNTER.search(used_id)
            if match:
                counter.skip_past(int(match.group(1)))
        id_generator = counter
    return BuilderGraph(nodes=nodes, edges=edges, metadata=metadata, id_generator=id_generator)


def _used_ids(nodes: List[BuilderNode], edges: List[BuilderEdge]) -> List[str]:
    used = [node.id for node in nodes] + [edge.id for edge in edges]
    for node in nodes:
        if isinstance(node.data, PassageNodeData):
            used.extend(choice.id for choice in node.data.choices)
    return used


def _parse_metadata(raw: object) -> StoryMetadata:
    if raw is None:
        return StoryMetadata()
    payload = _require_mapping(raw, "graph metadata")
    defaults = StoryMetadata()
    return StoryMetadata(
        id=_str_field(payload, "id", "graph metadata", defaults.id),
        title=_str_field(payload, "title", "graph metadata", defaults.title),
        author=_str_field(payload, "author", "graph metadata", defaults.author),
        description=_str_field(payload, "description", "graph metadata", defaults.description),
        version=_str_field(payload, "version", "graph metadata", defaults.version),
    )


def _parse_node(raw: object, context: str) -> BuilderNode:
    payload = _require_mapping(raw, context)
    node_id = _str_field(payload, "id", context, None)
    node_type = payload.get("type")
    data_payload = _require_mapping(payload.get("data", {}), f"{context} data")
    data_context = f"node '{node_id}' data"
    data: BuilderNodeData
    if node_type == "start":
        data = StartNodeData(
            label=_str_field(data_payload, "label", data_context, "Story Start"),
            initial_state=_parse_state_entries(data_payload.get("initialState"), f"{data_context}.initialState"),
        )
    elif node_type == "passage":
        data = PassageNodeData(
            passage_id=_str_field(data_payload, "passageId", data_context, ""),
            text=_str_field(data_payload, "text", data_context, ""),
            choices=[
                _parse_choice(entry, f"{data_context}.choices[{index}]")
                for index, entry in enumerate(
                    _require_list(data_payload.get("choices", []), f"{data_context}.choices")
                )
            ],
        )
    elif node_type == "ending":
        ending_type = data_payload.get("endingType")
        if ending_type is not None and ending_type not in ENDING_TYPES:
            raise SchemaError(f"{data_context}.endingType must be one of {', '.join(ENDING_TYPES)}.")
        data = EndingNodeData(
            passage_id=_str_field(data_payload, "passageId", data_context, ""),
            text=_str_field(data_payload, "text", data_context, ""),
            ending_type=ending_type,
        )
    elif node_type == "state":
        data = StateNodeData(
            state_changes=_parse_state_entries(data_payload.get("stateChanges"), f"{data_context}.stateChanges")
        )
    elif node_type == "condition":
        data = ConditionNodeData(
            conditions=_parse_condition_entries(data_payload.get("conditions"), f"{data_context}.conditions")
        )
    else:
        raise SchemaError(f"{context} has unknown node type {node_type!r}.")
    return BuilderNode(id=node_id, data=data, position=_parse_position(payload.get("position"), context))


def _parse_position(raw: object, context: str) -> Position:
    if raw is None:
        return Position()
    payload = _require_mapping(raw, f"{context} position")
    coords = []
    for axis in ("x", "y"):
        value = payload.get(axis, 0)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SchemaError(f"{context} position.{axis} must be a number.")
        coords.append(value)
    return Position(x=coords[0], y=coords[1])


def _parse_choice(raw: object, context: str) -> BuilderChoice:
    payload = _require_mapping(raw, context)
    return BuilderChoice(
        id=_str_field(payload, "id", context, None),
        text=_str_field(payload, "text", context, ""),
        set_state=_parse_scalar_map(payload.get("setState"), f"{context}.setState"),
        condition=_parse_scalar_map(payload.get("condition"), f"{context}.condition"),
    )


def _parse_state_entries(raw: object, context: str) -> List[StateEntry]:
    entries: List[StateEntry] = []
    for index, entry in enumerate(_require_list(raw or [], context)):
        entry_context = f"{context}[{index}]"
        payload = _require_mapping(entry, entry_context)
        entries.append(
            StateEntry(
                key=_str_field(payload, "key", entry_context, ""),
                value=_require_scalar(payload.get("value", ""), f"{entry_context}.value"),
            )
        )
    return entries


def _parse_condition_entries(raw: object, context: str) -> List[ConditionEntry]:
    entries: List[ConditionEntry] = []
    for index, entry in enumerate(_require_list(raw or [], context)):
        entry_context = f"{context}[{index}]"
        payload = _require_mapping(entry, entry_context)
        operator = payload.get("operator", "==")
        if operator not in CONDITION_OPERATORS:
            raise SchemaError(f"{entry_context}.operator {operator!r} is not supported.")
        entries.append(
            ConditionEntry(
                key=_str_field(payload, "key", entry_context, ""),
                value=_require_scalar(payload.get("value", ""), f"{entry_context}.value"),
                operator=operator,
            )
        )
    return entries


def _parse_edge(raw: object, context: str) -> BuilderEdge:
    payload = _require_mapping(raw, context)
    handle = payload.get("sourceHandle")
    if handle is not None and not isinstance(handle, str):
        raise SchemaError(f"{context} sourceHandle must be a string.")
    return BuilderEdge(
        id=_str_field(payload, "id", context, None),
        source=_str_field(payload, "source", context, None),
        target=_str_field(payload, "target", context, None),
        source_handle=handle,
    )


def _parse_scalar_map(raw: object, context: str) -> Dict[str, Scalar]:
    if raw is None:
        return {}
    payload = _require_mapping(raw, context)
    return {key: _require_scalar(value, f"{context}.{key}") for key, value in payload.items()}


def _require_scalar(value: object, context: str) -> Scalar:
    if not isinstance(value, (bool, int, float, str)):
        raise SchemaError(f"{context} must be a boolean, number or string.")
    return value


def _require_mapping(value: object, context: str) -> Mapping[str, object]:
    if not isinstance(value, dict):
        raise SchemaError(f"{context} must be an object.")
    return value


def _require_list(value: object, context: str) -> list:
    if not isinstance(value, list):
        raise SchemaError(f"{context} must be a list.")
    return value


def _str_field(payload: Mapping[str, object], name: str, context: str, default: str | None) -> str:
    value = payload.get(name)
    if value is None:
        if default is None:
            raise SchemaError(f"{context} {name} is required.")
        return default
    if not isinstance(value, str):
        raise SchemaError(f"{context} {name} must be a string.")
    return value


def graph_to_dict(graph: BuilderGraph) -> GraphPayload:
    """Return the JSON draft form of a builder graph."""
    metadata = graph.metadata
    return {
        "metadata": {
            "id": metadata.id,
            "title": metadata.title,
            "author": metadata.author,
            "description": metadata.description,
            "version": metadata.version,
        },
        "nodes": [_node_to_dict(node) for node in graph.nodes],
        "edges": [_edge_to_dict(edge) for edge in graph.edges],
    }


def _node_to_dict(node: BuilderNode) -> Dict[str, Any]:
    data = node.data
    if isinstance(data, StartNodeData):
        data_payload: Dict[str, Any] = {
            "label": data.label,
            "initialState": [{"key": entry.key, "value": entry.value} for entry in data.initial_state],
        }
    elif isinstance(data, PassageNodeData):
        data_payload = {
            "passageId": data.passage_id,
            "text": data.text,
            "choices": [_choice_to_dict(choice) for choice in data.choices],
        }
    elif isinstance(data, EndingNodeData):
        data_payload = {"passageId": data.passage_id, "text": data.text}
        if data.ending_type is not None:
            data_payload["endingType"] = data.ending_type
    elif isinstance(data, StateNodeData):
        data_payload = {
            "stateChanges": [{"key": entry.key, "value": entry.value} for entry in data.state_changes]
        }
    else:
        data_payload = {
            "conditions": [
                {"key": entry.key, "operator": entry.operator, "value": entry.value}
                for entry in data.conditions
            ]
        }
    return {
        "id": node.id,
        "type": node.type,
        "position": {"x": node.position.x, "y": node.position.y},
        "data": data_payload,
    }


def _choice_to_dict(choice: BuilderChoice) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"id": choice.id, "text": choice.text}
    if choice.set_state:
        payload["setState"] = dict(choice.set_state)
    if choice.condition:
        payload["condition"] = dict(choice.condition)
    return payload


def _edge_to_dict(edge: BuilderEdge) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"id": edge.id, "source": edge.source, "target": edge.target}
    if edge.source_handle is not None:
        payload["sourceHandle"] = edge.source_handle
    return payload
