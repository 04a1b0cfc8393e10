"""Translation between builder graphs and story documents."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List

from cyoa.core.ids import CounterIdGenerator, IdGenerator
from cyoa.core.types import Scalar
from cyoa.domain.builder_graph import BuilderGraph, generate_story_id
from cyoa.domain.defs import (
    BuilderChoice,
    BuilderNode,
    ChoiceDef,
    ConditionNodeData,
    EndingNodeData,
    PassageDef,
    PassageNodeData,
    Position,
    StartNodeData,
    StateEntry,
    StateNodeData,
    StoryDef,
    StoryMetadata,
)
from cyoa.services.errors import GraphCompileError

logger = logging.getLogger(__name__)

LEVEL_SPACING_Y = 200.0
NODE_SPACING_X = 300.0


@dataclass(slots=True)
class ResolvedTarget:
    """Destination of a choice edge after walking through auxiliary nodes."""

    goto: str = ""
    set_state: Dict[str, Scalar] = field(default_factory=dict)
    condition: Dict[str, Scalar] = field(default_factory=dict)


def resolve_target(graph: BuilderGraph, node_id: str) -> ResolvedTarget:
    """Follow state/condition nodes from ``node_id`` to a passage or ending.

    State changes and conditions met along the way are merged in walk order,
    so later nodes override earlier ones. A chain that stops before reaching
    a passage resolves to an empty ``goto``.
    """
    resolved = ResolvedTarget()
    visited: List[str] = []
    current = graph.get_node(node_id)
    while current is not None:
        if isinstance(current.data, (PassageNodeData, EndingNodeData)):
            resolved.goto = current.passage_id or ""
            return resolved
        if current.id in visited:
            raise GraphCompileError(
                f"Cycle through state/condition nodes: {' -> '.join(visited + [current.id])}"
            )
        visited.append(current.id)
        if isinstance(current.data, StateNodeData):
            resolved.set_state.update(_entries_to_dict(current.data.state_changes))
        elif isinstance(current.data, ConditionNodeData):
            resolved.condition.update(
                {entry.key: entry.value for entry in current.data.conditions if entry.key}
            )
        else:
            break
        edge = graph.auxiliary_successor(current)
        current = graph.get_node(edge.target) if edge else None
    return resolved


def _entries_to_dict(entries: List[StateEntry]) -> Dict[str, Scalar]:
    return {entry.key: entry.value for entry in entries if entry.key}


def compile_graph(graph: BuilderGraph) -> StoryDef:
    """Compile a builder graph into a story document.

    Raises GraphCompileError when the graph does not have exactly one start
    node or when a choice target loops through auxiliary nodes forever.
    """
    start_nodes = graph.nodes_of_type("start")
    if len(start_nodes) != 1:
        raise GraphCompileError(f"Expected exactly one start node, found {len(start_nodes)}.")
    start_node = start_nodes[0]

    passages: Dict[str, PassageDef] = {}
    for node in graph.iter_passage_nodes():
        passages[node.passage_id or node.id] = _compile_passage(graph, node)

    start_edges = graph.outgoing(start_node.id)
    start = resolve_target(graph, start_edges[0].target).goto if start_edges else ""

    start_data = start_node.data
    assert isinstance(start_data, StartNodeData)
    metadata = graph.metadata
    title = metadata.title or "Untitled Story"
    story = StoryDef(
        id=metadata.id or generate_story_id(title),
        title=title,
        author=metadata.author or "Anonymous",
        description=metadata.description,
        version=metadata.version or "1.0",
        start=start,
        passages=passages,
        initial_state=_entries_to_dict(start_data.initial_state),
    )
    logger.debug("Compiled graph into story %r: passages=%d start=%r", story.id, len(passages), start)
    return story


def _compile_passage(graph: BuilderGraph, node: BuilderNode) -> PassageDef:
    data = node.data
    if isinstance(data, EndingNodeData):
        return PassageDef(text=data.text, is_ending=True, ending_type=data.ending_type)
    assert isinstance(data, PassageNodeData)
    return PassageDef(
        text=data.text,
        choices=[_compile_choice(graph, node, choice) for choice in data.choices],
    )


def _compile_choice(graph: BuilderGraph, node: BuilderNode, choice: BuilderChoice) -> ChoiceDef:
    edges = graph.outgoing(node.id, choice.handle)
    resolved = resolve_target(graph, edges[0].target) if edges else ResolvedTarget()
    return ChoiceDef(
        text=choice.text,
        goto=resolved.goto,
        set_state={**resolved.set_state, **choice.set_state},
        condition={**resolved.condition, **choice.condition},
    )


def decompile_story(story: StoryDef, id_generator: IdGenerator | None = None) -> BuilderGraph:
    """Rebuild an editable graph from a story document.

    Choice state changes and conditions stay on the choices; no auxiliary
    nodes are created. Dangling ``goto`` targets get no edge.
    """
    graph = BuilderGraph(
        metadata=StoryMetadata(
            id=story.id,
            title=story.title,
            author=story.author,
            description=story.description,
            version=story.version,
        ),
        id_generator=id_generator or CounterIdGenerator(),
    )
    start_node = graph.add_node(
        "start",
        data=StartNodeData(
            initial_state=[StateEntry(key=key, value=value) for key, value in story.initial_state.items()]
        ),
    )

    node_by_passage: Dict[str, BuilderNode] = {}
    for passage_id, passage in story.passages.items():
        if passage.is_ending:
            node = graph.add_node(
                "ending",
                data=EndingNodeData(
                    passage_id=passage_id,
                    text=passage.text,
                    ending_type=passage.ending_type,
                ),
            )
        else:
            node = graph.add_node(
                "passage",
                data=PassageNodeData(
                    passage_id=passage_id,
                    text=passage.text,
                    choices=[
                        BuilderChoice(
                            id=graph.id_generator.next_id("choice"),
                            text=choice.text,
                            set_state=dict(choice.set_state),
                            condition=dict(choice.condition),
                        )
                        for choice in passage.choices
                    ],
                ),
            )
        node_by_passage[passage_id] = node

    if story.start in node_by_passage:
        graph.connect(start_node.id, node_by_passage[story.start].id)
    for passage_id, passage in story.passages.items():
        node = node_by_passage[passage_id]
        if not isinstance(node.data, PassageNodeData):
            continue
        for choice, builder_choice in zip(passage.choices, node.data.choices):
            target = node_by_passage.get(choice.goto)
            if target is not None:
                graph.connect(node.id, target.id, builder_choice.handle)

    layout(graph, start_node)
    logger.debug("Decompiled story %r into %d nodes", story.id, len(graph.nodes))
    return graph


def layout(graph: BuilderGraph, start_node: BuilderNode | None = None) -> None:
    """Assign cosmetic positions by breadth-first level from the start node.

    Endings sit one level below the deepest passage; nodes never reached from
    start sit one level below the endings.
    """
    if start_node is None:
        starts = graph.nodes_of_type("start")
        start_node = starts[0] if starts else None
    levels: Dict[str, int] = {}
    if start_node is not None:
        levels[start_node.id] = 0
        queue = deque([start_node.id])
        while queue:
            node_id = queue.popleft()
            for edge in graph.outgoing(node_id):
                if edge.target not in levels:
                    levels[edge.target] = levels[node_id] + 1
                    queue.append(edge.target)

    non_endings = [levels[node.id] for node in graph.nodes if node.id in levels and node.type != "ending"]
    max_level = max(non_endings, default=0)
    rows: Dict[int, List[BuilderNode]] = {}
    for node in graph.nodes:
        if node.type == "ending":
            level = max_level + 1
        else:
            level = levels.get(node.id, max_level + 2)
        rows.setdefault(level, []).append(node)

    for level, row in rows.items():
        offset = (len(row) - 1) * NODE_SPACING_X / 2
        for index, node in enumerate(row):
            node.position = Position(x=index * NODE_SPACING_X - offset, y=level * LEVEL_SPACING_Y)
