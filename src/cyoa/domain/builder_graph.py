"""Editing-time node/edge graph used by the story builder."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List

from cyoa.core.ids import CounterIdGenerator, IdGenerator
from cyoa.core.types import NodeType
from cyoa.domain.defs import (
    TRUE_HANDLE,
    BuilderChoice,
    BuilderEdge,
    BuilderNode,
    BuilderNodeData,
    ConditionNodeData,
    EndingNodeData,
    PassageNodeData,
    Position,
    StartNodeData,
    StateNodeData,
    StoryMetadata,
)

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def _slugify(text: str, separator: str, max_length: int) -> str:
    cleaned = _NON_SLUG_CHARS.sub("", text.lower())
    return _WHITESPACE.sub(separator, cleaned)[:max_length]


def generate_story_id(title: str) -> str:
    """Derive a story id from its title (``"My Tale!"`` -> ``"my-tale"``)."""
    return _slugify(title, "-", 50) or "untitled-story"


def generate_passage_id(label: str) -> str:
    return _slugify(label, "_", 30) or "passage"


@dataclass
class BuilderGraph:
    """Nodes, edges and story metadata of one editing session.

    The identifier generator belongs to the graph, so two sessions in the
    same process never hand out colliding node ids.
    """

    nodes: List[BuilderNode] = field(default_factory=list)
    edges: List[BuilderEdge] = field(default_factory=list)
    metadata: StoryMetadata = field(default_factory=StoryMetadata)
    id_generator: IdGenerator = field(default_factory=CounterIdGenerator, repr=False, compare=False)

    def get_node(self, node_id: str) -> BuilderNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def nodes_of_type(self, node_type: NodeType) -> List[BuilderNode]:
        return [node for node in self.nodes if node.type == node_type]

    def outgoing(self, node_id: str, handle: str | None = None) -> List[BuilderEdge]:
        """Edges leaving ``node_id``, optionally restricted to one output handle."""
        return [
            edge
            for edge in self.edges
            if edge.source == node_id and (handle is None or edge.source_handle == handle)
        ]

    def incoming(self, node_id: str) -> List[BuilderEdge]:
        return [edge for edge in self.edges if edge.target == node_id]

    def auxiliary_successor(self, node: BuilderNode) -> BuilderEdge | None:
        """Edge a state or condition node passes control along.

        State nodes continue along their first outgoing edge; condition nodes
        along their ``true`` handle. Other node types have no successor.
        """
        if isinstance(node.data, StateNodeData):
            edges = self.outgoing(node.id)
        elif isinstance(node.data, ConditionNodeData):
            edges = self.outgoing(node.id, TRUE_HANDLE)
        else:
            return None
        return edges[0] if edges else None

    def iter_passage_nodes(self) -> Iterator[BuilderNode]:
        """Yield passage and ending nodes in graph order."""
        for node in self.nodes:
            if isinstance(node.data, (PassageNodeData, EndingNodeData)):
                yield node

    def new_choice(self, text: str = "Continue") -> BuilderChoice:
        return BuilderChoice(id=self.id_generator.next_id("choice"), text=text)

    def default_data(self, node_type: NodeType) -> BuilderNodeData:
        """Fresh payload for a newly placed node."""
        if node_type == "start":
            return StartNodeData()
        if node_type == "passage":
            return PassageNodeData(
                passage_id=generate_passage_id("New Passage"),
                choices=[self.new_choice()],
            )
        if node_type == "ending":
            return EndingNodeData(passage_id=generate_passage_id("Ending"), ending_type="neutral")
        if node_type == "state":
            return StateNodeData()
        if node_type == "condition":
            return ConditionNodeData()
        raise ValueError(f"Unknown builder node type '{node_type}'.")

    def add_node(
        self,
        node_type: NodeType,
        position: Position | None = None,
        data: BuilderNodeData | None = None,
    ) -> BuilderNode:
        node = BuilderNode(
            id=self.id_generator.next_id(node_type),
            data=data if data is not None else self.default_data(node_type),
            position=position or Position(),
        )
        self.nodes.append(node)
        return node

    def connect(self, source: str, target: str, source_handle: str | None = None) -> BuilderEdge:
        """Add an edge between two existing nodes."""
        if self.get_node(source) is None:
            raise KeyError(source)
        if self.get_node(target) is None:
            raise KeyError(target)
        edge = BuilderEdge(
            id=self.id_generator.next_id("edge"),
            source=source,
            target=target,
            source_handle=source_handle,
        )
        self.edges.append(edge)
        return edge

    def add_node_with_connection(
        self,
        node_type: NodeType,
        source: str,
        source_handle: str | None = None,
        position: Position | None = None,
    ) -> tuple[BuilderNode, BuilderEdge]:
        node = self.add_node(node_type, position)
        edge = self.connect(source, node.id, source_handle)
        return node, edge

    def delete_node(self, node_id: str) -> None:
        """Remove a node together with every edge touching it."""
        self.nodes = [node for node in self.nodes if node.id != node_id]
        self.edges = [edge for edge in self.edges if edge.source != node_id and edge.target != node_id]

    def delete_edge(self, edge_id: str) -> None:
        self.edges = [edge for edge in self.edges if edge.id != edge_id]

    def clear(self) -> None:
        self.nodes = []
        self.edges = []
        self.metadata = StoryMetadata()
