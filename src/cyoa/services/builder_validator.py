"""Validation of builder graphs before they are compiled."""
from __future__ import annotations

import logging
from collections import deque
from typing import Dict, List

from cyoa.domain.builder_graph import BuilderGraph
from cyoa.domain.defs import (
    FALSE_HANDLE,
    BuilderNode,
    ConditionNodeData,
    EndingNodeData,
    PassageNodeData,
    StateNodeData,
)
from cyoa.services.story_validator import Issue, ValidationReport

logger = logging.getLogger(__name__)


def validate_builder_graph(graph: BuilderGraph) -> ValidationReport:
    """Report graph-level problems: start/ending structure, wiring and reachability."""
    issues: List[Issue] = []
    start_nodes = graph.nodes_of_type("start")
    _validate_start_nodes(graph, start_nodes, issues)
    _validate_metadata(graph, issues)
    for node in graph.nodes:
        _validate_node(graph, node, issues)
    _validate_duplicate_passage_ids(graph, issues)
    _validate_auxiliary_cycles(graph, issues)
    if start_nodes:
        _validate_reachability(graph, start_nodes[0], issues)
    report = ValidationReport.from_issues(issues)
    logger.debug(
        "Validated builder graph: nodes=%d edges=%d errors=%d warnings=%d",
        len(graph.nodes),
        len(graph.edges),
        len(report.errors),
        len(report.warnings),
    )
    return report


def _validate_start_nodes(graph: BuilderGraph, start_nodes: List[BuilderNode], issues: List[Issue]) -> None:
    if not start_nodes:
        issues.append(Issue("ERROR", "NO_START_NODE", "no-start", "Story needs a Start node"))
    elif len(start_nodes) > 1:
        issues.append(
            Issue(
                "ERROR",
                "MULTIPLE_START_NODES",
                "multiple-starts",
                "Only one Start node allowed",
                ref=start_nodes[1].id,
            )
        )
    if graph.nodes and not graph.nodes_of_type("ending"):
        issues.append(Issue("ERROR", "NO_ENDING_NODE", "no-ending", "Story needs at least one Ending node"))


def _validate_metadata(graph: BuilderGraph, issues: List[Issue]) -> None:
    if not graph.metadata.id.strip():
        issues.append(Issue("WARN", "MISSING_STORY_ID", "no-story-id", "Story ID is not set"))
    if not graph.metadata.author.strip():
        issues.append(Issue("WARN", "MISSING_AUTHOR", "no-author", "Author name is not set"))


def _validate_node(graph: BuilderGraph, node: BuilderNode, issues: List[Issue]) -> None:
    data = node.data
    if not isinstance(data, EndingNodeData) and not graph.outgoing(node.id):
        label = "Start" if node.type == "start" else "Node"
        issues.append(
            Issue(
                "ERROR",
                "NO_OUTGOING_EDGE",
                f"disconnected-{node.id}",
                f"{label} has no outgoing connection",
                ref=node.id,
            )
        )
    if isinstance(data, PassageNodeData):
        if not data.text.strip():
            issues.append(
                Issue("WARN", "EMPTY_PASSAGE_TEXT", f"empty-passage-{node.id}", "Passage has no text", ref=node.id)
            )
        if not data.passage_id.strip():
            issues.append(
                Issue("ERROR", "MISSING_PASSAGE_ID", f"no-passage-id-{node.id}", "Passage ID is required", ref=node.id)
            )
        for index, choice in enumerate(data.choices):
            if not graph.outgoing(node.id, choice.handle):
                issues.append(
                    Issue(
                        "ERROR",
                        "UNCONNECTED_CHOICE",
                        f"unconnected-choice-{node.id}-{index}",
                        f"Choice {index + 1} is not connected",
                        ref=node.id,
                    )
                )
            if not choice.text.strip():
                issues.append(
                    Issue(
                        "WARN",
                        "EMPTY_CHOICE_TEXT",
                        f"empty-choice-{node.id}-{index}",
                        f"Choice {index + 1} has no text",
                        ref=node.id,
                    )
                )
    elif isinstance(data, EndingNodeData):
        if not data.text.strip():
            issues.append(
                Issue("WARN", "EMPTY_ENDING_TEXT", f"empty-ending-{node.id}", "Ending has no text", ref=node.id)
            )
        if not data.passage_id.strip():
            issues.append(
                Issue("ERROR", "MISSING_PASSAGE_ID", f"no-ending-id-{node.id}", "Ending ID is required", ref=node.id)
            )
        if not graph.incoming(node.id):
            issues.append(
                Issue(
                    "WARN",
                    "UNREACHABLE_ENDING",
                    f"unreachable-ending-{node.id}",
                    "Ending is not reachable",
                    ref=node.id,
                )
            )
    elif isinstance(data, ConditionNodeData):
        for index, entry in enumerate(data.conditions):
            if entry.operator != "==":
                issues.append(
                    Issue(
                        "WARN",
                        "UNSUPPORTED_OPERATOR",
                        f"unsupported-operator-{node.id}-{index}",
                        f"Condition {index + 1} uses '{entry.operator}', which is exported as equality",
                        ref=node.id,
                    )
                )
        if graph.outgoing(node.id, FALSE_HANDLE):
            issues.append(
                Issue(
                    "WARN",
                    "FALSE_BRANCH_IGNORED",
                    f"false-branch-{node.id}",
                    "The false branch of a condition is not included in the exported story",
                    ref=node.id,
                )
            )


def _validate_duplicate_passage_ids(graph: BuilderGraph, issues: List[Issue]) -> None:
    owners: Dict[str, List[str]] = {}
    for node in graph.iter_passage_nodes():
        declared = node.data.passage_id
        if declared:
            owners.setdefault(declared, []).append(node.id)
    for passage_id, node_ids in owners.items():
        if len(node_ids) > 1:
            issues.append(
                Issue(
                    "ERROR",
                    "DUPLICATE_PASSAGE_ID",
                    f"duplicate-id-{passage_id}",
                    f'Duplicate passage ID: "{passage_id}"',
                    ref=node_ids[1],
                    context={"node_ids": ",".join(node_ids)},
                )
            )


def _validate_auxiliary_cycles(graph: BuilderGraph, issues: List[Issue]) -> None:
    reported: set[frozenset[str]] = set()
    for node in graph.nodes:
        if not isinstance(node.data, (StateNodeData, ConditionNodeData)):
            continue
        path: List[str] = []
        current: BuilderNode | None = node
        while current is not None and isinstance(current.data, (StateNodeData, ConditionNodeData)):
            if current.id in path:
                cycle = path[path.index(current.id):]
                key = frozenset(cycle)
                if key not in reported:
                    reported.add(key)
                    issues.append(
                        Issue(
                            "ERROR",
                            "AUXILIARY_CYCLE",
                            f"aux-cycle-{cycle[0]}",
                            "State/condition nodes form a cycle with no passage",
                            ref=cycle[0],
                            context={"cycle": " -> ".join(cycle + [cycle[0]])},
                        )
                    )
                break
            path.append(current.id)
            edge = graph.auxiliary_successor(current)
            current = graph.get_node(edge.target) if edge else None


def _validate_reachability(graph: BuilderGraph, start: BuilderNode, issues: List[Issue]) -> None:
    reachable: set[str] = set()
    queue = deque([start.id])
    while queue:
        node_id = queue.popleft()
        if node_id in reachable:
            continue
        reachable.add(node_id)
        for edge in graph.outgoing(node_id):
            if edge.target not in reachable:
                queue.append(edge.target)
    for node in graph.nodes:
        if node.type == "start" or node.id in reachable:
            continue
        issues.append(
            Issue(
                "WARN",
                "UNREACHABLE_NODE",
                f"orphan-{node.id}",
                "Node is not reachable from Start",
                ref=node.id,
            )
        )
