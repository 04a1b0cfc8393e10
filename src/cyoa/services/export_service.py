"""One-shot export of a builder graph to a story file payload."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from cyoa.data.paths import story_filename
from cyoa.data.story_codec import dumps_story
from cyoa.domain.builder_graph import BuilderGraph, generate_story_id
from cyoa.domain.defs import StoryDef
from cyoa.services.builder_validator import validate_builder_graph
from cyoa.services.errors import GraphCompileError
from cyoa.services.story_validator import ValidationReport, validate_story
from cyoa.services.translator import compile_graph

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExportResult:
    story: StoryDef | None
    story_json: str
    filename: str
    report: ValidationReport
    document_report: ValidationReport

    @property
    def can_export(self) -> bool:
        """Export is allowed only when the graph compiled and neither report has errors."""
        return self.story is not None and self.report.is_valid and self.document_report.is_valid


def export_graph(graph: BuilderGraph) -> ExportResult:
    """Validate, compile and serialize a builder graph.

    A graph that cannot be compiled (no start node, several start nodes or
    a loop through auxiliary nodes) yields a result with no story; the
    graph report carries the reason.
    """
    report = validate_builder_graph(graph)
    try:
        story = compile_graph(graph)
    except GraphCompileError as exc:
        logger.info("Graph not exportable: %s", exc)
        title = graph.metadata.title or "Untitled Story"
        return ExportResult(
            story=None,
            story_json="",
            filename=story_filename(graph.metadata.id or generate_story_id(title)),
            report=report,
            document_report=ValidationReport(),
        )
    document_report = validate_story(story)
    result = ExportResult(
        story=story,
        story_json=dumps_story(story),
        filename=story_filename(story.id),
        report=report,
        document_report=document_report,
    )
    logger.debug(
        "Exported %s: graph errors=%d document errors=%d",
        result.filename,
        len(report.errors),
        len(document_report.errors),
    )
    return result
