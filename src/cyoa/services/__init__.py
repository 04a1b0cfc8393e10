"""Application services: playback, validation, translation and export."""

from .builder_validator import validate_builder_graph
from .errors import GraphCompileError, InvalidStartReference, PlaybackError, SessionNotLoadedError
from .export_service import ExportResult, export_graph
from .playback_service import PassageView, PlaybackSession
from .story_stats import StoryStats, count_passages, find_endings, make_manifest_entry, story_stats
from .story_validator import Issue, ValidationReport, format_issue, reachable_passages, validate_story
from .translator import compile_graph, decompile_story, layout, resolve_target

__all__ = [
    "ExportResult",
    "GraphCompileError",
    "InvalidStartReference",
    "Issue",
    "PassageView",
    "PlaybackError",
    "PlaybackSession",
    "SessionNotLoadedError",
    "StoryStats",
    "ValidationReport",
    "compile_graph",
    "count_passages",
    "decompile_story",
    "export_graph",
    "find_endings",
    "format_issue",
    "layout",
    "make_manifest_entry",
    "reachable_passages",
    "resolve_target",
    "story_stats",
    "validate_builder_graph",
    "validate_story",
]
