"""Console front end: validation, compilation and interactive playback."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Sequence

from cyoa.data.builder_codec import graph_to_dict, parse_builder_graph
from cyoa.data.errors import DataError
from cyoa.data.json_loader import dump_json, load_json
from cyoa.data.repositories import ManifestRepository, StoryRepository
from cyoa.data.story_codec import load_story_file
from cyoa.domain.defs import StoryDef
from cyoa.presentation.cli import render
from cyoa.presentation.cli.config import load_config
from cyoa.presentation.cli.logging_setup import configure_logging
from cyoa.services import (
    GraphCompileError,
    PassageView,
    PlaybackError,
    PlaybackSession,
    decompile_story,
    export_graph,
    format_issue,
    story_stats,
    validate_builder_graph,
    validate_story,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cyoa", description="Branching story toolkit.")
    parser.add_argument("--stories-dir", default=None, help="Library directory holding manifest.json.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="Validate a story or builder graph file.")
    validate_parser.add_argument("file", type=Path)
    validate_parser.add_argument("--graph", action="store_true", help="Treat FILE as a builder graph.")

    play_parser = subparsers.add_parser("play", help="Play a story in the terminal.")
    play_source = play_parser.add_mutually_exclusive_group(required=True)
    play_source.add_argument("file", nargs="?", type=Path)
    play_source.add_argument("--story-id", default=None)

    compile_parser = subparsers.add_parser("compile", help="Compile a builder graph into a story.")
    compile_parser.add_argument("graph", type=Path)
    compile_parser.add_argument("-o", "--output", type=Path, default=None)

    decompile_parser = subparsers.add_parser("decompile", help="Turn a story into a builder graph.")
    decompile_parser.add_argument("story", type=Path)
    decompile_parser.add_argument("-o", "--output", type=Path, default=None)

    stats_parser = subparsers.add_parser("stats", help="Show passage, ending and choice counts.")
    stats_parser.add_argument("file", type=Path)

    subparsers.add_parser("library", help="List the stories in the library manifest.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run one CLI command and return its exit status."""
    configure_logging()
    args = build_parser().parse_args(argv)
    config = load_config()
    stories_dir = args.stories_dir or config.stories_dir
    try:
        if args.command == "validate":
            return _cmd_validate(args.file, graph=args.graph)
        if args.command == "play":
            return _cmd_play(args.file, args.story_id, stories_dir, show_state=config.show_state)
        if args.command == "compile":
            return _cmd_compile(args.graph, args.output)
        if args.command == "decompile":
            return _cmd_decompile(args.story, args.output)
        if args.command == "stats":
            return _cmd_stats(args.file)
        return _cmd_library(stories_dir)
    except (DataError, GraphCompileError, PlaybackError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def _cmd_validate(path: Path, *, graph: bool) -> int:
    raw = load_json(path)
    if graph:
        report = validate_builder_graph(parse_builder_graph(raw))
    else:
        if not isinstance(raw, dict):
            print(f"Error: {path} does not contain a story object.", file=sys.stderr)
            return 1
        report = validate_story(raw)
    render.render_report(report)
    return 0 if report.is_valid else 1


def _cmd_compile(path: Path, output: Path | None) -> int:
    graph = parse_builder_graph(load_json(path))
    result = export_graph(graph)
    if not result.can_export:
        render.render_issues("Graph issues", result.report.issues)
        render.render_issues("Story issues", result.document_report.issues)
        print("\nExport blocked: fix the errors above first.")
        return 1
    for issue in [*result.report.warnings, *result.document_report.warnings]:
        print(f"- {format_issue(issue)}", file=sys.stderr)
    if output is None:
        print(result.story_json)
        return 0
    target = output / result.filename if output.is_dir() else output
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(result.story_json + "\n", encoding="utf-8")
    print(f"Wrote {target}")
    return 0


def _cmd_decompile(path: Path, output: Path | None) -> int:
    story = load_story_file(path)
    payload: Dict[str, Any] = graph_to_dict(decompile_story(story))
    if output is None:
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0
    dump_json(payload, output)
    print(f"Wrote {output}")
    return 0


def _cmd_stats(path: Path) -> int:
    story = load_story_file(path)
    render.render_heading(story.title or story.id)
    render.render_stats(story_stats(story))
    return 0


def _cmd_library(stories_dir: str | None) -> int:
    entries = ManifestRepository(stories_dir).all()
    render.render_heading("Library")
    if not entries:
        print("No stories found.")
        return 0
    for entry in entries:
        tags = f" [{', '.join(entry.tags)}]" if entry.tags else ""
        print(f"- {entry.id}: {entry.title} by {entry.author or 'Unknown'}{tags}")
    return 0


def _cmd_play(path: Path | None, story_id: str | None, stories_dir: str | None, *, show_state: bool) -> int:
    if path is not None:
        story = StoryRepository.load_path(path)
    else:
        try:
            story = StoryRepository(stories_dir).get(story_id or "")
        except KeyError:
            print(f"Error: story '{story_id}' is not in the library.", file=sys.stderr)
            return 1
    report = validate_story(story)
    if not report.is_valid:
        render.render_report(report)
        return 1
    session = PlaybackSession()
    session.load_story(story)
    _run_play_loop(session, story, show_state=show_state or render.debug_enabled())
    return 0


def _run_play_loop(session: PlaybackSession, story: StoryDef, *, show_state: bool) -> None:
    print(f"=== {story.title} ===")
    if story.author:
        print(f"by {story.author}")
    while True:
        view = session.view()
        print()
        render.render_passage(view)
        if show_state:
            render.render_state(session.state)
        command = _prompt_command(len(view.choices), _extra_commands(view))
        if command == "q":
            print("Goodbye!")
            return
        if command == "b":
            session.go_back()
        elif command == "r":
            session.restart()
        else:
            session.choose(int(command) - 1)


def _extra_commands(view: PassageView) -> List[str]:
    extras = ["r", "q"]
    if view.can_go_back:
        extras.insert(0, "b")
    return extras


def _prompt_command(choice_count: int, extras: List[str]) -> str:
    hint = "/".join(extras)
    prompt = f"Select 1-{choice_count} ({hint}): " if choice_count else f"Select ({hint}): "
    while True:
        try:
            raw = input(prompt).strip().lower()
        except EOFError:
            return "q"
        if raw in extras:
            return raw
        try:
            index = int(raw)
        except ValueError:
            print("Please enter a number or one of: " + ", ".join(extras))
            continue
        if 1 <= index <= choice_count:
            return str(index)
        if choice_count:
            print(f"Please enter a value between 1 and {choice_count}.")
        else:
            print("Please enter one of: " + ", ".join(extras))
