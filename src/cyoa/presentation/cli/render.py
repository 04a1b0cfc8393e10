"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
import textwrap
from typing import Iterable, Mapping

from cyoa.core.types import Scalar
from cyoa.domain.conditions import format_state_value
from cyoa.services import Issue, PassageView, StoryStats, ValidationReport, format_issue

_WRAP_WIDTH = 78


def debug_enabled() -> bool:
    """Return True only when CYOA_DEBUG is explicitly set to '1'."""
    return os.getenv("CYOA_DEBUG") == "1"


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_passage(view: PassageView) -> None:
    """Render passage paragraphs, the ending banner and numbered choices."""
    if debug_enabled():
        print(f"[{view.passage_id}]")
    if view.missing:
        print(f'Unable to find passage "{view.passage_id}".')
        return
    for index, paragraph in enumerate(view.paragraphs):
        if index > 0:
            print()
        print(textwrap.fill(paragraph, width=_WRAP_WIDTH))
    if view.is_ending:
        label = (view.ending_type or "neutral").capitalize()
        print(f"\n*** The End ({label}) ***")
        return
    if view.choices:
        render_heading("Choices")
        for idx, choice in enumerate(view.choices, start=1):
            print(f"{idx}. {choice.text}")


def render_state(state: Mapping[str, Scalar]) -> None:
    if not state:
        print("(state is empty)")
        return
    for key, value in state.items():
        print(f"  {key} = {format_state_value(value)}")


def render_issues(title: str, issues: Iterable[Issue]) -> None:
    issues = list(issues)
    if not issues:
        return
    render_heading(title)
    for issue in issues:
        line = format_issue(issue)
        if issue.ref:
            line = f"{line} -> {issue.ref}"
        print(f"- {line}")


def render_report(report: ValidationReport) -> None:
    """Print errors then warnings, followed by a one-line verdict."""
    render_issues("Errors", report.errors)
    render_issues("Warnings", report.warnings)
    verdict = "valid" if report.is_valid else "invalid"
    print(f"\nResult: {verdict} ({len(report.errors)} errors, {len(report.warnings)} warnings)")


def render_stats(stats: StoryStats) -> None:
    print(f"Passages: {stats.passages}")
    print(f"Endings:  {stats.endings}")
    print(f"Choices:  {stats.choices}")
    for passage_id, ending_type in stats.ending_list:
        print(f"- {passage_id} ({ending_type or 'unspecified'})")
