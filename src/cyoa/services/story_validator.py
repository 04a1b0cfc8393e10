"""Static story document validation utilities."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from cyoa.core.types import Severity
from cyoa.data.errors import SchemaError
from cyoa.data.story_codec import parse_story
from cyoa.domain.defs import StoryDef

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    issue_id: str
    message: str
    ref: str | None = None
    context: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Errors block export and playback; warnings are advisory only."""

    errors: List[Issue] = field(default_factory=list)
    warnings: List[Issue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def issues(self) -> List[Issue]:
        return [*self.errors, *self.warnings]

    @classmethod
    def from_issues(cls, issues: List[Issue]) -> "ValidationReport":
        return cls(
            errors=[issue for issue in issues if issue.severity == "ERROR"],
            warnings=[issue for issue in issues if issue.severity == "WARN"],
        )


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def validate_story(story: StoryDef | Mapping[str, object]) -> ValidationReport:
    """Check a story document for structural errors and reachability warnings.

    Raw mappings are decoded first; a payload with the wrong shape yields a
    single INVALID_SCHEMA error rather than an exception.
    """
    if not isinstance(story, StoryDef):
        try:
            story = parse_story(story)
        except SchemaError as exc:
            return ValidationReport(
                errors=[Issue("ERROR", "INVALID_SCHEMA", "invalid-schema", str(exc))]
            )
    issues: List[Issue] = []
    _validate_required_fields(story, issues)
    start_valid = _validate_start(story, issues)
    _validate_choices(story, issues)
    _validate_dead_ends(story, issues)
    if start_valid:
        _validate_reachability(story, issues)
    report = ValidationReport.from_issues(issues)
    logger.debug(
        "Validated story %r: passages=%d errors=%d warnings=%d",
        story.id,
        len(story.passages),
        len(report.errors),
        len(report.warnings),
    )
    return report


def _validate_required_fields(story: StoryDef, issues: List[Issue]) -> None:
    for name, value in (
        ("id", story.id),
        ("title", story.title),
        ("author", story.author),
        ("start", story.start),
    ):
        if not value:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="MISSING_FIELD",
                    issue_id=f"missing-{name}",
                    message=f"Missing required field: {name}",
                    context={"field": name},
                )
            )
    if not story.passages:
        issues.append(
            Issue(
                severity="ERROR",
                code="MISSING_FIELD",
                issue_id="missing-passages",
                message="Missing required field: passages",
                context={"field": "passages"},
            )
        )


def _validate_start(story: StoryDef, issues: List[Issue]) -> bool:
    if not story.start or not story.passages:
        return False
    if story.start in story.passages:
        return True
    issues.append(
        Issue(
            severity="ERROR",
            code="MISSING_START_PASSAGE",
            issue_id="start-not-found",
            message=f'Start passage "{story.start}" not found in passages',
            ref=story.start,
            context={"referenced_id": story.start},
        )
    )
    return False


def _validate_choices(story: StoryDef, issues: List[Issue]) -> None:
    for passage_id, passage in story.passages.items():
        if passage.is_ending:
            if passage.choices:
                issues.append(
                    Issue(
                        severity="WARN",
                        code="ENDING_HAS_CHOICES",
                        issue_id=f"ending-choices-{passage_id}",
                        message=f'Ending passage "{passage_id}" has choices that will be ignored',
                        ref=passage_id,
                    )
                )
            continue
        for index, choice in enumerate(passage.choices):
            field_path = f"choices[{index}]"
            if not choice.goto:
                issues.append(
                    Issue(
                        severity="ERROR",
                        code="MISSING_GOTO",
                        issue_id=f"missing-goto-{passage_id}-{index}",
                        message=f'Passage "{passage_id}" choice {index + 1} has no goto target',
                        ref=passage_id,
                        context={"field_path": f"{field_path}.goto"},
                    )
                )
            elif choice.goto not in story.passages:
                issues.append(
                    Issue(
                        severity="ERROR",
                        code="MISSING_PASSAGE_REF",
                        issue_id=f"dangling-goto-{passage_id}-{index}",
                        message=(
                            f'Passage "{passage_id}" choice {index + 1} references '
                            f'non-existent passage "{choice.goto}"'
                        ),
                        ref=passage_id,
                        context={"field_path": f"{field_path}.goto", "referenced_id": choice.goto},
                    )
                )
            if not choice.text.strip():
                issues.append(
                    Issue(
                        severity="WARN",
                        code="EMPTY_CHOICE_TEXT",
                        issue_id=f"empty-choice-{passage_id}-{index}",
                        message=f'Passage "{passage_id}" choice {index + 1} has no text',
                        ref=passage_id,
                        context={"field_path": f"{field_path}.text"},
                    )
                )


def _validate_dead_ends(story: StoryDef, issues: List[Issue]) -> None:
    for passage_id, passage in story.passages.items():
        if passage.is_ending or passage.choices:
            continue
        issues.append(
            Issue(
                severity="WARN",
                code="DEAD_END",
                issue_id=f"dead-end-{passage_id}",
                message=f'Passage "{passage_id}" has no choices and is not marked as an ending',
                ref=passage_id,
            )
        )


def reachable_passages(story: StoryDef) -> set[str]:
    """Passage ids reachable from ``start`` along choice edges (breadth-first)."""
    reachable: set[str] = set()
    if story.start not in story.passages:
        return reachable
    queue = deque([story.start])
    while queue:
        passage_id = queue.popleft()
        if passage_id in reachable:
            continue
        reachable.add(passage_id)
        for choice in story.passages[passage_id].playable_choices():
            if choice.goto in story.passages and choice.goto not in reachable:
                queue.append(choice.goto)
    return reachable


def _validate_reachability(story: StoryDef, issues: List[Issue]) -> None:
    reachable = reachable_passages(story)
    for passage_id in story.passages:
        if passage_id in reachable:
            continue
        issues.append(
            Issue(
                severity="WARN",
                code="UNREACHABLE_PASSAGE",
                issue_id=f"unreachable-{passage_id}",
                message=f'Passage "{passage_id}" is not reachable from start',
                ref=passage_id,
            )
        )
