from cyoa.domain.defs import ChoiceDef, PassageDef, StoryDef
from cyoa.services.story_validator import format_issue, reachable_passages, validate_story


def _story(passages: dict, *, start: str = "a", **overrides) -> StoryDef:
    fields = {"id": "test", "title": "Test", "author": "Tester"}
    fields.update(overrides)
    return StoryDef(start=start, passages=passages, **fields)


def _valid_story() -> StoryDef:
    return _story(
        {
            "a": PassageDef(text="A", choices=[ChoiceDef(text="go", goto="b")]),
            "b": PassageDef(text="B", is_ending=True, ending_type="good"),
        }
    )


def test_valid_story_has_no_issues() -> None:
    report = validate_story(_valid_story())
    assert report.is_valid
    assert report.errors == []
    assert report.warnings == []


def test_missing_start_passage_is_single_error_without_reachability_warnings() -> None:
    story = _story(
        {
            "a": PassageDef(text="A", choices=[ChoiceDef(text="go", goto="b")]),
            "b": PassageDef(text="B", is_ending=True),
        },
        start="z",
    )
    report = validate_story(story)

    assert [issue.code for issue in report.errors] == ["MISSING_START_PASSAGE"]
    assert report.errors[0].ref == "z"
    assert not any(issue.code == "UNREACHABLE_PASSAGE" for issue in report.warnings)


def test_orphan_passage_is_warning_only() -> None:
    passages = dict(_valid_story().passages)
    passages["orphan"] = PassageDef(text="Nobody comes here.", is_ending=True)
    report = validate_story(_story(passages))

    assert report.is_valid
    assert [(issue.code, issue.ref) for issue in report.warnings] == [("UNREACHABLE_PASSAGE", "orphan")]
    assert report.warnings[0].issue_id == "unreachable-orphan"


def test_missing_required_fields_are_errors() -> None:
    report = validate_story(StoryDef(id="", title="", author="", start=""))

    ids = [issue.issue_id for issue in report.errors]
    assert ids == ["missing-id", "missing-title", "missing-author", "missing-start", "missing-passages"]


def test_missing_and_dangling_goto_are_errors() -> None:
    story = _story(
        {
            "a": PassageDef(
                text="A",
                choices=[
                    ChoiceDef(text="nowhere", goto=""),
                    ChoiceDef(text="broken", goto="ghost"),
                    ChoiceDef(text="fine", goto="b"),
                ],
            ),
            "b": PassageDef(text="B", is_ending=True),
        }
    )
    report = validate_story(story)

    assert not report.is_valid
    assert [issue.issue_id for issue in report.errors] == ["missing-goto-a-0", "dangling-goto-a-1"]
    assert report.errors[1].context["referenced_id"] == "ghost"


def test_empty_choice_text_and_dead_end_are_warnings() -> None:
    story = _story(
        {
            "a": PassageDef(text="A", choices=[ChoiceDef(text="  ", goto="b")]),
            "b": PassageDef(text="B"),
        }
    )
    report = validate_story(story)

    assert report.is_valid
    assert {issue.code for issue in report.warnings} == {"EMPTY_CHOICE_TEXT", "DEAD_END"}


def test_self_loop_and_cycles_terminate() -> None:
    story = _story(
        {
            "a": PassageDef(
                text="A",
                choices=[ChoiceDef(text="stay", goto="a"), ChoiceDef(text="on", goto="b")],
            ),
            "b": PassageDef(text="B", choices=[ChoiceDef(text="back", goto="a")]),
            "c": PassageDef(text="C", choices=[ChoiceDef(text="loop", goto="c")]),
        }
    )
    first = validate_story(story)
    second = validate_story(story)

    assert first == second
    assert [issue.ref for issue in first.warnings] == ["c"]
    assert reachable_passages(story) == {"a", "b"}


def test_ending_choices_do_not_count_for_reachability() -> None:
    story = _story(
        {
            "a": PassageDef(text="A", choices=[ChoiceDef(text="go", goto="b")]),
            "b": PassageDef(text="B", choices=[ChoiceDef(text="secret", goto="c")], is_ending=True),
            "c": PassageDef(text="C", is_ending=True),
        }
    )
    report = validate_story(story)

    codes = [issue.code for issue in report.warnings]
    assert codes == ["ENDING_HAS_CHOICES", "UNREACHABLE_PASSAGE"]


def test_raw_mapping_is_decoded_before_validation() -> None:
    report = validate_story(
        {
            "id": "raw",
            "title": "Raw",
            "author": "Tester",
            "start": "a",
            "passages": {"a": {"text": "A", "isEnding": True, "endingType": "neutral"}},
        }
    )
    assert report.is_valid


def test_malformed_mapping_is_reported_as_schema_error() -> None:
    report = validate_story({"id": "raw", "passages": {"a": {"text": "A", "choices": "nope"}}})

    assert [issue.code for issue in report.errors] == ["INVALID_SCHEMA"]


def test_format_issue_includes_context() -> None:
    report = validate_story(_story({"a": PassageDef(text="A")}, start="z"))
    line = format_issue(report.errors[0])

    assert line.startswith("[ERROR] MISSING_START_PASSAGE:")
    assert "referenced_id=z" in line
