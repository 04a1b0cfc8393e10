import json
from pathlib import Path

import pytest

from cyoa.data.errors import DataLoadError, ParseError, SchemaError
from cyoa.data.story_codec import (
    dumps_story,
    load_story_file,
    loads_story,
    manifest_entry_to_dict,
    parse_manifest,
    parse_story,
    story_to_dict,
)
from cyoa.domain.defs import ChoiceDef

_DOCUMENT = {
    "id": "codec",
    "title": "Codec",
    "author": "Ada",
    "description": "",
    "version": "1.0",
    "cover": "covers/codec.png",
    "initialState": {"gold": 1, "ratio": 0.5, "hasKey": False, "name": "Ada"},
    "start": "a",
    "passages": {
        "a": {
            "text": "A",
            "choices": [
                {"text": "go", "goto": "b", "setState": {"gold": 2}, "condition": {"hasKey": False}},
            ],
        },
        "b": {"text": "B", "isEnding": True, "endingType": "neutral"},
    },
}


def test_story_document_round_trips_through_dict() -> None:
    story = parse_story(_DOCUMENT)

    assert story.cover == "covers/codec.png"
    assert story.passages["a"].choices[0] == ChoiceDef(
        text="go", goto="b", set_state={"gold": 2}, condition={"hasKey": False}
    )
    assert story_to_dict(story) == _DOCUMENT


def test_scalar_types_survive_json_text() -> None:
    story = loads_story(dumps_story(parse_story(_DOCUMENT)))

    assert story.initial_state["hasKey"] is False
    assert isinstance(story.initial_state["gold"], int)
    assert story.initial_state["ratio"] == 0.5


def test_optional_fields_default() -> None:
    story = parse_story({"id": "x", "start": "a", "passages": {"a": {"text": "A"}}})

    assert story.title == ""
    assert story.version == "1.0"
    assert story.initial_state == {}
    assert story.passages["a"].choices == []
    assert not story.passages["a"].is_ending
    assert "initialState" not in story_to_dict(story)


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"id": 5},
        {"passages": []},
        {"passages": {"a": {"text": "A", "choices": {}}}},
        {"passages": {"a": {"text": "A", "isEnding": "yes"}}},
        {"passages": {"a": {"text": "A", "endingType": "great"}}},
        {"initialState": {"items": ["sword"]}},
    ],
)
def test_wrong_shapes_raise_schema_error(payload) -> None:
    with pytest.raises(SchemaError):
        parse_story(payload)


def test_invalid_json_raises_parse_error() -> None:
    with pytest.raises(ParseError):
        loads_story("{not json")


def test_load_story_file_errors(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        load_story_file(tmp_path / "missing.adventure.json")

    bad = tmp_path / "bad.adventure.json"
    bad.write_text(json.dumps({"passages": []}), encoding="utf-8")
    with pytest.raises(SchemaError) as excinfo:
        load_story_file(bad)
    assert "bad.adventure.json" in str(excinfo.value)


def test_manifest_accepts_object_or_array() -> None:
    entry = {"id": "a", "title": "A", "author": "Ada", "description": "", "file": "a.adventure.json"}

    from_object = parse_manifest({"stories": [entry]})
    from_array = parse_manifest([dict(entry, tags=["short"])])

    assert from_object[0].file == "a.adventure.json"
    assert from_array[0].tags == ["short"]
    assert manifest_entry_to_dict(from_object[0]) == entry


@pytest.mark.parametrize(
    "payload",
    [
        {"stories": "nope"},
        [{"title": "no id", "file": "x.adventure.json"}],
        [{"id": "x"}],
        [{"id": "x", "file": "x.adventure.json", "tags": "short"}],
    ],
)
def test_manifest_rejects_bad_entries(payload) -> None:
    with pytest.raises(SchemaError):
        parse_manifest(payload)
