"""Conversion between story documents and plain JSON-compatible payloads."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping

from cyoa.core.types import ENDING_TYPES, Scalar
from cyoa.data.errors import SchemaError
from cyoa.data.json_loader import load_json, loads_json
from cyoa.domain.defs import ChoiceDef, ManifestEntryDef, PassageDef, StoryDef

StoryPayload = Dict[str, Any]

_METADATA_FIELDS = ("id", "title", "author", "description", "version")


def parse_story(raw: object) -> StoryDef:
    """Build a StoryDef from decoded JSON.

    Missing identifying fields decode to empty strings so the validator can
    report them; values of the wrong type raise SchemaError.
    """
    payload = _require_mapping(raw, "story")
    metadata = {
        name: _optional_str(payload.get(name), f"story {name}") or ""
        for name in _METADATA_FIELDS
    }
    if "version" not in payload:
        metadata["version"] = "1.0"
    start = _optional_str(payload.get("start"), "story start") or ""
    raw_passages = payload.get("passages")
    passages: Dict[str, PassageDef] = {}
    if raw_passages is not None:
        passages_map = _require_mapping(raw_passages, "story passages")
        for passage_id, passage_payload in passages_map.items():
            passages[passage_id] = _parse_passage(passage_id, passage_payload)
    initial_state = _parse_scalar_map(payload.get("initialState"), "story initialState")
    cover = _optional_str(payload.get("cover"), "story cover")
    return StoryDef(
        id=metadata["id"],
        title=metadata["title"],
        author=metadata["author"],
        description=metadata["description"],
        version=metadata["version"],
        start=start,
        passages=passages,
        initial_state=initial_state,
        cover=cover,
    )


def _parse_passage(passage_id: str, raw: object) -> PassageDef:
    context = f"passage '{passage_id}'"
    payload = _require_mapping(raw, context)
    text = _optional_str(payload.get("text"), f"{context} text") or ""
    raw_choices = payload.get("choices")
    choices: List[ChoiceDef] = []
    if raw_choices is not None:
        if not isinstance(raw_choices, list):
            raise SchemaError(f"{context} choices must be a list if provided.")
        for index, entry in enumerate(raw_choices):
            choices.append(_parse_choice(entry, f"{context} choices[{index}]"))
    is_ending = payload.get("isEnding", False)
    if not isinstance(is_ending, bool):
        raise SchemaError(f"{context} isEnding must be a boolean.")
    ending_type = payload.get("endingType")
    if ending_type is not None and ending_type not in ENDING_TYPES:
        raise SchemaError(f"{context} endingType must be one of {', '.join(ENDING_TYPES)}.")
    return PassageDef(text=text, choices=choices, is_ending=is_ending, ending_type=ending_type)


def _parse_choice(raw: object, context: str) -> ChoiceDef:
    payload = _require_mapping(raw, context)
    return ChoiceDef(
        text=_optional_str(payload.get("text"), f"{context} text") or "",
        goto=_optional_str(payload.get("goto"), f"{context} goto") or "",
        set_state=_parse_scalar_map(payload.get("setState"), f"{context} setState"),
        condition=_parse_scalar_map(payload.get("condition"), f"{context} condition"),
    )


def _parse_scalar_map(raw: object, context: str) -> Dict[str, Scalar]:
    if raw is None:
        return {}
    payload = _require_mapping(raw, context)
    values: Dict[str, Scalar] = {}
    for key, value in payload.items():
        if not isinstance(value, (bool, int, float, str)):
            raise SchemaError(f"{context}.{key} must be a boolean, number or string.")
        values[key] = value
    return values


def _require_mapping(value: object, context: str) -> Mapping[str, object]:
    if not isinstance(value, dict):
        raise SchemaError(f"{context} must be an object.")
    return value


def _optional_str(value: object, context: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SchemaError(f"{context} must be a string.")
    return value


def story_to_dict(story: StoryDef) -> StoryPayload:
    """Return the JSON-compatible form of a story; optional fields are omitted when empty."""
    payload: StoryPayload = {
        "id": story.id,
        "title": story.title,
        "author": story.author,
        "description": story.description,
        "version": story.version,
    }
    if story.cover is not None:
        payload["cover"] = story.cover
    if story.initial_state:
        payload["initialState"] = dict(story.initial_state)
    payload["start"] = story.start
    payload["passages"] = {
        passage_id: _passage_to_dict(passage) for passage_id, passage in story.passages.items()
    }
    return payload


def _passage_to_dict(passage: PassageDef) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"text": passage.text}
    if passage.choices:
        payload["choices"] = [_choice_to_dict(choice) for choice in passage.choices]
    if passage.is_ending:
        payload["isEnding"] = True
    if passage.ending_type is not None:
        payload["endingType"] = passage.ending_type
    return payload


def _choice_to_dict(choice: ChoiceDef) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"text": choice.text, "goto": choice.goto}
    if choice.set_state:
        payload["setState"] = dict(choice.set_state)
    if choice.condition:
        payload["condition"] = dict(choice.condition)
    return payload


def loads_story(text: str, *, source: str = "<string>") -> StoryDef:
    """Decode a story from JSON text (ParseError / SchemaError on failure)."""
    return parse_story(loads_json(text, source=source))


def dumps_story(story: StoryDef) -> str:
    return json.dumps(story_to_dict(story), indent=2, ensure_ascii=False)


def load_story_file(path: Path) -> StoryDef:
    raw = load_json(path)
    try:
        return parse_story(raw)
    except SchemaError as exc:
        raise SchemaError(f"{path}: {exc}") from exc


def parse_manifest(raw: object) -> List[ManifestEntryDef]:
    """Decode a manifest given either as ``{"stories": [...]}`` or a bare list."""
    if isinstance(raw, dict):
        entries = raw.get("stories")
    else:
        entries = raw
    if not isinstance(entries, list):
        raise SchemaError("manifest must be a list of stories or an object with a 'stories' list.")
    manifest: List[ManifestEntryDef] = []
    for index, entry in enumerate(entries):
        context = f"manifest stories[{index}]"
        payload = _require_mapping(entry, context)
        fields = {}
        for name in ("id", "title", "author", "description", "file"):
            value = _optional_str(payload.get(name), f"{context} {name}")
            if value is None and name in ("id", "file"):
                raise SchemaError(f"{context} {name} is required.")
            fields[name] = value or ""
        tags = payload.get("tags", [])
        if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
            raise SchemaError(f"{context} tags must be a list of strings.")
        manifest.append(
            ManifestEntryDef(
                cover=_optional_str(payload.get("cover"), f"{context} cover"),
                tags=list(tags),
                **fields,
            )
        )
    return manifest


def manifest_entry_to_dict(entry: ManifestEntryDef) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": entry.id,
        "title": entry.title,
        "author": entry.author,
        "description": entry.description,
        "file": entry.file,
    }
    if entry.cover is not None:
        payload["cover"] = entry.cover
    if entry.tags:
        payload["tags"] = list(entry.tags)
    return payload
