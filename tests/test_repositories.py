import json
import logging
from pathlib import Path

import pytest

from cyoa.data.errors import DataLoadError, SchemaError
from cyoa.data.repositories import ManifestRepository, StoryRepository


def _write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def _story_payload(story_id: str, **overrides) -> dict:
    payload = {
        "id": story_id,
        "title": story_id.title(),
        "author": "Ada",
        "start": "a",
        "passages": {
            "a": {"text": "A", "choices": [{"text": "go", "goto": "b"}]},
            "b": {"text": "B", "isEnding": True, "endingType": "good"},
        },
    }
    payload.update(overrides)
    return payload


def _make_library(tmp_path: Path) -> Path:
    _write_json(
        tmp_path / "manifest.json",
        [
            {"id": "one", "title": "One", "author": "Ada", "description": "", "file": "one.adventure.json"},
            {"id": "two", "title": "Two", "author": "Bo", "description": "", "file": "two.adventure.json"},
        ],
    )
    _write_json(tmp_path / "one.adventure.json", _story_payload("one"))
    _write_json(tmp_path / "two.adventure.json", _story_payload("two"))
    return tmp_path


def test_manifest_repository_lists_entries_in_file_order(tmp_path: Path) -> None:
    repo = ManifestRepository(_make_library(tmp_path))

    assert [entry.id for entry in repo.all()] == ["one", "two"]
    assert repo.story_path("two") == tmp_path / "two.adventure.json"
    with pytest.raises(KeyError):
        repo.get("three")


def test_manifest_repository_reloads_after_file_changes(tmp_path: Path) -> None:
    library = _make_library(tmp_path)
    repo = ManifestRepository(library)
    assert "three" not in repo

    _write_json(
        library / "manifest.json",
        [{"id": "three", "title": "Three", "author": "Cy", "description": "", "file": "three.adventure.json"}],
    )
    assert "three" not in repo

    repo.reload()

    assert "three" in repo
    assert [entry.id for entry in repo.all()] == ["three"]


def test_manifest_repository_rejects_duplicate_ids(tmp_path: Path) -> None:
    entry = {"id": "one", "file": "one.adventure.json"}
    _write_json(tmp_path / "manifest.json", {"stories": [entry, entry]})

    with pytest.raises(SchemaError):
        ManifestRepository(tmp_path).all()


def test_missing_manifest_raises_data_load_error(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        ManifestRepository(tmp_path).all()


def test_story_repository_loads_and_caches(tmp_path: Path) -> None:
    repo = StoryRepository(_make_library(tmp_path))

    story = repo.get("one")

    assert story.title == "One"
    assert repo.get("one") is story
    assert repo.ids() == ["one", "two"]


def test_story_with_missing_start_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "broken.adventure.json"
    _write_json(path, _story_payload("broken", start="z"))

    with pytest.raises(SchemaError):
        StoryRepository.load_path(path)


def test_dangling_goto_only_logs_warning(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "dangling.adventure.json"
    payload = _story_payload("dangling")
    payload["passages"]["a"]["choices"].append({"text": "lost", "goto": "ghost"})
    _write_json(path, payload)

    with caplog.at_level(logging.WARNING, logger="cyoa.data.repositories.story_repo"):
        story = StoryRepository.load_path(path)

    assert len(story.passages["a"].choices) == 2
    assert "ghost" in caplog.text
