from pathlib import Path

from cyoa.data import paths


def test_get_stories_path_base_path(tmp_path: Path) -> None:
    assert paths.get_stories_path(tmp_path) == tmp_path
    assert paths.get_stories_path(str(tmp_path)) == tmp_path


def test_get_stories_path_source_repo_exists() -> None:
    stories_path = paths.get_stories_path()
    assert stories_path.name == "stories"
    assert (stories_path / paths.MANIFEST_FILE).exists()


def test_story_filename() -> None:
    assert paths.story_filename("the-lighthouse") == "the-lighthouse.adventure.json"
    assert paths.get_manifest_path(Path("lib")) == Path("lib") / "manifest.json"
