from cyoa.domain.defs import ChoiceDef, PassageDef, StoryDef
from cyoa.services.story_stats import count_passages, find_endings, make_manifest_entry, story_stats


def _story() -> StoryDef:
    return StoryDef(
        id="stats",
        title="Stats",
        author="Ada",
        description="Numbers.",
        start="a",
        cover="covers/stats.png",
        passages={
            "a": PassageDef(text="A", choices=[ChoiceDef(text="1", goto="b"), ChoiceDef(text="2", goto="c")]),
            "b": PassageDef(text="B", is_ending=True, ending_type="good"),
            "c": PassageDef(text="C", choices=[ChoiceDef(text="x", goto="a")], is_ending=True),
        },
    )


def test_story_stats_counts_playable_choices() -> None:
    stats = story_stats(_story())

    assert stats.passages == 3
    assert stats.endings == 2
    assert stats.choices == 2
    assert stats.ending_list == [("b", "good"), ("c", None)]


def test_find_endings_and_count_passages() -> None:
    story = _story()
    assert find_endings(story) == ["b", "c"]
    assert count_passages(story) == 3


def test_make_manifest_entry() -> None:
    entry = make_manifest_entry(_story(), tags=["demo"])

    assert entry.file == "stats.adventure.json"
    assert entry.cover == "covers/stats.png"
    assert entry.tags == ["demo"]
    assert entry.description == "Numbers."
