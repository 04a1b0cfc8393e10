import math

import pytest

from cyoa.domain.conditions import (
    apply_state_change,
    check_condition,
    format_state_value,
    is_available,
    parse_state_value,
    values_equal,
)
from cyoa.domain.defs import ChoiceDef


def test_choice_without_condition_is_always_available() -> None:
    assert is_available(ChoiceDef(text="Go", goto="b"), {})
    assert is_available(ChoiceDef(text="Go", goto="b", condition={}), {"anything": 1})


def test_missing_state_key_fails_condition() -> None:
    choice = ChoiceDef(text="Open", goto="vault", condition={"hasKey": True})
    assert not is_available(choice, {})


def test_every_condition_entry_must_match() -> None:
    condition = {"hasKey": True, "gold": 3}
    assert check_condition(condition, {"hasKey": True, "gold": 3, "extra": "x"})
    assert not check_condition(condition, {"hasKey": True, "gold": 2})


@pytest.mark.parametrize(
    ("actual", "expected", "matches"),
    [
        ("1", 1, False),
        (1, "1", False),
        (True, 1, False),
        (0, False, False),
        (1, 1.0, True),
        ("yes", "yes", True),
        (False, False, True),
    ],
)
def test_values_equal_is_strict_about_type(actual, expected, matches) -> None:
    assert values_equal(actual, expected) is matches


def test_apply_state_change_returns_new_mapping() -> None:
    state = {"gold": 1, "name": "Ada"}
    result = apply_state_change(state, {"gold": 5, "hasKey": True})

    assert result == {"gold": 5, "name": "Ada", "hasKey": True}
    assert state == {"gold": 1, "name": "Ada"}
    assert result is not state


def test_apply_state_change_with_empty_patch_copies_state() -> None:
    state = {"gold": 1}
    result = apply_state_change(state, None)
    assert result == state
    assert result is not state


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("true", True),
        ("false", False),
        ("42", 42),
        ("-3", -3),
        ("2.5", 2.5),
        ("1e3", 1000),
        ("0x10", 16),
        ("True", "True"),
        ("", ""),
        ("   ", 0),
        ("\t", 0),
        (" 7 ", 7),
        ("gold", "gold"),
    ],
)
def test_parse_state_value_infers_types(raw: str, expected) -> None:
    value = parse_state_value(raw)
    assert value == expected
    assert type(value) is type(expected)


def test_parse_state_value_handles_infinity() -> None:
    assert parse_state_value("Infinity") == math.inf
    assert parse_state_value("-Infinity") == -math.inf


def test_format_state_value() -> None:
    assert format_state_value(True) == "true"
    assert format_state_value(3.0) == "3"
    assert format_state_value(2.5) == "2.5"
    assert format_state_value("gold") == "gold"
