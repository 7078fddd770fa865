"""Tests for checkbox configuration and forced-key parsing."""
from __future__ import annotations

import pytest

from checkbox_workflow.core.checkbox.config import (
    extract_config_pairs,
    extract_key_and_label,
    load_config_pairs,
    parse_config,
    parse_forced_keys,
)
from checkbox_workflow.core.checkbox.models import ConfigPair
from checkbox_workflow.core.exceptions import ConfigError, InputValidationError


def test_parse_config_accepts_relaxed_json() -> None:
    text = """
    [
      // review steps
      {a: 'Task A'},
      {b: {label: "Task B", note: "ignored"}},  /* trailing comma next */
    ]
    """

    assert parse_config(text) == [
        {"a": "Task A"},
        {"b": {"label": "Task B", "note": "ignored"}},
    ]


def test_parse_config_accepts_unquoted_key_without_space() -> None:
    assert load_config_pairs('[{a:"Task A"},{b:"Task B"}]') == [
        ConfigPair("a", "Task A"),
        ConfigPair("b", "Task B"),
    ]


def test_parse_config_accepts_strict_json() -> None:
    assert parse_config('[{"task1": "Test 1"}, {"task2": {"label": "Test 2"}}]') == [
        {"task1": "Test 1"},
        {"task2": {"label": "Test 2"}},
    ]


def test_syntax_error_is_reported_separately() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config('[{a: "Task A"')

    assert excinfo.value.kind == ConfigError.SYNTAX
    assert str(excinfo.value).startswith("Invalid checkbox configuration syntax: ")


def test_keywords_of_other_formats_are_plain_keys() -> None:
    assert load_config_pairs('[{on: "Deploy"}, {off: "Rollback"}, {yes: "Ship"}]') == [
        ConfigPair("on", "Deploy"),
        ConfigPair("off", "Rollback"),
        ConfigPair("yes", "Ship"),
    ]


def test_tab_whitespace_is_accepted() -> None:
    assert parse_config('[\t{"a":\t"Task A"}]') == [{"a": "Task A"}]


def test_escaped_quotes_in_labels() -> None:
    assert load_config_pairs("""[{a: "It\\'s"}, {b: 'It\\'s'}]""") == [
        ConfigPair("a", "It's"),
        ConfigPair("b", "It's"),
    ]


@pytest.mark.parametrize("text", ["hello world", "[{a: Task A}]", ""])
def test_unparsable_text_is_a_syntax_error(text: str) -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config(text)

    assert excinfo.value.kind == ConfigError.SYNTAX
    assert str(excinfo.value).startswith("Invalid checkbox configuration syntax: ")


def test_empty_array_is_rejected() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config("[]")

    assert str(excinfo.value) == "Invalid checkbox configuration:\n  Config must contain at least one item"
    assert excinfo.value.kind == ConfigError.SHAPE


def test_non_array_is_rejected() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config('{"not": "array"}')

    assert str(excinfo.value) == "Invalid checkbox configuration:\n  Config must be an array of checkbox items"
    assert excinfo.value.kind == ConfigError.SHAPE


def test_empty_label_is_a_field_error() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config('[{"task1": ""}]')

    assert str(excinfo.value) == "Invalid checkbox configuration:\n  [0 → task1] Label must not be empty"
    assert excinfo.value.kind == ConfigError.FIELD


def test_multiple_keys_in_one_item_is_a_shape_error() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config('[{"task1": "Label 1", "task2": "Label 2"}]')

    assert str(excinfo.value) == (
        "Invalid checkbox configuration:\n  [0] Each config item must have exactly one key-value pair"
    )
    assert excinfo.value.kind == ConfigError.SHAPE


def test_empty_item_is_a_shape_error() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config("[{}]")

    assert "[0] Each config item must have exactly one key-value pair" in str(excinfo.value)


def test_non_object_item_is_rejected() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config('["just a string"]')

    assert "[0] Each config item must be an object" in str(excinfo.value)


def test_empty_key_is_a_field_error() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config('[{"": "Label"}]')

    assert "Key must not be empty" in str(excinfo.value)
    assert excinfo.value.kind == ConfigError.FIELD


def test_object_without_label_is_rejected() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config('[{"task1": {"priority": "high"}}]')

    assert "[0 → task1] Label is required" in str(excinfo.value)


def test_object_with_empty_label_is_rejected() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config('[{"task1": {"label": ""}}]')

    assert "[0 → task1 → label] Label must not be empty" in str(excinfo.value)


def test_invalid_value_type_is_rejected() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config('[{"task1": 42}]')

    assert "[0 → task1] Value must be a label string or an object with a label" in str(excinfo.value)


def test_duplicate_keys_are_rejected() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config("[{a: 'A'}, {b: 'B'}, {a: 'again'}]")

    assert "[2 → a] Duplicate key (first defined at index 0)" in str(excinfo.value)
    assert excinfo.value.kind == ConfigError.FIELD


def test_every_violation_is_listed() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_config('[{"a": ""}, {"b": ""}]')

    lines = str(excinfo.value).splitlines()
    assert lines[0] == "Invalid checkbox configuration:"
    assert lines[1:] == ["  [0 → a] Label must not be empty", "  [1 → b] Label must not be empty"]


def test_config_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        parse_config("[]")


def test_extract_key_and_label() -> None:
    assert extract_key_and_label({"task1": "Label 1"}) == ConfigPair("task1", "Label 1")
    assert extract_key_and_label({"task1": {"label": "Label 1", "x": 1}}) == ConfigPair("task1", "Label 1")


def test_extract_key_and_label_rejects_multiple_keys() -> None:
    with pytest.raises(ConfigError):
        extract_key_and_label({"a": "A", "b": "B"})


def test_extract_config_pairs_keeps_order() -> None:
    config = [{"key1": "label1"}, {"key2": {"label": "label2"}}]

    assert extract_config_pairs(config) == [ConfigPair("key1", "label1"), ConfigPair("key2", "label2")]


def test_parse_forced_keys() -> None:
    assert parse_forced_keys('["a", "c"]') == ["a", "c"]
    assert parse_forced_keys("[]") == []


def test_parse_forced_keys_rejects_non_array() -> None:
    with pytest.raises(InputValidationError) as excinfo:
        parse_forced_keys('{"task1": true}')

    assert str(excinfo.value) == (
        "Invalid checked parameter: Invalid checked parameter:\n  Expected an array of strings"
    )


def test_parse_forced_keys_rejects_non_string_items() -> None:
    with pytest.raises(InputValidationError) as excinfo:
        parse_forced_keys('["task1", 123, "task3"]')

    assert str(excinfo.value).endswith("[1] Expected a string")


def test_parse_forced_keys_requires_strict_json() -> None:
    with pytest.raises(InputValidationError) as excinfo:
        parse_forced_keys("[a, b]")

    assert str(excinfo.value).startswith("Invalid checked parameter: Invalid checked parameter syntax: ")
