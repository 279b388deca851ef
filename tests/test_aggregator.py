"""Tests for the key path aggregator and the mapping builder."""

import pytest

from vdf_keyvalues.domain.exceptions import EmptyKeyEncounteredException
from vdf_keyvalues.domain.value_objects import KeyValuePair, Token
from vdf_keyvalues.infrastructure.aggregator.builder import KeyValueMapBuilder
from vdf_keyvalues.infrastructure.aggregator.key_path import KeyPathAggregator


def build(pairs, use_latest_value=False):
    builder = KeyValueMapBuilder(use_latest_value=use_latest_value)
    builder.extend(KeyValuePair(tuple(path), value) for path, value in pairs)
    return builder.result


class TestKeyPathAggregator:
    def test_key_value(self):
        aggregator = KeyPathAggregator()
        assert aggregator.consume(Token.key("a")) == []
        assert aggregator.consume(Token.value("b")) == [KeyValuePair(("a",), "b")]
        assert aggregator.key_path == ()

    def test_nested_paths(self):
        aggregator = KeyPathAggregator()
        pairs = aggregator.consume_all([
            Token.key("a"), Token.nest_start(),
            Token.key("b"), Token.value("c"),
            Token.key("d"), Token.nest_start(),
            Token.key("e"), Token.value("f"),
            Token.nest_end(),
            Token.nest_end(),
            Token.key("g"), Token.value("h"),
        ])
        assert pairs == [
            KeyValuePair(("a", "b"), "c"),
            KeyValuePair(("a", "d", "e"), "f"),
            KeyValuePair(("g",), "h"),
        ]

    def test_nest_start_keeps_key_as_prefix(self):
        aggregator = KeyPathAggregator()
        aggregator.consume_all([Token.key("a"), Token.nest_start(), Token.key("b")])
        assert aggregator.key_path == ("a", "b")

    def test_empty_block_leaves_no_trace(self):
        aggregator = KeyPathAggregator()
        pairs = aggregator.consume_all([Token.key("a"), Token.nest_start(), Token.nest_end()])
        assert pairs == []
        assert aggregator.key_path == ()

    def test_value_without_key(self):
        aggregator = KeyPathAggregator()
        with pytest.raises(EmptyKeyEncounteredException):
            aggregator.consume(Token.value("orphan"))

    def test_reset(self):
        aggregator = KeyPathAggregator()
        aggregator.consume(Token.key("a"))
        aggregator.reset()
        assert aggregator.key_path == ()


class TestKeyValueMapBuilder:
    def test_nested_paths_create_submaps(self):
        result = build([(("a", "b", "c"), "1"), (("a", "d"), "2"), (("e",), "3")])
        assert result == {"a": {"b": {"c": "1"}, "d": "2"}, "e": "3"}

    def test_earliest_wins_keeps_submap(self):
        result = build([(("k", "a"), "1"), (("k",), "2")])
        assert result == {"k": {"a": "1"}}

    def test_latest_wins_replaces_submap(self):
        result = build([(("k", "a"), "1"), (("k",), "2")], use_latest_value=True)
        assert result == {"k": "2"}

    def test_earliest_wins_keeps_string(self):
        result = build([(("k",), "1"), (("k", "a"), "2")])
        assert result == {"k": "1"}

    def test_latest_wins_replaces_string_with_submap(self):
        result = build([(("k",), "1"), (("k", "a"), "2")], use_latest_value=True)
        assert result == {"k": {"a": "2"}}

    def test_earliest_wins_duplicate_string(self):
        assert build([(("k",), "1"), (("k",), "2")]) == {"k": "1"}

    def test_latest_wins_duplicate_string(self):
        assert build([(("k",), "1"), (("k",), "2")], use_latest_value=True) == {"k": "2"}

    @pytest.mark.parametrize("use_latest_value", [False, True])
    def test_submaps_always_merge(self, use_latest_value):
        result = build([(("k", "a"), "1"), (("k", "b"), "2")], use_latest_value)
        assert result == {"k": {"a": "1", "b": "2"}}

    def test_empty_key_path(self):
        builder = KeyValueMapBuilder()
        with pytest.raises(EmptyKeyEncounteredException):
            builder.add(KeyValuePair((), "value"))

    def test_keys_with_dots_stay_single_segments(self):
        assert build([(("a.b", "c"), "1")]) == {"a.b": {"c": "1"}}

    def test_reset(self):
        builder = KeyValueMapBuilder()
        builder.add(KeyValuePair(("a",), "1"))
        builder.reset()
        assert builder.result == {}
