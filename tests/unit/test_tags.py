# ABOUTME: Unit tests for tag parsing, tag overlap scoring, and the tag union merge.
# ABOUTME: Covers every accepted tag shape, malformed input, and merge idempotence.

import pytest

from artcatalog.similarity.errors import TagFormatError
from artcatalog.similarity.tags import merge_tags, parse_tag_values, tag_overlap


class TestParseTagValues:
    """Tests for parse_tag_values."""

    def test_json_object_values(self) -> None:
        """Values of a JSON object are lowercased; booleans become yes/no."""
        raw = '{"material": "Bronze", "year": 1999, "lit": true}'
        assert parse_tag_values(raw) == frozenset({"bronze", "1999", "yes"})

    def test_mapping_uses_values_not_keys(self) -> None:
        assert parse_tag_values({"material": "steel"}) == frozenset({"steel"})

    def test_nested_tags_object(self) -> None:
        """The structured {"tags": {...}} shape is unwrapped."""
        raw = {"tags": {"material": "Granite"}, "version": 2}
        assert parse_tag_values(raw) == frozenset({"granite"})

    def test_flat_list(self) -> None:
        assert parse_tag_values(["Mural", " paint "]) == frozenset({"mural", "paint"})

    def test_nested_and_empty_values_dropped(self) -> None:
        raw = {"dims": {"h": 3}, "note": "", "material": "wood", "x": None}
        assert parse_tag_values(raw) == frozenset({"wood"})

    def test_list_values_flattened(self) -> None:
        """Each value of a multi-valued tag is part of the set."""
        assert parse_tag_values({"material": ["Bronze", "steel"]}) == frozenset({"bronze", "steel"})

    def test_list_values_in_json_and_nested_shapes(self) -> None:
        raw = '{"tags": {"colours": ["red", "blue", ""], "material": "wood"}}'
        assert parse_tag_values(raw) == frozenset({"red", "blue", "wood"})

    def test_multi_valued_tags_overlap(self) -> None:
        a = parse_tag_values({"material": ["bronze", "steel"]})
        b = parse_tag_values({"material": "bronze"})
        assert tag_overlap(a, b) == pytest.approx(0.5)

    @pytest.mark.parametrize("raw", [None, "", "   ", "null", {}, []])
    def test_empty_payloads(self, raw: object) -> None:
        assert parse_tag_values(raw) == frozenset()

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(TagFormatError, match="not valid JSON"):
            parse_tag_values("{material: bronze")

    def test_scalar_json_raises(self) -> None:
        """A JSON scalar is neither a mapping nor a list."""
        with pytest.raises(TagFormatError) as exc_info:
            parse_tag_values("42")
        assert exc_info.value.code == "TAG_FORMAT_INVALID"


class TestTagOverlap:
    """Tests for tag_overlap."""

    def test_jaccard(self) -> None:
        assert tag_overlap(frozenset({"a", "b"}), frozenset({"b", "c"})) == pytest.approx(1 / 3)

    def test_identical_sets(self) -> None:
        assert tag_overlap(frozenset({"a"}), frozenset({"a"})) == 1.0

    def test_empty_side_is_absent(self) -> None:
        assert tag_overlap(frozenset(), frozenset({"a"})) is None


class TestMergeTags:
    """Tests for merge_tags."""

    def test_adds_missing_keys_only(self) -> None:
        """Existing keys keep their value; new keys are added."""
        result = merge_tags(
            {"material": "bronze"},
            {"material": "steel", "artist_url": "https://example.org/doe"},
        )
        assert result.merged_tags == {
            "material": "bronze",
            "artist_url": "https://example.org/doe",
        }
        assert result.new_tags_added == 1
        assert result.total_tags == 2

    def test_idempotent(self) -> None:
        """Merging the same tags a second time adds nothing."""
        new = {"material": "bronze", "height": "3m"}
        first = merge_tags({"material": "bronze"}, new)
        second = merge_tags(first.merged_tags, new)
        assert second.new_tags_added == 0
        assert second.merged_tags == first.merged_tags

    def test_does_not_mutate_existing(self) -> None:
        existing = {"material": "bronze"}
        merge_tags(existing, {"height": "3m"})
        assert existing == {"material": "bronze"}
