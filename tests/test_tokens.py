# tests/test_tokens.py
"""
Tests for tokenpulse.models.tokens.

Snapshots come from producers in several shapes; every accepted shape must
end up as the same flat category -> entries structure.
"""

import pytest

from tokenpulse.models.tokens import KNOWN_CATEGORIES, TokenEntry, TokenSet


class TestEntryLists:
    """Curated scanner output: a list of entry dicts per category."""

    def test_entries_keep_metadata(self):
        tokens = TokenSet.from_dict(
            {"colors": [{"path": "primary", "value": "#0000FF", "usage": 12, "confidence": 0.9}]}
        )

        entry = tokens.get("colors")[0]
        assert entry.path == "primary"
        assert entry.value == "#0000FF"
        assert entry.usage == 12
        assert entry.confidence == 0.9
        assert entry.percentage is None

    def test_name_is_accepted_as_path(self):
        tokens = TokenSet.from_dict({"spacing": [{"name": "sm", "value": "4px"}]})
        assert tokens.get("spacing")[0].path == "sm"

    def test_entry_without_path_is_skipped(self):
        tokens = TokenSet.from_dict(
            {"colors": [{"value": "#000000"}, {"path": "ink", "value": "#111111"}]}
        )
        assert [e.path for e in tokens.get("colors")] == ["ink"]

    def test_list_values_become_tuples(self):
        tokens = TokenSet.from_dict(
            {"fonts": [{"path": "body", "value": ["Inter", "sans-serif"]}]}
        )
        assert tokens.get("fonts")[0].value == ("Inter", "sans-serif")

    def test_duplicates_are_kept_in_order(self):
        tokens = TokenSet.from_dict(
            {"colors": [{"path": "a", "value": "#111111"}, {"path": "a", "value": "#222222"}]}
        )
        assert [e.value for e in tokens.get("colors")] == ["#111111", "#222222"]


class TestOtherShapes:
    """Mapping, W3C-style and nested-category inputs."""

    def test_path_value_mapping(self):
        tokens = TokenSet.from_dict({"spacing": {"sm": "4px", "md": "8px"}})
        assert [(e.path, e.value) for e in tokens.get("spacing")] == [
            ("sm", "4px"),
            ("md", "8px"),
        ]

    def test_w3c_nested_groups(self):
        tokens = TokenSet.from_dict(
            {"color": {"primary": {"500": {"$value": "#3B82F6", "$type": "color"}}}}
        )
        entry = tokens.get("color")[0]
        assert entry.path == "primary.500"
        assert entry.value == "#3B82F6"

    def test_nested_categories_are_flattened(self):
        tokens = TokenSet.from_dict(
            {
                "typography": {
                    "families": [{"path": "body", "value": "Inter"}],
                    "sizes": [{"path": "base", "value": "16px"}],
                }
            }
        )
        assert "typography" not in tokens
        assert "typography.families" in tokens
        assert tokens.get("typography.sizes")[0].value == "16px"

    def test_metadata_keys_are_skipped_and_version_read(self):
        tokens = TokenSet.from_dict({"$version": "2.1", "colors": []})
        assert tokens.version == "2.1"
        assert tokens.category_names == ["colors"]

    def test_unknown_categories_are_accepted(self):
        tokens = TokenSet.from_dict({"z-index": {"modal": 100}})
        assert "z-index" not in KNOWN_CATEGORIES
        assert tokens.get("z-index")[0].value == 100

    def test_empty_list_is_not_a_nested_category(self):
        tokens = TokenSet.from_dict({"shadows": {"card": [], "lg": "0 1px 2px"}})
        assert tokens.category_names == ["shadows"]
        assert "shadows.card" not in tokens
        assert ("lg", "0 1px 2px") in [(e.path, e.value) for e in tokens.get("shadows")]

    def test_non_mapping_raises(self):
        with pytest.raises(TypeError):
            TokenSet.from_dict(["colors"])


class TestTokenSet:
    """Read API and immutability."""

    def test_missing_category_is_empty(self):
        assert TokenSet().get("colors") == ()

    def test_count_and_len(self):
        tokens = TokenSet.from_dict(
            {"colors": {"a": "#000000", "b": "#FFFFFF"}, "spacing": {"sm": "4px"}}
        )
        assert len(tokens) == 2
        assert tokens.count() == 3

    def test_categories_are_read_only(self):
        tokens = TokenSet.from_dict({"colors": {"a": "#000000"}})
        with pytest.raises(TypeError):
            tokens.categories["colors"] = ()

    def test_to_dict_is_json_safe(self):
        entry = TokenEntry(path="stack", value=["Inter", "Arial"], usage=3)
        tokens = TokenSet(categories={"fonts": [entry]}, version="1")

        assert tokens.to_dict() == {
            "$version": "1",
            "fonts": [{"path": "stack", "value": ["Inter", "Arial"], "usage": 3}],
        }
