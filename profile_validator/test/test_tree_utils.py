import pytest

from profile_validator.utils.tree_utils import (
    deep_get,
    deep_has,
    deep_merge,
    deep_set,
    join_path,
    split_path,
)


class TestPaths:
    def test_split_dotted_path(self):
        assert split_path("address.city") == ["address", "city"]

    def test_split_sequence_stringifies_indices(self):
        assert split_path(["items", 0, "name"]) == ["items", "0", "name"]

    def test_empty_segment_rejected(self):
        with pytest.raises(ValueError, match="empty segment"):
            split_path("address..city")

    def test_join_path(self):
        assert join_path(["items", 3]) == "items.3"


class TestDeepAccess:
    def test_get_and_has(self):
        tree = {"a": {"b": {"x": True}}}
        assert deep_get(tree, "a.b") == {"x": True}
        assert deep_has(tree, "a.b.x")
        assert not deep_has(tree, "a.c")
        assert deep_get(tree, "a.b.x.y", "default") == "default"

    def test_has_false_value(self):
        assert deep_has({"a": {"b": None}}, "a.b")

    def test_set_creates_parents(self):
        tree = {}
        deep_set(tree, "a.b.c", {"invalid": True})
        assert tree == {"a": {"b": {"c": {"invalid": True}}}}

    def test_set_replaces_terminal_parent(self):
        tree = {"a": True}
        deep_set(tree, "a.b", 1)
        assert tree == {"a": {"b": 1}}

    def test_set_empty_path(self):
        with pytest.raises(ValueError):
            deep_set({}, "", 1)


class TestDeepMerge:
    def test_nested_merge(self):
        target = {"a": {"x": True}, "b": 1}
        deep_merge(target, {"a": {"y": True}, "b": 2, "c": {"z": True}})
        assert target == {"a": {"x": True, "y": True}, "b": 2, "c": {"z": True}}

    def test_merged_mappings_are_copied(self):
        source = {"a": {"x": True}}
        target = deep_merge({}, source)
        target["a"]["y"] = True
        assert source == {"a": {"x": True}}
