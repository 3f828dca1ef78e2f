"""Tests for nested dictionary helpers."""

import pytest

from src.rtd.utils.deep import deep_get, deep_set, merge_deep


class TestDeepGet:
    def test_existing_path(self):
        assert deep_get({"a": {"b": {"c": 1}}}, "a.b.c") == 1

    def test_missing_path(self):
        assert deep_get({"a": {}}, "a.b.c", "default") == "default"

    def test_non_dict_segment(self):
        assert deep_get({"a": "text"}, "a.b") is None


class TestDeepSet:
    def test_creates_intermediates(self):
        obj = {}
        deep_set(obj, "site.ext.permutive.p_standard", ["1"])
        assert obj == {"site": {"ext": {"permutive": {"p_standard": ["1"]}}}}

    def test_siblings_preserved(self):
        obj = {"user": {"ext": {"data": {"other": 1}, "eids": []}}}
        deep_set(obj, "user.ext.data.p_standard", ["1"])
        assert obj == {"user": {"ext": {"data": {"other": 1, "p_standard": ["1"]}, "eids": []}}}

    def test_non_dict_intermediate_raises(self):
        with pytest.raises(TypeError):
            deep_set({"user": []}, "user.keywords", "a=1")


class TestMergeDeep:
    def test_inputs_not_modified(self):
        base = {"a": {"b": [1]}}
        merged = merge_deep(base, {"a": {"c": 2}})
        merged["a"]["b"].append(2)

        assert base == {"a": {"b": [1]}}
        assert merged == {"a": {"b": [1, 2], "c": 2}}

    def test_lists_replace(self):
        assert merge_deep({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}
