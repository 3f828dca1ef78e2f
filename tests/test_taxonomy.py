"""Tests for taxonomy transformations."""

from src.rtd.config.module_config import TransformationConfig
from src.rtd.models.user_data import UserDataEntry
from src.rtd.transformer.taxonomy import (
    apply_transformations,
    iab_segment_id,
    transform_iab,
)


class TestIabTransformation:
    """Tests for the IAB transformation."""

    def test_unmapped_ids_dropped(self):
        """Unmapped ids are removed, not emitted as a sentinel."""
        entry = UserDataEntry.from_ids("permutive.com", ["1", "2"])
        result = transform_iab(entry, {"segtax": 4, "iabIds": {"1": "100"}})

        assert result.to_dict() == {
            "name": "permutive.com",
            "ext": {"segtax": 4},
            "segment": [{"id": "100"}],
        }

    def test_nothing_mapped(self):
        entry = UserDataEntry.from_ids("permutive.com", ["1", "2"])
        result = transform_iab(entry, {"segtax": 4, "iabIds": {}})
        assert result.segment == []
        assert result.segtax == 4

    def test_input_not_modified(self):
        entry = UserDataEntry.from_ids("permutive.com", ["1"])
        transform_iab(entry, {"segtax": 4, "iabIds": {"1": "100"}})
        assert entry.segment_ids == ["1"]
        assert entry.segtax is None

    def test_iab_segment_id_unknown(self):
        assert iab_segment_id("9", {"1": "100"}) == "_unknown_"
        assert iab_segment_id("1", {"1": 100}) == "100"


class TestApplyTransformations:
    """Tests for running configured transformations."""

    def test_each_config_produces_an_entry(self):
        entry = UserDataEntry.from_ids("permutive.com", ["1", "2"])
        configs = [
            TransformationConfig(id="iab", config={"segtax": 4, "iabIds": {"1": "100"}}),
            TransformationConfig(id="iab", config={"segtax": 6, "iabIds": {"2": "200"}}),
        ]

        results = apply_transformations(entry, configs)
        assert [r.segtax for r in results] == [4, 6]
        assert [r.segment_ids for r in results] == [["100"], ["200"]]

    def test_unknown_transformations_skipped(self):
        entry = UserDataEntry.from_ids("permutive.com", ["1"])
        configs = [TransformationConfig(id="unknown", config={})]
        assert apply_transformations(entry, configs) == []
