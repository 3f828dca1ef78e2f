"""Tests for the SignalCollector."""

import pytest

from src.rtd.collector.signal_collector import SignalCollector, to_cohort_id
from src.rtd.storage.signal_store import InMemorySignalStore


@pytest.fixture
def store_data():
    """Store contents with every source populated."""
    return {
        "_psegs": [1, 999999, 1000000, "1000001", "abc", 2000000.0],
        "_pcrprs": ["dcr1", "dcr2"],
        "_pprebid": ["c1", "c2"],
        "_papns": ["c2", "a1"],
        "_prubicons": ["r1"],
        "_pindexs": [7],
        "_pdfps": ["c1", "g1"],
        "_pssps": {"ssps": ["pubmatic", "ix"], "cohorts": ["s1", "s2", "s3"]},
        "_ppsts": {"600": [1, 2, 3], "601": ["4"]},
    }


class TestToCohortId:
    """Tests for id normalization."""

    def test_strings_unchanged(self):
        assert to_cohort_id("abc") == "abc"

    def test_numbers(self):
        assert to_cohort_id(12) == "12"
        assert to_cohort_id(1000000.0) == "1000000"
        assert to_cohort_id(1.5) == "1.5"

    def test_objects_rejected(self):
        with pytest.raises(TypeError):
            to_cohort_id({"id": 1})


class TestSignalCollector:
    """Tests for SignalCollector.collect."""

    def test_ac_dcr_first_then_standard(self, store_data):
        """AC has DCR cohorts first, then standard cohorts >= 1,000,000."""
        bundle = SignalCollector(InMemorySignalStore(store_data)).collect(500)
        assert bundle.ac == ("dcr1", "dcr2", "1000000", "1000001", "2000000")

    def test_ac_capped(self, store_data):
        bundle = SignalCollector(InMemorySignalStore(store_data)).collect(3)
        assert bundle.ac == ("dcr1", "dcr2", "1000000")

    def test_custom_cohorts_unified_and_deduplicated(self, store_data):
        """Primary and legacy sources merge in encounter order without duplicates."""
        bundle = SignalCollector(InMemorySignalStore(store_data)).collect(500)
        assert bundle.custom_cohorts == ("c1", "c2", "a1", "r1", "7", "g1")

    def test_custom_cohorts_capped_after_dedup(self, store_data):
        bundle = SignalCollector(InMemorySignalStore(store_data)).collect(3)
        assert bundle.custom_cohorts == ("c1", "c2", "a1")

    def test_ssp_cohorts_capped_but_not_bidders(self):
        store = InMemorySignalStore({
            "_pssps": {"ssps": ["a", "b", "c"], "cohorts": ["1", "2", "3"]},
        })
        bundle = SignalCollector(store).collect(2)
        assert bundle.ssp.cohorts == ("1", "2")
        assert bundle.ssp.ssps == ("a", "b", "c")

    def test_topics_capped_per_version(self, store_data):
        bundle = SignalCollector(InMemorySignalStore(store_data)).collect(2)
        assert dict(bundle.topics) == {"600": ("1", "2"), "601": ("4",)}

    def test_topics_malformed_version_degrades_alone(self):
        store = InMemorySignalStore({"_ppsts": {"600": ["1"], "601": "oops"}})
        bundle = SignalCollector(store).collect(500)
        assert dict(bundle.topics) == {"600": ("1",), "601": ()}

    def test_empty_store(self):
        """Every source falls back to its default."""
        bundle = SignalCollector(InMemorySignalStore()).collect(500)
        assert bundle.ac == ()
        assert bundle.custom_cohorts == ()
        assert bundle.ssp.cohorts == ()
        assert bundle.ssp.ssps == ()
        assert dict(bundle.topics) == {}

    def test_malformed_topics_isolated(self, store_data):
        """A non-JSON topics source does not affect the other classes."""
        store_data["_ppsts"] = "this is not json"
        bundle = SignalCollector(InMemorySignalStore(store_data)).collect(500)

        assert dict(bundle.topics) == {}
        assert bundle.ac == ("dcr1", "dcr2", "1000000", "1000001", "2000000")
        assert bundle.custom_cohorts == ("c1", "c2", "a1", "r1", "7", "g1")
        assert bundle.ssp.cohorts == ("s1", "s2", "s3")

    def test_type_mismatches_default(self):
        """Sources with the wrong shape fall back to their defaults."""
        store = InMemorySignalStore({
            "_psegs": {"not": "a list"},
            "_pcrprs": "dcr",
            "_pprebid": ["ok"],
            "_papns": 5,
            "_pssps": ["ix"],
            "_ppsts": ["600"],
        })
        bundle = SignalCollector(store).collect(500)

        assert bundle.ac == ()
        assert bundle.custom_cohorts == ("ok",)
        assert bundle.ssp.cohorts == ()
        assert bundle.ssp.ssps == ()
        assert dict(bundle.topics) == {}

    def test_ssp_partial_payload(self):
        """A missing ssps list does not drop the cohorts."""
        store = InMemorySignalStore({"_pssps": {"cohorts": ["s1"]}})
        bundle = SignalCollector(store).collect(500)
        assert bundle.ssp.cohorts == ("s1",)
        assert bundle.ssp.ssps == ()

    def test_bundle_is_immutable(self, store_data):
        bundle = SignalCollector(InMemorySignalStore(store_data)).collect(500)
        with pytest.raises(AttributeError):
            bundle.ac = ()
        with pytest.raises(TypeError):
            bundle.topics["602"] = ("x",)

    def test_collect_reads_fresh_each_time(self):
        store = InMemorySignalStore({"_pcrprs": ["a"]})
        collector = SignalCollector(store)
        first = collector.collect(500)
        store.set_data("_pcrprs", ["b"])
        second = collector.collect(500)

        assert first.ac == ("a",)
        assert second.ac == ("b",)

    def test_standard_cohorts_numeric_strings(self):
        """Digit separators are not numbers; decimal and hex strings are."""
        store = InMemorySignalStore({
            "_psegs": ["1_000_000", "2000000", " 3000000 ", "0xF4240", "1e6x", "4e6"],
        })
        bundle = SignalCollector(store).collect(500)
        assert bundle.ac == ("2000000", "3000000", "1000000", "4000000")
