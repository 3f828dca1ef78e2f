"""Tests for the ORTB2 fragment writer."""

import copy

import pytest

from src.rtd.config.module_config import TransformationConfig
from src.rtd.router.signal_router import BidderRole, BidderSignals
from src.rtd.writer.ortb_writer import OrtbFragmentWriter, merge_keywords


@pytest.fixture
def writer():
    return OrtbFragmentWriter()


@pytest.fixture
def signals():
    """AC+SSP+CC bidder with topics."""
    return BidderSignals(
        bidder_code="appnexus",
        roles={BidderRole.AC, BidderRole.SSP, BidderRole.CC},
        merged=["1", "2", "3"],
        ssp=["3"],
        custom_cohorts=["c1"],
        topics={"600": ["t1"], "601": ["t2", "t3"]},
    )


@pytest.fixture
def existing_fragment():
    """Publisher-authored fragment with unrelated data."""
    return {
        "user": {
            "data": [
                {"name": "other.com", "segment": [{"id": "x"}]},
                {"name": "permutive.com", "segment": [{"id": "stale"}]},
                {"name": "permutive", "segment": [{"id": "stale"}]},
            ],
            "keywords": "foo=bar, p_standard=1",
            "ext": {"data": {"publisher": ["keep"]}, "eids": [{"source": "id5"}]},
        },
        "site": {
            "domain": "example.com",
            "ext": {"permutive": {"other": True}, "data": {"section": "news"}},
        },
    }


class TestMergeKeywords:
    """Tests for keyword merging."""

    def test_existing_token_not_duplicated(self):
        keywords = merge_keywords("p_standard=1,foo=bar", [("p_standard", ["1", "2"])])
        tokens = keywords.split(",")

        assert tokens.count("p_standard=1") == 1
        assert "p_standard=2" in tokens
        assert "foo=bar" in tokens

    def test_group_then_id_order(self):
        keywords = merge_keywords(None, [("p_standard", ["1", "2"]), ("permutive", ["c"])])
        assert keywords == "p_standard=1,p_standard=2,permutive=c"

    def test_whitespace_and_empty_tokens(self):
        assert merge_keywords(" a=1 ,, b=2,", []) == "a=1,b=2"

    def test_non_string_rejected(self):
        with pytest.raises(TypeError):
            merge_keywords(["a=1"], [])


class TestOrtbFragmentWriter:
    """Tests for OrtbFragmentWriter.write."""

    def test_user_data_entries(self, writer, signals):
        result = writer.write({}, signals, [])

        assert result["user"]["data"] == [
            {"name": "permutive.com", "segment": [{"id": "1"}, {"id": "2"}, {"id": "3"}]},
            {"name": "permutive", "segment": [{"id": "c1"}]},
            {"name": "permutive.com", "ext": {"segtax": 600}, "segment": [{"id": "t1"}]},
            {"name": "permutive.com", "ext": {"segtax": 601}, "segment": [{"id": "t2"}, {"id": "t3"}]},
        ]

    def test_transformations_follow_provider_entry(self, writer, signals):
        transformations = [TransformationConfig(id="iab", config={"segtax": 4, "iabIds": {"1": "100"}})]
        result = writer.write({}, signals, transformations)

        assert result["user"]["data"][1] == {
            "name": "permutive.com",
            "ext": {"segtax": 4},
            "segment": [{"id": "100"}],
        }
        assert result["user"]["data"][2]["name"] == "permutive"

    def test_reserved_entries_replaced(self, writer, signals, existing_fragment):
        result = writer.write(existing_fragment, signals, [])
        names = [entry["name"] for entry in result["user"]["data"]]

        assert names[0] == "other.com"
        assert names.count("permutive") == 1
        assert [e for e in result["user"]["data"] if e.get("segment") == [{"id": "stale"}]] == []

    def test_keywords(self, writer, signals, existing_fragment):
        result = writer.write(existing_fragment, signals, [])
        assert result["user"]["keywords"] == (
            "foo=bar,p_standard=1,p_standard=2,p_standard=3,p_standard_aud=3,permutive=c1"
        )

    def test_ext_data_and_site(self, writer, signals, existing_fragment):
        result = writer.write(existing_fragment, signals, [])

        assert result["user"]["ext"]["data"]["p_standard"] == ["1", "2", "3"]
        assert result["user"]["ext"]["data"]["permutive"] == ["c1"]
        assert result["site"]["ext"]["permutive"]["p_standard"] == ["1", "2", "3"]

    def test_unrelated_content_preserved(self, writer, signals, existing_fragment):
        """Everything outside the reserved paths is unchanged."""
        original = copy.deepcopy(existing_fragment)
        result = writer.write(existing_fragment, signals, [])

        assert result["user"]["data"][0] == original["user"]["data"][0]
        assert result["user"]["ext"]["data"]["publisher"] == ["keep"]
        assert result["user"]["ext"]["eids"] == original["user"]["ext"]["eids"]
        assert result["site"]["domain"] == "example.com"
        assert result["site"]["ext"]["permutive"]["other"] is True
        assert result["site"]["ext"]["data"] == {"section": "news"}

    def test_input_fragment_not_modified(self, writer, signals, existing_fragment):
        original = copy.deepcopy(existing_fragment)
        writer.write(existing_fragment, signals, [])
        assert existing_fragment == original

    def test_idempotent(self, writer, signals, existing_fragment):
        transformations = [TransformationConfig(id="iab", config={"segtax": 4, "iabIds": {"1": "100"}})]
        once = writer.write(existing_fragment, signals, transformations)
        twice = writer.write(once, signals, transformations)
        assert twice == once

    def test_empty_signals_leave_paths_untouched(self, writer, existing_fragment):
        """No ids means ext.data and site paths are not cleared."""
        existing_fragment["user"]["ext"]["data"]["p_standard"] = ["old"]
        existing_fragment["site"]["ext"]["permutive"]["p_standard"] = ["old"]
        result = writer.write(existing_fragment, BidderSignals(bidder_code="ix"), [])

        assert result["user"]["ext"]["data"]["p_standard"] == ["old"]
        assert result["site"]["ext"]["permutive"]["p_standard"] == ["old"]
        assert result["user"]["data"][-2:] == [
            {"name": "permutive.com", "segment": []},
            {"name": "permutive", "segment": []},
        ]

    def test_none_fragment(self, writer, signals):
        result = writer.write(None, signals, [])
        assert result["site"]["ext"]["permutive"]["p_standard"] == ["1", "2", "3"]

    def test_non_numeric_topic_version_skipped(self, writer):
        signals = BidderSignals(bidder_code="ix", topics={"v1": ["t"], "600": ["u"]})
        result = writer.write({}, signals, [])
        segtaxes = [e["ext"]["segtax"] for e in result["user"]["data"] if "ext" in e]
        assert segtaxes == [600]

    @pytest.mark.parametrize("user_data", [{}, "", 0])
    def test_falsy_non_list_user_data_raises(self, writer, signals, user_data):
        """An empty but malformed user.data is rejected, not overwritten."""
        with pytest.raises(TypeError):
            writer.write({"user": {"data": user_data}}, signals, [])

    def test_malformed_fragment_raises(self, writer, signals):
        with pytest.raises(TypeError):
            writer.write({"user": {"data": "oops"}}, signals, [])
        with pytest.raises(TypeError):
            writer.write({"site": {"ext": "oops"}}, signals, [])
        with pytest.raises(TypeError):
            writer.write(["not", "a", "dict"], signals, [])
