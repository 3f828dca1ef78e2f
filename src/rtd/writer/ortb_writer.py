"""
ORTB2 Fragment Writer for the RTD provider.

Merges a bidder's routed signals into its ORTB2 fragment:

ortb2.user.data[]:
    - "permutive.com": merged AC/SSP signals
    - "permutive.com" + ext.segtax: taxonomy transformations of the above
    - "permutive": custom cohorts
    - "permutive.com" + ext.segtax: topics, one entry per taxonomy version

ortb2.user.keywords:
    - p_standard=<id>: merged AC/SSP signals
    - p_standard_aud=<id>: SSP signals
    - permutive=<id>: custom cohorts

ortb2.user.ext.data.p_standard / .permutive
ortb2.site.ext.permutive.p_standard

Only these paths are touched. Existing entries named "permutive.com"
or "permutive" are replaced on every write, so writing twice with the
same signals gives the same fragment.
"""

import copy
from typing import Any, Iterable, Optional

from ..config.module_config import TransformationConfig
from ..logging import bidder_logger
from ..models.user_data import UserDataEntry
from ..router.signal_router import BidderSignals
from ..transformer.taxonomy import apply_transformations
from ..utils.constants import (
    CUSTOM_COHORTS_KEYWORD,
    PROVIDER_NAME,
    STANDARD_AUD_KEYWORD,
    STANDARD_KEYWORD,
)
from ..utils.deep import deep_get, deep_set

RESERVED_USER_DATA_NAMES = frozenset({PROVIDER_NAME, CUSTOM_COHORTS_KEYWORD})


def merge_keywords(existing: Optional[str], groups: Iterable[tuple[str, list[str]]]) -> str:
    """
    Merge ``key=value`` tokens into a comma-separated keyword string.

    Existing tokens keep their order and come first. Duplicate and
    empty tokens are dropped.

    Raises:
        TypeError: If ``existing`` is not a string
    """
    if existing is None:
        existing = ""
    if not isinstance(existing, str):
        raise TypeError(f"user.keywords must be a string, got {type(existing).__name__}")

    tokens = [kv.strip() for kv in existing.split(",")]
    tokens.extend(f"{keyword}={cohort_id}" for keyword, ids in groups for cohort_id in ids)
    return ",".join(dict.fromkeys(t for t in tokens if t))


def _segtax(version: str) -> Optional[int]:
    try:
        return int(version)
    except (TypeError, ValueError):
        return None


class OrtbFragmentWriter:
    """
    Writes routed signals into per-bidder ORTB2 fragments.

    The input fragment is never modified; write() returns an updated
    deep copy for the caller to swap in.
    """

    def build_user_data(
        self,
        signals: BidderSignals,
        transformations: list[TransformationConfig],
    ) -> list[UserDataEntry]:
        """Entries appended to ``user.data``, in emission order."""
        log = bidder_logger(signals.bidder_code)
        provider_entry = UserDataEntry.from_ids(PROVIDER_NAME, signals.merged)

        entries = [provider_entry]
        entries.extend(apply_transformations(provider_entry, transformations))
        entries.append(UserDataEntry.from_ids(CUSTOM_COHORTS_KEYWORD, signals.custom_cohorts))

        for version, ids in signals.topics.items():
            segtax = _segtax(version)
            if segtax is None:
                log.warning("Skipping topics with non-numeric taxonomy", taxonomy=version)
                continue
            entries.append(UserDataEntry.from_ids(PROVIDER_NAME, ids, segtax=segtax))
        return entries

    def write_user_data(
        self,
        ortb2: dict[str, Any],
        signals: BidderSignals,
        transformations: list[TransformationConfig],
    ) -> None:
        current = deep_get(ortb2, "user.data")
        if current is None:
            current = []
        elif not isinstance(current, list):
            raise TypeError("user.data must be a list")

        kept = [
            entry for entry in current
            if not (isinstance(entry, dict) and entry.get("name") in RESERVED_USER_DATA_NAMES)
        ]
        added = [e.to_dict() for e in self.build_user_data(signals, transformations)]
        deep_set(ortb2, "user.data", kept + added)

    def write_keywords(self, ortb2: dict[str, Any], signals: BidderSignals) -> None:
        keywords = merge_keywords(
            deep_get(ortb2, "user.keywords"),
            [
                (STANDARD_KEYWORD, signals.merged),
                (STANDARD_AUD_KEYWORD, signals.ssp),
                (CUSTOM_COHORTS_KEYWORD, signals.custom_cohorts),
            ],
        )
        deep_set(ortb2, "user.keywords", keywords)

    def write_ext_data(self, ortb2: dict[str, Any], signals: BidderSignals) -> None:
        if signals.merged:
            deep_set(ortb2, f"user.ext.data.{STANDARD_KEYWORD}", list(signals.merged))
        if signals.custom_cohorts:
            deep_set(ortb2, f"user.ext.data.{CUSTOM_COHORTS_KEYWORD}", list(signals.custom_cohorts))

    def write_site_ext(self, ortb2: dict[str, Any], signals: BidderSignals) -> None:
        if signals.merged:
            deep_set(ortb2, f"site.ext.permutive.{STANDARD_KEYWORD}", list(signals.merged))

    def write(
        self,
        fragment: Optional[dict[str, Any]],
        signals: BidderSignals,
        transformations: list[TransformationConfig],
    ) -> dict[str, Any]:
        """
        Merge signals into a bidder's ORTB2 fragment.

        Args:
            fragment: Existing fragment (None for a new bidder)
            signals: Routed signals for the bidder
            transformations: Configured taxonomy transformations

        Returns:
            Updated copy of the fragment

        Raises:
            TypeError: If the fragment or one of the written paths is malformed
        """
        if fragment is None:
            fragment = {}
        if not isinstance(fragment, dict):
            raise TypeError(f"ORTB2 fragment must be an object, got {type(fragment).__name__}")

        log = bidder_logger(signals.bidder_code)
        log.debug("Current ortb2 config", config=fragment)

        ortb2 = copy.deepcopy(fragment)
        self.write_user_data(ortb2, signals, transformations)
        self.write_keywords(ortb2, signals)
        self.write_ext_data(ortb2, signals)
        self.write_site_ext(ortb2, signals)

        log.debug("Updated ortb2 config", config=ortb2)
        return ortb2
