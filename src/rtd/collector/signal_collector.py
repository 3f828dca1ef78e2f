"""
Signal Collector for the RTD provider.

Reads every cohort source the identity SDK writes, normalizes ids to
strings, deduplicates and caps each signal class, and returns one
immutable SignalBundle.

Each source is read independently: a missing or malformed source falls
back to its own default and never affects the others.
"""

import math
import re
from typing import Any, Iterable

from ..logging import collector_logger
from ..models.signal_bundle import SignalBundle, SspSignals
from ..storage.signal_store import ReadResult, SignalStore, read_json
from ..utils.constants import (
    CUSTOM_COHORTS_KEY,
    DCR_COHORTS_KEY,
    LEGACY_CUSTOM_COHORT_KEYS,
    SSP_SIGNALS_KEY,
    STANDARD_COHORT_MIN_ID,
    STANDARD_COHORTS_KEY,
    TOPICS_KEY,
)

logger = collector_logger()

# Numeric strings accepted for standard cohort ids: decimal or hex, no digit separators
_DECIMAL_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")


def to_cohort_id(value: Any) -> str:
    """
    Normalize a raw cohort value to its string id.

    Integral floats lose their fractional part (1000000.0 -> "1000000").

    Raises:
        TypeError: For objects, arrays and nulls
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    raise TypeError(f"Unsupported cohort id: {value!r}")


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if _DECIMAL_RE.fullmatch(text):
            number = float(text)
        elif _HEX_RE.fullmatch(text):
            number = float(int(text, 16))
        else:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _id_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        raise TypeError(f"Expected a list of cohort ids, got {type(value).__name__}")
    return [to_cohort_id(v) for v in value]


def _standard_cohorts(value: Any) -> list[str]:
    if not isinstance(value, list):
        raise TypeError(f"Expected a list of cohort ids, got {type(value).__name__}")
    cohorts = []
    for raw in value:
        number = _as_number(raw)
        if number is not None and number >= STANDARD_COHORT_MIN_ID:
            cohorts.append(to_cohort_id(number))
    return cohorts


def _unique(ids: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for cohort_id in ids:
        if cohort_id not in seen:
            seen.add(cohort_id)
            result.append(cohort_id)
    return result


def _field(payload: Any, name: str) -> ReadResult[list[str]]:
    if not isinstance(payload, dict):
        return ReadResult.failure("payload is not an object")
    return ReadResult.success(payload.get(name)).map(_id_list)


class SignalCollector:
    """
    Builds a SignalBundle from the signal store.

    Holds no state between calls: every collect() reads the store again.
    """

    def __init__(self, store: SignalStore):
        """
        Initialize the collector.

        Args:
            store: Store the identity SDK writes cohorts to
        """
        self._store = store

    def _read(self, key: str, parse) -> ReadResult:
        result = read_json(self._store, key).map(parse)
        if not result.ok and result.error != "missing":
            logger.debug("Cohort source unreadable", key=key, reason=result.error)
        return result

    def collect_ac(self, max_segs: int) -> list[str]:
        """DCR cohorts first, then standard cohorts, capped at max_segs."""
        standard = self._read(STANDARD_COHORTS_KEY, _standard_cohorts).or_default([])
        dcr = self._read(DCR_COHORTS_KEY, _id_list).or_default([])
        return _unique(dcr + standard)[:max_segs]

    def collect_custom_cohorts(self, max_segs: int) -> list[str]:
        """Unified custom cohorts merged with every legacy source, deduplicated."""
        cohorts: list[str] = []
        for key in [CUSTOM_COHORTS_KEY, *LEGACY_CUSTOM_COHORT_KEYS]:
            cohorts.extend(self._read(key, _id_list).or_default([]))
        return _unique(cohorts)[:max_segs]

    def collect_ssp(self, max_segs: int) -> SspSignals:
        """Curation cohorts capped at max_segs; bidder codes are kept whole."""
        payload = read_json(self._store, SSP_SIGNALS_KEY).or_default({"cohorts": [], "ssps": []})
        cohorts = _field(payload, "cohorts").or_default([])
        ssps = _field(payload, "ssps").or_default([])
        return SspSignals(cohorts=tuple(cohorts[:max_segs]), ssps=tuple(ssps))

    def collect_topics(self, max_segs: int) -> dict[str, list[str]]:
        """Topic ids per taxonomy version, each list capped independently."""
        payload = read_json(self._store, TOPICS_KEY).or_default({})
        if not isinstance(payload, dict):
            logger.debug("Cohort source unreadable", key=TOPICS_KEY, reason="payload is not an object")
            return {}

        topics = {}
        for version, value in payload.items():
            ids = ReadResult.success(value).map(_id_list).or_default([])
            topics[str(version)] = ids[:max_segs]
        return topics

    def collect(self, max_segs: int) -> SignalBundle:
        """
        Read all cohort sources.

        Args:
            max_segs: Cap applied to every signal list

        Returns:
            A new SignalBundle for this pass
        """
        bundle = SignalBundle(
            ac=self.collect_ac(max_segs),
            custom_cohorts=self.collect_custom_cohorts(max_segs),
            ssp=self.collect_ssp(max_segs),
            topics=self.collect_topics(max_segs),
        )
        logger.debug(
            "Read segments",
            ac=len(bundle.ac),
            custom_cohorts=len(bundle.custom_cohorts),
            ssp_cohorts=len(bundle.ssp.cohorts),
            ssp_bidders=list(bundle.ssp.ssps),
            topic_versions=list(bundle.topics),
        )
        return bundle
