"""
Taxonomy transformations for ``user.data`` entries.

Each transformation maps the provider's cohort ids into an external
taxonomy and returns a new entry tagged with that taxonomy's segtax.
Results are appended to ``user.data`` next to the untransformed entry.
"""

from typing import Any, Callable

from ..config.module_config import TransformationConfig
from ..models.user_data import Segment, UserDataEntry
from ..utils.constants import UNKNOWN_TAXONOMY_ID

Transformation = Callable[[UserDataEntry, dict[str, Any]], UserDataEntry]


def iab_segment_id(cohort_id: str, iab_ids: dict[str, Any]) -> str:
    """
    Map a cohort id to its IAB audience taxonomy id.

    Returns UNKNOWN_TAXONOMY_ID when no mapping exists.
    """
    mapped = iab_ids.get(cohort_id)
    return str(mapped) if mapped else UNKNOWN_TAXONOMY_ID


def transform_iab(entry: UserDataEntry, config: dict[str, Any]) -> UserDataEntry:
    """
    Map an entry's segments into the IAB audience taxonomy.

    Unmapped segments are dropped, so the result may have no segments.
    """
    iab_ids = config.get("iabIds") or {}
    segments = [Segment(id=iab_segment_id(s.id, iab_ids)) for s in entry.segment]
    return UserDataEntry(
        name=entry.name,
        segment=[s for s in segments if s.id != UNKNOWN_TAXONOMY_ID],
        segtax=config.get("segtax"),
    )


TRANSFORMATIONS: dict[str, Transformation] = {
    "iab": transform_iab,
}


def apply_transformations(
    entry: UserDataEntry,
    configs: list[TransformationConfig],
) -> list[UserDataEntry]:
    """Run every registered transformation in config order; unknown ids are skipped."""
    return [
        TRANSFORMATIONS[t.id](entry, t.config)
        for t in configs
        if t.id in TRANSFORMATIONS
    ]
