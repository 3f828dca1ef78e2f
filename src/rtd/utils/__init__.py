"""RTD Utilities."""

from .constants import (
    CUSTOM_COHORTS_KEYWORD,
    LEGACY_CUSTOM_COHORT_BIDDERS,
    PROVIDER_NAME,
    STANDARD_AUD_KEYWORD,
    STANDARD_KEYWORD,
)
from .deep import deep_get, deep_set, merge_deep

__all__ = [
    'CUSTOM_COHORTS_KEYWORD',
    'LEGACY_CUSTOM_COHORT_BIDDERS',
    'PROVIDER_NAME',
    'STANDARD_AUD_KEYWORD',
    'STANDARD_KEYWORD',
    'deep_get',
    'deep_set',
    'merge_deep',
]
