"""
Bidder Adapters Module

Backwards-compatible ad unit patching through publisher overrides.

Usage:
    from src.rtd.bidders import apply_ad_unit_overrides

    apply_ad_unit_overrides(request["adUnits"], config, bundle)
"""

from .adapters import (
    AdapterKind,
    BidderAdapter,
    BidderAdapterRegistry,
    apply_ad_unit_overrides,
    resolve_alias,
)

__all__ = [
    "AdapterKind",
    "BidderAdapter",
    "BidderAdapterRegistry",
    "apply_ad_unit_overrides",
    "resolve_alias",
]
