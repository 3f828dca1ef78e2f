"""
Bidder adapters for the deprecated ad unit path.

Before ORTB2 fragments existed, publishers patched ``adUnits[].bids[]``
directly through ``params.overwrites``. That path is kept for backwards
compatibility only: a bidder with a callable override gets it invoked,
every other bidder gets the no-op adapter.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from ..config.module_config import ResolvedModuleConfig
from ..logging import bidder_logger
from ..models.signal_bundle import SignalBundle
from ..router.signal_router import is_ac_enabled
from ..utils.constants import BIDDER_ALIASES
from ..utils.deep import merge_deep

# fn(bid, segment_data, ac_enabled) -> optional patch for the bid
BidOverride = Callable[[dict[str, Any], dict[str, Any], bool], Optional[dict[str, Any]]]


class AdapterKind(str, Enum):
    """Adapter variants."""

    NOOP = "noop"
    OVERRIDE = "override"


@dataclass(frozen=True)
class BidderAdapter:
    """A bidder's ad unit patcher."""

    bidder_code: str
    kind: AdapterKind = AdapterKind.NOOP
    override: Optional[BidOverride] = None

    def apply(self, bid: dict[str, Any], bundle: SignalBundle, ac_enabled: bool) -> Optional[dict[str, Any]]:
        """Run the override; returns the patch it produced, if any."""
        if self.kind is AdapterKind.NOOP or self.override is None:
            return None
        return self.override(bid, bundle.to_dict(), ac_enabled)


def resolve_alias(bidder_code: str) -> str:
    """Map bidder aliases to their canonical code."""
    return BIDDER_ALIASES.get(bidder_code, bidder_code)


class BidderAdapterRegistry:
    """Lookup of adapters by bidder code, defaulting to no-op."""

    def __init__(self, adapters: Optional[dict[str, BidderAdapter]] = None):
        self._adapters = dict(adapters or {})

    @classmethod
    def from_config(cls, config: ResolvedModuleConfig) -> "BidderAdapterRegistry":
        """Build adapters from ``params.overwrites``; non-callables are ignored."""
        adapters = {
            code: BidderAdapter(bidder_code=code, kind=AdapterKind.OVERRIDE, override=fn)
            for code, fn in config.overwrites.items()
            if callable(fn)
        }
        return cls(adapters)

    def get(self, bidder_code: str) -> BidderAdapter:
        code = resolve_alias(bidder_code)
        return self._adapters.get(code) or BidderAdapter(bidder_code=code)

    def __contains__(self, bidder_code: str) -> bool:
        return resolve_alias(bidder_code) in self._adapters


def apply_ad_unit_overrides(
    ad_units: Any,
    config: ResolvedModuleConfig,
    bundle: SignalBundle,
) -> int:
    """
    Apply publisher overrides to every bid of every ad unit.

    A failing override is logged and skipped.

    Returns:
        Number of overrides invoked
    """
    if not isinstance(ad_units, list):
        return 0

    registry = BidderAdapterRegistry.from_config(config)
    applied = 0
    for ad_unit in ad_units:
        bids = ad_unit.get("bids") if isinstance(ad_unit, dict) else None
        for bid in bids or []:
            if not isinstance(bid, dict):
                continue
            adapter = registry.get(str(bid.get("bidder", "")))
            if adapter.kind is AdapterKind.NOOP:
                continue
            try:
                patch = adapter.apply(bid, bundle, is_ac_enabled(config, adapter.bidder_code))
                if isinstance(patch, dict):
                    merged = merge_deep(bid, patch)
                    bid.clear()
                    bid.update(merged)
                applied += 1
            except Exception:
                bidder_logger(adapter.bidder_code).error("Bid override failed", exc_info=True)
    return applied
