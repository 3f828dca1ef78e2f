"""
Signal Router for the RTD provider.

Decides which signals each bidder receives:

    AC bidders   (params.acBidders)        -> AC signals
    SSP bidders  (ssp.ssps from the store) -> curation signals
    AC + SSP                               -> AC then new curation ids, re-capped
    CC bidders   (params.ccBidders + legacy bidders) -> custom cohorts
    every bidder                           -> topics
"""

from dataclasses import dataclass, field
from enum import Enum

from ..config.module_config import ResolvedModuleConfig
from ..models.signal_bundle import SignalBundle
from ..utils.constants import LEGACY_CUSTOM_COHORT_BIDDERS


class BidderRole(str, Enum):
    """Signal classes a bidder is entitled to."""

    AC = "ac"  # Auction-wide cohorts
    SSP = "ssp"  # Curation signals
    CC = "cc"  # Custom cohorts


@dataclass
class BidderSignals:
    """
    Signals routed to a single bidder.

    Attributes:
        bidder_code: Bidder identifier
        roles: Roles the bidder holds
        merged: AC and/or SSP ids emitted under the standard keyword
        ssp: Curation ids emitted under the audience keyword
        custom_cohorts: Custom cohort ids
        topics: Topic ids per taxonomy version
    """

    bidder_code: str
    roles: set[BidderRole] = field(default_factory=set)
    merged: list[str] = field(default_factory=list)
    ssp: list[str] = field(default_factory=list)
    custom_cohorts: list[str] = field(default_factory=list)
    topics: dict[str, list[str]] = field(default_factory=dict)


def _ordered_union(*groups: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for group in groups:
        for item in group:
            if item not in seen:
                seen.add(item)
                result.append(item)
    return result


def is_ac_enabled(config: ResolvedModuleConfig, bidder: str) -> bool:
    """Check whether a bidder is configured to receive AC signals."""
    return bidder in config.ac_bidders


class SignalRouter:
    """Computes per-bidder signal entitlements."""

    def custom_cohort_bidders(self, config: ResolvedModuleConfig) -> list[str]:
        """Configured CC bidders followed by the legacy set."""
        return _ordered_union(config.cc_bidders, LEGACY_CUSTOM_COHORT_BIDDERS)

    def candidate_bidders(self, bundle: SignalBundle, config: ResolvedModuleConfig) -> list[str]:
        """Every bidder appearing in any role list, in first-seen order."""
        return _ordered_union(
            config.ac_bidders,
            list(bundle.ssp.ssps),
            self.custom_cohort_bidders(config),
        )

    def roles_for(
        self,
        bidder: str,
        bundle: SignalBundle,
        config: ResolvedModuleConfig,
    ) -> set[BidderRole]:
        roles = set()
        if is_ac_enabled(config, bidder):
            roles.add(BidderRole.AC)
        if bidder in bundle.ssp.ssps:
            roles.add(BidderRole.SSP)
        if bidder in self.custom_cohort_bidders(config):
            roles.add(BidderRole.CC)
        return roles

    def signals_for(
        self,
        bidder: str,
        bundle: SignalBundle,
        config: ResolvedModuleConfig,
    ) -> BidderSignals:
        """Build the entitlement for one bidder."""
        roles = self.roles_for(bidder, bundle, config)

        merged: list[str] = []
        if BidderRole.AC in roles:
            merged = list(bundle.ac)
        ssp: list[str] = []
        if BidderRole.SSP in roles:
            ssp = list(bundle.ssp.cohorts)
            # The union can exceed either cap, so cap again
            merged = _ordered_union(merged, ssp)[:config.max_segs]

        return BidderSignals(
            bidder_code=bidder,
            roles=roles,
            merged=merged,
            ssp=ssp,
            custom_cohorts=list(bundle.custom_cohorts) if BidderRole.CC in roles else [],
            topics={k: list(v) for k, v in bundle.topics.items()},
        )

    def route(self, bundle: SignalBundle, config: ResolvedModuleConfig) -> dict[str, BidderSignals]:
        """
        Route signals to every candidate bidder.

        Args:
            bundle: Signals collected for this pass
            config: Resolved module config

        Returns:
            Mapping of bidder code to its entitled signals
        """
        return {
            bidder: self.signals_for(bidder, bundle, config)
            for bidder in self.candidate_bidders(bundle, config)
        }
