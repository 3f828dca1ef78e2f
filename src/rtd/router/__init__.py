"""RTD Signal Router."""

from .signal_router import BidderRole, BidderSignals, SignalRouter, is_ac_enabled

__all__ = ['BidderRole', 'BidderSignals', 'SignalRouter', 'is_ac_enabled']
