"""RTD Signal Collector."""

from .signal_collector import SignalCollector, to_cohort_id

__all__ = ['SignalCollector', 'to_cohort_id']
