"""
Real-Time Data (RTD) provider for The Nexus Engine.

Reads audience cohorts written by the identity SDK, layers publisher
and platform configuration, and writes the signals each bidder is
entitled to into its ORTB2 bid request fragment.
"""

from .collector import SignalCollector
from .config import ConfigResolver, ModuleConfig, ResolvedModuleConfig
from .models import SignalBundle, SspSignals, UserDataEntry
from .provider import CompletionHandle, RtdProvider
from .router import BidderRole, BidderSignals, SignalRouter
from .storage import InMemorySignalStore, RedisSignalStore
from .writer import OrtbFragmentWriter

__version__ = '1.0.0'

__all__ = [
    'RtdProvider',
    'CompletionHandle',
    'ConfigResolver',
    'ModuleConfig',
    'ResolvedModuleConfig',
    'SignalCollector',
    'SignalBundle',
    'SspSignals',
    'UserDataEntry',
    'SignalRouter',
    'BidderRole',
    'BidderSignals',
    'OrtbFragmentWriter',
    'InMemorySignalStore',
    'RedisSignalStore',
]
