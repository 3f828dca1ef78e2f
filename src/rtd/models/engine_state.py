"""Per-provider mutable state shared across auctions."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class EngineState:
    """
    State owned by one RtdProvider instance.

    Attributes:
        cached_platform_params: Platform params read from the store at init
        cache_loaded: Whether the store cache has been read
        sdk_realtime: Latch set once the identity SDK has reported ready
    """

    cached_platform_params: dict[str, Any] = field(default_factory=dict)
    cache_loaded: bool = False
    sdk_realtime: bool = False
