"""RTD Models and Data Types."""

from .engine_state import EngineState
from .signal_bundle import SignalBundle, SspSignals
from .user_data import Segment, UserDataEntry

__all__ = [
    "EngineState",
    "SignalBundle",
    "SspSignals",
    "Segment",
    "UserDataEntry",
]
