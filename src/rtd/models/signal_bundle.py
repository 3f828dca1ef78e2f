"""
Signal bundle read from the identity SDK's store on one pass.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping


def _freeze_ids(ids: Iterable[str]) -> tuple[str, ...]:
    return tuple(str(i) for i in ids)


@dataclass(frozen=True)
class SspSignals:
    """
    Curation signals and the SSP bidder codes allowed to receive them.

    Attributes:
        cohorts: Curation cohort ids (capped at maxSegs)
        ssps: Bidder codes, never truncated
    """

    cohorts: tuple[str, ...] = ()
    ssps: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "cohorts", _freeze_ids(self.cohorts))
        object.__setattr__(self, "ssps", _freeze_ids(self.ssps))

    def to_dict(self) -> dict[str, Any]:
        return {"cohorts": list(self.cohorts), "ssps": list(self.ssps)}


@dataclass(frozen=True)
class SignalBundle:
    """
    Immutable snapshot of every signal class.

    Attributes:
        ac: Auction-wide cohorts, DCR first then standard cohorts
        custom_cohorts: Unified custom cohorts from current and legacy keys
        ssp: Curation signals and their eligible bidders
        topics: Topic ids keyed by taxonomy version
    """

    ac: tuple[str, ...] = ()
    custom_cohorts: tuple[str, ...] = ()
    ssp: SspSignals = field(default_factory=SspSignals)
    topics: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "ac", _freeze_ids(self.ac))
        object.__setattr__(self, "custom_cohorts", _freeze_ids(self.custom_cohorts))
        object.__setattr__(
            self,
            "topics",
            MappingProxyType({str(k): _freeze_ids(v) for k, v in dict(self.topics).items()}),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON shape handed to publisher overrides."""
        return {
            "ac": list(self.ac),
            "customCohorts": list(self.custom_cohorts),
            "ssp": self.ssp.to_dict(),
            "topics": {k: list(v) for k, v in self.topics.items()},
        }
