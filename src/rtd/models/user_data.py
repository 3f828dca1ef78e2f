"""ORTB2 ``user.data`` entries."""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional


@dataclass(frozen=True)
class Segment:
    """A single segment within a user data entry."""

    id: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id}


@dataclass
class UserDataEntry:
    """
    One provider entry in ``user.data``.

    Attributes:
        name: Provider name
        segment: Segments in emission order
        segtax: Taxonomy id, emitted as ``ext.segtax`` when set
    """

    name: str
    segment: list[Segment] = field(default_factory=list)
    segtax: Optional[int] = None

    @classmethod
    def from_ids(cls, name: str, ids: Iterable[str], segtax: Optional[int] = None) -> "UserDataEntry":
        return cls(name=name, segment=[Segment(id=str(i)) for i in ids], segtax=segtax)

    @property
    def segment_ids(self) -> list[str]:
        return [s.id for s in self.segment]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ORTB2 JSON shape."""
        result: dict[str, Any] = {"name": self.name}
        if self.segtax is not None:
            result["ext"] = {"segtax": self.segtax}
        result["segment"] = [s.to_dict() for s in self.segment]
        return result
