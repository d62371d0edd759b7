from dataclasses import dataclass, field, replace
from enum import Enum

from trackgeo.domain.entities.topology import Edge, EffectiveDirection
from trackgeo.domain.records import Record


class Orientation(Enum):
    NOT_CONNECTED = "not-connected"
    EQUAL = "equal"
    OPPOSITE = "opposite"
    BOTH = "both"  # at least one side has effective direction "both"


@dataclass(frozen=True)
class EdgeRef:
    edge_id: str
    offset_mm: int  # from node A
    direction: EffectiveDirection = EffectiveDirection.BOTH
    lateral_mm: int = 0  # carried through, not interpreted
    side: str | None = None

    def moved(self, offset_mm: int) -> "EdgeRef":
        return replace(self, offset_mm=offset_mm)

    def __str__(self) -> str:
        return f"{self.edge_id}@{self.offset_mm}mm/{self.direction.value}"


@dataclass(frozen=True)
class Position:
    """A located entity or hypothetical point.

    A point sitting exactly on an edge boundary is expressible on more than
    one edge; every reference is kept and every algorithm enumerates them.
    """

    refs: tuple[EdgeRef, ...]
    identity: str | None = None

    def __post_init__(self):
        if not self.refs:
            raise ValueError("Position needs at least one edge reference")
        if not isinstance(self.refs, tuple):
            object.__setattr__(self, "refs", tuple(self.refs))

    @classmethod
    def on(
        cls,
        edge_id: str,
        offset_mm: int,
        direction: EffectiveDirection = EffectiveDirection.BOTH,
        *,
        identity: str | None = None,
    ) -> "Position":
        return cls((EdgeRef(edge_id, offset_mm, direction),), identity=identity)

    def single(self, i: int) -> "Position":
        return Position((self.refs[i],), identity=self.identity)

    @property
    def ref(self) -> EdgeRef:
        return self.refs[0]

    def __str__(self) -> str:
        return f"[{self.identity}{[str(r) for r in self.refs]}]"


@dataclass(frozen=True)
class AdjacentEdge:
    edge: Edge
    ascending: bool  # continue in A -> B order on `edge`


@dataclass(frozen=True)
class PathMatch:
    entity: Record
    edges: tuple[Edge, ...] = field(default_factory=tuple)  # start edge first
    distance_mm: int = 0

    def __str__(self) -> str:
        return f"[{[e.id for e in self.edges]},{self.entity.identity},{self.distance_mm}]"


def nearest(matches: list[PathMatch]) -> PathMatch | None:
    best = None
    for m in matches:
        if best is None or m.distance_mm < best.distance_mm:
            best = m
    return best


def farthest(matches: list[PathMatch]) -> PathMatch | None:
    best = None
    for m in matches:
        if best is None or m.distance_mm > best.distance_mm:
            best = m
    return best
