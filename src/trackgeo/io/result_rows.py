# trackgeo/io/result_rows.py

from dataclasses import dataclass

from trackgeo.domain.entities.position import AdjacentEdge, PathMatch, Position


# Base type for query output rows (flat, JSON friendly)
@dataclass
class ResultRow:
    run_id: str
    op: str  # query name


@dataclass
class NeighborRow(ResultRow):
    edge_id: str
    ascending: bool
    length_m: float


@dataclass
class PositionRow(ResultRow):
    edge_id: str
    offset_m: float
    direction: str
    identity: str | None = None


@dataclass
class MatchRow(ResultRow):
    entity_id: str | None
    label: str
    edges: list[str]
    distance_m: float


@dataclass
class ScalarRow(ResultRow):
    value: float | str | None
    start: str | None = None
    end: str | None = None


def mm_to_m(mm: int) -> float:
    return mm / 1000.0


def neighbor_rows(run_id: str, adj: list[AdjacentEdge]) -> list[NeighborRow]:
    return [NeighborRow(run_id, "neighbors", a.edge.id, a.ascending, mm_to_m(a.edge.length_mm)) for a in adj]


def position_rows(run_id: str, op: str, positions: list[Position]) -> list[PositionRow]:
    return [
        PositionRow(run_id, op, r.edge_id, mm_to_m(r.offset_mm), r.direction.value, p.identity)
        for p in positions
        for r in p.refs
    ]


def match_rows(run_id: str, matches: list[PathMatch]) -> list[MatchRow]:
    return [
        MatchRow(
            run_id,
            "search",
            m.entity.identity,
            m.entity.label,
            [e.id for e in m.edges],
            mm_to_m(m.distance_mm),
        )
        for m in matches
    ]
