# trackgeo/domain/topology/topology_measure.py
import heapq
from collections.abc import Sequence

import numpy as np

from trackgeo.domain.entities.position import EdgeRef, Orientation, Position
from trackgeo.domain.entities.topology import EffectiveDirection, heading
from trackgeo.domain.topology.topology_adjacency import neighbors
from trackgeo.domain.topology.topology_index import TopologyIndex
from trackgeo.engine.hooks import NoopHooks, TraversalHooks
from trackgeo.engine.limits import TraversalLimits

BOTH = EffectiveDirection.BOTH


def distance(
    index: TopologyIndex,
    start: Position,
    end: Position,
    *,
    limits: TraversalLimits = TraversalLimits(),
    hooks: TraversalHooks | None = None,
) -> int | None:
    """Shortest non-negative track distance in mm, or None when not connected.

    Every start x end reference pair is tried, forward first, then backward;
    the first pair and direction that connects decides.
    """
    hooks = hooks or NoopHooks()
    for s in start.refs:
        for e in end.refs:
            for forward in (True, False):
                d = _pair_distance(index, s, e, forward, limits, hooks)
                if d is not None:
                    return d
    return None


def _pair_distance(index, s: EdgeRef, e: EdgeRef, forward: bool, limits, hooks) -> int | None:
    asc = heading(s.direction, forward)
    if s.edge_id == e.edge_id:
        d = e.offset_mm - s.offset_mm if asc else s.offset_mm - e.offset_mm
        return d if d >= 0 else None

    first = index.edge(s.edge_id)
    target = index.edge(e.edge_id)
    seq = 0
    # (cost, seq, terminal, edge, ascending, hops); seq keeps pops in push order on ties
    heap = [(first.length_mm - s.offset_mm if asc else s.offset_mm, seq, False, first, asc, 0)]
    visited: set[tuple[str, bool]] = set()
    while heap:
        cost, _, terminal, edge, asc, hops = heapq.heappop(heap)
        if terminal:
            return cost
        if (edge.id, asc) in visited:
            continue
        visited.add((edge.id, asc))
        limits.check_hops("distance", hops)
        for adj in neighbors(index, edge, asc):
            seq += 1
            if adj.edge.id == target.id:
                tail = e.offset_mm if adj.ascending else target.length_mm - e.offset_mm
                heapq.heappush(heap, (cost + tail, seq, True, adj.edge, adj.ascending, hops + 1))
            else:
                hooks.cross(adj.edge.id, ascending=adj.ascending, hops=hops + 1)
                heapq.heappush(
                    heap,
                    (cost + adj.edge.length_mm, seq, False, adj.edge, adj.ascending, hops + 1),
                )
    return None


def classify(a: EffectiveDirection, b: EffectiveDirection) -> Orientation:
    """Orientation of two facings expressed on the same edge axis."""
    if a is BOTH or b is BOTH:
        return Orientation.BOTH
    return Orientation.EQUAL if a is b else Orientation.OPPOSITE


def orientation(
    index: TopologyIndex,
    start: Position,
    end: Position,
    *,
    limits: TraversalLimits = TraversalLimits(),
    hooks: TraversalHooks | None = None,
) -> Orientation:
    hooks = hooks or NoopHooks()
    for s in start.refs:
        for e in end.refs:
            for forward in (True, False):
                o = _pair_orientation(index, s, e, forward, limits, hooks)
                if o is not Orientation.NOT_CONNECTED:
                    return o
    return Orientation.NOT_CONNECTED


def _pair_orientation(index, s: EdgeRef, e: EdgeRef, forward: bool, limits, hooks) -> Orientation:
    if s.edge_id == e.edge_id:
        return classify(s.direction, e.direction)

    # the start facing is carried along as a direction on each edge's own axis;
    # the target is checked on pop, so the first neighbour's subtree is exhausted
    # before the next neighbour is tried
    stack = [(index.edge(s.edge_id), heading(s.direction, forward), s.direction, 0)]
    visited: set[tuple[str, bool, EffectiveDirection]] = set()
    while stack:
        edge, asc, rel, hops = stack.pop()
        if edge.id == e.edge_id:
            return classify(rel, e.direction)
        if (edge.id, asc, rel) in visited:
            continue
        visited.add((edge.id, asc, rel))
        limits.check_hops("orientation", hops)
        frames = []
        for adj in neighbors(index, edge, asc):
            new_rel = rel if adj.ascending == asc else rel.flipped()
            hooks.cross(adj.edge.id, ascending=adj.ascending, hops=hops + 1)
            frames.append((adj.edge, adj.ascending, new_rel, hops + 1))
        stack.extend(reversed(frames))
    return Orientation.NOT_CONNECTED


def distance_matrix(
    index: TopologyIndex,
    positions: Sequence[Position],
    *,
    limits: TraversalLimits = TraversalLimits(),
    hooks: TraversalHooks | None = None,
) -> np.ndarray:
    """Pairwise distances in mm; -1 marks unconnected pairs."""
    n = len(positions)
    out = np.full((n, n), -1, dtype=np.int64)
    for i, a in enumerate(positions):
        for j, b in enumerate(positions):
            d = distance(index, a, b, limits=limits, hooks=hooks)
            if d is not None:
                out[i, j] = d
    return out
