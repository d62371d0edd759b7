# trackgeo/domain/topology/topology_projection.py
from collections.abc import Sequence

from trackgeo.domain.entities.position import EdgeRef, Position
from trackgeo.domain.entities.topology import Edge, EffectiveDirection, heading
from trackgeo.domain.topology.topology_adjacency import neighbors
from trackgeo.domain.topology.topology_index import TopologyIndex
from trackgeo.engine.hooks import NoopHooks, TraversalHooks
from trackgeo.engine.limits import TraversalLimits

FORWARD = EffectiveDirection.FORWARD
REVERSE = EffectiveDirection.REVERSE


def project(
    index: TopologyIndex,
    position: Position,
    distance_mm: int,
    *,
    limits: TraversalLimits = TraversalLimits(),
    hooks: TraversalHooks | None = None,
) -> list[Position]:
    """All positions `distance_mm` away from `position`, one per reachable branch.

    Positive distances follow the effective direction ("both" counts as
    forward), negative ones go against it. Every reference of `position` is
    projected on its own; results are concatenated, not deduplicated.
    """
    hooks = hooks or NoopHooks()
    out: list[Position] = []
    # frame: (ref, signed distance, hops, exit states seen on this branch)
    stack = [(ref, distance_mm, 0, frozenset()) for ref in reversed(position.refs)]
    while stack:
        ref, dist, hops, seen = stack.pop()
        edge = index.edge(ref.edge_id)
        reverse = ref.direction is REVERSE
        new = ref.offset_mm - dist if reverse else ref.offset_mm + dist
        if 0 <= new <= edge.length_mm:
            out.append(Position((ref.moved(new),)))
            continue

        if new < 0:
            ascending = False
            rem = dist - ref.offset_mm if reverse else dist + ref.offset_mm
        else:
            ascending = True
            to_end = edge.length_mm - ref.offset_mm
            rem = dist + to_end if reverse else dist - to_end

        state = (edge.id, ascending, rem)
        if state in seen:
            hooks.pruned(edge.id, reason="cycle", op="project", remaining_mm=rem)
            continue
        hops += 1
        limits.check_hops("project", hops)
        hooks.cross(edge.id, ascending=ascending, hops=hops)

        seen = seen | {state}
        for adj in reversed(neighbors(index, edge, ascending)):
            nxt = adj.edge
            # entering at A moves ascending; the facing follows the sign of rem
            if adj.ascending:
                start = EdgeRef(nxt.id, 0, REVERSE if rem < 0 else FORWARD)
            else:
                start = EdgeRef(nxt.id, nxt.length_mm, FORWARD if rem < 0 else REVERSE)
            stack.append((start, rem, hops, seen))
    return out


def project_on_path(
    index: TopologyIndex,
    position: Position,
    path: Sequence[Edge | str],
    distance_mm: int,
    forward: bool = True,
    *,
    hooks: TraversalHooks | None = None,
) -> Position | None:
    """Position `distance_mm` along a fixed edge sequence, without fanning out.

    `path` starts with the edge of the position. The first reference whose
    edge heads the path and that reaches the distance within the path wins.
    """
    if distance_mm < 0:
        raise ValueError(f"distance along a path must be >= 0, got {distance_mm}")
    hooks = hooks or NoopHooks()
    ids = [p if isinstance(p, str) else p.id for p in path]
    for ref in position.refs:
        res = _walk_path(index, ref, ids, distance_mm, forward, hooks)
        if res is not None:
            return res
    return None


def _walk_path(
    index: TopologyIndex,
    ref: EdgeRef,
    ids: list[str],
    dist: int,
    forward: bool,
    hooks: TraversalHooks,
) -> Position | None:
    if not ids or ids[0] != ref.edge_id:
        hooks.pruned(ref.edge_id, reason="path_mismatch", op="project_on_path")
        return None
    for i, edge_id in enumerate(ids):
        edge = index.edge(edge_id)
        asc = heading(ref.direction, forward)
        new = ref.offset_mm + dist if asc else ref.offset_mm - dist
        if 0 <= new <= edge.length_mm:
            return Position((ref.moved(new),))
        if i + 1 == len(ids):
            hooks.pruned(edge.id, reason="path_exhausted", op="project_on_path", remaining_mm=dist)
            return None

        nxt = index.edge(ids[i + 1])
        shared = edge.node(asc)
        if shared == nxt.node_a:
            nxt_asc = True
        elif shared == nxt.node_b:
            nxt_asc = False
        else:
            hooks.pruned(edge.id, reason="path_disconnected", op="project_on_path")
            return None
        dist -= edge.length_mm - ref.offset_mm if asc else ref.offset_mm
        ref = EdgeRef(
            nxt.id,
            0 if nxt_asc else nxt.length_mm,
            FORWARD if nxt_asc == forward else REVERSE,
        )
    return None
