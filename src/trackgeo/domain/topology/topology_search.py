# trackgeo/domain/topology/topology_search.py
from trackgeo.domain.conditions import Condition, evaluate, of_type
from trackgeo.domain.entities.position import Orientation, PathMatch, Position, nearest
from trackgeo.domain.entities.topology import EffectiveDirection, heading
from trackgeo.domain.records import Record
from trackgeo.domain.topology.topology_adjacency import neighbors
from trackgeo.domain.topology.topology_index import TopologyIndex
from trackgeo.domain.topology.topology_measure import classify
from trackgeo.engine.hooks import NoopHooks, TraversalHooks
from trackgeo.engine.limits import TraversalLimits


def _passes(wanted: Orientation, rel: EffectiveDirection, other: EffectiveDirection) -> bool:
    got = classify(rel, other)
    if wanted is Orientation.EQUAL:
        return got is not Orientation.OPPOSITE
    if wanted is Orientation.OPPOSITE:
        return got is not Orientation.EQUAL
    return True


def search(
    index: TopologyIndex,
    start: Position,
    condition: Condition,
    orientation_filter: Orientation = Orientation.BOTH,
    forward: bool = True,
    *,
    limits: TraversalLimits = TraversalLimits(),
    hooks: TraversalHooks | None = None,
) -> list[PathMatch]:
    """Every nearest match of `condition`, one per explored branch.

    On each edge the closest match ahead wins and stops that branch; only
    edges without a match fan out to their neighbours. Branch results are
    unioned, reduce them with `nearest`/`farthest` when a single one is needed.
    """
    if orientation_filter is Orientation.NOT_CONNECTED:
        return []
    hooks = hooks or NoopHooks()
    out: list[PathMatch] = []
    for ref in start.refs:
        # frame: (edge, offset, facing on edge axis, forward, path, acc mm, hops, seen)
        stack = [(index.edge(ref.edge_id), ref.offset_mm, ref.direction, forward, (), 0, 0, frozenset())]
        while stack:
            edge, off, rel, fwd, prefix, acc, hops, seen = stack.pop()
            path = prefix + (edge,)
            asc = heading(rel, fwd)

            best: Record | None = None
            best_d = 0
            for rec, loc in index.located_on(edge.id):
                if start.identity is not None and rec.identity == start.identity:
                    continue
                if not evaluate(condition, rec):
                    continue
                if not _passes(orientation_filter, rel, loc.direction):
                    continue
                d = loc.offset_mm - off if asc else off - loc.offset_mm
                if d >= 0 and (best is None or d < best_d):
                    best, best_d = rec, d
            if best is not None:
                out.append(PathMatch(best, path, acc + best_d))
                limits.check_results("search", len(out))
                continue

            crossed = edge.length_mm - off if asc else off
            frames = []
            for adj in neighbors(index, edge, asc):
                nxt = adj.edge
                new_rel = rel if adj.ascending == asc else rel.flipped()
                new_fwd = adj.ascending == (new_rel is not EffectiveDirection.REVERSE)
                state = (nxt.id, adj.ascending, new_rel, new_fwd)
                if state in seen:
                    hooks.pruned(nxt.id, reason="cycle", op="search", hops=hops)
                    continue
                limits.check_hops("search", hops + 1)
                hooks.cross(nxt.id, ascending=adj.ascending, hops=hops + 1)
                frames.append(
                    (
                        nxt,
                        0 if adj.ascending else nxt.length_mm,
                        new_rel,
                        new_fwd,
                        path,
                        acc + crossed,
                        hops + 1,
                        seen | {state},
                    )
                )
            stack.extend(reversed(frames))
    return out


def next_entity(
    index: TopologyIndex,
    start: Position,
    type_name: str = "",
    forward: bool = True,
    *,
    limits: TraversalLimits = TraversalLimits(),
    hooks: TraversalHooks | None = None,
) -> Record | None:
    """Closest record of `type_name` (any located record when empty)."""
    m = nearest(
        search(index, start, of_type(type_name), Orientation.BOTH, forward, limits=limits, hooks=hooks)
    )
    return m.entity if m else None
