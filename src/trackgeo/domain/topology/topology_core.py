# trackgeo/domain/topology/topology_core.py
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import numpy as np

from trackgeo.app.protocols import TopologyQueries
from trackgeo.domain.conditions import Condition
from trackgeo.domain.entities.position import AdjacentEdge, Orientation, PathMatch, Position
from trackgeo.domain.entities.topology import Edge
from trackgeo.domain.errors import DataError, TrackGeoError
from trackgeo.domain.records import Record, RecordStore
from trackgeo.domain.topology import topology_measure, topology_projection, topology_search
from trackgeo.domain.topology.topology_adjacency import neighbors
from trackgeo.domain.topology.topology_index import (
    TopologyIndex,
    located_record,
    position_from_record,
)
from trackgeo.engine.hooks import NoopHooks, TraversalHooks
from trackgeo.engine.limits import TraversalLimits

Located = Position | Record | str


def _count(out) -> int:
    if out is None or out is Orientation.NOT_CONNECTED:
        return 0
    if isinstance(out, list):
        return len(out)
    if isinstance(out, np.ndarray):
        return int((out >= 0).sum())
    return 1


@dataclass
class TopologyEngine(TopologyQueries):
    """Query façade over one record store.

    The topology index is rebuilt lazily whenever the store revision moved,
    so records added between two calls are visible to the next one. Positions
    may be given as `Position`, as a located `Record` or as a record id.
    """

    store: RecordStore
    limits: TraversalLimits = field(default_factory=TraversalLimits)
    hooks: TraversalHooks = field(default_factory=NoopHooks)
    _index: TopologyIndex | None = field(default=None, init=False, repr=False)

    @property
    def index(self) -> TopologyIndex:
        if self._index is None or self._index.revision != self.store.revision:
            self._index = TopologyIndex(self.store)
        return self._index

    def _run(self, op: str, fn: Callable, **kw):
        self.hooks.query_start(op, **kw)
        t0 = time.perf_counter()
        try:
            out = fn()
        except TrackGeoError as exc:
            self.hooks.error(op, exc=exc, **kw)
            raise
        self.hooks.query_end(op, results=_count(out), wall_ms=(time.perf_counter() - t0) * 1000.0)
        return out

    # ---------------- positions ----------------

    def position_of(self, entity: Located) -> Position:
        if isinstance(entity, Position):
            return entity
        if isinstance(entity, str):
            rec = self.store.lookup(entity)
            if rec is None:
                raise DataError(f"unknown record {entity!r}", record_id=entity)
            entity = rec
        return position_from_record(entity)

    def place(self, label: str, identity: str, at: Located, *extra: Record) -> Record:
        """Add a new `label` record located at `at` and return it."""
        if self.store.lookup(identity) is not None:
            raise DataError(f"record {identity!r} already exists", record_id=identity)
        rec = located_record(label, identity, self.position_of(at), *extra)
        self.store.add(rec)
        return rec

    def edge(self, edge_id: str) -> Edge:
        return self.index.edge(edge_id)

    # ---------------- queries ----------------

    def neighbors(self, edge: Edge | str, ascending: bool) -> list[AdjacentEdge]:
        def go():
            e = self.index.edge(edge) if isinstance(edge, str) else edge
            return neighbors(self.index, e, ascending)

        return self._run("neighbors", go, edge=getattr(edge, "id", edge), ascending=ascending)

    def project(self, position: Located, distance_mm: int) -> list[Position]:
        def go():
            return topology_projection.project(
                self.index,
                self.position_of(position),
                distance_mm,
                limits=self.limits,
                hooks=self.hooks,
            )

        return self._run("project", go, start=str(position), distance_mm=distance_mm)

    def project_on_path(
        self,
        position: Located,
        path: Sequence[Edge | str],
        distance_mm: int,
        forward: bool = True,
    ) -> Position | None:
        def go():
            return topology_projection.project_on_path(
                self.index, self.position_of(position), path, distance_mm, forward, hooks=self.hooks
            )

        return self._run("project_on_path", go, start=str(position), distance_mm=distance_mm)

    def distance(self, start: Located, end: Located) -> int | None:
        def go():
            return topology_measure.distance(
                self.index,
                self.position_of(start),
                self.position_of(end),
                limits=self.limits,
                hooks=self.hooks,
            )

        return self._run("distance", go, start=str(start), end=str(end))

    def orientation(self, start: Located, end: Located) -> Orientation:
        def go():
            return topology_measure.orientation(
                self.index,
                self.position_of(start),
                self.position_of(end),
                limits=self.limits,
                hooks=self.hooks,
            )

        return self._run("orientation", go, start=str(start), end=str(end))

    def search(
        self,
        start: Located,
        condition: Condition,
        orientation_filter: Orientation = Orientation.BOTH,
        forward: bool = True,
    ) -> list[PathMatch]:
        def go():
            return topology_search.search(
                self.index,
                self.position_of(start),
                condition,
                orientation_filter,
                forward,
                limits=self.limits,
                hooks=self.hooks,
            )

        return self._run(
            "search", go, start=str(start), orientation=orientation_filter.value, forward=forward
        )

    def next_entity(self, start: Located, type_name: str = "", forward: bool = True) -> Record | None:
        def go():
            return topology_search.next_entity(
                self.index,
                self.position_of(start),
                type_name,
                forward,
                limits=self.limits,
                hooks=self.hooks,
            )

        return self._run("next_entity", go, start=str(start), type_name=type_name, forward=forward)

    def distance_matrix(self, positions: Sequence[Located]) -> np.ndarray:
        def go():
            return topology_measure.distance_matrix(
                self.index,
                [self.position_of(p) for p in positions],
                limits=self.limits,
                hooks=self.hooks,
            )

        return self._run("distance_matrix", go, n=len(positions))
