from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import numpy as np

from trackgeo.domain.conditions import Condition
from trackgeo.domain.entities.position import AdjacentEdge, Orientation, PathMatch, Position
from trackgeo.domain.entities.topology import Edge
from trackgeo.domain.records import RecordStore


# ------------- Topology queries --------------------
@runtime_checkable
class TopologyQueries(Protocol):
    """
    Responsibilities:
      • Resolve adjacency across switches.
      • Project positions by signed distances, free or along a known path.
      • Measure distance and relative orientation between positions.
      • Find the nearest records matching a condition.
    Units: integer millimetres throughout.
    """

    store: RecordStore

    def neighbors(self, edge: Edge | str, ascending: bool) -> list[AdjacentEdge]: ...
    def project(self, position: Position, distance_mm: int) -> list[Position]: ...
    def project_on_path(
        self, position: Position, path: Sequence[Edge | str], distance_mm: int, forward: bool = True
    ) -> Position | None: ...
    def distance(self, start: Position, end: Position) -> int | None: ...
    def orientation(self, start: Position, end: Position) -> Orientation: ...
    def search(
        self,
        start: Position,
        condition: Condition,
        orientation_filter: Orientation = Orientation.BOTH,
        forward: bool = True,
    ) -> list[PathMatch]: ...
    def distance_matrix(self, positions: Sequence[Position]) -> np.ndarray: ...
