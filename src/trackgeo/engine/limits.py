# engine/limits.py
from dataclasses import dataclass

from trackgeo.domain.errors import TraversalLimitExceeded


@dataclass(frozen=True)
class TraversalLimits:
    """Bounds applied to every graph walk.

    max_hops: edge crossings along a single traversal branch.
    max_results: matches a single search may collect (None = unbounded).
    """

    max_hops: int = 10_000
    max_results: int | None = None

    def check_hops(self, op: str, hops: int) -> None:
        if hops > self.max_hops:
            raise TraversalLimitExceeded(op, kind="hops", limit=self.max_hops)

    def check_results(self, op: str, n: int) -> None:
        if self.max_results is not None and n > self.max_results:
            raise TraversalLimitExceeded(op, kind="results", limit=self.max_results)
