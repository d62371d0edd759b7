# engine/hooks.py
from typing import Protocol


class TraversalHooks(Protocol):
    def query_start(self, op: str, **kw): ...
    def query_end(self, op: str, *, results: int, wall_ms: float): ...
    def cross(self, edge_id: str, *, ascending: bool, hops: int): ...
    def pruned(self, edge_id: str, *, reason: str, **kw): ...
    def error(self, op: str, *, exc: BaseException, **kw): ...


class NoopHooks:
    def query_start(self, *_, **__):
        pass

    def query_end(self, *_, **__):
        pass

    def cross(self, *_, **__):
        pass

    def pruned(self, *_, **__):
        pass

    def error(self, *_, **__):
        pass
