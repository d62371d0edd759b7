# io/engine_logging.py
import json
import logging
import sys

from trackgeo.engine.hooks import NoopHooks


def _default_json_logger(name="trackgeo", level="INFO", stream=None):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(stream or sys.stderr)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class EngineLogging(NoopHooks):
    """
    Traversal hooks that emit one structured JSON line per query and, in
    debug mode, sampled lines for edge crossings and pruned branches.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.log = logger or _default_json_logger(level=level)
        self._crossed = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # --------------------------------------------------------

    # query lifecycle

    def query_start(self, op: str, **kw):
        self._emit("INFO", "query_start", op=op, **kw)

    def query_end(self, op: str, *, results: int, wall_ms: float):
        self._emit("INFO", "query_end", op=op, results=results, wall_ms=round(wall_ms, 3))

    # traversal

    def cross(self, edge_id: str, *, ascending: bool, hops: int):
        self._crossed += 1
        if self.debug and (self._crossed % self.sample_every) == 0:
            self._emit("DEBUG", "cross", edge=edge_id, ascending=ascending, hops=hops)

    def pruned(self, edge_id: str, *, reason: str, **kw):
        if self.debug:
            self._emit("DEBUG", "pruned", edge=edge_id, reason=reason, **kw)

    def error(self, op: str, *, exc: BaseException, **kw):
        self._emit("ERROR", "query_error", op=op, error=str(exc), error_type=type(exc).__name__, **kw)
