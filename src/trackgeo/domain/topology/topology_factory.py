# trackgeo/domain/topology/topology_factory.py

from trackgeo.config.models import EngineModel, LimitsModel
from trackgeo.domain.records import RecordStore
from trackgeo.domain.topology.topology_core import TopologyEngine
from trackgeo.engine.hooks import NoopHooks, TraversalHooks
from trackgeo.engine.limits import TraversalLimits


def make_limits(cfg: LimitsModel) -> TraversalLimits:
    return TraversalLimits(max_hops=cfg.max_hops, max_results=cfg.max_results)


def build_engine(
    cfg: EngineModel, store: RecordStore, *, hooks: TraversalHooks | None = None
) -> TopologyEngine:
    return TopologyEngine(
        store=store,
        limits=make_limits(cfg.limits),
        hooks=hooks or NoopHooks(),
    )
