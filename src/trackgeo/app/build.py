# trackgeo/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from trackgeo.config.models import RunModel
from trackgeo.domain.records import RecordStore
from trackgeo.domain.topology.topology_core import TopologyEngine
from trackgeo.domain.topology.topology_factory import build_engine
from trackgeo.engine.hooks import NoopHooks, TraversalHooks
from trackgeo.io.engine_logging import EngineLogging  # JSON logs
from trackgeo.io.recorder import JsonlSink, Recorder
from trackgeo.runtime.registries import make_store


@dataclass
class App:
    run_id: str
    store: RecordStore
    engine: TopologyEngine
    hooks: TraversalHooks
    recorder: Recorder


def build(
    cfg: RunModel | Mapping,
    *,
    use_logging: bool = True,
    recorder: Recorder | None = None,
    store: RecordStore | None = None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, RunModel) else RunModel.model_validate(cfg)

    # 1) Records (an already loaded store wins over the configured source)
    store = store if store is not None else make_store(model.store)

    # 2) Hooks & output
    recorder = recorder or Recorder(JsonlSink())
    hooks = (
        EngineLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )

    # 3) Engine
    engine = build_engine(model.engine, store, hooks=hooks)

    return App(model.run_id, store, engine, hooks, recorder)
