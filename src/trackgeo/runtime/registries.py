# runtime/registries.py
from collections.abc import Callable

from trackgeo.config.models import StoreByPath, StoreInline, StoreRef
from trackgeo.domain.records import RecordStore
from trackgeo.io.planpro import load_store, parse_store

StoreFactory = Callable[[StoreRef], RecordStore]

_store_registry: dict[str, StoreFactory] = {}


# ------------------- Record store registries ---------------------------


def register_store(by: str):
    def deco(fn: StoreFactory):
        _store_registry[by] = fn
        return fn

    return deco


def make_store(cfg: StoreRef) -> RecordStore:
    try:
        factory = _store_registry[cfg.by]
    except KeyError:
        raise ValueError(f"Unknown store source {cfg.by!r}")
    return factory(cfg)


@register_store("path")
def _store_from_path(cfg: StoreByPath) -> RecordStore:
    return load_store(cfg.file, cfg.container)


@register_store("inline")
def _store_from_inline(cfg: StoreInline) -> RecordStore:
    return parse_store(cfg.xml, cfg.container)
