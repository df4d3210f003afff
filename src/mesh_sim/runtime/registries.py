# runtime/registries.py
from collections.abc import Callable

from mesh_sim.app.protocols import PathEngine
from mesh_sim.config.models import EngineUnion, HeapEngineModel, LinearEngineModel
from mesh_sim.engine.shortest_path import HeapEngine, LinearScanEngine

EngineFactory = Callable[[EngineUnion], PathEngine]

_engine_registry: dict[str, EngineFactory] = {}


# ------------------- Path engine registry ---------------------------


def register_engine(kind: str):
    def deco(fn: EngineFactory):
        _engine_registry[kind] = fn
        return fn

    return deco


def make_engine(cfg: EngineUnion) -> PathEngine:
    try:
        factory = _engine_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown engine kind {cfg.kind!r}")
    return factory(cfg)


def engine_kinds() -> list[str]:
    return sorted(_engine_registry)


@register_engine("linear")
def _make_linear(cfg: LinearEngineModel):
    return LinearScanEngine()


@register_engine("heap")
def _make_heap(cfg: HeapEngineModel):
    return HeapEngine()
