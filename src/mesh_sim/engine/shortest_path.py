# mesh_sim/engine/shortest_path.py
from dataclasses import dataclass

import numpy as np

from mesh_sim.app.protocols import PathEngine
from mesh_sim.config.models import CostModel
from mesh_sim.domain.graph import ROOT, Graph, TrialState
from mesh_sim.sim.heap import IndexedMinHeap


@dataclass(frozen=True)
class CostBreakdown:
    path_cost: float
    msg_cost: float
    total: float
    n_enabled: int
    n_unreachable: int


class _LabelSetting(PathEngine):
    """
    Dijkstra over the switch-gated graph. Subclasses only choose how the
    next unvisited node is extracted.
    """

    def run(self, graph: Graph, state: TrialState) -> None:
        if not len(graph):
            return
        state.force_root()
        self._begin(state)
        u: int | None = ROOT
        while u is not None:
            self._visit(graph, state, u)
            u = self._extract(state)

    def _visit(self, graph: Graph, state: TrialState, u: int) -> None:
        if state.switch_enabled[u]:
            base = state.min_cost[u]
            for ln in graph.links(u):
                v = ln.target
                if state.visited[v]:
                    continue
                new_cost = base + ln.cost
                if new_cost < state.min_cost[v]:
                    state.min_cost[v] = new_cost
                    self._improved(v, new_cost)
        state.visited[u] = True

    def _begin(self, state: TrialState) -> None:
        pass

    def _improved(self, v: int, cost: float) -> None:
        pass

    def _extract(self, state: TrialState) -> int | None:
        raise NotImplementedError


class LinearScanEngine(_LabelSetting):
    """O(V^2 + E): scan every unvisited, already-reached node for the minimum."""

    def _extract(self, state: TrialState) -> int | None:
        open_ = np.flatnonzero(~state.visited & np.isfinite(state.min_cost))
        if open_.size == 0:
            return None
        return int(open_[np.argmin(state.min_cost[open_])])


class HeapEngine(_LabelSetting):
    """O((V + E) log V): first improvement inserts, later ones decrease-key."""

    def __init__(self):
        self._heap: IndexedMinHeap[int] = IndexedMinHeap()

    def _begin(self, state: TrialState) -> None:
        # fresh heap every pass
        self._heap = IndexedMinHeap()

    def _improved(self, v: int, cost: float) -> None:
        if v in self._heap:
            self._heap.decrease_key(v, cost)
        else:
            self._heap.push(v, cost)

    def _extract(self, state: TrialState) -> int | None:
        return self._heap.pop()


def network_cost(state: TrialState, costs: CostModel) -> CostBreakdown:
    """
    path_cost = mean(min_cost, unreachable charged costs.not_found)
    msg_cost  = costs.message * (#enabled switches)
    """
    n = len(state)
    if n == 0:
        return CostBreakdown(0.0, 0.0, 0.0, 0, 0)
    reached = np.isfinite(state.min_cost)
    per_node = np.where(reached, state.min_cost, costs.not_found)
    path_cost = float(per_node.sum() / n)
    n_enabled = int(np.count_nonzero(state.switch_enabled))
    msg_cost = float(n_enabled * costs.message)
    return CostBreakdown(
        path_cost=path_cost,
        msg_cost=msg_cost,
        total=path_cost + msg_cost,
        n_enabled=n_enabled,
        n_unreachable=int(n - np.count_nonzero(reached)),
    )


def evaluate(
    graph: Graph, state: TrialState, engine: PathEngine, costs: CostModel
) -> CostBreakdown:
    state.reset()
    engine.run(graph, state)
    return network_cost(state, costs)
