# mesh_sim/mesh/greedy.py
import logging
from dataclasses import dataclass

from mesh_sim.app.protocols import PathEngine
from mesh_sim.config.models import CostModel
from mesh_sim.domain.graph import ROOT, Graph, TrialState
from mesh_sim.engine.shortest_path import CostBreakdown, evaluate
from mesh_sim.sim.hooks import NoopHooks, TrialHooks

log = logging.getLogger("mesh_sim.greedy")


@dataclass
class GreedyResult:
    baseline: CostBreakdown  # every switch on
    result: CostBreakdown
    enabled: list[int]  # activation order
    rings: int


class GreedyMeshBuilder:
    """
    Wavefront max-coverage mesh.

    Each ring starts from the nodes the previous ring covered. Within a ring,
    the candidate covering the most still-pending neighbors is switched on,
    until nothing is pending or no candidate covers anything.
    """

    def __init__(self, graph: Graph):
        self.graph = graph
        self._nbrs = [set(graph.neighbor_ids(i)) for i in range(len(graph))]

    def _best_candidate(self, candidates: dict[int, None], pending: set[int]) -> int | None:
        best, best_cover = None, 0
        for cid in candidates:
            cover = len(self._nbrs[cid] & pending)
            if cover > best_cover:
                best, best_cover = cid, cover
        return best

    def select(self, state: TrialState) -> tuple[list[int], int]:
        """Write the activation set into state.switch_enabled; return (activation order, rings)."""
        state.switch_enabled.fill(False)
        state.force_root()
        if not len(self.graph):
            return [], 0

        # dict keeps candidate insertion order for tie-breaks
        candidates: dict[int, None] = {ROOT: None}
        covered: set[int] = set()
        pending: set[int] = set(self._nbrs[ROOT])
        order: list[int] = []
        rings = 0

        while pending:
            rings += 1
            newly: dict[int, None] = {}
            while pending:
                cid = self._best_candidate(candidates, pending)
                if cid is None:
                    # leftovers nobody on the frontier can reach
                    break
                del candidates[cid]
                hit = self._nbrs[cid] & pending
                pending -= hit
                covered |= hit
                for v in sorted(hit):
                    newly[v] = None
                if cid != ROOT:
                    order.append(cid)
                state.switch_enabled[cid] = True

            candidates = newly
            pending = set()
            for v in newly:
                pending |= self._nbrs[v] - covered
            log.debug("ring %d: %d enabled, %d pending", rings, len(order), len(pending))

        return order, rings

    def build(
        self,
        state: TrialState,
        engine: PathEngine,
        costs: CostModel,
        *,
        hooks: TrialHooks | None = None,
    ) -> GreedyResult:
        hooks = hooks or NoopHooks()
        state.enable_all()
        baseline = evaluate(self.graph, state, engine, costs)

        order, rings = self.select(state)
        result = evaluate(self.graph, state, engine, costs)
        hooks.greedy_done(
            baseline_cost=baseline.total, cost=result.total, n_enabled=result.n_enabled, rings=rings
        )
        return GreedyResult(baseline=baseline, result=result, enabled=order, rings=rings)
