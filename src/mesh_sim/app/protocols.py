from typing import Protocol, runtime_checkable

from mesh_sim.domain.graph import Graph, TrialState


@runtime_checkable
class PathEngine(Protocol):
    """
    Responsibilities:
      • Fill state.min_cost with each node's cheapest cost to the root.
      • Only switch-enabled nodes relax their outgoing links.
    Expects path state freshly reset; the root switch is forced on before the pass.
    """

    def run(self, graph: Graph, state: TrialState) -> None: ...
