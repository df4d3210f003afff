# mesh_sim/domain/graph.py
from dataclasses import dataclass, field

import numpy as np

from mesh_sim.domain.entities.geography import Point

ROOT = 0


@dataclass(frozen=True)
class NeighborLink:
    target: int  # index into Graph.nodes
    cost: int


@dataclass
class Node:
    id: int
    loc: Point
    links: list[NeighborLink] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.id == ROOT


@dataclass(frozen=True)
class NodeSnapshot:
    id: int
    min_cost: float
    switch_enabled: bool


@dataclass
class TrialState:
    """
    Everything a trial mutates, held apart from the topology.
    min_cost / visited are path state and are wiped by reset(); the switch
    arrays survive so sampling can remember the previous trial's choice.
    """

    min_cost: np.ndarray
    visited: np.ndarray
    switch_enabled: np.ndarray
    last_switch_enabled: np.ndarray

    @classmethod
    def for_size(cls, n: int) -> "TrialState":
        st = cls(
            min_cost=np.full(n, np.inf),
            visited=np.zeros(n, dtype=bool),
            switch_enabled=np.ones(n, dtype=bool),
            last_switch_enabled=np.ones(n, dtype=bool),
        )
        st.reset()
        return st

    def __len__(self) -> int:
        return len(self.min_cost)

    def reset(self) -> None:
        self.min_cost.fill(np.inf)
        self.visited.fill(False)
        if len(self.min_cost):
            self.min_cost[ROOT] = 0.0

    def enable_all(self) -> None:
        self.switch_enabled.fill(True)

    def force_root(self) -> None:
        if len(self.switch_enabled):
            self.switch_enabled[ROOT] = True


class Graph:
    """Arena of nodes; links refer to targets by index. Topology is fixed once built."""

    def __init__(self, nodes: list[Node]):
        if nodes and nodes[0].id != ROOT:
            raise ValueError("node 0 must be the root")
        self.nodes = nodes

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def root(self) -> Node:
        return self.nodes[ROOT]

    def links(self, i: int) -> list[NeighborLink]:
        return self.nodes[i].links

    def neighbor_ids(self, i: int) -> list[int]:
        return [ln.target for ln in self.nodes[i].links]

    def n_links(self) -> int:
        return sum(len(n.links) for n in self.nodes)

    def new_state(self) -> TrialState:
        return TrialState.for_size(len(self.nodes))

    def dump(self, state: TrialState) -> list[NodeSnapshot]:
        return [
            NodeSnapshot(
                id=n.id,
                min_cost=float(state.min_cost[n.id]),
                switch_enabled=bool(state.switch_enabled[n.id]),
            )
            for n in self.nodes
        ]
