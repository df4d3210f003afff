# mesh_sim/domain/topology.py
import logging
import math
from collections.abc import Sequence

import numpy as np

from mesh_sim.config.models import CostModel, TopologyModel
from mesh_sim.domain.entities.geography import ORIGIN, Point
from mesh_sim.domain.graph import ROOT, Graph, NeighborLink, Node

log = logging.getLogger("mesh_sim.topology")

# distance -> radio hop cost
COST_PER_UNIT = 5
BASE_HOP_COST = 30


def distance_to_cost(d: float) -> int:
    return int(math.floor(d * COST_PER_UNIT + BASE_HOP_COST))


def link_cost(d: float, a: int, b: int, *, switch_cost: int) -> int:
    """Hop cost a->b; relay-to-relay hops pay the switch overhead, hops touching the root don't."""
    cost = distance_to_cost(d)
    if a != ROOT and b != ROOT:
        cost += switch_cost
    return cost


def place_nodes(cfg: TopologyModel, rng: np.random.Generator) -> list[Point]:
    """Root at the origin, the rest uniform over the field centred on it."""
    n = max(cfg.n_nodes - 1, 0)
    xs = rng.uniform(-cfg.field_x / 2, cfg.field_x / 2, size=n)
    ys = rng.uniform(-cfg.field_y / 2, cfg.field_y / 2, size=n)
    return [ORIGIN] + [Point(float(x), float(y)) for x, y in zip(xs, ys)]


def graph_from_points(
    points: Sequence[Point], *, cutoff: float = 10.0, costs: CostModel | None = None
) -> Graph:
    """
    Materialize directed links for every ordered pair closer than `cutoff`.
    points[0] is taken as the root. Links on each node are ordered by target id.
    """
    costs = costs or CostModel()
    nodes = [Node(id=i, loc=p) for i, p in enumerate(points)]
    if not nodes:
        return Graph(nodes)

    xy = np.array([(p.x, p.y) for p in points], dtype=float)
    d = np.hypot(xy[:, None, 0] - xy[None, :, 0], xy[:, None, 1] - xy[None, :, 1])
    near = d < cutoff
    np.fill_diagonal(near, False)

    for a, node in enumerate(nodes):
        for b in np.flatnonzero(near[a]):
            b = int(b)
            node.links.append(
                NeighborLink(
                    target=b, cost=link_cost(float(d[a, b]), a, b, switch_cost=costs.switch)
                )
            )
    g = Graph(nodes)
    log.debug("built graph: %d nodes, %d links", len(g), g.n_links())
    return g


def build_topology(
    cfg: TopologyModel, rng: np.random.Generator, *, costs: CostModel | None = None
) -> Graph:
    return graph_from_points(place_nodes(cfg, rng), cutoff=cfg.cutoff_distance, costs=costs)
