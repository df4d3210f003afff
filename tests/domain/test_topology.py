# tests/domain/test_topology.py
import numpy as np
import pytest

from mesh_sim.config.models import CostModel, TopologyModel
from mesh_sim.domain.entities.geography import Point
from mesh_sim.domain.graph import ROOT, Graph, Node
from mesh_sim.domain.topology import (
    build_topology,
    distance_to_cost,
    graph_from_points,
    link_cost,
    place_nodes,
)
from mesh_sim.sim.rng import RNGRegistry

LINE = [Point(0.0, 0.0), Point(5.0, 0.0), Point(10.0, 0.0), Point(15.0, 0.0)]


def _costs(g: Graph, i: int) -> dict[int, int]:
    return {ln.target: ln.cost for ln in g.links(i)}


def test_line_adjacency_and_costs():
    g = graph_from_points(LINE)
    assert _costs(g, 0) == {1: 55}
    assert _costs(g, 1) == {0: 55, 2: 135}
    assert _costs(g, 2) == {1: 135, 3: 135}
    assert _costs(g, 3) == {2: 135}


def test_cutoff_is_strict():
    g = graph_from_points([Point(0.0, 0.0), Point(10.0, 0.0)])
    assert g.n_links() == 0
    g = graph_from_points([Point(0.0, 0.0), Point(9.999, 0.0)])
    assert g.neighbor_ids(0) == [1]
    assert g.neighbor_ids(1) == [0]


def test_cost_floor_and_switch_overhead():
    assert distance_to_cost(0.0) == 30
    assert distance_to_cost(1.99) == 39
    assert link_cost(3.0, 0, 4, switch_cost=80) == 45
    assert link_cost(3.0, 4, 0, switch_cost=80) == 45
    assert link_cost(3.0, 2, 4, switch_cost=80) == 125


def test_links_sorted_by_target():
    pts = [Point(0, 0), Point(3, 0), Point(-2, 1), Point(1, 1), Point(0, -4)]
    g = graph_from_points(pts)
    for i in range(len(g)):
        ids = g.neighbor_ids(i)
        assert ids == sorted(ids)
        assert i not in ids


def test_custom_cutoff_and_switch_cost():
    g = graph_from_points(LINE, cutoff=11.0, costs=CostModel(switch=0))
    assert _costs(g, 0) == {1: 55, 2: 80}
    assert _costs(g, 1) == {0: 55, 2: 55, 3: 80}


def test_random_topology_invariants():
    cfg = TopologyModel(n_nodes=120, field_x=30, field_y=40)
    g = build_topology(cfg, RNGRegistry(5).stream("placement"))
    assert len(g) == 120
    assert g.root.loc == Point(0.0, 0.0)
    for n in g.nodes:
        assert -15 <= n.loc.x < 15
        assert -20 <= n.loc.y < 20
        for ln in n.links:
            other = g.nodes[ln.target]
            d = float(np.hypot(n.loc.x - other.loc.x, n.loc.y - other.loc.y))
            assert d < 10
            assert ln.cost >= 30
            extra = 0 if ROOT in (n.id, ln.target) else 80
            assert ln.cost == int(np.floor(d * 5 + 30)) + extra
            # symmetric in value
            assert _costs(g, ln.target)[n.id] == ln.cost


def test_cost_weakly_increases_with_distance():
    ds = np.linspace(0, 9.99, 400)
    cs = [distance_to_cost(float(d)) for d in ds]
    assert all(a <= b for a, b in zip(cs, cs[1:]))


def test_placement_is_reproducible():
    cfg = TopologyModel(n_nodes=30)
    a = place_nodes(cfg, RNGRegistry(9).stream("placement"))
    b = place_nodes(cfg, RNGRegistry(9).stream("placement"))
    assert a == b


def test_degenerate_sizes():
    for n in (0, 1):
        g = build_topology(TopologyModel(n_nodes=n), RNGRegistry(0).stream("placement"))
        assert len(g) == 1
        assert g.n_links() == 0


def test_graph_requires_root_first():
    with pytest.raises(ValueError):
        Graph([Node(id=3, loc=Point(0, 0))])
