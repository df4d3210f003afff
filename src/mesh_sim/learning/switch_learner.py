# mesh_sim/learning/switch_learner.py
import time
from dataclasses import dataclass

import numpy as np

from mesh_sim.app.protocols import PathEngine
from mesh_sim.config.models import CostModel, LearningModel
from mesh_sim.domain.graph import Graph, TrialState
from mesh_sim.engine.shortest_path import CostBreakdown, evaluate
from mesh_sim.sim.hooks import NoopHooks, TrialHooks


def sigmoid(v):
    return 1.0 / (1.0 + np.exp(-v))


@dataclass
class LearningResult:
    initial_cost: float
    final_cost: float
    best_cost: float
    costs: np.ndarray  # one entry per sampled trial
    weights: np.ndarray
    probabilities: np.ndarray  # sigmoid(weights)
    switch_enabled: np.ndarray


class SwitchLearner:
    """
    Learns per-node enable probabilities sigmoid(weight) from trial-to-trial
    cost changes. Only nodes that flipped in a trial get credit for its delta:
    a node switched on while cost rose is pushed towards off, and vice versa.
    """

    def __init__(
        self,
        *,
        graph: Graph,
        engine: PathEngine,
        costs: CostModel,
        cfg: LearningModel,
        rng: np.random.Generator,
        hooks: TrialHooks | None = None,
        state: TrialState | None = None,
    ):
        if cfg.learning_rate is None:
            raise ValueError("learning_rate must be resolved before building a learner")
        self.graph, self.engine, self.costs, self.rng = graph, engine, costs, rng
        self.learning_rate = cfg.learning_rate
        self.state = state or graph.new_state()
        self.weights = np.full(len(graph), cfg.init_weight, dtype=float)
        self.hooks = hooks or NoopHooks()
        self.last_cost: float | None = None

    def sample_switches(self, force_enable: bool = False) -> None:
        st = self.state
        if force_enable:
            st.enable_all()
        else:
            st.last_switch_enabled[:] = st.switch_enabled
            st.switch_enabled[:] = sigmoid(self.weights) >= self.rng.random(len(st))
        st.force_root()

    def update_weights(self, delta: float) -> None:
        st = self.state
        flipped = st.switch_enabled != st.last_switch_enabled
        self.weights[flipped] += delta * np.where(st.switch_enabled[flipped], -1.0, 1.0)

    def baseline(self) -> CostBreakdown:
        """All switches on; sets the cost the first sampled trial is compared with."""
        self.sample_switches(force_enable=True)
        res = evaluate(self.graph, self.state, self.engine, self.costs)
        self.last_cost = res.total
        return res

    def step(self) -> tuple[CostBreakdown, float]:
        if self.last_cost is None:
            self.baseline()
        self.sample_switches()
        res = evaluate(self.graph, self.state, self.engine, self.costs)
        delta = (res.total - self.last_cost) * self.learning_rate
        self.update_weights(delta)
        self.last_cost = res.total
        return res, delta

    def run(self, trials: int) -> LearningResult:
        t0 = time.perf_counter()
        initial = self.baseline().total
        self.hooks.run_start(trials=trials, n_nodes=len(self.graph), initial_cost=initial)

        costs = np.empty(trials, dtype=float)
        for i in range(trials):
            res, delta = self.step()
            costs[i] = res.total
            self.hooks.trial_end(trial=i, cost=res.total, delta=delta, n_enabled=res.n_enabled)

        final = float(costs[-1]) if trials else initial
        best = float(min(initial, costs.min())) if trials else initial
        self.hooks.run_end(
            trials=trials,
            final_cost=final,
            best_cost=best,
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return LearningResult(
            initial_cost=initial,
            final_cost=final,
            best_cost=best,
            costs=costs,
            weights=self.weights.copy(),
            probabilities=sigmoid(self.weights),
            switch_enabled=self.state.switch_enabled.copy(),
        )