# sim/hooks.py
from typing import Protocol


class TrialHooks(Protocol):
    def run_start(self, *, trials, n_nodes, initial_cost): ...
    def trial_end(self, *, trial, cost, delta, n_enabled): ...
    def run_end(self, *, trials, final_cost, best_cost, wall_ms): ...
    def greedy_done(self, *, baseline_cost, cost, n_enabled, rings): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def trial_end(self, **_):
        pass

    def run_end(self, **_):
        pass

    def greedy_done(self, **_):
        pass
