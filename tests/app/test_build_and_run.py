# tests/app/test_build_and_run.py
import json
import logging

import numpy as np
import pytest

from mesh_sim.app.build import build
from mesh_sim.engine.shortest_path import HeapEngine, LinearScanEngine
from mesh_sim.io.recorder import JsonlSink, Recorder, RecordingHooks, TrialRecord
from mesh_sim.io.trial_logging import TrialLogging, _default_json_logger
from mesh_sim.runtime.registries import engine_kinds, make_engine


def _cfg(**over):
    cfg = {
        "name": "test",
        "run_id": "t-1",
        "seed": 7,
        "topology": {"n_nodes": 80, "field_x": 30, "field_y": 40},
        "learning": {"trials": 20},
        "engine": {"kind": "heap"},
    }
    cfg.update(over)
    return cfg


def test_build_runs():
    app = build(_cfg(), use_logging=False)
    assert len(app.graph) == 80
    assert isinstance(app.engine, HeapEngine)
    res = app.learn()
    assert res.costs.shape == (20,)
    assert len(app.history.records) == 21


def test_same_seed_same_everything():
    a = build(_cfg(), use_logging=False)
    b = build(_cfg(engine={"kind": "linear"}), use_logging=False)
    assert isinstance(b.engine, LinearScanEngine)
    assert [n.loc for n in a.graph.nodes] == [n.loc for n in b.graph.nodes]
    assert np.array_equal(a.learn().costs, b.learn().costs)


def test_different_seed_moves_nodes():
    a = build(_cfg(), use_logging=False)
    b = build(_cfg(seed=8), use_logging=False)
    assert [n.loc for n in a.graph.nodes] != [n.loc for n in b.graph.nodes]


def test_greedy_via_app():
    app = build(_cfg(), use_logging=False)
    out = app.greedy()
    assert out.result.n_enabled == len(out.enabled) + 1
    assert out.baseline.n_enabled == len(app.graph)


def test_engine_registry():
    assert engine_kinds() == ["heap", "linear"]

    class _Bogus:
        kind = "bogus"

    with pytest.raises(ValueError):
        make_engine(_Bogus())


def test_trial_logging_emits_json(caplog):
    logger = logging.getLogger("mesh_sim.test")
    hooks = TrialLogging(run_id="r-9", debug=True, sample_every=2, logger=logger)
    with caplog.at_level(logging.DEBUG, logger="mesh_sim.test"):
        hooks.run_start(trials=3, n_nodes=10, initial_cost=100.0)
        for i in range(3):
            hooks.trial_end(trial=i, cost=90.0 + i, delta=0.1, n_enabled=5)
        hooks.run_end(trials=3, final_cost=92.0, best_cost=90.0, wall_ms=1.0)
    msgs = [r.getMessage() for r in caplog.records]
    assert msgs == ["run_start", "trial", "trial", "run_end"]
    assert caplog.records[0].extra["run_id"] == "r-9"


def test_jsonl_sink_writes_records(tmp_path):
    path = tmp_path / "trials.jsonl"
    with open(path, "w") as fp:
        hooks = RecordingHooks(Recorder(JsonlSink(fp)))
        hooks.run_start(trials=1, n_nodes=4, initial_cost=150.5)
        hooks.trial_end(trial=0, cost=148.5, delta=-0.02, n_enabled=3)
    rows = [json.loads(line) for line in path.read_text().splitlines()]
    assert rows[0] == {"trial": -1, "cost": 150.5, "delta": 0.0, "n_enabled": 4}
    assert TrialRecord(**rows[1]).cost == 148.5


def test_dump_snapshots_after_learning():
    app = build(_cfg(), use_logging=False)
    learner = app.learner()
    learner.run(3)
    snap = app.graph.dump(learner.state)
    assert len(snap) == len(app.graph)
    assert snap[0].id == 0 and snap[0].min_cost == 0.0 and snap[0].switch_enabled
    assert [s.switch_enabled for s in snap] == learner.state.switch_enabled.tolist()


def test_history_holds_latest_learn_only():
    app = build(_cfg(), use_logging=False)
    app.learn(5)
    app.learn(8)
    assert [r.trial for r in app.history.records] == list(range(-1, 8))


def test_json_logger_level_follows_latest_request():
    name = "mesh_sim.level_check"
    lg = _default_json_logger(name, level="WARNING")
    assert lg.level == logging.WARNING
    again = _default_json_logger(name, level="DEBUG")
    assert again is lg
    assert lg.level == logging.DEBUG
    assert len(lg.handlers) == 1
