# io/trial_logging.py
import json
import logging
import sys

from mesh_sim.io.recorder import Recorder, RecordingHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload)


def _default_json_logger(name="mesh_sim", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class TrialLogging(RecordingHooks):
    """
    Structured logs for learning runs and greedy builds.
    Per-trial lines are DEBUG-only and sampled; every trial still goes to the recorder.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1000,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        super().__init__(recorder)
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.log = logger or _default_json_logger(level=level)

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # learning lifecycle

    def run_start(self, *, trials: int, n_nodes: int, initial_cost: float):
        super().run_start(trials=trials, n_nodes=n_nodes, initial_cost=initial_cost)
        self._emit("INFO", "run_start", trials=trials, n_nodes=n_nodes, initial_cost=initial_cost)

    def trial_end(self, *, trial: int, cost: float, delta: float, n_enabled: int):
        super().trial_end(trial=trial, cost=cost, delta=delta, n_enabled=n_enabled)
        if self.debug and trial % self.sample_every == 0:
            self._emit("DEBUG", "trial", trial=trial, cost=cost, delta=delta, n_enabled=n_enabled)

    def run_end(self, *, trials: int, final_cost: float, best_cost: float, wall_ms: float):
        self._emit(
            "INFO",
            "run_end",
            trials=trials,
            final_cost=final_cost,
            best_cost=best_cost,
            wall_ms=wall_ms,
        )

    # greedy

    def greedy_done(self, *, baseline_cost: float, cost: float, n_enabled: int, rings: int):
        self._emit(
            "INFO",
            "greedy_done",
            baseline_cost=baseline_cost,
            cost=cost,
            n_enabled=n_enabled,
            rings=rings,
        )
