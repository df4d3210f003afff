# io/recorder.py
import json
import sys
from dataclasses import asdict, dataclass
from typing import Protocol

from mesh_sim.sim.hooks import NoopHooks


@dataclass(frozen=True)
class TrialRecord:
    trial: int  # -1 for the all-on baseline
    cost: float
    delta: float
    n_enabled: int


class Sink(Protocol):
    def write(self, rec) -> None: ...


class JsonlSink:
    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, rec) -> None:
        self.fp.write(json.dumps(asdict(rec)) + "\n")


class MemorySink:
    def __init__(self):
        self.records: list = []

    def clear(self) -> None:
        self.records.clear()

    def write(self, rec) -> None:
        self.records.append(rec)


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (MemorySink(),)

    def emit(self, rec):
        for s in self.sinks:
            s.write(rec)


class RecordingHooks(NoopHooks):
    """Trial hooks that only feed a recorder."""

    def __init__(self, recorder: Recorder | None = None):
        self.recorder = recorder

    def run_start(self, *, trials: int, n_nodes: int, initial_cost: float):
        if self.recorder:
            self.recorder.emit(TrialRecord(trial=-1, cost=initial_cost, delta=0.0, n_enabled=n_nodes))

    def trial_end(self, *, trial: int, cost: float, delta: float, n_enabled: int):
        if self.recorder:
            self.recorder.emit(TrialRecord(trial=trial, cost=cost, delta=delta, n_enabled=n_enabled))
