# mesh_sim/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from mesh_sim.app.protocols import PathEngine
from mesh_sim.config.models import ScenarioModel
from mesh_sim.domain.graph import Graph
from mesh_sim.domain.topology import build_topology
from mesh_sim.io.recorder import MemorySink, Recorder, RecordingHooks
from mesh_sim.io.trial_logging import TrialLogging
from mesh_sim.learning.switch_learner import LearningResult, SwitchLearner
from mesh_sim.mesh.greedy import GreedyMeshBuilder, GreedyResult
from mesh_sim.runtime.registries import make_engine
from mesh_sim.sim.hooks import TrialHooks
from mesh_sim.sim.rng import RNGRegistry


@dataclass
class App:
    model: ScenarioModel
    rng: RNGRegistry
    graph: Graph
    engine: PathEngine
    hooks: TrialHooks
    history: MemorySink  # records of the latest learn() only

    def learner(self) -> SwitchLearner:
        return SwitchLearner(
            graph=self.graph,
            engine=self.engine,
            costs=self.model.costs,
            cfg=self.model.learning,
            rng=self.rng.stream("switches"),
            hooks=self.hooks,
        )

    def learn(self, trials: int | None = None) -> LearningResult:
        n = self.model.learning.trials if trials is None else trials
        self.history.clear()
        return self.learner().run(n)

    def greedy(self) -> GreedyResult:
        return GreedyMeshBuilder(self.graph).build(
            self.graph.new_state(), self.engine, self.model.costs, hooks=self.hooks
        )


def build(cfg: ScenarioModel | Mapping, *, use_logging: bool = True) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) RNG & topology (placement draws once, from its own stream)
    rng_registry = RNGRegistry(model.seed, scenario=model.name)
    graph = build_topology(model.topology, rng_registry.stream("placement"), costs=model.costs)

    # 2) Engine
    engine = make_engine(model.engine)

    # 3) Hooks; the memory sink keeps the per-trial cost history either way
    history = MemorySink()
    recorder = Recorder(history)
    hooks = (
        TrialLogging(
            run_id=model.run_id,
            level="DEBUG" if model.log.debug else model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
            recorder=recorder,
        )
        if use_logging
        else RecordingHooks(recorder)
    )

    return App(model, rng_registry, graph, engine, hooks, history)
