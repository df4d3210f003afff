from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

# learning rates observed to work at each network scale
SMALL_NET_LEARNING_RATE = 0.0003
LARGE_NET_LEARNING_RATE = 0.003
LARGE_NET_NODES = 1000


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(default=1000, ge=1)


class CostModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    not_found: float = 5000  # charged per unreachable node
    switch: int = 80  # extra per-hop cost between two non-root relays
    message: float = 2  # per enabled switch

    @field_validator("not_found", "switch", "message")
    @classmethod
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v


class TopologyModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    n_nodes: int = Field(default=300, ge=0)
    field_x: float = Field(default=30.0, gt=0)
    field_y: float = Field(default=40.0, gt=0)
    cutoff_distance: float = Field(default=10.0, gt=0)


class LearningModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    init_weight: float = 1.5
    learning_rate: float | None = Field(default=None, gt=0)
    trials: int = Field(default=100_000, ge=0)


# ----------------- ENGINES ---------------------


class LinearEngineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["linear"] = "linear"


class HeapEngineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["heap"] = "heap"


EngineUnion = Annotated[LinearEngineModel | HeapEngineModel, Field(discriminator="kind")]


# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "mesh"
    run_id: str = "local"
    seed: int = 0
    log: LogModel = LogModel()
    costs: CostModel = Field(default_factory=CostModel)
    topology: TopologyModel = Field(default_factory=TopologyModel)
    learning: LearningModel = Field(default_factory=LearningModel)
    engine: EngineUnion = Field(default_factory=HeapEngineModel)

    @model_validator(mode="after")
    def _scale_learning_rate(self):
        # unset rate => pick by network size
        if self.learning.learning_rate is None:
            big = self.topology.n_nodes >= LARGE_NET_NODES
            rate = LARGE_NET_LEARNING_RATE if big else SMALL_NET_LEARNING_RATE
            # copy: the caller may share one LearningModel across scenarios
            self.learning = self.learning.model_copy(update={"learning_rate": rate})
        return self
