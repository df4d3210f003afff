from dataclasses import dataclass


# Field coordinates; only used while building adjacency
@dataclass(frozen=True)
class Point:
    x: float
    y: float


ORIGIN = Point(0.0, 0.0)
