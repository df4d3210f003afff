# sim/rng.py
from __future__ import annotations

from dataclasses import dataclass
from zlib import crc32

import numpy as np


def _u32(x: int) -> int:
    return int(x & 0xFFFFFFFF)


def _crc32_u32(s: str) -> int:
    return _u32(crc32(s.encode("utf-8")))


@dataclass(frozen=True)
class RNGKey:
    """Stream name plus optional ids, e.g. ("topo", n_nodes) for a per-size substream."""

    stream: str
    parts: tuple[int, ...]  # u32, stream name first

    @classmethod
    def from_parts(cls, stream: str, *parts: object) -> RNGKey:
        norm: list[int] = [_crc32_u32(stream)]
        for p in parts:
            if isinstance(p, (int, np.integer)):
                norm.append(_u32(int(p)))
            else:
                norm.append(_crc32_u32(p if isinstance(p, str) else repr(p)))
        return cls(stream=stream, parts=tuple(norm))


class RNGRegistry:
    """
    Seeded PCG64 streams, one per key, owned by this registry.

    Node placement and switch sampling each draw from their own named stream,
    so re-running the learner never perturbs the topology for the same seed.
    """

    def __init__(self, master_seed: int, *, scenario: str | int = 0):
        self.master_seed = _u32(master_seed)
        self.scenario_tag = _crc32_u32(str(scenario))
        self._streams: dict[RNGKey, np.random.Generator] = {}

    def generator(self, key: RNGKey) -> np.random.Generator:
        gen = self._streams.get(key)
        if gen is None:
            ss = np.random.SeedSequence(entropy=[self.master_seed, self.scenario_tag, *key.parts])
            gen = self._streams[key] = np.random.Generator(np.random.PCG64(ss))
        return gen

    def stream(self, name: str) -> np.random.Generator:
        return self.generator(RNGKey.from_parts(name))

    def substream(self, name: str, *parts: object) -> np.random.Generator:
        return self.generator(RNGKey.from_parts(name, *parts))
