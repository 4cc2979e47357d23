# -*- coding: utf-8 -*-
"""
Deterministic random stream for the collapser.

The seed string is hashed once (SHA-256) into the initial state of a PCG64
generator. Nothing else in the package draws random numbers.
"""

import hashlib
from typing import Any, Dict

import numpy as np


def seed_to_int(seed: str) -> int:
    digest = hashlib.sha256(str(seed).encode("utf-8")).digest()
    return int.from_bytes(digest, "big")


class SeedStream:
    def __init__(self, seed: str):
        self.seed = str(seed)
        self.rng = np.random.Generator(np.random.PCG64(seed_to_int(self.seed)))
        self.draws = 0

    @classmethod
    def from_state(cls, state: Dict[str, Any]) -> "SeedStream":
        me = cls.__new__(cls)
        me.seed = state.get("seed", "")
        me.rng = np.random.Generator(np.random.PCG64())
        me.rng.bit_generator.state = state["bit_generator"]
        me.draws = int(state.get("draws", 0))
        return me

    @property
    def state(self) -> Dict[str, Any]:
        return {"seed": self.seed, "draws": self.draws, "bit_generator": self.rng.bit_generator.state}

    def random(self) -> float:
        self.draws += 1
        return float(self.rng.random())

    def integer(self, n: int) -> int:
        """Uniform draw in [0, n)."""
        if n <= 1:
            return 0
        self.draws += 1
        return int(self.rng.integers(n))

    def weighted_index(self, weights: np.ndarray) -> int:
        """Index into `weights` sampled proportionally to its (positive) values."""
        cum = np.cumsum(np.asarray(weights, dtype=np.float64))
        r = self.random() * cum[-1]
        return int(min(np.searchsorted(cum, r, side="right"), len(cum) - 1))
