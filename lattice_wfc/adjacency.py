# -*- coding: utf-8 -*-
"""
Pattern compatibility model.

For offset d, pattern B is a valid neighbor of pattern A when A's window and
B's window shifted by d agree on every overlapping symbol. Tables are kept as
one sorted ID array per (offset, pattern); nothing of size n_patterns**2 is
ever allocated.
"""

from collections import defaultdict
from typing import List, Sequence

import numpy as np

from .offsets import OffsetGroup, overlap_slices
from .patterns import PatternSet

EMPTY_IDS = np.zeros(0, dtype=np.int32)


class AdjacencyModel:
    def __init__(self, offsets: OffsetGroup, table: List[List[np.ndarray]], trivial: List[bool], num_patterns: int):
        self.offsets = offsets
        self.table = table          # table[offset_id][pattern_id] -> compatible neighbor IDs
        self.trivial = trivial      # offsets with no overlap: everything is compatible
        self.num_patterns = num_patterns

    @classmethod
    def build(cls, pattern_set: PatternSet) -> "AdjacencyModel":
        offsets = OffsetGroup(pattern_set.ndim)
        n = pattern_set.num_patterns
        pats = pattern_set.patterns
        everything = np.arange(n, dtype=np.int32)
        table, trivial = [], []
        for _, d in offsets:
            sl = overlap_slices(d, pattern_set.pattern_extent)
            if sl is None:
                table.append([everything] * n)
                trivial.append(True)
                continue
            own, other = sl
            buckets = defaultdict(list)
            for b in range(n):
                buckets[pats[b][other].tobytes()].append(b)
            lookup = {k: np.asarray(v, dtype=np.int32) for k, v in buckets.items()}
            table.append([lookup.get(pats[a][own].tobytes(), EMPTY_IDS) for a in range(n)])
            trivial.append(False)
        return cls(offsets, table, trivial, n)

    def neighbors(self, offset_id: int, pattern_id: int) -> np.ndarray:
        return self.table[offset_id][pattern_id]

    def compatible(self, offset_id: int, pattern_id: int, neighbor_id: int) -> bool:
        ids = self.table[offset_id][pattern_id]
        i = int(np.searchsorted(ids, neighbor_id))
        return i < ids.size and int(ids[i]) == int(neighbor_id)

    def allowed_union(self, offset_id: int, candidate_ids: Sequence[int], out: np.ndarray) -> np.ndarray:
        """Mark in `out` every pattern compatible at `offset_id` with any of `candidate_ids`."""
        out[:] = False
        row = self.table[offset_id]
        parts = [row[a] for a in candidate_ids]
        if parts:
            out[np.concatenate(parts)] = True
        return out

    def assignment_is_valid(self, pattern_grid: np.ndarray, periodic: Sequence[bool]) -> bool:
        """Overlap consistency of a fully decided pattern grid."""
        g = np.asarray(pattern_grid)
        for oid, d in self.offsets:
            if self.trivial[oid]:
                continue
            nb = g
            valid = np.ones(g.shape, dtype=bool)
            for axis, (step, wrap) in enumerate(zip(d, periodic)):
                if step == 0:
                    continue
                nb = np.roll(nb, -step, axis=axis)
                if not wrap:
                    edge = [slice(None)] * g.ndim
                    edge[axis] = slice(-1, None) if step > 0 else slice(0, 1)
                    valid[tuple(edge)] = False
            pairs = np.unique(np.stack([g[valid], nb[valid]], axis=1), axis=0) if valid.any() else []
            for a, b in pairs:
                if not self.compatible(oid, int(a), int(b)):
                    return False
        return True
