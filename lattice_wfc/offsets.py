# -*- coding: utf-8 -*-
# Unit neighbor directions in {-1,0,1}^D, zero vector excluded.

import itertools
from typing import List, Sequence, Tuple

Offset = Tuple[int, ...]


class OffsetGroup:
    """All 3^D-1 unit offsets, ordered so opposites have mirror indices."""

    def __init__(self, ndim: int):
        self.ndim = ndim
        zero = (0,) * ndim
        self.offsets: List[Offset] = [d for d in itertools.product((-1, 0, 1), repeat=ndim) if d != zero]
        self.index = {d: i for i, d in enumerate(self.offsets)}

    def __len__(self):
        return len(self.offsets)

    def __iter__(self):
        return iter(enumerate(self.offsets))

    def opposite(self, offset_id: int) -> int:
        return len(self.offsets) - 1 - offset_id

    def offset_id(self, offset: Sequence[int]) -> int:
        return self.index[tuple(offset)]


def overlap_slices(offset: Offset, pattern_extent: Sequence[int]):
    """
    Slices selecting the region shared by a window at the origin (first) and a
    window shifted by `offset` (second), each in its own local frame.
    Returns None when the windows do not overlap.
    """
    own, other = [], []
    for d, p in zip(offset, pattern_extent):
        if p - abs(d) <= 0:
            return None
        own.append(slice(max(0, d), min(p, p + d)))
        other.append(slice(max(0, -d), min(p, p - d)))
    return tuple(own), tuple(other)
