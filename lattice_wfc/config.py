# -*- coding: utf-8 -*-
"""
Run configuration for one synthesis.

All extents are per axis in the grid's own index order ([x, y] or [x, y, z]).
Periodicity flags default to periodic on every axis.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .errors import InvalidConfiguration

DEFAULT_SEED = "1"
DEFAULT_MAX_ATTEMPTS = 10


def _as_tuple(v, name: str) -> Tuple[int, ...]:
    try:
        return tuple(int(x) for x in v)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"{name} must be a sequence of integers, got {v!r}")


@dataclass
class SynthesisConfig:
    output_extent: Sequence[int]
    pattern_extent: Sequence[int]
    input_periodic: Optional[Sequence[bool]] = None
    output_periodic: Optional[Sequence[bool]] = None
    seed: str = DEFAULT_SEED
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    debug: bool = False

    def __post_init__(self):
        self.output_extent = _as_tuple(self.output_extent, "output_extent")
        self.pattern_extent = _as_tuple(self.pattern_extent, "pattern_extent")
        ndim = len(self.output_extent)
        if self.input_periodic is None: self.input_periodic = (True,) * ndim
        if self.output_periodic is None: self.output_periodic = (True,) * ndim
        self.input_periodic = tuple(bool(x) for x in self.input_periodic)
        self.output_periodic = tuple(bool(x) for x in self.output_periodic)
        self.seed = str(self.seed)

    @property
    def ndim(self) -> int:
        return len(self.output_extent)

    def validate(self, exemplar_shape: Sequence[int]):
        """Fail fast on anything that would make synthesis meaningless."""
        ndim = self.ndim
        if ndim not in (2, 3):
            raise InvalidConfiguration(f"grids must be 2-D or 3-D, got {ndim} output axes")
        for name, v in (("pattern_extent", self.pattern_extent),
                        ("input_periodic", self.input_periodic),
                        ("output_periodic", self.output_periodic),
                        ("exemplar", tuple(exemplar_shape))):
            if len(v) != ndim:
                raise InvalidConfiguration(f"{name} has {len(v)} axes, expected {ndim}")
        if any(e <= 0 for e in self.output_extent):
            raise InvalidConfiguration(f"output extent must be positive, got {self.output_extent}")
        if any(p <= 0 for p in self.pattern_extent):
            raise InvalidConfiguration(f"pattern extent must be positive, got {self.pattern_extent}")
        if any(int(e) <= 0 for e in exemplar_shape):
            raise InvalidConfiguration(f"exemplar grid is empty (shape {tuple(exemplar_shape)})")
        if self.max_attempts < 1:
            raise InvalidConfiguration(f"max_attempts must be at least 1, got {self.max_attempts}")
        for axis, (p, e, wrap) in enumerate(zip(self.pattern_extent, exemplar_shape, self.input_periodic)):
            if not wrap and p > int(e):
                raise InvalidConfiguration(
                    f"pattern extent {p} exceeds exemplar extent {int(e)} on non-periodic axis {axis}")
