# -*- coding: utf-8 -*-
"""Overlapping wave function collapse over 2-D and 3-D symbol grids."""

from .adjacency import AdjacencyModel
from .collapse import Collapser
from .config import SynthesisConfig
from .errors import Cancelled, InvalidConfiguration, SynthesisContradiction, UnsupportedFormat, WFCError
from .offsets import OffsetGroup
from .patterns import PatternSet, extract_patterns
from .propagate import propagate
from .seed import SeedStream
from .synthesize import SynthesisResult, index_exemplar, materialize, synthesize
from .tiles import TileSet
from .wave import Wave, boundary_candidates, neighbor_table

__version__ = "0.1.0"
