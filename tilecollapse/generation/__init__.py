"""Tile-collapse generation: worldmap, propagation and the solver loop."""

from .worldmap import Worldmap, Domain
from .propagation import (
    available_labels,
    filter_neighbor,
    propagate,
    find_conflicts,
    is_consistent,
)
from .rng import SeededRandom
from .solver import WFCSolver, SolverState

__all__ = [
    "Worldmap",
    "Domain",
    "available_labels",
    "filter_neighbor",
    "propagate",
    "find_conflicts",
    "is_consistent",
    "SeededRandom",
    "WFCSolver",
    "SolverState",
]
