"""tilecollapse - tile-based Wave Function Collapse with backtracking."""

__version__ = "0.1.0"

from .core import (
    Direction,
    Position,
    Label,
    Tile,
    SolverConfig,
    TileCollapseError,
    Contradiction,
    UnsolvableError,
    SolveCancelled,
    CatalogError,
)
from .catalog import TileCatalog, compose_multi_cell, expand, load_catalog
from .generation import Worldmap, WFCSolver, SolverState, SeededRandom

__all__ = [
    "__version__",
    "Direction",
    "Position",
    "Label",
    "Tile",
    "SolverConfig",
    "TileCollapseError",
    "Contradiction",
    "UnsolvableError",
    "SolveCancelled",
    "CatalogError",
    "TileCatalog",
    "compose_multi_cell",
    "expand",
    "load_catalog",
    "Worldmap",
    "WFCSolver",
    "SolverState",
    "SeededRandom",
]
