"""Core types for tilecollapse: directions, positions, labels, tiles, errors."""

from .types import Direction, Position, Label, SYNTHETIC_LABEL_THRESHOLD
from .tile import Tile
from .errors import (
    TileCollapseError,
    Contradiction,
    UnsolvableError,
    SolveCancelled,
    CatalogError,
)
from .config import SolverConfig, parse_dimensions

__all__ = [
    "Direction",
    "Position",
    "Label",
    "SYNTHETIC_LABEL_THRESHOLD",
    "Tile",
    "TileCollapseError",
    "Contradiction",
    "UnsolvableError",
    "SolveCancelled",
    "CatalogError",
    "SolverConfig",
    "parse_dimensions",
]
