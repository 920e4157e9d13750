"""Tile catalogs: symmetry expansion, multi-cell composition and YAML loading."""

from .catalog import (
    TileCatalog,
    SeamAllocator,
    compose_multi_cell,
    expand,
    rotate,
    symmetry_of,
)
from .loader import load_catalog, catalog_from_dict, tile_from_dict, DEFAULT_CATALOG

__all__ = [
    "TileCatalog",
    "SeamAllocator",
    "compose_multi_cell",
    "expand",
    "rotate",
    "symmetry_of",
    "load_catalog",
    "catalog_from_dict",
    "tile_from_dict",
    "DEFAULT_CATALOG",
]
