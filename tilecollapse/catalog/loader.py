"""
Load tile catalogs from YAML files.

Schema:

    tiles:
      - index: 0
        labels: [1, 1, 0, 1]
        rotatable: true      # optional, default true
    composites:              # optional multi-cell tiles, rows north to south
      - - [{index: 10, labels: [0, 0, 0, 0]}, null]
        - [{index: 11, labels: [0, 0, 0, 0]}, {index: 12, labels: [0, 0, 0, 0]}]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..core.errors import CatalogError
from ..core.tile import Tile
from ..logging_config import get_logger, log_storage
from .catalog import TileCatalog

logger = get_logger(__name__)

# Sample catalogs shipped with the package
CONFIG_DIR = Path(__file__).parent.parent / "config"
DEFAULT_CATALOG = CONFIG_DIR / "pipes.yaml"


def tile_from_dict(data: Any) -> Tile:
    """Build a Tile from one YAML mapping."""
    if not isinstance(data, dict):
        raise CatalogError(f"Tile entry must be a mapping, got {data!r}")
    if "index" not in data or "labels" not in data:
        raise CatalogError(f"Tile entry needs 'index' and 'labels': {data!r}")
    labels = data["labels"]
    if not isinstance(labels, list):
        raise CatalogError(f"Tile {data['index']} labels must be a list")
    rotatable = data.get("rotatable", True)
    if not isinstance(rotatable, bool):
        raise CatalogError(f"Tile {data['index']} rotatable must be true or false, got {rotatable!r}")
    return Tile(
        index=int(data["index"]),
        labels=tuple(labels),
        angle=int(data.get("angle", 0)),
        rotatable=rotatable,
    )


def catalog_from_dict(data: Any) -> TileCatalog:
    """Build a TileCatalog from parsed YAML."""
    if not isinstance(data, dict) or "tiles" not in data:
        raise CatalogError("Catalog file must contain a 'tiles' list")

    tiles = [tile_from_dict(entry) for entry in data["tiles"] or []]

    composites = []
    for layout in data.get("composites") or []:
        if not isinstance(layout, list):
            raise CatalogError("Each composite must be a list of rows")
        rows = []
        for row in layout:
            if not isinstance(row, list):
                raise CatalogError("Composite rows must be lists")
            rows.append([None if slot is None else tile_from_dict(slot) for slot in row])
        composites.append(rows)

    return TileCatalog(tiles, composites)


def load_catalog(path: Path | str | None = None) -> TileCatalog:
    """
    Load a catalog from a YAML file.

    Args:
        path: Catalog file. If None, uses the bundled pipes catalog.

    Raises:
        CatalogError: If the file is missing or malformed.
    """
    catalog_path = Path(path) if path is not None else DEFAULT_CATALOG
    if not catalog_path.exists():
        log_storage(logger, "load_catalog", catalog_path, success=False, details="missing")
        raise CatalogError(f"Catalog file not found: {catalog_path}")

    with open(catalog_path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise CatalogError(f"Invalid YAML in {catalog_path}: {exc}") from exc

    catalog = catalog_from_dict(data)
    log_storage(logger, "load_catalog", catalog_path, details=f"variants={len(catalog)}")
    return catalog
