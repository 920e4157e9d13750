"""
Tile catalog: turns author-supplied base tiles into the oriented variants
the solver places in every cell.

Rotating a tile whose faces are symmetric produces variants that look the
same, and the solver would waste effort telling them apart. Expansion
therefore classifies each rotatable tile by the symmetry of its four
horizontal labels:

    X (all four equal)          -> 1 variant
    I (north==south, east==west) -> 2 variants (0, 90)
    anything else (L, T, ...)   -> 4 variants (0, 90, 180, 270)

Multi-cell "big tiles" are built by compose_multi_cell(), which binds the
slots of a rectangular layout together with synthetic seam labels.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..core.errors import CatalogError
from ..core.tile import Tile
from ..core.types import Label, SYNTHETIC_LABEL_THRESHOLD
from ..logging_config import get_logger

logger = get_logger(__name__)

Layout = Sequence[Sequence[Tile | None]]


def symmetry_of(tile: Tile) -> str:
    """Classify a tile's planar symmetry as "X", "I" or "" (none)."""
    north, east, south, west = tile.horizontal_labels
    if north == east == south == west:
        return "X"
    if north == south and east == west:
        return "I"
    return ""


VARIANTS_FOR_SYMMETRY = {"X": 1, "I": 2, "": 4}


def rotate(tile: Tile, steps: int) -> Tile:
    """Return tile turned by steps quarter turns (see Tile.rotated)."""
    return tile.rotated(steps)


def expand(tiles: Iterable[Tile]) -> list[Tile]:
    """
    Expand base tiles into every distinguishable oriented variant.

    Non-rotatable tiles are emitted unchanged. Structural duplicates are
    dropped, keeping the first occurrence, so the order of the result
    follows the order of the input.
    """
    variants: list[Tile] = []
    seen: set[Tile] = set()

    def emit(variant: Tile) -> None:
        if variant not in seen:
            seen.add(variant)
            variants.append(variant)

    for tile in tiles:
        if not tile.rotatable:
            emit(tile)
            continue
        for steps in range(VARIANTS_FOR_SYMMETRY[symmetry_of(tile)]):
            emit(tile.rotated(steps))

    return variants


class SeamAllocator:
    """Hands out fresh synthetic seam ids, monotonically increasing."""

    def __init__(self, start: int = SYNTHETIC_LABEL_THRESHOLD):
        self._next = start

    @property
    def next_id(self) -> int:
        return self._next

    def allocate(self) -> Label:
        seam = Label.seam(self._next)
        self._next += 1
        return seam


def compose_multi_cell(layout: Layout, seams: SeamAllocator | None = None) -> list[Tile]:
    """
    Bind a rectangular arrangement of sub-tiles into a multi-cell tile family.

    Every pair of occupied slots that touch north/south or east/west gets a
    fresh synthetic seam label on both touching faces, so the sub-tiles only
    fit together in the authored arrangement. Empty slots (None) keep the
    author labels of their neighbours. The sub-tiles are then emitted in all
    four rotations as a unit; the seam labels carry the rotation epoch, so
    pieces of a rotated copy never join pieces of an unrotated one.

    Args:
        layout: Rows of slots, row 0 is the northernmost.
        seams: Seam id source. Share one allocator across composites of a
               catalog so their seams never collide.

    Returns:
        Sub-tile variants, four per occupied slot, marked non-rotatable.
    """
    if seams is None:
        seams = SeamAllocator()

    rows = [list(row) for row in layout]
    if not rows or not rows[0]:
        raise CatalogError("Multi-cell layout must have at least one slot")
    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise CatalogError("Multi-cell layout must be rectangular")

    # Mutable label lists per occupied slot
    slots: dict[tuple[int, int], list[Label]] = {}
    for y, row in enumerate(rows):
        for x, tile in enumerate(row):
            if tile is not None:
                slots[(x, y)] = list(tile.labels)

    for y in range(len(rows)):
        for x in range(width):
            if (x, y) not in slots:
                continue
            north = (x, y - 1)
            if north in slots:
                seam = seams.allocate()
                slots[(x, y)][0] = seam  # north face
                slots[north][2] = seam  # south face of the slot above
            west = (x - 1, y)
            if west in slots:
                seam = seams.allocate()
                slots[(x, y)][3] = seam  # west face
                slots[west][1] = seam  # east face of the slot to the left

    pieces: list[Tile] = []
    for (x, y), labels in sorted(slots.items(), key=lambda item: (item[0][1], item[0][0])):
        source = rows[y][x]
        piece = Tile(
            index=source.index,
            labels=tuple(labels) if not source.planar else tuple(labels[:4]),
            angle=source.angle,
            rotatable=False,
        )
        pieces.append(piece)

    family = [piece.rotated(steps) for piece in pieces for steps in range(4)]
    logger.debug(
        f"Composed multi-cell tile | slots={len(pieces)} | variants={len(family)} "
        f"| next_seam={seams.next_id}"
    )
    return family


class TileCatalog:
    """
    The immutable set of tiles a solver may place.

    Built once from base tiles (expanded by symmetry) and optional multi-cell
    layouts (bound by seams). `variants` is the full list every cell's
    domain starts from.
    """

    def __init__(
        self,
        tiles: Iterable[Tile],
        composites: Iterable[Layout] = (),
    ):
        self._base: tuple[Tile, ...] = tuple(tiles)
        self._seams = SeamAllocator()
        composite_variants: list[Tile] = []
        for layout in composites:
            composite_variants.extend(compose_multi_cell(layout, self._seams))
        self._composites: tuple[Tile, ...] = tuple(composite_variants)

        self._validate()
        self._variants: tuple[Tile, ...] = tuple(
            expand(self._base + self._composites)
        )
        logger.info(
            f"Catalog built | base={len(self._base)} | composite_pieces={len(self._composites)} "
            f"| variants={len(self._variants)}"
        )

    def _validate(self) -> None:
        all_tiles = self._base + self._composites
        if not all_tiles:
            raise CatalogError("Tile catalog is empty")
        arities = {tile.planar for tile in all_tiles}
        if len(arities) > 1:
            raise CatalogError("All tiles of a catalog must carry the same number of labels")
        for tile in self._base:
            if tile.is_synthetic:
                raise CatalogError(
                    f"Tile {tile.index} uses a synthetic label; seams are generated "
                    "by compose_multi_cell"
                )

    @property
    def base_tiles(self) -> tuple[Tile, ...]:
        return self._base

    @property
    def variants(self) -> tuple[Tile, ...]:
        """Every oriented variant, in expansion order."""
        return self._variants

    @property
    def planar(self) -> bool:
        return all(tile.planar for tile in self._base + self._composites)

    def by_index(self, index: int) -> list[Tile]:
        """All variants carrying the given identity."""
        return [tile for tile in self._variants if tile.index == index]

    def find(self, index: int, angle: int = 0) -> Tile:
        """Look up one variant by identity and angle."""
        for tile in self._variants:
            if tile.index == index and tile.angle == angle % 360:
                return tile
        raise CatalogError(f"No variant with index {index} at angle {angle}")

    def __len__(self) -> int:
        return len(self._variants)

    def __iter__(self):
        return iter(self._variants)

    def __contains__(self, tile: object) -> bool:
        return tile in self._variants
