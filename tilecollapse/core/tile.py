"""
Tile definition for tile-collapse.

A Tile is an oriented unit that can occupy a cell in the worldmap.
Each face carries a connection Label; two tiles may sit side by side only
when the labels on their touching faces are equal. This is the only data
the constraint propagation looks at.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import CatalogError
from .types import Direction, Label

# Label used for the vertical faces of planar tiles
_FLAT = Label(0)


@dataclass(frozen=True)
class Tile:
    """
    A tile variant that can appear in the generated output.

    Attributes:
        index: Opaque identity (e.g. an index into a rendering atlas).
               The engine never interprets it.
        labels: One Label per direction in Direction order
                (north, east, south, west, up, down). Four labels may be
                given for planar tiles; up/down are then filled with label 0.
                Plain ints are accepted and coerced to author labels.
        angle: Rotation in degrees (0, 90, 180 or 270).
        rotatable: Whether catalog expansion may emit rotated variants.
                   Not part of equality: two variants that look the same are
                   the same tile.
    """

    index: int
    labels: tuple[Label, ...]
    angle: int = 0
    rotatable: bool = field(default=True, compare=False)
    planar: bool = field(default=False, init=False, compare=False, repr=False)

    def __post_init__(self):
        raw = tuple(self.labels)
        if len(raw) not in (4, 6):
            raise CatalogError(
                f"Tile {self.index} needs 4 or 6 connection labels, got {len(raw)}"
            )
        try:
            labels = tuple(Label.of(label) for label in raw)
        except TypeError as exc:
            raise CatalogError(f"Tile {self.index}: {exc}") from exc
        for label in labels:
            if label.value < 0:
                raise CatalogError(f"Tile {self.index} has negative label {label.value}")
        if self.angle % 90 != 0:
            raise CatalogError(f"Tile {self.index} angle must be a multiple of 90, got {self.angle}")

        object.__setattr__(self, "planar", len(labels) == 4)
        if len(labels) == 4:
            labels = labels + (_FLAT, _FLAT)
        object.__setattr__(self, "labels", labels)
        object.__setattr__(self, "angle", self.angle % 360)

    def label(self, direction: Direction) -> Label:
        """The label this tile exposes toward the given direction."""
        return self.labels[direction.index]

    @property
    def horizontal_labels(self) -> tuple[Label, ...]:
        return self.labels[:4]

    @property
    def is_synthetic(self) -> bool:
        """True if any face carries a seam label from a multi-cell tile."""
        return any(label.synthetic for label in self.labels)

    def rotated(self, steps: int) -> Tile:
        """
        Return this tile turned by steps quarter turns.

        The horizontal labels are shifted cyclically and the angle advances
        by 90 degrees per step. Author labels on up/down are untouched.
        Synthetic labels are re-tagged with the rotation epoch so that
        rotated copies of a multi-cell tile only join copies rotated the
        same way.
        """
        steps %= 4
        horizontal = self.labels[:4]
        shifted = tuple(horizontal[(i + steps) % 4] for i in range(4))
        labels = tuple(
            label.at_epoch(label.epoch + steps) for label in shifted + self.labels[4:]
        )
        return Tile(
            index=self.index,
            labels=labels if not self.planar else labels[:4],
            angle=self.angle + 90 * steps,
            rotatable=self.rotatable,
        )

    def fits(self, direction: Direction, other: Tile) -> bool:
        """Check if other may sit next to this tile in the given direction."""
        return self.label(direction) == other.label(direction.opposite)

    def describe(self) -> str:
        labels = ",".join(str(label) for label in self.labels)
        return f"Tile({self.index} @{self.angle} [{labels}])"
