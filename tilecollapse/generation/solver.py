"""
Tile-collapse solver.

This is the outer algorithm that observes (collapses) cells and propagates
constraints until the entire grid is determined.

The algorithm:
1. Take a checkpoint of the worldmap
2. Pick the first undecided cell (fixed row-major order)
3. Collapse it to one random candidate and propagate
4. On contradiction: strike that candidate from the checkpoint, restore
   the checkpoint and try again
5. Repeat until every cell is decided, or a cell runs out of alternatives

Cell selection is deterministic; only the tile drawn for a cell is random.
That keeps contradictions local and every run reproducible from its seed.

Backtracking takes a full clone of the worldmap once per step. Domains are
lists of shared immutable tiles, so a clone costs one list copy per cell.
For very large grids an undo log of removed candidates would be cheaper;
grids this engine targets are small enough that the clone wins on
simplicity.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from enum import Enum, auto

from ..catalog.catalog import TileCatalog
from ..core.config import SolverConfig
from ..core.errors import Contradiction, SolveCancelled, UnsolvableError
from ..core.tile import Tile
from ..core.types import Position
from ..logging_config import get_logger, log_attempt, log_backtrack, log_step
from .propagation import propagate
from .rng import SeededRandom
from .worldmap import Domain, Worldmap, as_position

logger = get_logger(__name__)


class SolverState(Enum):
    """The current state of one solving attempt."""
    RUNNING = auto()        # Still solving, more steps needed
    SOLVED = auto()         # All cells decided
    CONTRADICTION = auto()  # A cell ran out of alternatives with this seed


class WFCSolver:
    """
    The tile-collapse engine.

    Usage:
        solver = WFCSolver(Worldmap(8, 8), catalog, seed=7)
        while solver.step() != SolverState.SOLVED:
            render(solver.worldmap)

    Or for bulk solving:
        solver.run()                 # raises UnsolvableError on a dead end
        solver.run_until_success()   # reseeds and retries on dead ends

    Cells can be pinned before solving:
        solver.surround_border(catalog.find(EMPTY))
        solver.add_tile(Position(3, 3), catalog.find(ENTRANCE))
    """

    def __init__(
        self,
        worldmap: Worldmap,
        catalog: TileCatalog,
        seed: int | None = None,
        config: SolverConfig | None = None,
    ):
        """
        Initialize the solver and fill every cell with the catalog variants.

        Args:
            worldmap: The grid to solve. Its domains are replaced.
            catalog: Tiles that may be placed (read-only)
            seed: Starting seed; defaults to config.seed
            config: Retry policy and budget; defaults to SolverConfig()
        """
        self.config = config or SolverConfig(dimensions=worldmap.size[: worldmap.axes])
        self.catalog = catalog
        self.worldmap = worldmap
        self.rng = SeededRandom(self.config.seed if seed is None else seed)

        self.state = SolverState.RUNNING
        self.step_count = 0
        self.backtrack_count = 0
        self.attempt_count = 0

        # Last collapsed cell (for visualization/debugging)
        self.last_collapsed: Position | None = None

        # Whether the whole grid has been made arc consistent once
        self._settled = False

        self.worldmap.reset_all(catalog)

    @classmethod
    def from_config(cls, config: SolverConfig, catalog: TileCatalog) -> WFCSolver:
        """Build a solver for config.dimensions, pinning the border tile if set."""
        solver = cls(Worldmap(*config.dimensions), catalog, config=config)
        if config.border_tile is not None:
            solver.surround_border(catalog.find(config.border_tile))
        return solver

    @property
    def seed(self) -> int:
        return self.rng.seed

    def reseed(self, seed: int) -> None:
        self.rng.reseed(seed)

    # -------------------------------------------------------------------------
    # Observe
    # -------------------------------------------------------------------------

    def find_next_undecided(self) -> Position | None:
        """
        First cell in flat-index order with more than one candidate.

        Returns None once every cell is decided.
        """
        for index, domain in enumerate(self.worldmap.cells):
            if len(domain) > 1:
                return self.worldmap.position(index)
        return None

    def collapse(self, position: Position) -> Tile:
        """Reduce a cell to one candidate drawn uniformly at random."""
        domain = self.worldmap[position]
        chosen = self.rng.choice(domain)
        self.worldmap[position] = [chosen]
        return chosen

    # -------------------------------------------------------------------------
    # Step / run
    # -------------------------------------------------------------------------

    def step(self) -> SolverState:
        """
        Perform one collapse and propagate it.

        Returns SOLVED when nothing is left to collapse, RUNNING after a
        successful collapse. Contradictions are handled internally by
        backtracking to the checkpoint taken at the start of the step.

        Raises:
            UnsolvableError: A cell ran out of alternatives with this seed.
        """
        if not self._settled:
            self._settle()

        checkpoint = self.worldmap.clone()
        self.last_collapsed = None

        while True:
            position = self.find_next_undecided()
            if position is None:
                self.state = SolverState.SOLVED
                log_step(logger, self.step_count, "SOLVED")
                return self.state

            tile = self.collapse(position)
            try:
                propagate(self.worldmap, position)
            except Contradiction as exc:
                log_backtrack(
                    logger,
                    self.step_count,
                    position,
                    remaining=len(checkpoint[position]) - 1,
                    details=f"tile={tile.describe()} | emptied={tuple(exc.position)}",
                )
                self.worldmap = self._recover(checkpoint, position, tile)
                continue

            self.step_count += 1
            self.last_collapsed = position
            self.state = SolverState.RUNNING
            log_step(logger, self.step_count, "COLLAPSED", f"square={tuple(position)} | {tile.describe()}")
            return self.state

    wfc_step = step

    def _settle(self) -> None:
        """
        Propagate from every cell once before the first collapse.

        Cells that start decided (single-variant catalogs, pins made before
        the catalog changed) would otherwise never be checked against their
        neighbours.
        """
        try:
            for position in self.worldmap.positions():
                propagate(self.worldmap, position)
        except Contradiction as exc:
            self.state = SolverState.CONTRADICTION
            raise UnsolvableError(
                f"Initial grid is inconsistent at square {tuple(exc.position)}",
                position=exc.position,
                seed=self.seed,
            ) from exc
        self._settled = True

    def backtrack(self, checkpoint: Worldmap, position: Position, tile: Tile) -> Worldmap:
        """
        Strike a failed candidate from the checkpoint and restore from it.

        The removal is the only change carried forward: the checkpoint keeps
        every other domain exactly as it was before the collapse. Returns a
        fresh working copy of the updated checkpoint.

        Raises:
            UnsolvableError: The checkpoint had no alternative left at position.
        """
        domain = checkpoint[position]
        if len(domain) <= 1:
            self.state = SolverState.CONTRADICTION
            raise UnsolvableError(
                f"Collapse of square {tuple(position)} resulted in an empty stack "
                f"after trying all available tiles (seed {self.seed})",
                position=position,
                seed=self.seed,
            )
        checkpoint[position] = [candidate for candidate in domain if candidate != tile]
        self.backtrack_count += 1
        return checkpoint.clone()

    def _recover(self, checkpoint: Worldmap, position: Position, tile: Tile) -> Worldmap:
        """Backtrack, then propagate the narrower domain on the restored copy."""
        restored = self.backtrack(checkpoint, position, tile)
        try:
            propagate(restored, position)
        except Contradiction as exc:
            self.state = SolverState.CONTRADICTION
            raise UnsolvableError(
                f"No remaining candidate for square {tuple(position)} is consistent "
                f"(seed {self.seed})",
                position=position,
                seed=self.seed,
            ) from exc
        return restored

    def run(self) -> Worldmap:
        """
        Step until the grid is solved.

        Returns the solved worldmap.

        Raises:
            UnsolvableError: If the current seed hits a dead end.
        """
        while self.step() != SolverState.SOLVED:
            pass
        return self.worldmap

    def run_until_success(
        self,
        seed: int | None = None,
        max_attempts: int | None = None,
        should_stop: Callable[[], bool] | None = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> Worldmap:
        """
        Solve, restarting from the initial worldmap with the next seed on failure.

        The initial worldmap (including any pinned cells) is snapshotted once;
        every attempt starts from a copy of it.

        Args:
            seed: Seed of the first attempt (default: the current seed)
            max_attempts: Attempt budget (default: config.max_attempts,
                          None = unbounded)
            should_stop: Cancellation hook, checked once before each attempt
            progress_callback: Optional callback(attempt, seed) before each attempt

        Returns:
            The solved worldmap.

        Raises:
            UnsolvableError: On the first failure when config.stop_policy is
                "first_failure", or when the attempt budget is spent.
            SolveCancelled: If should_stop returned True. The worldmap is
                restored to the initial snapshot first.
        """
        if seed is not None:
            self.reseed(seed)
        if max_attempts is None:
            max_attempts = self.config.max_attempts

        initial = self.worldmap.clone()
        attempt = 0

        while True:
            if should_stop is not None and should_stop():
                self.worldmap = initial
                self._settled = False
                self.state = SolverState.RUNNING
                logger.info(f"Solve cancelled after {attempt} attempt(s)")
                raise SolveCancelled(attempt)

            if max_attempts is not None and attempt >= max_attempts:
                self.worldmap = initial
                self._settled = False
                logger.warning(f"No solution after {attempt} attempt(s), last seed {self.seed}")
                raise UnsolvableError(
                    f"No solution found in {attempt} attempt(s)",
                    seed=self.seed,
                )

            attempt += 1
            self.attempt_count = attempt
            # step and backtrack counts are per attempt
            self.step_count = 0
            self.backtrack_count = 0
            self.state = SolverState.RUNNING
            if progress_callback is not None:
                progress_callback(attempt, self.seed)

            started = time.monotonic()
            try:
                self.run()
            except UnsolvableError as exc:
                duration_ms = int((time.monotonic() - started) * 1000)
                log_attempt(logger, attempt, self.seed, "UNSOLVABLE", duration_ms, str(exc))
                if not self.config.retries_on_failure:
                    raise
                self.reseed(self.seed + 1)
                self.worldmap = initial.clone()
                self._settled = False
                continue

            duration_ms = int((time.monotonic() - started) * 1000)
            log_attempt(
                logger,
                attempt,
                self.seed,
                "SOLVED",
                duration_ms,
                f"steps={self.step_count} | backtracks={self.backtrack_count}",
            )
            return self.worldmap

    # -------------------------------------------------------------------------
    # Pinning
    # -------------------------------------------------------------------------

    @staticmethod
    def _pin(worldmap: Worldmap, position: Position, tile: Tile) -> None:
        worldmap[position] = [tile]
        propagate(worldmap, position)

    def add_tile(self, position: Position | tuple[int, ...], tile: Tile) -> None:
        """
        Fix a cell to one tile and propagate.

        All-or-nothing: the pin is applied to a copy and only committed if
        propagation succeeds.

        Raises:
            Contradiction: The pin is incompatible with the current grid.
            IndexError: Position is outside the worldmap.
        """
        position = as_position(position)
        working = self.worldmap.clone()
        self._pin(working, position, tile)
        self.worldmap = working
        logger.debug(f"Pinned {tuple(position)} to {tile.describe()}")

    def surround_border(self, tile: Tile) -> None:
        """
        Pin every boundary cell to tile (typically an empty/wall tile).

        All-or-nothing, like add_tile.

        Raises:
            Contradiction: Some pin is incompatible with the grid.
        """
        working = self.worldmap.clone()
        border = working.boundary_positions()
        for position in border:
            self._pin(working, position, tile)
        self.worldmap = working
        logger.debug(f"Pinned {len(border)} border cells to {tile.describe()}")

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def domain(self, position: Position | tuple[int, ...]) -> Domain:
        """Copy of the candidates still possible at position."""
        return list(self.worldmap[position])

    def dump_lines(self) -> Iterator[tuple[int, int, int, int, int]]:
        """Yield (x, y, z, angle, index) for every decided cell, x-major."""
        width, height, depth = self.worldmap.size
        for x in range(width):
            for y in range(height):
                for z in range(depth):
                    tile = self.worldmap.decided_tile(Position(x, y, z))
                    if tile is not None:
                        yield (x, y, z, tile.angle, tile.index)

    def dump(self) -> str:
        """Text listing of all decided cells, one line per x column."""
        lines: dict[int, list[str]] = {}
        for x, y, z, angle, index in self.dump_lines():
            lines.setdefault(x, []).append(f"({x}, {y}, {z}, {angle}, {index})")
        return "\n".join(", ".join(entries) for _, entries in sorted(lines.items()))

    def reset(self) -> None:
        """Refill every domain from the catalog and clear counters."""
        self.worldmap.reset_all(self.catalog)
        self.state = SolverState.RUNNING
        self.step_count = 0
        self.backtrack_count = 0
        self.attempt_count = 0
        self.last_collapsed = None
        self._settled = False
