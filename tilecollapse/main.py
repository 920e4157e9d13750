"""tilecollapse - batch command line runner for the tile-collapse solver."""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from .logging_config import setup_logging, get_logger
from .core import CatalogError, Contradiction, SolverConfig, UnsolvableError
from .catalog import load_catalog
from .generation import WFCSolver, Worldmap, find_conflicts

logger = get_logger(__name__)


def render_grid(worldmap: Worldmap, layer: int = 0) -> Table:
    """Build a rich table of decided tile indices for one z layer.

    Undecided cells show their candidate count in brackets.
    """
    table = Table(show_header=False, show_lines=False, box=None, pad_edge=False)
    for _ in range(worldmap.width):
        table.add_column(justify="right")
    for y in range(worldmap.height):
        row = []
        for x in range(worldmap.width):
            domain = worldmap[(x, y, layer)]
            if len(domain) == 1:
                tile = domain[0]
                row.append(f"{tile.index}:{tile.angle // 90}")
            else:
                row.append(f"[dim]\\[{len(domain)}][/dim]")
        table.add_row(*row)
    return table


def solve(args: argparse.Namespace, console: Console) -> int:
    """Load the catalog, pin, solve and print the result."""
    config = SolverConfig.from_env(
        dimensions=tuple(args.dims) if args.dims else None,
        seed=args.seed,
        max_attempts=args.max_attempts,
        stop_policy="first_failure" if args.stop_on_failure else None,
        border_tile=args.border,
    )
    catalog = load_catalog(args.catalog)
    console.print(
        f"Catalog: {len(catalog.base_tiles)} base tiles, {len(catalog)} variants"
    )
    console.print(f"Grid: {'x'.join(str(d) for d in config.dimensions)}, seed {config.seed}")

    solver = WFCSolver.from_config(config, catalog)

    pbar = tqdm(total=config.max_attempts, desc="Solving", unit="attempt", leave=False)

    def update_progress(attempt: int, seed: int) -> None:
        pbar.set_postfix(seed=seed)
        pbar.update(1)

    try:
        worldmap = solver.run_until_success(progress_callback=update_progress)
    finally:
        pbar.close()

    console.print(
        f"Solved with seed {solver.seed} after {solver.attempt_count} attempt(s), "
        f"{solver.backtrack_count} backtrack(s)"
    )
    for layer in range(worldmap.depth):
        if worldmap.depth > 1:
            console.print(f"[bold]z = {layer}[/bold]")
        console.print(render_grid(worldmap, layer))

    if args.dump:
        console.print(solver.dump(), markup=False)

    if args.verify:
        conflicts = find_conflicts(worldmap)
        if conflicts:
            for position, direction in conflicts:
                console.print(f"[red]Conflict at {tuple(position)} facing {direction.name}[/red]")
            return 1
        console.print("[green]All adjacent tiles agree[/green]")

    return 0


def main() -> int:
    """Main entry point for tilecollapse."""
    # Load environment variables first
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="tilecollapse - generate tile grids with Wave Function Collapse",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tilecollapse                          # 8x8 grid from the bundled pipes catalog
  tilecollapse --dims 20 10 --seed 3    # 20x10 grid, starting at seed 3
  tilecollapse --border 1 --verify      # Pin the border to tile 1, check result
  tilecollapse --catalog my_tiles.yaml --max-attempts 50
        """,
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Tile catalog YAML file (default: bundled pipes catalog)",
    )
    parser.add_argument("--dims", nargs="+", type=int, metavar="N", help="Grid size: W [H [D]]")
    parser.add_argument("--seed", type=int, help="Seed of the first attempt")
    parser.add_argument("--max-attempts", type=int, metavar="N", help="Give up after N attempts")
    parser.add_argument(
        "--stop-on-failure",
        action="store_true",
        help="Stop at the first unsolvable attempt instead of reseeding",
    )
    parser.add_argument("--border", type=int, metavar="INDEX", help="Pin border cells to this tile")
    parser.add_argument("--dump", action="store_true", help="Print the decided-cell listing")
    parser.add_argument("--verify", action="store_true", help="Check every adjacent pair agrees")
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=Path("logs"),
        help="Log directory (default: logs/)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )

    args = parser.parse_args()

    console_level = logging.DEBUG if args.debug else logging.WARNING
    setup_logging(args.log_dir, console_level=console_level)
    console = Console()

    try:
        return solve(args, console)
    except (CatalogError, ValidationError, ValueError) as exc:
        logger.error(f"Invalid input: {exc}")
        console.print(f"[red]Invalid input:[/red] {exc}")
        return 2
    except Contradiction as exc:
        logger.error(f"Border pin failed: {exc}")
        console.print(f"[red]Border tile does not fit:[/red] {exc}")
        return 1
    except UnsolvableError as exc:
        logger.error(f"Unsolvable: {exc}")
        console.print(f"[red]Unsolvable:[/red] {exc}")
        return 1
    except KeyboardInterrupt:
        console.print("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
