"""Shared test fixtures for tilecollapse."""

import pytest

from tilecollapse.core import Tile
from tilecollapse.catalog import TileCatalog


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped by default, run with --run-slow)")


def pytest_addoption(parser):
    """Add --run-slow option to pytest."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (skipped by default)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="Slow test (use --run-slow to run)")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


# Pipe tiles using labels {0, 1}: 0 is empty ground, 1 a pipe opening.
EMPTY = Tile(index=1, labels=(0, 0, 0, 0))
T_JUNCTION = Tile(index=0, labels=(1, 1, 0, 1))
STRAIGHT = Tile(index=2, labels=(0, 1, 0, 1))
CROSS = Tile(index=3, labels=(1, 1, 1, 1))
BEND = Tile(index=4, labels=(0, 0, 1, 1))


@pytest.fixture
def empty_tile() -> Tile:
    return EMPTY


@pytest.fixture
def pipe_catalog() -> TileCatalog:
    """Small pipe catalog: every variant fits next to something."""
    return TileCatalog([T_JUNCTION, EMPTY, STRAIGHT, CROSS, BEND])


@pytest.fixture
def line_catalog() -> TileCatalog:
    """A horizontal "line" tile and an "empty" tile, neither rotatable."""
    return TileCatalog([
        Tile(index=10, labels=(0, 1, 0, 1), rotatable=False),
        Tile(index=11, labels=(0, 0, 0, 0), rotatable=False),
    ])


@pytest.fixture
def incompatible_catalog() -> TileCatalog:
    """Two fixed tiles that fit neither each other nor themselves."""
    return TileCatalog([
        Tile(index=20, labels=(1, 2, 3, 4), rotatable=False),
        Tile(index=21, labels=(5, 6, 7, 8), rotatable=False),
    ])
