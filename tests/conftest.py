"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sweeper import Board, BoardConfig, Cell, CellState


# ============================================================================
# Helpers
# ============================================================================

class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible mine layouts."""
    return random.Random(1234)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def default_board(rng: random.Random, clock: FakeClock) -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board(rng=rng, clock=clock)


@pytest.fixture
def empty_board(clock: FakeClock) -> Board:
    """Create a board with no mines for cascade testing."""
    return Board(5, 5, 0, clock=clock)


@pytest.fixture
def corner_board(clock: FakeClock) -> Board:
    """
    A started 3x3 board with a single mine in the bottom-right corner.

        ???
        ???
        ??m
    """
    return Board.from_text(["???", "???", "??m"], clock=clock)


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def blank_cell() -> Cell:
    """Create a blank cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a hidden cell containing a mine."""
    return Cell.from_text("m")


@pytest.fixture
def numbered_cell() -> Cell:
    """Create a discovered cell with adjacent mines."""
    return Cell(CellState.DISCOVERED, 3)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(9, 9, 10)
