"""
Base solver interface for the Minesweeper engine.

A solver is built from a snapshot of the grid when the board is activated
and then started. It only ever reads its own snapshot.
"""
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

import numpy as np

from ..cell import Cell


# ============================================================================
# Base Solver Interface
# ============================================================================

class BaseSolver(ABC):
    """
    Abstract base class for solvers attached to a board.

    Subclasses implement start() to run their analysis over the
    snapshot captured in from_grid_snapshot().
    """

    def __init__(
        self, values: np.ndarray, first_move: Optional[Tuple[int, int]] = None
    ) -> None:
        """
        Initialize the solver.

        Args:
            values: 2D array of true cell values (0-8 or MINE).
            first_move: (row, col) the player opened with, if known.
        """
        self._values = values
        self._values.setflags(write=False)
        self.board_height, self.board_width = values.shape
        self.first_move = first_move
        self.started = False

    @classmethod
    def from_grid_snapshot(
        cls,
        cells: Sequence[Sequence[Cell]],
        first_move: Optional[Tuple[int, int]] = None,
    ) -> "BaseSolver":
        """
        Build a solver from the board's cells.

        The values are copied, so later moves on the board are not seen.
        """
        values = np.array(
            [[cell.value for cell in row] for row in cells], dtype=np.int8
        )
        return cls(values, first_move)

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the captured cell values."""
        return self._values

    @abstractmethod
    def start(self) -> None:
        """Run the solver over its snapshot."""

    def action_to_position(self, action: int) -> Tuple[int, int]:
        """Convert flat action index to (row, col) position."""
        row = action // self.board_width
        col = action % self.board_width
        return row, col
