"""
Board module for Minesweeper game.

Implements the game board with lazy mine placement, the reveal cascade,
flag cycling, and game state management.
"""
import logging
import random
import time
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Callable, Iterable, List, Optional, Set, Tuple, Type

import numpy as np

from .cell import Cell, CellState
from .errors import InvalidCoordinate
from .minefield import generate_mines, neighbors, place_mines
from .solver import BaseSolver, LogicSolver
from .timer import Timer

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


# ============================================================================
# Constants
# ============================================================================

class GameState(Enum):
    """Possible states of the game."""

    IN_PROGRESS = auto()
    WON = auto()
    LOST = auto()


@dataclass
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        rows: Number of rows.
        cols: Number of columns.
        mines: Total mines to place.
    """

    rows: int = 9
    cols: int = 9
    mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.rows < 1 or self.cols < 1:
            raise ValueError("Board dimensions must be positive")
        if self.mines < 0:
            raise ValueError("Number of mines cannot be negative")
        max_mines = self.rows * self.cols - 1
        if self.mines > max_mines:
            raise ValueError(f"Too many mines (max {max_mines})")


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10)
INTERMEDIATE = BoardConfig(16, 16, 40)
EXPERT = BoardConfig(16, 30, 99)


# ============================================================================
# Board Class
# ============================================================================

class Board:
    """
    Minesweeper game board.

    Owns the grid of cells and every counter. Mines are placed on the
    first click or flag so that the first move is always safe.

    Not reentrant: callers must feed moves one at a time.
    """

    def __init__(
        self,
        rows: int = 9,
        cols: int = 9,
        mines: int = 10,
        solver_factory: Optional[Type[BaseSolver]] = LogicSolver,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize an all-blank board with no mines placed.

        Args:
            rows: Number of rows.
            cols: Number of columns.
            mines: Number of mines.
            solver_factory: Solver class built on activation, or None.
            rng: Random source for mine placement (default: `random`).
            clock: Time source for the game timer.
        """
        self.config = BoardConfig(rows, cols, mines)
        self._grid: List[List[Cell]] = [
            [Cell() for _ in range(cols)] for _ in range(rows)
        ]
        self._game_state = GameState.IN_PROGRESS
        self._started = False
        self._discovered = 0
        self._flagged = 0
        self._timer = Timer(clock)
        self._display_time = 0.0
        self._solver_factory = solver_factory
        self._solver: Optional[BaseSolver] = None
        self._rng = rng

    @classmethod
    def from_config(cls, config: BoardConfig, **kwargs) -> "Board":
        """Create a board from a configuration or preset."""
        return cls(config.rows, config.cols, config.mines, **kwargs)

    @classmethod
    def from_text(cls, lines: Iterable[str], **kwargs) -> "Board":
        """
        Build an already-started board from fixture rows.

        Each character is parsed with Cell.from_text. Adjacency values of
        hidden cells are recomputed from the 'm' cells; discovered digits
        count toward the discovered-cell counter.
        """
        cells = [[Cell.from_text(char) for char in line] for line in lines]
        if not cells or any(len(row) != len(cells[0]) for row in cells):
            raise ValueError("Fixture rows must be non-empty and equal length")
        mines = [
            (row, col)
            for row, line in enumerate(cells)
            for col, cell in enumerate(line)
            if cell.is_mine
        ]
        board = cls(len(cells), len(cells[0]), len(mines), **kwargs)
        for row, col in mines:
            for neighbor_row, neighbor_col in board._neighbors(row, col):
                neighbor = cells[neighbor_row][neighbor_col]
                if neighbor.state == CellState.BLANK and not neighbor.is_mine:
                    neighbor.value += 1
        board._grid = cells
        board._discovered = sum(
            cell.is_discovered for line in cells for cell in line
        )
        board._started = True
        board._timer.start()
        return board

    # ========================================================================
    # Activation (Low-level)
    # ========================================================================

    def _activate(self, x: int, y: int) -> None:
        """Place mines around the first move, start the timer and solver."""
        if self._started:
            return
        logger.debug("Activating board at (%d, %d)", x, y)
        positions = generate_mines(
            x, y, self.rows, self.cols, self.mines, rng=self._rng
        )
        place_mines(self._grid, positions)

        if self._solver_factory is not None:
            self._solver = self._solver_factory.from_grid_snapshot(
                self._grid, first_move=(x, y)
            )
            self._solver.start()
        self._started = True
        self._timer.start()

    def _check_position(self, x: int, y: int) -> None:
        if not (0 <= x < self.rows and 0 <= y < self.cols):
            raise InvalidCoordinate(x, y, self.rows, self.cols)

    def _neighbors(self, x: int, y: int) -> List[Position]:
        return list(neighbors(x, y, self.rows, self.cols))

    def _finish(self, state: GameState) -> None:
        """Enter a terminal state and freeze the timer."""
        self._game_state = state
        self._timer.stop()
        logger.debug("Game %s after %.2fs", state.name, self._timer.elapsed())

    # ========================================================================
    # Reveal Engine (Mid-level)
    # ========================================================================

    def _chord_seeds(self, x: int, y: int) -> List[Position]:
        """Blank neighbors of a discovered cell whose flags match its value."""
        around = self._neighbors(x, y)
        flags = sum(self._grid[row][col].is_flagged for row, col in around)
        if flags != self._grid[x][y].value:
            return []
        return [
            (row, col) for row, col in around
            if self._grid[row][col].state == CellState.BLANK
        ]

    def _cascade(self, seeds: List[Position]) -> None:
        """
        Reveal seeds breadth-first, spreading through zero cells.

        Stops at the first mine, which loses the game.
        """
        queue = deque(seeds)
        visited: Set[Position] = set(seeds)
        revealed = 0
        while queue:
            row, col = queue.popleft()
            cell = self._grid[row][col]
            if cell.is_mine:
                cell.explode()
                self._finish(GameState.LOST)
                return
            was_blank = cell.state == CellState.BLANK
            spread = cell.reveal()
            if was_blank:
                self._discovered += 1
                revealed += 1
            if spread:
                for neighbor in self._neighbors(row, col):
                    neighbor_row, neighbor_col = neighbor
                    if (
                        neighbor not in visited
                        and self._grid[neighbor_row][neighbor_col].state == CellState.BLANK
                    ):
                        visited.add(neighbor)
                        queue.append(neighbor)
        logger.debug("Cascade revealed %d cells", revealed)
        self._check_win_condition()

    def _check_win_condition(self) -> None:
        """Check if all non-mine cells are discovered."""
        if self._discovered + self.mines == self.rows * self.cols:
            self._finish(GameState.WON)

    # ========================================================================
    # Game Actions (High-level)
    # ========================================================================

    def click(self, x: int, y: int) -> None:
        """
        Click a cell.

        On first move, places mines avoiding the 3x3 area around it. A
        blank cell is revealed; a discovered cell with as many flagged
        neighbors as its value reveals its blank neighbors (chord).

        Args:
            x: Row index.
            y: Column index.

        Raises:
            InvalidCoordinate: If (x, y) is outside the board.
        """
        self._check_position(x, y)
        if self._game_state != GameState.IN_PROGRESS:
            return
        self._activate(x, y)

        cell = self._grid[x][y]
        if cell.state == CellState.BLANK:
            self._cascade([(x, y)])
        elif cell.state == CellState.DISCOVERED:
            seeds = self._chord_seeds(x, y)
            if seeds:
                self._cascade(seeds)

    def flag(self, x: int, y: int) -> None:
        """
        Cycle the flag marker on a cell (blank, flagged, question).

        Flagging a discovered cell acts as a chord click instead.

        Raises:
            InvalidCoordinate: If (x, y) is outside the board.
        """
        self._check_position(x, y)
        if self._game_state != GameState.IN_PROGRESS:
            return
        if self._grid[x][y].state == CellState.DISCOVERED:
            self.click(x, y)
            return
        self._activate(x, y)
        self._flagged += self._grid[x][y].cycle_flag()

    def update(self) -> None:
        """
        Reconcile the board for display; safe to call every frame.

        While in progress only the cached time is refreshed. After a win
        every mine shows a flag; after a loss every other mine is shown
        and the exploded one keeps its marker. Non-mine cells are
        revealed in both cases.
        """
        self._display_time = self._timer.elapsed()
        if self._game_state == GameState.IN_PROGRESS:
            return
        won = self._game_state == GameState.WON
        for line in self._grid:
            for cell in line:
                if not cell.is_mine:
                    cell.force_reveal()
                elif won:
                    cell.show_flag()
                else:
                    cell.show_mine()

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def rows(self) -> int:
        return self.config.rows

    @property
    def cols(self) -> int:
        return self.config.cols

    @property
    def mines(self) -> int:
        return self.config.mines

    @property
    def game_state(self) -> GameState:
        """Get current game state."""
        return self._game_state

    @property
    def started(self) -> bool:
        """Check if mines have been placed."""
        return self._started

    @property
    def is_playing(self) -> bool:
        return self._game_state == GameState.IN_PROGRESS

    @property
    def is_won(self) -> bool:
        return self._game_state == GameState.WON

    @property
    def is_lost(self) -> bool:
        return self._game_state == GameState.LOST

    @property
    def solver(self) -> Optional[BaseSolver]:
        """Solver built on activation, if any."""
        return self._solver

    def board_cells(self) -> Tuple[Tuple[Cell, ...], ...]:
        """
        Read-only view of the grid for rendering.

        The cells are copies; use get_cell() for the live cell.
        """
        return tuple(tuple(replace(cell) for cell in line) for line in self._grid)

    def get_cell(self, x: int, y: int) -> Cell:
        """Get cell at position."""
        self._check_position(x, y)
        return self._grid[x][y]

    def flagged_cells(self) -> int:
        """Signed count of flag actions; not clamped to the mine count."""
        return self._flagged

    def discovered_cells(self) -> int:
        return self._discovered

    def display_time(self) -> float:
        """
        Get elapsed seconds for display.

        Live while in progress, frozen once the game has ended.
        """
        return self._timer.elapsed()

    @property
    def cached_time(self) -> float:
        """Elapsed seconds captured by the last update()."""
        return self._display_time

    def get_observation(self) -> np.ndarray:
        """
        Get board state as numpy array.

        Returns:
            2D int8 array of Cell.to_observation values.
        """
        obs = np.zeros((self.rows, self.cols), dtype=np.int8)
        for row in range(self.rows):
            for col in range(self.cols):
                obs[row, col] = self._grid[row][col].to_observation()
        return obs

    def __str__(self) -> str:
        return "\n".join("".join(str(cell) for cell in line) for line in self._grid)
