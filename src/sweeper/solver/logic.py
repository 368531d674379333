"""
Logic-based solver for Minesweeper.

Plays a private copy of the board using constraint propagation, to find
out how far the layout can be cleared without guessing.
"""
import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

import numpy as np

from ..cell import MINE
from ..minefield import neighbors
from .base import BaseSolver

logger = logging.getLogger(__name__)

HIDDEN = -1
MARKED = -2

Position = Tuple[int, int]


# ============================================================================
# Constraint Types
# ============================================================================

@dataclass(frozen=True)
class Constraint:
    """
    A constraint representing: sum of cells in 'cells' == mine_count.

    For example, if a revealed "2" has 3 hidden neighbors and 0 marked,
    the constraint is: cells={A, B, C}, mine_count=2
    """

    cells: FrozenSet[Position]
    mine_count: int


# ============================================================================
# Logic Solver with Constraint Propagation
# ============================================================================

class LogicSolver(BaseSolver):
    """
    Solver that clears a snapshot by deduction only.

    Strategy:
        1. Open the first move (any zero cell if none was given)
        2. Build constraints from all revealed numbered cells
        3. Propagate until no constraint yields a certain safe/mine cell
        4. Apply subset reduction for advanced deductions
        5. Fall back to the global mine count when the frontier is stuck

    Results are left in `safe_moves`, `known_mines` and `solved`.
    """

    def __init__(
        self, values: np.ndarray, first_move: Optional[Position] = None
    ) -> None:
        super().__init__(values, first_move)
        self.total_mines = int(np.count_nonzero(values == MINE))
        self.safe_moves: List[Position] = []
        self.known_mines: Set[Position] = set()
        self.solved = False
        self._observation = np.full(values.shape, HIDDEN, dtype=np.int8)

    def start(self) -> None:
        """Play the snapshot until no certain move remains."""
        if self.started:
            return
        self.started = True

        opening = self._opening()
        if opening is None:
            logger.debug("No cell to open, solver idle")
            return
        self._open(*opening)

        while True:
            safe_cells, mine_cells = self._solve_constraints()
            new_mines = mine_cells - self.known_mines
            new_safe = [
                cell for cell in sorted(safe_cells)
                if self._observation[cell] == HIDDEN
            ]
            if not new_safe and not new_mines:
                break
            for row, col in new_mines:
                self._observation[row, col] = MARKED
            self.known_mines |= new_mines
            for row, col in new_safe:
                if self._observation[row, col] == HIDDEN:
                    self.safe_moves.append((row, col))
                    self._open(row, col)

        safe_total = self._values.size - self.total_mines
        opened = int(np.count_nonzero(self._observation >= 0))
        self.solved = opened == safe_total
        logger.debug(
            "Solver opened %d/%d safe cells, %d moves, solved=%s",
            opened, safe_total, len(self.safe_moves), self.solved,
        )

    @property
    def observation(self) -> np.ndarray:
        """Copy of the solver's private view of the board."""
        return self._observation.copy()

    # ========================================================================
    # Simulation
    # ========================================================================

    def _opening(self) -> Optional[Position]:
        """Pick the first cell to open: the first move, else a zero cell."""
        if self.first_move is not None:
            if self._values[self.first_move] == MINE:
                raise ValueError(f"First move {self.first_move} is a mine")
            return self.first_move
        zeros = np.flatnonzero(self._values.ravel() == 0)
        if len(zeros) == 0:
            return None
        return self.action_to_position(int(zeros[0]))

    def _open(self, row: int, col: int) -> None:
        """Reveal a safe cell and cascade through zero cells."""
        queue = deque([(row, col)])
        seen = {(row, col)}
        while queue:
            current = queue.popleft()
            value = int(self._values[current])
            self._observation[current] = value
            if value != 0:
                continue
            for neighbor in neighbors(*current, *self._values.shape):
                if neighbor not in seen and self._observation[neighbor] == HIDDEN:
                    seen.add(neighbor)
                    queue.append(neighbor)

    def _split_neighbors(
        self, row: int, col: int
    ) -> Tuple[Set[Position], int]:
        """Get hidden neighbors and the count of marked neighbors."""
        hidden: Set[Position] = set()
        marked = 0
        for neighbor in neighbors(row, col, *self._values.shape):
            value = self._observation[neighbor]
            if value == HIDDEN:
                hidden.add(neighbor)
            elif value == MARKED:
                marked += 1
        return hidden, marked

    # ========================================================================
    # Deduction
    # ========================================================================

    def _build_constraints(self) -> List[Constraint]:
        """
        Build constraints from revealed numbered cells.

        Each revealed number N with hidden neighbors creates a constraint:
        "exactly (N - marked_count) of these hidden cells are mines"
        """
        constraints = []
        for row, col in zip(*np.nonzero(self._observation > 0)):
            hidden, marked = self._split_neighbors(int(row), int(col))
            if not hidden:
                continue
            remaining = int(self._observation[row, col]) - marked
            if 0 <= remaining <= len(hidden):
                constraints.append(Constraint(frozenset(hidden), remaining))
        return constraints

    def _global_constraint(self) -> Optional[Constraint]:
        """Constraint over every hidden cell from the total mine count."""
        hidden_cells = frozenset(
            (int(row), int(col))
            for row, col in zip(*np.nonzero(self._observation == HIDDEN))
        )
        remaining = self.total_mines - len(self.known_mines)
        if not hidden_cells or not 0 <= remaining <= len(hidden_cells):
            return None
        return Constraint(hidden_cells, remaining)

    def _solve_constraints(self) -> Tuple[Set[Position], Set[Position]]:
        """
        Find definite safe/mine cells from the frontier.

        The global mine count is only brought in when the local
        constraints give nothing.

        Returns:
            Tuple of (safe_cells, mine_cells) sets.
        """
        constraints = self._build_constraints()
        safe_cells, mine_cells = self._propagate(constraints)
        if safe_cells or mine_cells:
            return safe_cells, mine_cells

        global_constraint = self._global_constraint()
        if global_constraint is None:
            return safe_cells, mine_cells
        return self._propagate(constraints + [global_constraint])

    def _propagate(
        self, constraints: List[Constraint]
    ) -> Tuple[Set[Position], Set[Position]]:
        """Apply single-constraint rules and subset reduction to a fixpoint."""
        safe_cells: Set[Position] = set()
        mine_cells: Set[Position] = set()

        changed = True
        while changed:
            changed = False

            reduced = []
            for constraint in constraints:
                remaining_cells = constraint.cells - safe_cells - mine_cells
                remaining_mines = (
                    constraint.mine_count - len(constraint.cells & mine_cells)
                )
                if not remaining_cells:
                    continue
                if remaining_mines == 0:
                    safe_cells |= remaining_cells
                    changed = True
                    continue
                if remaining_mines == len(remaining_cells):
                    mine_cells |= remaining_cells
                    changed = True
                    continue
                reduced.append(Constraint(frozenset(remaining_cells), remaining_mines))
            constraints = reduced

            subset_safe, subset_mines = self._subset_reduction(constraints)
            if subset_safe or subset_mines:
                safe_cells |= subset_safe
                mine_cells |= subset_mines
                changed = True

        return safe_cells, mine_cells

    def _subset_reduction(
        self, constraints: List[Constraint]
    ) -> Tuple[Set[Position], Set[Position]]:
        """
        Apply subset reduction to find additional deductions.

        If constraint A's cells are a strict subset of constraint B's cells,
        the difference (B - A) holds exactly (B.mines - A.mines) mines.
        Differences that settle nothing are dropped rather than kept as
        new constraints.

        Example:
            A: {X, Y} has 1 mine
            B: {X, Y, Z} has 1 mine
            -> Z must be safe
        """
        safe_cells: Set[Position] = set()
        mine_cells: Set[Position] = set()

        # A superset must contain every cell of the subset, so only
        # constraints sharing one cell of it need checking.
        by_cell: Dict[Position, List[Constraint]] = defaultdict(list)
        for constraint in constraints:
            for cell in constraint.cells:
                by_cell[cell].append(constraint)

        for first in constraints:
            anchor = next(iter(first.cells))
            for second in by_cell[anchor]:
                if not first.cells < second.cells:
                    continue
                diff_cells = second.cells - first.cells
                diff_mines = second.mine_count - first.mine_count
                if diff_mines == 0:
                    safe_cells |= diff_cells
                elif diff_mines == len(diff_cells):
                    mine_cells |= diff_cells

        return safe_cells, mine_cells
