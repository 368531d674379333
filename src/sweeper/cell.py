"""
Cell module for Minesweeper game.

Represents individual cells on the game board as a display state
(blank/discovered/flagged/...) plus a value: the adjacent mine count,
or the MINE sentinel.
"""
from enum import Enum
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

MINE = 15
"""Reserved cell value marking a mine, independent of display state."""


class CellState(Enum):
    """Possible visual states of a cell."""

    DISCOVERED = 0
    BLANK = 1
    FLAGGED = 2
    QUESTION = 3
    EXPLODED = 4
    OTHER = 5


HIDDEN_STATES = frozenset(
    (CellState.BLANK, CellState.FLAGGED, CellState.QUESTION)
)

_NEXT_FLAG_STATE = {
    CellState.BLANK: CellState.FLAGGED,
    CellState.FLAGGED: CellState.QUESTION,
    CellState.QUESTION: CellState.BLANK,
}

# Change to the flagged-cell counter when leaving each state
_FLAG_CYCLE_DELTA = {
    CellState.BLANK: 1,
    CellState.FLAGGED: 0,
    CellState.QUESTION: -1,
}


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass(eq=False)
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Attributes:
        state: Current visual state.
        value: Count of mines in neighboring cells (0-8), or MINE.
    """

    state: CellState = CellState.BLANK
    value: int = 0

    @classmethod
    def from_text(cls, char: str) -> "Cell":
        """
        Parse a single fixture character into a cell.

        A digit gives a discovered cell with that value, 'm' a hidden
        mine, '?' a hidden safe cell, and anything else an opaque cell.
        """
        if len(char) != 1:
            raise ValueError(f"Expected a single character, got {char!r}")
        if char in "0123456789":
            return cls(CellState.DISCOVERED, int(char))
        if char == "m":
            return cls(CellState.BLANK, MINE)
        if char == "?":
            return cls(CellState.BLANK, 0)
        return cls(CellState.OTHER, 0)

    # ========================================================================
    # Transitions
    # ========================================================================

    def reveal(self) -> bool:
        """
        Reveal this cell if it is blank.

        Returns:
            True if the cell was revealed and has no adjacent mines,
            meaning the cascade should continue through its neighbors.
        """
        if self.state != CellState.BLANK:
            return False
        self.state = CellState.DISCOVERED
        return self.value == 0

    def cycle_flag(self) -> int:
        """
        Advance the flag marker: blank -> flagged -> question -> blank.

        Returns:
            Change to apply to the board's flagged-cell counter.
        """
        if self.state not in _NEXT_FLAG_STATE:
            return 0
        delta = _FLAG_CYCLE_DELTA[self.state]
        self.state = _NEXT_FLAG_STATE[self.state]
        return delta

    def force_reveal(self) -> None:
        """Show a non-mine cell regardless of its marker."""
        if not self.is_mine:
            self.state = CellState.DISCOVERED

    def explode(self) -> None:
        self.state = CellState.EXPLODED

    def show_mine(self) -> None:
        """Display a mine as a plain mine marker."""
        if self.state != CellState.EXPLODED:
            self.state = CellState.DISCOVERED

    def show_flag(self) -> None:
        self.state = CellState.FLAGGED

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def is_mine(self) -> bool:
        """Check if cell holds a mine."""
        return self.value == MINE

    @property
    def is_hidden(self) -> bool:
        """Check if cell is blank, flagged or question-marked."""
        return self.state in HIDDEN_STATES

    @property
    def is_discovered(self) -> bool:
        return self.state == CellState.DISCOVERED

    @property
    def is_flagged(self) -> bool:
        return self.state == CellState.FLAGGED

    def to_observation(self) -> int:
        """
        Convert cell to an observation value.

        Returns:
            -1: Blank cell
            -2: Flagged cell
            -3: Question-marked cell
            -4: Opaque cell
            0-8: Discovered cell with adjacent mine count
            9: Discovered mine (game over state)
            10: Exploded mine
        """
        if self.state == CellState.BLANK:
            return -1
        if self.state == CellState.FLAGGED:
            return -2
        if self.state == CellState.QUESTION:
            return -3
        if self.state == CellState.EXPLODED:
            return 10
        if self.state == CellState.OTHER:
            return -4
        if self.is_mine:
            return 9
        return self.value

    # ========================================================================
    # Comparison / Display
    # ========================================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        if self.is_hidden and other.is_hidden:
            return True
        if self.is_discovered and other.is_discovered:
            return self.value == other.value
        return False

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        if self.is_discovered and not self.is_mine:
            return str(self.value)
        if self.state == CellState.BLANK:
            return "m" if self.is_mine else "?"
        return "."

    def __repr__(self) -> str:
        return f"Cell({self.value}, {self.state.name})"
