"""
Errors raised by the Minesweeper engine.
"""


class InvalidCoordinate(IndexError):
    """Raised when a move targets a cell outside the board."""

    def __init__(self, x: int, y: int, rows: int, cols: int) -> None:
        self.x = x
        self.y = y
        self.rows = rows
        self.cols = cols
        super().__init__(
            f"Coordinate ({x}, {y}) outside {rows}x{cols} board"
        )
