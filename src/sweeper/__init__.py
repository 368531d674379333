"""
Minesweeper game engine.

Provides core game logic including board management, mine placement and
cell state.
"""
from .cell import Cell, CellState, MINE
from .errors import InvalidCoordinate
from .timer import Timer
from .board import Board, BoardConfig, GameState, BEGINNER, INTERMEDIATE, EXPERT
from .solver import BaseSolver, LogicSolver

__all__ = [
    "Cell",
    "CellState",
    "MINE",
    "InvalidCoordinate",
    "Timer",
    "Board",
    "BoardConfig",
    "GameState",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "BaseSolver",
    "LogicSolver",
]
