"""
Solvers attached to a board at activation.
"""
from .base import BaseSolver
from .logic import LogicSolver, Constraint

__all__ = [
    "BaseSolver",
    "LogicSolver",
    "Constraint",
]
