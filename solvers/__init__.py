"""
Placement solver and scoring.

Usage:
    from solvers import solve

    sequence = solve(board, pieces)
    if sequence is None:
        print("No solution found.")
"""
from .scoring import (
    ScoreWeights,
    DEFAULT_WEIGHTS,
    score_board,
    score_mask
)
from .placement_solver import (
    PlacementSolver,
    PlacementStep,
    SolveSequence,
    solve
)
