"""
Placement Solver - Exhaustive Backtracking Search

Finds the placement sequence for the current piece inventory that maximizes
the board score (see scoring.py).

Algorithm:
- Drop pieces without occupied cells
- Enumerate piece orderings lazily, in lexicographic order
- Depth-first search over anchors in row-major order, clearing full
  rows/columns after every placement
- Keep the first sequence with the strictly highest final score

Board states are integer masks, so every branch owns its own value and
backtracking needs no undo. The board-only part of the score is cached per
final mask, and an ordering whose sequence of shapes repeats an earlier one
is skipped since it reaches exactly the same final boards.

Cost grows as N! * 64^N; with 3 pieces this is about 10^6 leaves.
"""

import time
from dataclasses import dataclass, field
from itertools import permutations
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from core.board import (
    BOARD_SIZE,
    Offset,
    Piece,
    apply_placement,
    board_to_mask,
    mask_to_board,
)
from .scoring import DEFAULT_WEIGHTS, ScoreWeights, board_value


@dataclass(frozen=True)
class PlacementStep:
    """One placement decision, with the board as it was before it."""
    piece_index: int
    row: int
    col: int
    cleared: int
    board_before: np.ndarray = field(compare=False, repr=False)
    offsets: Tuple[Offset, ...] = ()

    @property
    def cells(self) -> Tuple[Offset, ...]:
        """Absolute board cells covered by the piece."""
        return tuple((self.row + dr, self.col + dc) for dr, dc in self.offsets)


@dataclass(frozen=True)
class SolveSequence:
    """Best complete assignment of pieces to placements."""
    steps: Tuple[PlacementStep, ...]
    score: int
    total_cleared: int
    final_board: np.ndarray = field(compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[PlacementStep]:
        return iter(self.steps)


def as_piece(piece) -> Piece:
    """Accept a Piece or a 2D occupancy grid."""
    if isinstance(piece, Piece):
        return piece
    return Piece.from_grid(piece)


def iter_orderings(indices: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    """Lazy, lexicographically ordered permutations of sorted indices."""
    return permutations(sorted(indices))


def enumerate_placements(piece: Piece) -> List[Tuple[int, int, int]]:
    """
    All in-bounds anchors of a piece on an empty board.

    Returns:
        List of (row, col, placement mask) in row-major anchor order
    """
    placements = []
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            placed = piece.placement_mask(row, col)
            if placed is not None:
                placements.append((row, col, placed))
    return placements


class PlacementSolver:
    """
    Exhaustive search over orderings and anchors.

    One instance handles one solve; it keeps the best sequence found and
    a node counter for progress reports.
    """

    def __init__(self, pieces: Sequence, weights: ScoreWeights = DEFAULT_WEIGHTS):
        self.weights = weights
        self.pieces = {idx: as_piece(p) for idx, p in enumerate(pieces)}
        self.valid = [idx for idx, p in self.pieces.items() if not p.is_empty]
        self.placements = {idx: enumerate_placements(self.pieces[idx]) for idx in self.valid}

        self.nodes = 0
        self.orderings = 0
        self.best_score = float('-inf')
        self.best_path: Optional[List[Tuple[int, int, int, int, int]]] = None
        self.best_mask = 0
        self.best_cleared = 0
        self._base = weights.base
        self._values = {}

    def _board_value(self, mask: int) -> int:
        value = self._values.get(mask)
        if value is None:
            value = board_value(mask, self.weights)
            self._values[mask] = value
        return value

    def _search(self, mask: int, order: Tuple[int, ...], depth: int,
                path: list, total_cleared: int) -> None:
        self.nodes += 1
        idx = order[depth]
        last = depth == len(order) - 1

        for row, col, placed in self.placements[idx]:
            if mask & placed:
                continue
            next_mask, cleared = apply_placement(mask, placed)
            path.append((idx, row, col, cleared, mask))

            if last:
                self.nodes += 1
                lines = total_cleared + cleared
                score = self._base + self.weights.per_line * lines + self._board_value(next_mask)
                if score > self.best_score:
                    self.best_score = score
                    self.best_path = list(path)
                    self.best_mask = next_mask
                    self.best_cleared = lines
            else:
                self._search(next_mask, order, depth + 1, path, total_cleared + cleared)
            path.pop()

    def run(self, board) -> Optional[SolveSequence]:
        """Search every ordering from the given board."""
        if not self.valid:
            return None

        start = board_to_mask(board)
        seen_shapes = set()
        for order in iter_orderings(self.valid):
            # Same shapes in the same order cannot beat the earlier ordering
            shapes = tuple(self.pieces[idx].offsets for idx in order)
            if shapes in seen_shapes:
                continue
            seen_shapes.add(shapes)

            self.orderings += 1
            self._search(start, order, 0, [], 0)

        if self.best_path is None:
            return None

        steps = tuple(
            PlacementStep(
                piece_index=idx,
                row=row,
                col=col,
                cleared=cleared,
                board_before=mask_to_board(before),
                offsets=self.pieces[idx].offsets,
            )
            for idx, row, col, cleared, before in self.best_path
        )
        return SolveSequence(
            steps=steps,
            score=int(self.best_score),
            total_cleared=self.best_cleared,
            final_board=mask_to_board(self.best_mask),
        )


def solve(board, pieces: Sequence, weights: ScoreWeights = DEFAULT_WEIGHTS,
          verbose: bool = False) -> Optional[SolveSequence]:
    """
    Find the best placement sequence for a board and piece inventory.

    Args:
        board: 8x8 board (array or nested lists), 1 = filled
        pieces: Piece objects or 2D occupancy grids, one per inventory slot
        weights: Scoring weights
        verbose: Print search statistics

    Returns:
        Best SolveSequence, or None when no complete legal sequence exists
        (including when every piece is empty)
    """
    solver = PlacementSolver(pieces, weights)

    if verbose:
        print("=" * 50)
        print("Placement Solver (exhaustive)")
        print("=" * 50)
        print(f"Pieces: {len(solver.valid)} of {len(solver.pieces)} non-empty")

    t0 = time.time()
    result = solver.run(board)

    if verbose:
        print(f"  Orderings searched: {solver.orderings}")
        print(f"  Nodes visited: {solver.nodes} in {time.time() - t0:.2f}s")
        if result is None:
            print("  No solution found")
        else:
            print(f"  Best score: {result.score} ({result.total_cleared} lines cleared)")

    return result
