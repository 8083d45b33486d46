"""
Board scoring heuristic.

Score of a final board after a full placement sequence:

    base     = 5000 + 200 * lines cleared
    windows  = +50 per fully empty 3x3 window (36 top-left anchors)
    streaks  = +30 per row / column whose longest empty run is >= 5
    empties  = +1 per empty cell

Higher is better.
"""

from dataclasses import dataclass
from typing import Union

import numpy as np

from core.board import BOARD_SIZE, N_CELLS, board_to_mask, count_filled


@dataclass(frozen=True)
class ScoreWeights:
    """Weights of the scoring heuristic."""
    base: int = 5000
    per_line: int = 200
    open_window: int = 50
    streak: int = 30
    streak_length: int = 5
    window_size: int = 3

    def __post_init__(self):
        if not 1 <= self.window_size <= BOARD_SIZE:
            raise ValueError(f"window_size must be in [1, {BOARD_SIZE}], got {self.window_size}")
        if not 1 <= self.streak_length <= BOARD_SIZE:
            raise ValueError(f"streak_length must be in [1, {BOARD_SIZE}], got {self.streak_length}")


DEFAULT_WEIGHTS = ScoreWeights()


def _longest_empty_run(line_bits: int) -> int:
    best = cur = 0
    for i in range(BOARD_SIZE):
        if line_bits >> i & 1:
            cur = 0
        else:
            cur += 1
            best = max(best, cur)
    return best


# Longest empty run for every possible 8-cell line
EMPTY_RUN_TABLE = tuple(_longest_empty_run(bits) for bits in range(1 << BOARD_SIZE))

# Row byte -> the same cells laid down a column (bit c moves to bit c * 8)
_SPREAD_TABLE = tuple(
    sum(((bits >> c) & 1) << (c * BOARD_SIZE) for c in range(BOARD_SIZE))
    for bits in range(1 << BOARD_SIZE)
)

LINE_MASK = (1 << BOARD_SIZE) - 1


def _row_bits(mask: int, row: int) -> int:
    return (mask >> (row * BOARD_SIZE)) & LINE_MASK


def transpose_mask(mask: int) -> int:
    """Mirror a board mask on its main diagonal, so columns become rows."""
    out = 0
    for r in range(BOARD_SIZE):
        out |= _SPREAD_TABLE[_row_bits(mask, r)] << r
    return out


def count_open_windows(mask: int, size: int = 3) -> int:
    """Fully empty size x size windows over all top-left anchors."""
    anchors = BOARD_SIZE - size + 1
    anchor_mask = (1 << anchors) - 1

    # Per row: bit c set iff cells c .. c+size-1 are all empty
    runs = []
    for r in range(BOARD_SIZE):
        free = ~_row_bits(mask, r) & LINE_MASK
        run = free
        for k in range(1, size):
            run &= free >> k
        runs.append(run & anchor_mask)

    total = 0
    for r in range(anchors):
        open_cols = runs[r]
        for k in range(1, size):
            open_cols &= runs[r + k]
        total += bin(open_cols).count('1')
    return total


def count_streak_lines(mask: int, length: int = 5) -> int:
    """Rows plus columns whose longest run of empty cells is at least ``length``."""
    columns = transpose_mask(mask)
    total = 0
    for i in range(BOARD_SIZE):
        if EMPTY_RUN_TABLE[_row_bits(mask, i)] >= length:
            total += 1
        if EMPTY_RUN_TABLE[_row_bits(columns, i)] >= length:
            total += 1
    return total


def board_value(mask: int, weights: ScoreWeights = DEFAULT_WEIGHTS) -> int:
    """Part of the score that depends on the final board alone."""
    value = weights.open_window * count_open_windows(mask, weights.window_size)
    value += weights.streak * count_streak_lines(mask, weights.streak_length)
    return value + (N_CELLS - count_filled(mask))


def score_mask(mask: int, total_cleared: int,
               weights: ScoreWeights = DEFAULT_WEIGHTS) -> int:
    """Score a board given as an integer mask."""
    return weights.base + weights.per_line * total_cleared + board_value(mask, weights)


def score_board(board: Union[np.ndarray, list, int], total_cleared: int,
                weights: ScoreWeights = DEFAULT_WEIGHTS) -> int:
    """
    Compute the strategy score of a final board.

    Args:
        board: 8x8 board array / nested lists, or an integer board mask
        total_cleared: Lines cleared over the whole sequence
        weights: Scoring weights

    Returns:
        Integer score (higher is better)
    """
    mask = board if isinstance(board, int) else board_to_mask(board)
    return score_mask(mask, total_cleared, weights)
