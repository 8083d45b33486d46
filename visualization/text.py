"""Plain-text rendering of boards, pieces and suggested moves."""

from typing import Optional

import numpy as np

from solvers.placement_solver import PlacementStep, SolveSequence

FILLED = '#'
EMPTY = '.'
NEW = '@'


def format_grid(grid) -> str:
    grid = np.asarray(grid)
    return "\n".join(
        " ".join(FILLED if v else EMPTY for v in row) for row in grid
    )


def format_board(board) -> str:
    """8x8 board, '#' = filled, '.' = empty."""
    return format_grid(board)


def format_piece(shape) -> str:
    """Inferred piece grid (PieceShape or 2D grid)."""
    return format_grid(getattr(shape, 'grid', shape))


def format_step(step: PlacementStep, number: int) -> str:
    """
    One suggested move: the board before it with the new piece as '@'.
    """
    new_cells = set(step.cells)
    lines = []
    for r, row in enumerate(step.board_before):
        cells = []
        for c, v in enumerate(row):
            if (r, c) in new_cells:
                cells.append(NEW)
            else:
                cells.append(FILLED if v else EMPTY)
        lines.append(" ".join(cells))

    header = f"Step {number}: Place piece {step.piece_index + 1} at row {step.row + 1}, col {step.col + 1}"
    if step.cleared > 0:
        header += f"  (clears {step.cleared} line{'s' if step.cleared != 1 else ''}!)"
    return header + "\n" + "\n".join(lines)


def format_sequence(sequence: Optional[SolveSequence]) -> str:
    if sequence is None:
        return "No solution found."
    blocks = [format_step(step, i + 1) for i, step in enumerate(sequence)]
    blocks.append(f"Score: {sequence.score} ({sequence.total_cleared} lines cleared)")
    return "\n\n".join(blocks)
