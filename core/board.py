"""
Board model for the 8x8 block puzzle.

A board is exposed as an 8x8 uint8 numpy array (1 = filled, 0 = empty).
The solver works on the equivalent 64-bit integer mask, bit ``row * 8 + col``,
so every search branch holds its own immutable value.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np

BOARD_SIZE = 8
N_CELLS = BOARD_SIZE * BOARD_SIZE
FULL_MASK = (1 << N_CELLS) - 1

Offset = Tuple[int, int]


def cell_bit(row: int, col: int) -> int:
    """Bit of a single cell in the board mask."""
    return 1 << (row * BOARD_SIZE + col)


ROW_MASKS = tuple(
    sum(cell_bit(r, c) for c in range(BOARD_SIZE)) for r in range(BOARD_SIZE)
)
COL_MASKS = tuple(
    sum(cell_bit(r, c) for r in range(BOARD_SIZE)) for c in range(BOARD_SIZE)
)


@dataclass(frozen=True)
class Piece:
    """
    A movable shape as normalized (row, col) offsets.

    Offsets are deduplicated, sorted row-major and shifted so the smallest
    row offset and the smallest column offset are both 0.
    """
    offsets: Tuple[Offset, ...] = ()

    def __post_init__(self):
        cells = sorted(set((int(r), int(c)) for r, c in self.offsets))
        if cells:
            min_r = min(r for r, _ in cells)
            min_c = min(c for _, c in cells)
            cells = [(r - min_r, c - min_c) for r, c in cells]
        object.__setattr__(self, 'offsets', tuple(cells))

    @classmethod
    def from_offsets(cls, offsets: Iterable[Offset]) -> 'Piece':
        return cls(offsets=tuple(offsets))

    @classmethod
    def from_grid(cls, grid) -> 'Piece':
        """Build a piece from a 2D occupancy grid (truthy = occupied)."""
        grid = np.asarray(grid)
        if grid.ndim != 2:
            raise ValueError(f"Piece grid must be 2D, got shape {grid.shape}")
        rows, cols = np.nonzero(grid)
        return cls.from_offsets(zip(rows.tolist(), cols.tolist()))

    @property
    def is_empty(self) -> bool:
        return not self.offsets

    @property
    def height(self) -> int:
        return max((r for r, _ in self.offsets), default=-1) + 1

    @property
    def width(self) -> int:
        return max((c for _, c in self.offsets), default=-1) + 1

    def __len__(self) -> int:
        return len(self.offsets)

    def placement_mask(self, row: int, col: int) -> Optional[int]:
        """Mask covered when anchored at (row, col), or None if out of bounds."""
        mask = 0
        for dr, dc in self.offsets:
            r, c = row + dr, col + dc
            if not (0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE):
                return None
            mask |= cell_bit(r, c)
        return mask


# =============================================================================
# ARRAY <-> MASK
# =============================================================================

def empty_board() -> np.ndarray:
    return np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.uint8)


def as_board(board) -> np.ndarray:
    """
    Validate and copy an 8x8 binary grid into a uint8 board array.

    Raises:
        ValueError: If the grid is not 8x8 or holds values other than 0/1
    """
    arr = np.asarray(board)
    if arr.shape != (BOARD_SIZE, BOARD_SIZE):
        raise ValueError(f"Board must be {BOARD_SIZE}x{BOARD_SIZE}, got shape {arr.shape}")
    if arr.dtype != np.bool_ and not np.isin(arr, (0, 1)).all():
        raise ValueError("Board cells must be 0 or 1")
    return arr.astype(np.uint8)


def board_to_mask(board) -> int:
    """Convert an 8x8 board (array or nested lists) into its integer mask."""
    flat = as_board(board).ravel()
    mask = 0
    for idx in np.flatnonzero(flat):
        mask |= 1 << int(idx)
    return mask


def mask_to_board(mask: int) -> np.ndarray:
    bits = [(mask >> i) & 1 for i in range(N_CELLS)]
    return np.array(bits, dtype=np.uint8).reshape(BOARD_SIZE, BOARD_SIZE)


def count_filled(mask: int) -> int:
    return bin(mask & FULL_MASK).count('1')


# =============================================================================
# LINE CLEARING
# =============================================================================

def full_lines(mask: int) -> Tuple[List[int], List[int]]:
    """Indices of the fully occupied rows and columns."""
    rows = [i for i, m in enumerate(ROW_MASKS) if mask & m == m]
    cols = [i for i, m in enumerate(COL_MASKS) if mask & m == m]
    return rows, cols


def clear_full_lines(mask: int) -> Tuple[int, int]:
    """
    Clear every full row and column at once.

    Rows and columns are detected on the same board before anything is
    cleared, so a cell on a full row and a full column is cleared once
    while both lines are counted.

    Returns:
        (cleared mask, number of lines cleared)
    """
    rows, cols = full_lines(mask)
    cleared = 0
    for r in rows:
        cleared |= ROW_MASKS[r]
    for c in cols:
        cleared |= COL_MASKS[c]
    return mask & ~cleared, len(rows) + len(cols)


# =============================================================================
# PLACEMENT
# =============================================================================

def can_place(board, piece: Piece, row: int, col: int) -> bool:
    """True iff every piece cell lands in bounds on an empty cell."""
    mask = board if isinstance(board, int) else board_to_mask(board)
    placed = piece.placement_mask(row, col)
    return placed is not None and not (mask & placed)


def apply_placement(mask: int, placed: int) -> Tuple[int, int]:
    """Fill a legal placement mask and clear the resulting full lines."""
    return clear_full_lines(mask | placed)


def place_piece(board, piece: Piece, row: int, col: int) -> Tuple[np.ndarray, int]:
    """
    Place a piece on a copy of the board and clear full lines.

    Args:
        board: 8x8 board array
        piece: Piece to place
        row, col: Anchor of the piece's (0, 0) offset

    Returns:
        (new board array, lines cleared)

    Raises:
        ValueError: If the placement is out of bounds or overlaps filled cells
    """
    mask = board_to_mask(board)
    placed = piece.placement_mask(row, col)
    if placed is None or mask & placed:
        raise ValueError(f"Illegal placement at ({row}, {col})")
    new_mask, cleared = apply_placement(mask, placed)
    return mask_to_board(new_mask), cleared
