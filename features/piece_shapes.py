"""
Piece shape inference from slot blobs.

Each inventory slot yields a set of foreground blobs (one per detected block
or fused run of blocks) and a thresholded bitmap. The shape grid is found by:

1. Taking the union box of the significant blobs as the piece footprint
2. Estimating the size of one block from the smallest blob dimension
3. Dividing the footprint into rows x cols cells of that size
4. Sampling the center of each cell in the bitmap

The thresholds were tuned on phone screenshots of one resolution; they live
in ShapeConfig so they can be recalibrated for other capture sizes.
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

from core.board import Piece


@dataclass(frozen=True)
class Blob:
    """Bounding box and pixel area of one foreground contour."""
    x: int
    y: int
    width: int
    height: int
    area: float


@dataclass
class SlotCapture:
    """
    Everything the inferencer needs about one inventory slot.

    Attributes:
        blobs: Foreground blobs, coordinates relative to the slot
        bitmap: Thresholded slot image (non-zero = foreground)
        width, height: Slot size in pixels
        origin_x, origin_y: Slot position in the source image
    """
    blobs: List[Blob]
    bitmap: np.ndarray
    width: int
    height: int
    origin_x: int = 0
    origin_y: int = 0


@dataclass
class ShapeConfig:
    """Calibration constants of the shape inferencer (pixels unless noted)."""
    footprint_min_area: float = 40      # blobs counted in the footprint box
    unit_min_area: float = 20           # blobs counted for the unit estimate
    min_unit_dim: int = 12              # ignore blob sides at or below this
    fused_unit_dim: int = 80            # smallest side above this is a fused run
    nominal_unit: float = 50            # expected block size
    max_cells: int = 5                  # largest piece side, in cells
    sample_fraction: float = 0.7        # central part of each cell that is sampled
    fill_threshold: float = 0.2         # foreground fraction for an occupied cell

    def __post_init__(self):
        if not 0 < self.sample_fraction <= 1:
            raise ValueError(f"sample_fraction must be in (0, 1], got {self.sample_fraction}")
        if not 0 <= self.fill_threshold < 1:
            raise ValueError(f"fill_threshold must be in [0, 1), got {self.fill_threshold}")
        if self.nominal_unit <= 0:
            raise ValueError(f"nominal_unit must be positive, got {self.nominal_unit}")
        if self.max_cells < 1:
            raise ValueError(f"max_cells must be >= 1, got {self.max_cells}")


DEFAULT_SHAPE_CONFIG = ShapeConfig()


@dataclass
class PieceShape:
    """
    Inferred piece plus where it sits in the source image.

    cell_size and origin are only used to draw crops of the piece.
    """
    grid: np.ndarray
    cell_size: float
    origin_x: float
    origin_y: float
    piece: Piece = field(init=False)

    def __post_init__(self):
        self.grid = np.asarray(self.grid, dtype=bool)
        self.piece = Piece.from_grid(self.grid)

    @property
    def rows(self) -> int:
        return self.grid.shape[0]

    @property
    def cols(self) -> int:
        return self.grid.shape[1]


def round_half_up(value: float) -> int:
    """Round with .5 going up (Python's round() goes to even)."""
    return int(math.floor(value + 0.5))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def footprint_box(blobs: Sequence[Blob], min_area: float) -> Tuple[int, int, int, int]:
    """
    Union bounding box of blobs with area above ``min_area``.

    Returns:
        (min_x, min_y, max_x, max_y)

    Raises:
        ValueError: If no blob is above ``min_area``
    """
    big = [b for b in blobs if b.area > min_area]
    min_x = min(b.x for b in big)
    min_y = min(b.y for b in big)
    max_x = max(b.x + b.width for b in big)
    max_y = max(b.y + b.height for b in big)
    return min_x, min_y, max_x, max_y


def estimate_unit_size(blobs: Sequence[Blob],
                       config: ShapeConfig = DEFAULT_SHAPE_CONFIG) -> float:
    """
    Estimate the pixel size of one block.

    The smallest blob side is taken as the block size. A smallest side above
    ``fused_unit_dim`` means no single block was separated, so it is split
    into whole multiples of the nominal block size.
    """
    dims = []
    for b in blobs:
        if b.area > config.unit_min_area:
            dims.extend((b.width, b.height))

    candidates = sorted(d for d in dims if d > config.min_unit_dim)
    if not candidates:
        return float(config.nominal_unit)

    smallest = candidates[0]
    if smallest > config.fused_unit_dim:
        return smallest / max(1, round_half_up(smallest / config.nominal_unit))
    return float(smallest)


def sample_grid(bitmap: np.ndarray, box: Tuple[int, int, int, int], rows: int, cols: int,
                config: ShapeConfig = DEFAULT_SHAPE_CONFIG) -> np.ndarray:
    """Mark each footprint cell whose central sample is mostly foreground."""
    min_x, min_y, max_x, max_y = box
    cell_w = (max_x - min_x) / cols
    cell_h = (max_y - min_y) / rows
    margin = (1.0 - config.sample_fraction) / 2

    grid = np.zeros((rows, cols), dtype=bool)
    for r in range(rows):
        for c in range(cols):
            x0 = int(math.floor(min_x + c * cell_w + cell_w * margin))
            y0 = int(math.floor(min_y + r * cell_h + cell_h * margin))
            sw = int(math.floor(cell_w * config.sample_fraction))
            sh = int(math.floor(cell_h * config.sample_fraction))
            if sw <= 0 or sh <= 0:
                continue

            region = bitmap[y0:y0 + sh, x0:x0 + sw]
            filled = np.count_nonzero(region)
            if filled / (sw * sh) > config.fill_threshold:
                grid[r, c] = True
    return grid


def infer_piece_shape(capture: SlotCapture,
                      config: ShapeConfig = DEFAULT_SHAPE_CONFIG) -> PieceShape:
    """
    Infer the occupancy grid of the piece in one inventory slot.

    A slot without significant blobs yields a single filled cell centered
    in the slot, so every slot produces exactly one shape.
    """
    if not any(b.area > config.footprint_min_area for b in capture.blobs):
        size = config.nominal_unit
        return PieceShape(
            grid=np.ones((1, 1), dtype=bool),
            cell_size=float(size),
            origin_x=capture.origin_x + (capture.width - size) // 2,
            origin_y=capture.origin_y + (capture.height - size) // 2,
        )

    box = footprint_box(capture.blobs, config.footprint_min_area)
    min_x, min_y, max_x, max_y = box
    fig_w = max_x - min_x
    fig_h = max_y - min_y

    unit = estimate_unit_size(capture.blobs, config)
    cols = _clamp(round_half_up(fig_w / unit), 1, config.max_cells)
    rows = _clamp(round_half_up(fig_h / unit), 1, config.max_cells)

    grid = sample_grid(capture.bitmap, box, rows, cols, config)
    return PieceShape(
        grid=grid,
        cell_size=(fig_w / cols + fig_h / rows) / 2,
        origin_x=capture.origin_x + min_x,
        origin_y=capture.origin_y + min_y,
    )


def infer_piece_shapes(captures: Sequence[SlotCapture],
                       config: ShapeConfig = DEFAULT_SHAPE_CONFIG) -> List[PieceShape]:
    """Infer one shape per slot, in slot order."""
    return [infer_piece_shape(capture, config) for capture in captures]
