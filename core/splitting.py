"""Splitting a screenshot into board cells and piece tray slots."""

import math
from typing import List, Tuple

import numpy as np

from .board import BOARD_SIZE
from .image_utils import mean_color_rgb, to_bgr
from .samples import CellSample
from .scan_config import DEFAULT_SCAN_CONFIG, ScanConfig


def sample_cells(board_image, config: ScanConfig = DEFAULT_SCAN_CONFIG) -> List[CellSample]:
    """
    Average the color at the center of every board cell.

    Args:
        board_image: Rectified BGR board image
        config: Scan parameters

    Returns:
        64 CellSample values in row-major order
    """
    image = to_bgr(board_image)
    height, width = image.shape[:2]
    cell_w = width / BOARD_SIZE
    cell_h = height / BOARD_SIZE
    frac = config.cell_sample_fraction
    margin = (1.0 - frac) / 2

    samples = []
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            x0 = int(math.floor(c * cell_w + cell_w * margin))
            y0 = int(math.floor(r * cell_h + cell_h * margin))
            w = max(1, int(math.floor(cell_w * frac)))
            h = max(1, int(math.floor(cell_h * frac)))

            red, green, blue = mean_color_rgb(image[y0:y0 + h, x0:x0 + w])
            samples.append(CellSample(row=r, col=c, r=red, g=green, b=blue))
    return samples


def tray_bounds(image_height: int, board_rect: Tuple[int, int, int, int],
                config: ScanConfig = DEFAULT_SCAN_CONFIG):
    """
    Vertical extent of the piece tray below the board.

    Returns:
        (y_start, y_end), or None when there is no room below the board
    """
    _, by, _, bh = board_rect
    y_start = by + bh + config.slot_gap
    y_end = image_height - int(math.floor(image_height * config.bottom_margin))

    if y_start >= y_end:
        if image_height - y_start > config.min_tray_height:
            y_end = image_height - 5
        else:
            return None
    return y_start, y_end


def split_figure_slots(gray_image, board_rect: Tuple[int, int, int, int],
                       config: ScanConfig = DEFAULT_SCAN_CONFIG
                       ) -> List[Tuple[np.ndarray, int, int]]:
    """
    Cut the tray below the board into equal-width slots.

    The last slot absorbs the remainder of the width.

    Returns:
        List of (slot image, origin_x, origin_y)
    """
    bounds = tray_bounds(gray_image.shape[0], board_rect, config)
    if bounds is None:
        return []

    y_start, y_end = bounds
    tray = gray_image[y_start:y_end]
    width = tray.shape[1]
    slot_w = width // config.slot_count

    slots = []
    for i in range(config.slot_count):
        x0 = i * slot_w
        x1 = width if i == config.slot_count - 1 else x0 + slot_w
        slots.append((tray[:, x0:x1].copy(), x0, y_start))
    return slots
