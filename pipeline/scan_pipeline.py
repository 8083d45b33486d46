"""
Scan Pipeline

Turns a puzzle screenshot into solver inputs:
1. Find and rectify the 8x8 board
2. Sample every cell color → classify into filled / empty
3. Split the tray below the board into slots → infer one piece per slot

When no board outline is found, the whole image is classified as the
board and no pieces are reported.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np

from core.grid_detection import detect_board
from core.image_utils import load_image_bgr, to_bgr, to_grayscale
from core.samples import CellSample
from core.scan_config import DEFAULT_SCAN_CONFIG, ScanConfig
from core.splitting import sample_cells, split_figure_slots
from features.blobs import detect_slot_blobs
from features.cell_classifier import DEFAULT_CLASSIFIER_CONFIG, ClassifierConfig, classify_board
from features.piece_shapes import DEFAULT_SHAPE_CONFIG, PieceShape, ShapeConfig, infer_piece_shapes


@dataclass
class ScanResult:
    """
    Everything extracted from one screenshot.

    Attributes:
        board: 8x8 uint8 occupancy (1 = filled)
        samples: The 64 cell samples the board was classified from
        shapes: One inferred shape per tray slot
        board_found: False when the board outline was not detected
        board_rect: Board bounding rect (x, y, w, h) in the screenshot
    """
    board: np.ndarray
    samples: List[CellSample]
    shapes: List[PieceShape] = field(default_factory=list)
    board_found: bool = True
    board_rect: Optional[Tuple[int, int, int, int]] = None

    @property
    def pieces(self):
        return [shape.piece for shape in self.shapes]


def scan_image(image: Union[str, Path, np.ndarray],
               scan_config: ScanConfig = DEFAULT_SCAN_CONFIG,
               classifier_config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG,
               shape_config: ShapeConfig = DEFAULT_SHAPE_CONFIG,
               verbose: bool = False) -> ScanResult:
    """
    Extract board and pieces from a screenshot.

    Args:
        image: Image path or BGR array
        scan_config: Front-end parameters
        classifier_config: Cell classifier parameters
        shape_config: Shape inferencer parameters
        verbose: Print progress info

    Returns:
        ScanResult

    Raises:
        ValueError: If the image cannot be loaded
    """
    if isinstance(image, (str, Path)):
        img_bgr = load_image_bgr(image)
        if verbose:
            print(f"Loaded: {image}")
    else:
        img_bgr = to_bgr(np.asarray(image))

    if verbose:
        print(f"Size: {img_bgr.shape[1]}x{img_bgr.shape[0]}")

    warped, board_rect = detect_board(img_bgr, scan_config)

    if warped is None:
        if verbose:
            print("Could not detect a clear 8x8 grid, classifying the full image")
        samples = sample_cells(img_bgr, scan_config)
        board = classify_board(samples, classifier_config)
        return ScanResult(board=board, samples=samples, board_found=False)

    samples = sample_cells(warped, scan_config)
    board = classify_board(samples, classifier_config)

    gray = to_grayscale(img_bgr)
    captures = [
        detect_slot_blobs(slot, origin_x, origin_y)
        for slot, origin_x, origin_y in split_figure_slots(gray, board_rect, scan_config)
    ]
    shapes = infer_piece_shapes(captures, shape_config)

    if verbose:
        print(f"Board: {int(board.sum())} filled cells, rect={board_rect}")
        print(f"Pieces: {len(shapes)} slots")
        for i, shape in enumerate(shapes):
            print(f"  - slot {i + 1}: {shape.rows}x{shape.cols}, {len(shape.piece)} cells")

    return ScanResult(board=board, samples=samples, shapes=shapes,
                      board_found=True, board_rect=board_rect)
