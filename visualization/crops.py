"""Crop previews of the pieces detected in the tray."""

import math
from pathlib import Path
from typing import List, Sequence, Tuple, Union

import cv2
import numpy as np

from features.piece_shapes import PieceShape

# Padding around the piece, as a fraction of one cell
CROP_MARGIN = 0.15
# Keeps the crop origin at least this many pixels inside the image
EDGE_GUARD = 10


def piece_crop_rect(shape: PieceShape, image_width: int,
                    image_height: int) -> Tuple[int, int, int, int]:
    """
    Rectangle around a detected piece in screenshot coordinates.

    The crop starts 0.15 cells before the piece origin and spans
    ``cols + 0.3`` by ``rows + 0.3`` cells, clamped to the image.

    Returns:
        (x, y, w, h) with w, h >= 1
    """
    margin = shape.cell_size * CROP_MARGIN
    side_w = int(math.floor(shape.cell_size * (shape.cols + 2 * CROP_MARGIN)))
    side_h = int(math.floor(shape.cell_size * (shape.rows + 2 * CROP_MARGIN)))

    x = int(max(0, min(image_width - EDGE_GUARD, shape.origin_x - margin)))
    y = int(max(0, min(image_height - EDGE_GUARD, shape.origin_y - margin)))
    w = max(1, min(image_width - x, side_w))
    h = max(1, min(image_height - y, side_h))
    return x, y, w, h


def crop_piece(image: np.ndarray, shape: PieceShape) -> np.ndarray:
    """Copy of the screenshot region showing one piece."""
    x, y, w, h = piece_crop_rect(shape, image.shape[1], image.shape[0])
    return image[y:y + h, x:x + w].copy()


def save_piece_crops(image: np.ndarray, shapes: Sequence[PieceShape],
                     output_dir: Union[str, Path]) -> List[Path]:
    """
    Write one PNG crop per detected piece.

    Files are named ``piece_<n>.png`` with n counting from 1.

    Returns:
        Paths of the written files, in piece order
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for i, shape in enumerate(shapes):
        path = output_dir / f"piece_{i + 1}.png"
        if not cv2.imwrite(str(path), crop_piece(image, shape)):
            raise ValueError(f"Could not write image: {path}")
        paths.append(path)
    return paths
