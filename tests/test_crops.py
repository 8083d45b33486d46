"""Tests for the piece crop previews and the --save-crops option."""

import sys
import os

import cv2
import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from features.piece_shapes import PieceShape
from solve_blocks import main
from visualization import crop_piece, piece_crop_rect, save_piece_crops


def single_cell(cell_size, origin_x, origin_y):
    return PieceShape(grid=np.ones((1, 1), dtype=bool), cell_size=cell_size,
                      origin_x=origin_x, origin_y=origin_y)


# ============================================================================
# Crop rectangle
# ============================================================================

def test_crop_pads_piece_by_fifteen_percent_of_a_cell():
    # margin 15 px, side 1.3 cells
    assert piece_crop_rect(single_cell(100, 100, 200), 600, 1000) == (85, 185, 130, 130)


def test_crop_is_clamped_to_image_origin():
    x, y, _, _ = piece_crop_rect(single_cell(100, 5, 5), 600, 1000)
    assert (x, y) == (0, 0)


def test_crop_is_clamped_to_image_extent():
    x, y, w, h = piece_crop_rect(single_cell(100, 190, 190), 200, 200)
    assert (x, y) == (175, 175)
    assert (w, h) == (25, 25)


def test_crop_covers_every_piece_cell():
    shape = PieceShape(grid=np.ones((2, 3), dtype=bool), cell_size=20,
                       origin_x=50, origin_y=60)
    x, y, w, h = piece_crop_rect(shape, 600, 1000)
    assert x <= 50 and y <= 60
    assert x + w >= 50 + 3 * 20
    assert y + h >= 60 + 2 * 20


def test_crop_piece_returns_a_copy():
    image = np.zeros((300, 300, 3), dtype=np.uint8)
    crop = crop_piece(image, single_cell(100, 100, 100))
    assert crop.shape == (130, 130, 3)
    crop[:] = 255
    assert image.sum() == 0


def test_save_piece_crops_writes_one_png_per_piece(tmp_path):
    image = np.zeros((400, 400, 3), dtype=np.uint8)
    image[100:150, 100:150] = (255, 255, 255)
    shapes = [single_cell(50, 100, 100), single_cell(50, 250, 250)]

    paths = save_piece_crops(image, shapes, tmp_path / "crops")

    assert [p.name for p in paths] == ["piece_1.png", "piece_2.png"]
    first = cv2.imread(str(paths[0]))
    assert first.shape[:2] == (65, 65)
    # crop starts at x = y = 92, so the block spans 8 .. 57 locally
    assert first[8:58, 8:58].min() == 255
    assert first[:8, :8].max() == 0


# ============================================================================
# CLI
# ============================================================================

@pytest.fixture
def screenshot_path(tmp_path):
    """Nearly full board with three free cells and a single block in the tray."""
    img = np.full((1000, 600, 3), (20, 20, 20), dtype=np.uint8)
    cv2.rectangle(img, (50, 100), (550, 600), (90, 60, 50), -1)
    cv2.rectangle(img, (50, 100), (550, 600), (255, 255, 255), 3)

    cell = 500 / 8
    for r in range(8):
        for c in range(8):
            if r == 7 and c >= 5:
                continue
            x0 = int(50 + c * cell + 6)
            y0 = int(100 + r * cell + 6)
            cv2.rectangle(img, (x0, y0), (int(x0 + cell - 12), int(y0 + cell - 12)), (0, 180, 255), -1)

    cv2.rectangle(img, (80, 700), (119, 739), (230, 230, 230), -1)
    path = tmp_path / "screen.png"
    cv2.imwrite(str(path), img)
    return path


def test_cli_saves_piece_crops(screenshot_path, tmp_path, capsys):
    crops_dir = tmp_path / "crops"
    main([str(screenshot_path), "--quiet", "--save-crops", str(crops_dir)])

    out = capsys.readouterr().out
    assert f"Saved 3 piece crops to {crops_dir}" in out
    assert sorted(p.name for p in crops_dir.iterdir()) == ["piece_1.png", "piece_2.png", "piece_3.png"]


def test_cli_missing_image_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "missing.png")])
    assert exc.value.code == 1
    assert "Image not found" in capsys.readouterr().out
