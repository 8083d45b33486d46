"""
Tests for the screenshot front end and pipelines.

Screenshots are drawn synthetically with OpenCV: an outlined 8x8 board with
bright filled cells, and a piece tray of white blocks below it.
"""

import sys
import os

import cv2
import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.board import empty_board
from core.grid_detection import detect_board, order_corners
from core.samples import CellSample
from core.scan_config import ScanConfig
from core.splitting import sample_cells, split_figure_slots, tray_bounds
from features.blobs import detect_slot_blobs
from features.piece_shapes import PieceShape, infer_piece_shape
from pipeline import ScanResult, scan_image, solve_image, solve_scan

SCREEN_W, SCREEN_H = 600, 1000
BOARD_X, BOARD_Y, BOARD_SIDE = 50, 100, 500
BACKGROUND = (20, 20, 20)
BOARD_BG = (90, 60, 50)
FILLED = (0, 180, 255)
BLOCK = (230, 230, 230)


def draw_blocks(img, x, y, cells, size=40, gap=4):
    for r, c in cells:
        x0 = x + c * (size + gap)
        y0 = y + r * (size + gap)
        cv2.rectangle(img, (x0, y0), (x0 + size - 1, y0 + size - 1), BLOCK, -1)


@pytest.fixture
def board_pattern():
    pattern = empty_board()
    pattern[7, :7] = 1
    pattern[0, 0] = 1
    pattern[3, 4] = 1
    pattern[2:5, 6] = 1
    return pattern


@pytest.fixture
def screenshot(board_pattern):
    img = np.full((SCREEN_H, SCREEN_W, 3), BACKGROUND, dtype=np.uint8)
    x1, y1 = BOARD_X + BOARD_SIDE, BOARD_Y + BOARD_SIDE
    cv2.rectangle(img, (BOARD_X, BOARD_Y), (x1, y1), BOARD_BG, -1)
    cv2.rectangle(img, (BOARD_X, BOARD_Y), (x1, y1), (255, 255, 255), 3)

    cell = BOARD_SIDE / 8
    for r in range(8):
        for c in range(8):
            if board_pattern[r, c]:
                cx0 = int(BOARD_X + c * cell + 6)
                cy0 = int(BOARD_Y + r * cell + 6)
                cv2.rectangle(img, (cx0, cy0), (int(cx0 + cell - 12), int(cy0 + cell - 12)), FILLED, -1)

    draw_blocks(img, 80, 700, [(0, 0)])
    draw_blocks(img, 250, 700, [(0, 0), (0, 1)])
    draw_blocks(img, 450, 700, [(0, 0), (1, 0), (1, 1)])
    return img


# ============================================================================
# Front end pieces
# ============================================================================

def test_order_corners():
    pts = [(10, 100), (100, 100), (100, 10), (10, 10)]
    ordered = order_corners(pts)
    assert ordered.tolist() == [[10, 10], [100, 10], [100, 100], [10, 100]]


def test_sample_cells_reports_rgb():
    img = np.zeros((80 * 8, 80 * 8, 3), dtype=np.uint8)
    img[2 * 80:3 * 80, 3 * 80:4 * 80] = (10, 20, 30)   # BGR
    samples = sample_cells(img)
    assert len(samples) == 64
    sample = samples[2 * 8 + 3]
    assert (sample.row, sample.col) == (2, 3)
    assert (sample.r, sample.g, sample.b) == pytest.approx((30, 20, 10))


def test_tray_bounds():
    assert tray_bounds(1000, (0, 100, 500, 500)) == (610, 850)
    # board reaches into the bottom margin: fall back to the screen bottom
    assert tray_bounds(1000, (0, 0, 500, 900)) == (910, 995)
    assert tray_bounds(1000, (0, 0, 500, 960)) is None


def test_split_figure_slots_last_slot_takes_remainder():
    gray = np.zeros((1000, 601), dtype=np.uint8)
    slots = split_figure_slots(gray, (0, 100, 500, 500))
    assert [s[1] for s in slots] == [0, 200, 400]
    assert [s[0].shape[1] for s in slots] == [200, 200, 201]
    assert all(s[2] == 610 for s in slots)


def test_detect_slot_blobs_finds_separate_blocks():
    slot = np.zeros((200, 200), dtype=np.uint8)
    slot[50:90, 50:90] = 230
    slot[50:90, 94:134] = 230
    capture = detect_slot_blobs(slot, origin_x=200, origin_y=600)
    assert len(capture.blobs) == 2
    assert sorted(b.x for b in capture.blobs) == [50, 94]
    assert all(b.width == 40 and b.height == 40 for b in capture.blobs)
    shape = infer_piece_shape(capture)
    assert shape.grid.tolist() == [[True, True]]
    assert (shape.origin_x, shape.origin_y) == (250, 650)


def test_detect_board(screenshot):
    warped, rect = detect_board(screenshot)
    assert warped is not None
    assert warped.shape[:2] == (600, 600)
    x, y, w, h = rect
    # outline ring sits a few pixels outside the drawn border
    assert abs(x - BOARD_X) <= 10 and abs(y - BOARD_Y) <= 10
    assert abs(w - BOARD_SIDE) <= 20 and abs(h - BOARD_SIDE) <= 20


# ============================================================================
# Pipelines
# ============================================================================

def test_scan_image_reads_board_and_pieces(screenshot, board_pattern):
    scan = scan_image(screenshot)
    assert scan.board_found
    assert np.array_equal(scan.board, board_pattern)
    assert len(scan.samples) == 64
    grids = [shape.grid.tolist() for shape in scan.shapes]
    assert grids == [[[True]], [[True, True]], [[True, False], [True, True]]]


def test_scan_image_from_path(tmp_path, screenshot, board_pattern):
    path = tmp_path / "screen.png"
    cv2.imwrite(str(path), screenshot)
    scan = scan_image(str(path))
    assert np.array_equal(scan.board, board_pattern)


def test_scan_without_board_outline_falls_back():
    blank = np.full((400, 400, 3), 128, dtype=np.uint8)
    scan = scan_image(blank)
    assert not scan.board_found
    assert scan.shapes == []
    assert scan.board.sum() == 0
    assert solve_scan(scan) is None


def test_missing_image_raises(tmp_path):
    with pytest.raises(ValueError):
        scan_image(str(tmp_path / "missing.png"))


def test_solve_scan_uses_scan_pieces():
    board = np.ones((8, 8), dtype=np.uint8)
    np.fill_diagonal(board, 0)
    samples = [CellSample(r, c, 0, 0, 0) for r in range(8) for c in range(8)]
    shapes = [PieceShape(grid=np.ones((1, 1), dtype=bool), cell_size=50, origin_x=0, origin_y=0)]
    scan = ScanResult(board=board, samples=samples, shapes=shapes)
    result = solve_scan(scan)
    assert len(result) == 1
    assert result.total_cleared == 2


def test_solve_image_small_board():
    img = np.full((SCREEN_H, SCREEN_W, 3), BACKGROUND, dtype=np.uint8)
    x1, y1 = BOARD_X + BOARD_SIDE, BOARD_Y + BOARD_SIDE
    cv2.rectangle(img, (BOARD_X, BOARD_Y), (x1, y1), BOARD_BG, -1)
    cv2.rectangle(img, (BOARD_X, BOARD_Y), (x1, y1), (255, 255, 255), 3)
    cell = BOARD_SIDE / 8
    for c in range(7):
        cx0 = int(BOARD_X + c * cell + 6)
        cy0 = int(BOARD_Y + 7 * cell + 6)
        cv2.rectangle(img, (cx0, cy0), (int(cx0 + cell - 12), int(cy0 + cell - 12)), FILLED, -1)
    draw_blocks(img, 80, 700, [(0, 0)])

    config = ScanConfig(slot_count=1)
    scan, sequence = solve_image(img, scan_config=config)
    assert scan.board[7].tolist() == [1, 1, 1, 1, 1, 1, 1, 0]
    step = sequence.steps[0]
    assert (step.row, step.col, step.cleared) == (7, 7, 1)
