"""Test that all modules can be imported correctly."""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def test_core_imports():
    """Test core module imports."""
    from core import Piece, CellSample, ScanConfig, load_image_bgr, detect_board, sample_cells
    from core.board import clear_full_lines, full_lines, mask_to_board
    from core.grid_detection import find_board_contour, warp_board
    from core.splitting import split_figure_slots, tray_bounds


def test_features_imports():
    """Test features module imports."""
    from features import classify_board, infer_piece_shape, detect_slot_blobs, PieceShape
    from features.cell_classifier import classify_cells, ClassifierConfig
    from features.piece_shapes import estimate_unit_size, sample_grid
    from features.blobs import threshold_slot, find_blobs


def test_solvers_imports():
    """Test solvers module imports."""
    from solvers import solve, score_board, PlacementStep, SolveSequence, ScoreWeights
    from solvers.placement_solver import iter_orderings, enumerate_placements
    from solvers.scoring import count_open_windows, count_streak_lines


def test_pipeline_imports():
    """Test pipeline module imports."""
    from pipeline import scan_image, solve_scan, solve_image, ScanResult


def test_visualization_imports():
    """Test visualization module imports."""
    from visualization import format_board, format_piece, format_step, format_sequence
    from visualization import piece_crop_rect, crop_piece, save_piece_crops


def test_cli_imports():
    """Test command line entry point import."""
    from solve_blocks import main
