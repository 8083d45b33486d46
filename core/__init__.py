"""Core board model and image processing utilities."""
from .board import Piece, BOARD_SIZE, as_board, board_to_mask, mask_to_board, place_piece, can_place
from .samples import CellSample
from .scan_config import ScanConfig
from .image_utils import load_image_bgr
from .grid_detection import detect_board
from .splitting import sample_cells, split_figure_slots
