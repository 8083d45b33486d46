"""Feature extraction modules."""
from .cell_classifier import ClassifierConfig, classify_cells, classify_board
from .piece_shapes import Blob, SlotCapture, ShapeConfig, PieceShape, infer_piece_shape, infer_piece_shapes
from .blobs import detect_slot_blobs
