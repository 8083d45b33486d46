"""Text rendering and crop previews of scan and solver results."""
from .text import (
    format_board,
    format_piece,
    format_step,
    format_sequence
)
from .crops import (
    piece_crop_rect,
    crop_piece,
    save_piece_crops
)
