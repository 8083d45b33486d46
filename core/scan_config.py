"""Parameters of the screenshot front end."""

from dataclasses import dataclass


@dataclass
class ScanConfig:
    """All configurable front-end parameters."""
    # Board outline detection
    blur_kernel: int = 5
    threshold_block: int = 11
    threshold_c: int = 2
    min_board_area: float = 1000
    poly_epsilon: float = 0.02

    # Rectified board
    warp_size: int = 600
    cell_sample_fraction: float = 0.5   # central part of each cell that is averaged

    # Piece tray below the board
    slot_count: int = 3
    slot_gap: int = 10                  # pixels between board bottom and tray
    bottom_margin: float = 0.15         # screen fraction reserved for the UI bar
    min_tray_height: int = 40

    def __post_init__(self):
        if self.blur_kernel % 2 == 0 or self.threshold_block % 2 == 0:
            raise ValueError("blur_kernel and threshold_block must be odd")
        if not 0 < self.cell_sample_fraction <= 1:
            raise ValueError(f"cell_sample_fraction must be in (0, 1], got {self.cell_sample_fraction}")
        if self.slot_count < 1:
            raise ValueError(f"slot_count must be >= 1, got {self.slot_count}")


DEFAULT_SCAN_CONFIG = ScanConfig()
