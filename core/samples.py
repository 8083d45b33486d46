"""Per-cell color samples handed from the front end to the classifier."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class CellSample:
    """Mean color of one board cell."""
    row: int
    col: int
    r: float
    g: float
    b: float

    @property
    def color(self) -> np.ndarray:
        return np.array([self.r, self.g, self.b], dtype=np.float64)

    @property
    def brightness(self) -> float:
        """Luma (ITU-R BT.601)."""
        return 0.299 * self.r + 0.587 * self.g + 0.114 * self.b
