"""
Board cell classification.

Separates the 64 sampled cell colors into two groups with a deterministic
binary k-means: one center is seeded from the darkest cell, the other from
the brightest. Which group means "filled" depends on the board skin and
lighting, so the mapping is a config value rather than something inferred.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from scipy.spatial.distance import cdist

from core.board import BOARD_SIZE, N_CELLS
from core.samples import CellSample


@dataclass
class ClassifierConfig:
    """Parameters of the cell classifier."""
    max_iterations: int = 10
    # Cluster label that means "filled": 1 = brightest-seeded, 0 = darkest-seeded
    filled_label: int = 1

    def __post_init__(self):
        if self.filled_label not in (0, 1):
            raise ValueError(f"filled_label must be 0 or 1, got {self.filled_label}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")


DEFAULT_CLASSIFIER_CONFIG = ClassifierConfig()


def cluster_mean(points: np.ndarray, assign: np.ndarray, label: int) -> np.ndarray:
    """Mean color of one cluster; a cluster without members sits at the origin."""
    members = points[assign == label]
    if len(members) == 0:
        return np.zeros(3, dtype=np.float64)
    return members.mean(axis=0)


def classify_cells(samples: Sequence[CellSample],
                   config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG) -> np.ndarray:
    """
    Label every sample 0 (darkest-seeded cluster) or 1 (brightest-seeded).

    Args:
        samples: Cell samples, row-major
        config: Classifier parameters

    Returns:
        int array of labels, one per sample, in input order
    """
    if len(samples) == 0:
        return np.zeros(0, dtype=np.int64)

    points = np.array([[s.r, s.g, s.b] for s in samples], dtype=np.float64)
    brightness = np.array([s.brightness for s in samples], dtype=np.float64)

    order = np.argsort(brightness, kind='stable')
    centers = np.stack([points[order[0]], points[order[-1]]])
    assign = np.zeros(len(samples), dtype=np.int64)

    for _ in range(config.max_iterations):
        dist = cdist(points, centers)
        # Ties go to the darkest-seeded cluster
        nxt = np.where(dist[:, 0] <= dist[:, 1], 0, 1)
        if np.array_equal(nxt, assign):
            break
        assign = nxt
        centers = np.stack([cluster_mean(points, assign, 0),
                            cluster_mean(points, assign, 1)])

    return assign


def classify_board(samples: Sequence[CellSample],
                   config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG) -> np.ndarray:
    """
    Classify 64 cell samples into an 8x8 occupancy board.

    Raises:
        ValueError: If there are not exactly 64 samples
    """
    if len(samples) != N_CELLS:
        raise ValueError(f"Expected {N_CELLS} cell samples, got {len(samples)}")

    labels = classify_cells(samples, config)
    board = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.uint8)
    for sample, label in zip(samples, labels):
        if label == config.filled_label:
            board[sample.row, sample.col] = 1
    return board
