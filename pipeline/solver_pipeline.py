"""
Solver Pipeline

Screenshot → scan (board + pieces) → placement search.
"""

from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np

from core.scan_config import DEFAULT_SCAN_CONFIG, ScanConfig
from features.cell_classifier import DEFAULT_CLASSIFIER_CONFIG, ClassifierConfig
from features.piece_shapes import DEFAULT_SHAPE_CONFIG, ShapeConfig
from solvers.placement_solver import SolveSequence, solve
from solvers.scoring import DEFAULT_WEIGHTS, ScoreWeights

from .scan_pipeline import ScanResult, scan_image


def solve_scan(scan: ScanResult, weights: ScoreWeights = DEFAULT_WEIGHTS,
               verbose: bool = False) -> Optional[SolveSequence]:
    """
    Solve an existing scan.

    Returns None when the scan has no pieces or no complete sequence fits.
    """
    if not scan.shapes:
        if verbose:
            print("No pieces detected, nothing to solve")
        return None
    return solve(scan.board, scan.pieces, weights=weights, verbose=verbose)


def solve_image(image: Union[str, Path, np.ndarray],
                scan_config: ScanConfig = DEFAULT_SCAN_CONFIG,
                classifier_config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG,
                shape_config: ShapeConfig = DEFAULT_SHAPE_CONFIG,
                weights: ScoreWeights = DEFAULT_WEIGHTS,
                verbose: bool = False) -> Tuple[ScanResult, Optional[SolveSequence]]:
    """
    Complete pipeline: load → scan → solve.

    Args:
        image: Image path or BGR array
        scan_config: Front-end parameters
        classifier_config: Cell classifier parameters
        shape_config: Shape inferencer parameters
        weights: Scoring weights
        verbose: Print progress info

    Returns:
        scan: Extracted board and pieces
        sequence: Best placement sequence, or None
    """
    if verbose:
        print("\n" + "=" * 60)
        print("PHASE 1: Scan")
        print("=" * 60)

    scan = scan_image(image, scan_config, classifier_config, shape_config, verbose)

    if verbose:
        print("\n" + "=" * 60)
        print("PHASE 2: Placement Search")
        print("=" * 60)

    return scan, solve_scan(scan, weights, verbose)
