"""
Pipeline orchestration modules.

1. scan_image() - screenshot → board + pieces
2. solve_scan() - scan → best placement sequence
3. solve_image() - both in one call
"""
from .scan_pipeline import (
    ScanResult,
    scan_image
)
from .solver_pipeline import (
    solve_scan,
    solve_image
)
