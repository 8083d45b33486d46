#!/usr/bin/env python
"""
Block Puzzle Screenshot Solver

Usage:
    python solve_blocks.py <image_path> [--quiet] [--filled-label {0,1}] [--save-crops DIR]

Examples:
    python solve_blocks.py ./screens/board.png
    python solve_blocks.py ./screens/dark_skin.png --filled-label 0
    python solve_blocks.py ./screens/board.png --save-crops ./crops

Pipeline:
    Phase 1: Detect board, classify cells, infer tray pieces
    Phase 2: Exhaustive placement search
"""

import argparse
import os
import sys

from core.image_utils import load_image_bgr
from features.cell_classifier import ClassifierConfig
from pipeline import solve_image
from visualization import format_board, format_piece, format_sequence, save_piece_crops


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Best placement sequence for a block puzzle screenshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Scoring:
  - 5000 base + 200 per cleared line
  - +50 per empty 3x3 area, +30 per row/column with 5 free cells in a row
  - +1 per empty cell
        """
    )
    parser.add_argument("image_path", help="Path to the screenshot")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only print the result")
    parser.add_argument("--filled-label", type=int, choices=[0, 1], default=1,
                        help="Color cluster that means 'filled' (1 = brighter cells, default)")
    parser.add_argument("--save-crops", metavar="DIR",
                        help="Write a crop of every detected piece to DIR")

    args = parser.parse_args(argv)

    if not os.path.exists(args.image_path):
        print(f"Error: Image not found: {args.image_path}")
        sys.exit(1)

    verbose = not args.quiet
    scan, sequence = solve_image(
        args.image_path,
        classifier_config=ClassifierConfig(filled_label=args.filled_label),
        verbose=verbose
    )

    print("\nBoard:")
    print(format_board(scan.board))
    if not scan.board_found:
        print("(board outline not found - classified the full image)")

    for i, shape in enumerate(scan.shapes):
        print(f"\nPiece {i + 1}:")
        print(format_piece(shape))

    if args.save_crops and scan.shapes:
        paths = save_piece_crops(load_image_bgr(args.image_path), scan.shapes, args.save_crops)
        print(f"\nSaved {len(paths)} piece crops to {args.save_crops}")

    print()
    print(format_sequence(sequence))


if __name__ == "__main__":
    main()
