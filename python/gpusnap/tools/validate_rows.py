#!/usr/bin/env python3
"""
Row-stride validator for PNG snapshots.

Checks that recorded snapshot images are tightly packed: the pixel count
matches width x height, and there is no run of duplicated rows or column
banding of the kind a wrong bytes_per_row in the capture copy produces.

Usage:
    python -m gpusnap.tools.validate_rows [-v] <image_path> [...]
"""

import argparse
import sys
from pathlib import Path

import numpy as np

from ..codec import decode_png


DUPLICATE_ROW_FAIL_RATIO = 0.3
DUPLICATE_ROW_WARN_RATIO = 0.2
BANDING_THRESHOLD = 10.0  # mean difference on the 0-255 scale


def validate_png_row_structure(image_path: Path) -> dict:
    """
    Validate that a PNG snapshot has a tight row structure.

    Args:
        image_path: Path to PNG file

    Returns:
        dict with "valid", "errors", "warnings" and "stats" entries
    """
    results = {
        "valid": True,
        "errors": [],
        "warnings": [],
        "stats": {},
    }

    if not image_path.exists():
        results["valid"] = False
        results["errors"].append(f"File does not exist: {image_path}")
        return results

    try:
        image = decode_png(image_path)
    except (OSError, ValueError) as e:
        results["valid"] = False
        results["errors"].append(f"Failed to decode image: {e}")
        return results

    width, height = image.width, image.height
    results["stats"]["width"] = width
    results["stats"]["height"] = height

    if len(image.data) != width * height * 4:
        results["valid"] = False
        results["errors"].append(
            f"Pixel data length mismatch: expected {width * height * 4}, got {len(image.data)}"
        )
        return results

    arr = image.to_array()

    duplicate_rows = int(sum(np.array_equal(arr[i], arr[i + 1]) for i in range(height - 1)))
    results["stats"]["duplicate_consecutive_rows"] = duplicate_rows

    # Flat fills (e.g. a cleared frame) have every row equal; only flag
    # duplicates when the image has vertical variation at all.
    distinct_rows = len({arr[i].tobytes() for i in range(height)})
    results["stats"]["distinct_rows"] = distinct_rows

    if distinct_rows > 1:
        if duplicate_rows > height * DUPLICATE_ROW_FAIL_RATIO:
            results["valid"] = False
            results["errors"].append(
                f"Too many duplicate consecutive rows: {duplicate_rows}/{height}. "
                "This may indicate a wrong bytes_per_row in the capture copy."
            )
        elif duplicate_rows > height * DUPLICATE_ROW_WARN_RATIO:
            results["warnings"].append(
                f"High number of duplicate consecutive rows: {duplicate_rows}/{height}"
            )

    if width > 2:
        col_diff = float(np.abs(arr[:, ::2, :].mean() - arr[:, 1::2, :].mean()))
        results["stats"]["even_odd_col_diff"] = col_diff
        if col_diff > BANDING_THRESHOLD:
            results["warnings"].append(
                f"Significant difference between even/odd columns: {col_diff:.2f}. "
                "This may indicate stride artifacts."
            )

    return results


def print_validation_results(image_path: Path, results: dict, verbose: bool = False):
    print(f"Validating: {image_path}")
    stats = results["stats"]
    if "width" in stats and "height" in stats:
        print(f"Dimensions: {stats['width']}x{stats['height']}")

    if verbose:
        for key, value in stats.items():
            if key not in ("width", "height"):
                print(f"  {key}: {value}")

    for error in results["errors"]:
        print(f"  ERROR: {error}")
    for warning in results["warnings"]:
        print(f"  WARNING: {warning}")

    print("PASSED" if results["valid"] else "FAILED")


def validate_multiple_files(image_paths: list, verbose: bool = False) -> int:
    """Validate several PNG files and return the number that failed."""
    failed_count = 0
    for path in image_paths:
        results = validate_png_row_structure(path)
        print_validation_results(path, results, verbose)
        if not results["valid"]:
            failed_count += 1

    if len(image_paths) > 1:
        print(f"Summary: {len(image_paths) - failed_count}/{len(image_paths)} passed")
    return failed_count


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Validate PNG snapshot row structure for stride artifacts",
    )
    parser.add_argument("images", nargs="+", type=Path, help="PNG files to validate")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed statistics")
    args = parser.parse_args(argv)
    return validate_multiple_files(args.images, args.verbose)


if __name__ == "__main__":
    sys.exit(main())
