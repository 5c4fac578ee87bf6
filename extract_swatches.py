#!/usr/bin/env python3
"""Extract a swatch palette from an image and print it."""

import argparse
import sys
import time
from pathlib import Path

from palette_cluster import (
    ExtractionConfig, Palette, PaletteClusterError, PillowImage, configure_logging, extract_palette,
)
from palette_cluster.config import ALGORITHMS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Extract representative colors from an image by clustering its pixels.'
    )
    parser.add_argument('image', help='Path to the image to analyze')
    parser.add_argument(
        '--algorithm', '-a',
        choices=ALGORITHMS,
        help='Clustering algorithm (default: PALETTE_ALGORITHM or dbscan)'
    )
    parser.add_argument(
        '--sampling-rate', '-s',
        type=float,
        help='Fraction of pixels to read, e.g. 0.25 reads every 4th pixel'
    )
    parser.add_argument(
        '--count', '-n',
        type=int,
        help='Print only this many populous, well separated swatches'
    )
    parser.add_argument(
        '--seed',
        type=int,
        help='Seed for the randomized algorithms'
    )
    parser.add_argument(
        '--log-level',
        help='Log level (default: PALETTE_LOG_LEVEL or INFO)'
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.count is not None and args.count < 1:
        parser.error(f"--count must be at least 1, got {args.count}")

    image_path = Path(args.image)
    if not image_path.is_file():
        print(f"Error: Image not found: {image_path}", file=sys.stderr)
        sys.exit(2)

    overrides = {
        'algorithm': args.algorithm,
        'sampling_rate': args.sampling_rate,
        'seed': args.seed,
        'log_level': args.log_level,
    }
    try:
        config = ExtractionConfig.from_env(**{key: value for key, value in overrides.items() if value is not None})
    except PaletteClusterError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    configure_logging(config.log_level)

    start = time.perf_counter()
    try:
        palette = Palette(extract_palette(PillowImage(image_path), config))
        selected = palette.find_swatches(args.count) if args.count is not None else palette.swatches
    except (PaletteClusterError, FileNotFoundError) as e:
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start

    total = sum(swatch.population for swatch in palette)
    print(f"{image_path.name} → {len(palette)} swatches ({config.algorithm}, {elapsed:.2f}s)")
    for i, swatch in enumerate(selected, 1):
        share = swatch.population / total * 100
        print(f"  {i:2d}. {swatch.hex}  {share:5.1f}%  at ({swatch.position.x}, {swatch.position.y})")


if __name__ == '__main__':
    main()
