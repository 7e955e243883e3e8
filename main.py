#!/usr/bin/env python3
"""
Cross-E-shop Product Matcher

Usage:
    python3 main.py --kosik data/kosik.json --rohlik data/rohlik.json --tesco data/tesco.json
    python3 main.py --kosik K.json --rohlik R.json --tesco T.json --limit 200 --output-dir out/
    python3 main.py ... --mapping-view-dir out/substringsMappingView --verbose
"""

import sys
import json
import logging
import argparse
from pathlib import Path

from matching.config import MatchingConfig
from matching.errors import ComparisonFailed
from matching.pipeline import run_matching_pipeline
from standardization.loader import CatalogLoadError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    env_config = MatchingConfig.from_env()

    parser = argparse.ArgumentParser(description='Rank probable equal products across e-shops')
    parser.add_argument('--kosik', required=True, type=Path, help='Normalized Kosik catalog (JSON)')
    parser.add_argument('--rohlik', required=True, type=Path, help='Normalized Rohlik catalog (JSON)')
    parser.add_argument('--tesco', required=True, type=Path, help='Normalized Tesco catalog (JSON)')
    parser.add_argument('--limit', type=int, default=env_config.limit_processed_products,
                        help='Products of the smaller e-shop processed per pair')
    parser.add_argument('--output-dir', type=Path, default=env_config.output_dir,
                        help='Directory for ranked candidate files')
    parser.add_argument('--mapping-view-dir', type=Path, default=env_config.mapping_view_dir,
                        help='Dump token -> product names mapping per e-shop here')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        config = MatchingConfig(
            limit_processed_products=args.limit,
            output_dir=args.output_dir,
            mapping_view_dir=args.mapping_view_dir,
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    try:
        stats = run_matching_pipeline(args.kosik, args.rohlik, args.tesco, config=config)
    except CatalogLoadError as e:
        logger.error(str(e))
        return 1
    except ComparisonFailed as e:
        for pair_id, exc in e.failures.items():
            logger.error(f"{pair_id}: {exc}")
        return 1

    print("\n" + "=" * 60)
    print("RESULTS")
    print("=" * 60)
    print(json.dumps(stats, indent=2))
    print(f"\nRanked candidates written to {config.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
