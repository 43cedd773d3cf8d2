"""
Align a scanner report and print the beacon count and scanner separation.

Usage:
    python scripts/run_alignment.py --input data/scanners.txt
    python scripts/run_alignment.py --config config/default.yaml --parallel
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional

# Add the src to the path to import modules
sys.path.append(str(Path(__file__).parent.parent / "src"))

from beacon_scanner.alignment import ScannerAligner, DisconnectedScannerError
from beacon_scanner.preprocessing import load_scanners
from beacon_scanner.utils.config import load_config, AppConfig
from beacon_scanner.utils.logging import setup_logger, configure_package_logging


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Beacon scanner alignment")
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="Scanner report file (overrides paths.input_file)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file (defaults to config/default.yaml)",
    )
    parser.add_argument(
        "--min-overlap",
        type=int,
        default=None,
        help="Override alignment.min_overlap",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Distribute pair work across worker processes",
    )
    args = parser.parse_args(argv)

    cfg: AppConfig = load_config(args.config)
    if args.input:
        cfg.paths.input_file = args.input
    if args.min_overlap is not None:
        cfg.alignment.min_overlap = args.min_overlap
    if args.parallel:
        cfg.parallel.enabled = True

    log_level = getattr(logging, cfg.logging.level.upper(), logging.INFO)
    logger = setup_logger("beacon_scanner.run_alignment", level=log_level, log_file=cfg.logging.file)
    configure_package_logging(level=log_level, log_file=cfg.logging.file)

    if not cfg.paths.input_file:
        logger.error("No input file given (use --input or paths.input_file)")
        return 2

    try:
        scanners = load_scanners(cfg.paths.input_file)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Could not load scanners: {e}")
        return 1

    try:
        result = ScannerAligner.from_config(cfg).align(scanners)
    except DisconnectedScannerError as e:
        logger.error(f"Alignment failed: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid alignment settings: {e}")
        return 1

    logger.info(f"Unique beacons: {result.n_beacons}")
    logger.info(f"Max scanner separation: {result.max_scanner_separation}")
    print(result.n_beacons)
    print(result.max_scanner_separation)
    return 0


if __name__ == "__main__":
    sys.exit(main())
