"""
Run beacon localization on a puzzle-format scan file.

Prints the number of unique beacons and the largest Manhattan distance
between any two scanners.
"""

import sys
import argparse
import logging
from pathlib import Path

# Add the src to the path to import modules
sys.path.append(str(Path(__file__).parent.parent / "src"))

from beacon_localization.exceptions import BeaconLocalizationError
from beacon_localization.pipeline import localize_scans
from beacon_localization.preprocessing import ScanLoader
from beacon_localization.utils.config import load_config, AppConfig
from beacon_localization.utils.logging import setup_logger, set_package_level


def main() -> int:
    parser = argparse.ArgumentParser(description="Beacon Localization")
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="Scan file ('--- scanner N ---' blocks). Overrides paths.input_file.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file (defaults to config/default.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override logging.level from the config",
    )
    parser.add_argument(
        "--positions",
        action="store_true",
        help="Also print every scanner position",
    )
    args = parser.parse_args()

    cfg: AppConfig = load_config(args.config)
    if args.input:
        cfg.paths.input_file = args.input
    if args.log_level:
        cfg.logging.level = args.log_level

    log_level = getattr(logging, cfg.logging.level.upper(), logging.INFO)
    logger = setup_logger(__name__, level=log_level, log_file=cfg.logging.file)
    set_package_level(log_level)

    if not cfg.paths.input_file:
        logger.error("No input file given (use --input or paths.input_file)")
        return 2

    try:
        scans = ScanLoader().load(cfg.paths.input_file)
        result = localize_scans(scans, cfg)
    except (FileNotFoundError, BeaconLocalizationError) as e:
        logger.error(str(e))
        return 1

    print(f"Unique beacons: {result.beacon_count}")
    print(f"Largest Manhattan distance between scanners: {result.max_manhattan_distance}")
    if args.positions:
        for scan_id, pos in result.scanner_positions.items():
            print(f"  scanner {scan_id}: {pos[0]},{pos[1]},{pos[2]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
