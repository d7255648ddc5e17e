"""
Scan Data Loader

This module reads scans from the puzzle text format:

    --- scanner 0 ---
    404,-588,-901
    528,-643,409

    --- scanner 1 ---
    686,422,578
    ...

Scan ids follow the order of the blocks in the input.
"""

import re
from pathlib import Path
from typing import List, Optional

import numpy as np

from ..exceptions import MalformedInputError
from ..geometry.scan import Scan
from ..utils.logging import setup_logger

logger = setup_logger(__name__)

_HEADER = re.compile(r"^---\s*scanner\s+(-?\d+)\s*---$")
_COORD = re.compile(r"^\s*(-?\d+)\s*,\s*(-?\d+)\s*,\s*(-?\d+)\s*$")


def parse_scans(text: str) -> List[Scan]:
    """
    Parse puzzle-format text into scans.

    Args:
        text: Full input text

    Returns:
        List of scans, ids 0..n-1 in input order

    Raises:
        MalformedInputError: On a missing header, a bad coordinate line, an
            empty block or a point repeated within one block
    """
    scans: List[Scan] = []
    rows: List[tuple] = []
    seen: set = set()
    header_line: Optional[int] = None

    def close_block() -> None:
        if header_line is None:
            return
        if not rows:
            raise MalformedInputError(f"scanner block {len(scans)} has no beacons", header_line)
        scans.append(Scan(len(scans), np.array(rows, dtype=np.int64)))

    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        header = _HEADER.match(line)
        if header:
            close_block()
            rows, seen = [], set()
            header_line = line_number
            declared = int(header.group(1))
            if declared != len(scans):
                logger.warning(
                    f"Scanner header on line {line_number} says {declared}; "
                    f"using input order id {len(scans)}"
                )
            continue
        if header_line is None:
            raise MalformedInputError(f"expected a scanner header, found '{line}'", line_number)
        coord = _COORD.match(line)
        if not coord:
            raise MalformedInputError(f"cannot parse beacon coordinates '{line}'", line_number)
        point = tuple(int(v) for v in coord.groups())
        if point in seen:
            raise MalformedInputError(f"beacon {point} repeated in scanner block {len(scans)}", line_number)
        seen.add(point)
        rows.append(point)

    close_block()
    return scans


class ScanLoader:
    """
    Load scans from puzzle-format text files.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def load(self, file_path: str) -> List[Scan]:
        """
        Load all scans from a file.

        Raises:
            FileNotFoundError: If the file does not exist
            MalformedInputError: If the content cannot be parsed
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        logger.info(f"Loading scans from {file_path}")
        scans = parse_scans(file_path.read_text(encoding=self.encoding))
        n_points = sum(len(s) for s in scans)
        logger.info(f"Loaded {len(scans)} scans with {n_points} beacon observations")
        return scans
