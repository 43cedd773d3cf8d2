"""
Scanner Report Parser

Reads scanner reports: blank-line separated sections, each an optional
"--- scanner N ---" header followed by one "x,y,z" integer triple per line.
"""

import re
from pathlib import Path
from typing import List

import numpy as np

from ..utils.logging import setup_logger

logger = setup_logger(__name__)

_HEADER_RE = re.compile(r"^---\s*scanner\s+(\d+)\s*---$")


def _parse_point(line: str, line_no: int) -> List[int]:
    fields = [f.strip() for f in line.split(",")]
    if len(fields) != 3:
        raise ValueError(f"Line {line_no}: expected 3 comma-separated coordinates, got {len(fields)}: {line!r}")
    try:
        return [int(f) for f in fields]
    except ValueError:
        raise ValueError(f"Line {line_no}: non-integer coordinate in {line!r}") from None


def parse_scanners(text: str) -> List[np.ndarray]:
    """
    Parse a scanner report.

    Args:
        text: Report contents

    Returns:
        One (N, 3) int64 array per scanner, in report order

    Raises:
        ValueError: If a coordinate line is malformed
    """
    scanners: List[np.ndarray] = []
    current: List[List[int]] = []
    in_section = False

    def close_section():
        nonlocal current, in_section
        if in_section:
            scanners.append(np.array(current, dtype=np.int64).reshape(-1, 3))
        current = []
        in_section = False

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            close_section()
            continue
        header = _HEADER_RE.match(line)
        if header:
            close_section()
            in_section = True
            idx = int(header.group(1))
            if idx != len(scanners):
                logger.warning(f"Line {line_no}: scanner {idx} found at position {len(scanners)}")
            continue
        in_section = True
        current.append(_parse_point(line, line_no))
    close_section()

    logger.debug(f"Parsed {len(scanners)} scanners")
    return scanners


def load_scanners(file_path: str) -> List[np.ndarray]:
    """
    Load a scanner report file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the report is malformed
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    logger.info(f"Loading scanner report from {file_path}")
    scanners = parse_scanners(file_path.read_text(encoding="utf-8"))
    logger.info(f"Loaded {len(scanners)} scanners with {sum(len(s) for s in scanners)} beacons")
    return scanners
