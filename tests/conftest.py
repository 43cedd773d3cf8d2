"""Shared fixtures for the beacon scanner tests."""

from pathlib import Path
import sys

import pytest

# Ensure src is importable
sys.path.append(str(Path(__file__).parent.parent / "src"))

from beacon_scanner.preprocessing.parser import load_scanners

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def example_report_path() -> Path:
    return DATA_DIR / "example_scanners.txt"


@pytest.fixture
def example_scanners(example_report_path):
    """The canonical five-scanner report."""
    return load_scanners(str(example_report_path))
