"""
Preprocessing Module

Parsing and loading of scanner reports.
"""

from .parser import parse_scanners, load_scanners

__all__ = ["parse_scanners", "load_scanners"]
