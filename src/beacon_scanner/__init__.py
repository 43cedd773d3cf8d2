"""
Beacon Scanner Package

Aligns beacon reports from scanners with unknown, axis-aligned orientations
and unknown positions into one global frame. Overlapping scanners are found
cheaply from pairwise-distance fingerprints, related through exact integer
rigid transforms, and composed into per-scanner poses relative to a root
scanner.
"""

__version__ = "0.1.0"

from .geometry import *
from .alignment import *
from .preprocessing import *
from .utils import *

__all__ = [
    "geometry",
    "alignment",
    "acceleration",
    "preprocessing",
    "utils",
]
