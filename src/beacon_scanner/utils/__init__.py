"""
Utility Functions Module

- Logging setup
- Typed configuration loading
"""

from .logging import setup_logger, configure_package_logging
from .config import AppConfig, load_config

__all__ = [
    "setup_logger",
    "configure_package_logging",
    "AppConfig",
    "load_config",
]
