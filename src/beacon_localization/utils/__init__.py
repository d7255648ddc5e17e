"""
Utility Functions Module

This module provides common utility functions used across the beacon localization project.
- Logging setup
- Typed YAML configuration
"""

from .logging import setup_logger, set_package_level
from .config import AppConfig, load_config

__all__ = [
    "setup_logger",
    "set_package_level",
    "AppConfig",
    "load_config",
]
