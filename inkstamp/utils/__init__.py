"""
Utility functions and helpers.
"""
from .resource_loader import (
    get_config_dir,
    get_cache_dir,
    get_font_cache_dir,
)
from .logging_setup import configure_logging

__all__ = [
    'get_config_dir',
    'get_cache_dir',
    'get_font_cache_dir',
    'configure_logging',
]
