"""
Per-user directories for configuration and cached resources.
"""
import os
import sys
from pathlib import Path

APP_NAME = "InkstampPDF"


def get_config_dir(app_name: str = APP_NAME) -> Path:
    """
    Get the configuration directory for storing settings.

    Args:
        app_name: Name of the application

    Returns:
        Path to the config directory
    """
    if os.name == 'nt':  # Windows
        base_dir = Path(os.environ.get('APPDATA', os.path.expanduser('~')))
        config_dir = base_dir / app_name / "config"
    elif sys.platform == 'darwin':  # macOS
        config_dir = Path.home() / "Library" / "Preferences" / app_name
    else:  # Linux
        base_dir = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / ".config"))
        config_dir = base_dir / app_name

    return config_dir


def get_cache_dir(app_name: str = APP_NAME) -> Path:
    """
    Get the cache directory for downloaded resources, creating it if needed.

    Args:
        app_name: Name of the application

    Returns:
        Path to the cache directory
    """
    if os.name == 'nt':  # Windows
        cache_dir = Path(os.environ.get('LOCALAPPDATA', os.path.expanduser('~'))) / app_name / "cache"
    elif sys.platform == 'darwin':  # macOS
        cache_dir = Path.home() / "Library" / "Caches" / app_name
    else:  # Linux
        base_dir = Path(os.environ.get('XDG_CACHE_HOME', Path.home() / ".cache"))
        cache_dir = base_dir / app_name

    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir


def get_font_cache_dir(app_name: str = APP_NAME) -> Path:
    """Directory holding downloaded font files."""
    font_dir = get_cache_dir(app_name) / "fonts"
    font_dir.mkdir(parents=True, exist_ok=True)
    return font_dir
