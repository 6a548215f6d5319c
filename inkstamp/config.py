"""
Layered application configuration.

Precedence (lowest to highest): embedded defaults, ``config.ini`` in the
user config directory (or an explicit path), environment variables named
``INKSTAMP_<SECTION>__<KEY>``.
"""
import configparser
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from inkstamp.utils.resource_loader import get_config_dir

logger = logging.getLogger(__name__)

ENV_PREFIX = "INKSTAMP_"
CONFIG_FILE_NAME = "config.ini"

INTER_FONT_URL = (
    "https://raw.githubusercontent.com/google/fonts/main/ofl/inter/static/Inter-Regular.ttf"
)

_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "Upload": {
        "max_upload_mb": "20",
    },
    "Export": {
        "baseline_ratio": "0.8",
        "signatures_dir": "",
    },
    "Fonts": {
        "inter_font_url": INTER_FONT_URL,
        "font_fetch_timeout": "10",
        "cache_fonts": "true",
    },
    "Editor": {
        "clone_offset": "0.02",
        "clone_max": "0.98",
        "nudge_step_px": "1",
        "nudge_step_shift_px": "10",
        "default_font_size": "14",
        "default_font_family": "Inter, system-ui, sans-serif",
        "default_color": "#111111",
        "default_image_width": "150",
        "default_image_height": "75",
    },
    "Logging": {
        "level": "INFO",
    },
}


@dataclass
class UploadConfig:
    max_upload_mb: float = 20.0

    @property
    def max_upload_bytes(self) -> int:
        return int(self.max_upload_mb * 1024 * 1024)


@dataclass
class ExportConfig:
    baseline_ratio: float = 0.8
    signatures_dir: str = ""


@dataclass
class FontsConfig:
    inter_font_url: str = INTER_FONT_URL
    font_fetch_timeout: float = 10.0
    cache_fonts: bool = True


@dataclass
class EditorConfig:
    clone_offset: float = 0.02
    clone_max: float = 0.98
    nudge_step_px: float = 1.0
    nudge_step_shift_px: float = 10.0
    default_font_size: float = 14.0
    default_font_family: str = "Inter, system-ui, sans-serif"
    default_color: str = "#111111"
    default_image_width: float = 150.0
    default_image_height: float = 75.0


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class AppConfig:
    upload: UploadConfig
    export: ExportConfig
    fonts: FontsConfig
    editor: EditorConfig
    logging: LoggingConfig

    @classmethod
    def defaults(cls) -> "AppConfig":
        return _build_config(_DEFAULTS)


def _cast(value: Any, typ: type) -> Any:
    if typ is bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if typ is int:
        return int(value)
    if typ is float:
        return float(value)
    return typ(value)


def _build_dataclass(cls: type, data: Dict[str, Any]) -> Any:
    kwargs = {}
    for field in fields(cls):
        if field.name not in data:
            continue
        try:
            kwargs[field.name] = _cast(data[field.name], field.type)
        except (TypeError, ValueError):
            logger.warning(
                "Ignoring invalid config value %s=%r for %s",
                field.name, data[field.name], cls.__name__,
            )
    return cls(**kwargs)


def _build_config(merged: Dict[str, Dict[str, Any]]) -> AppConfig:
    return AppConfig(
        upload=_build_dataclass(UploadConfig, merged.get("Upload", {})),
        export=_build_dataclass(ExportConfig, merged.get("Export", {})),
        fonts=_build_dataclass(FontsConfig, merged.get("Fonts", {})),
        editor=_build_dataclass(EditorConfig, merged.get("Editor", {})),
        logging=_build_dataclass(LoggingConfig, merged.get("Logging", {})),
    )


def _apply(target: Dict[str, Dict[str, Any]], source: Dict[str, Dict[str, Any]]) -> None:
    for section, items in source.items():
        sec = target.setdefault(section, {})
        for key, value in items.items():
            sec[key] = value


def _read_ini(path: Path) -> Dict[str, Dict[str, Any]]:
    cp = configparser.ConfigParser()
    try:
        cp.read(path, encoding="utf-8")
    except configparser.Error as e:
        logger.warning("Could not parse config file %s: %s", path, e)
        return {}
    return {section: dict(cp.items(section)) for section in cp.sections()}


def _env_overlays(environ: Optional[Dict[str, str]] = None) -> Dict[str, Dict[str, Any]]:
    environ = os.environ if environ is None else environ
    result: Dict[str, Dict[str, Any]] = {}
    for env_key, value in environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        parts = env_key[len(ENV_PREFIX):].split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        result.setdefault(section.title(), {})[key.lower()] = value
    return result


def default_config_path() -> Path:
    return get_config_dir() / CONFIG_FILE_NAME


def load_config(path: Optional[Union[str, Path]] = None,
                environ: Optional[Dict[str, str]] = None) -> AppConfig:
    """
    Load the application configuration.

    Args:
        path: Optional INI file; defaults to ``config.ini`` in the user
            config directory. A missing file is not an error.
        environ: Environment mapping to read overrides from (``os.environ``
            when omitted)

    Returns:
        The merged configuration
    """
    merged: Dict[str, Dict[str, Any]] = {}
    _apply(merged, _DEFAULTS)

    ini_path = Path(path) if path is not None else default_config_path()
    if ini_path.is_file():
        _apply(merged, _read_ini(ini_path))

    _apply(merged, _env_overlays(environ))
    return _build_config(merged)
