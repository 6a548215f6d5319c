"""Tests for layered configuration."""
import pytest

from inkstamp.config import AppConfig, load_config


def test_defaults(tmp_path):
    config = load_config(tmp_path / "missing.ini", environ={})
    assert config == AppConfig.defaults()
    assert config.upload.max_upload_bytes == 20 * 1024 * 1024
    assert config.export.baseline_ratio == pytest.approx(0.8)
    assert config.editor.clone_offset == pytest.approx(0.02)
    assert config.fonts.cache_fonts is True


def test_ini_overrides_defaults(tmp_path):
    ini = tmp_path / "config.ini"
    ini.write_text("[Upload]\nmax_upload_mb = 5\n\n[Export]\nbaseline_ratio = 0.75\n",
                   encoding="utf-8")

    config = load_config(ini, environ={})
    assert config.upload.max_upload_bytes == 5 * 1024 * 1024
    assert config.export.baseline_ratio == pytest.approx(0.75)


def test_environment_overrides_ini(tmp_path):
    ini = tmp_path / "config.ini"
    ini.write_text("[Logging]\nlevel = WARNING\n", encoding="utf-8")

    config = load_config(ini, environ={
        "INKSTAMP_LOGGING__LEVEL": "DEBUG",
        "INKSTAMP_FONTS__CACHE_FONTS": "no",
        "UNRELATED": "1",
    })
    assert config.logging.level == "DEBUG"
    assert config.fonts.cache_fonts is False


def test_invalid_values_keep_defaults(tmp_path):
    config = load_config(tmp_path / "missing.ini",
                         environ={"INKSTAMP_EDITOR__CLONE_OFFSET": "lots"})
    assert config.editor.clone_offset == pytest.approx(0.02)
