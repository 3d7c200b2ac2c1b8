"""Tests for configuration loading."""

import os
import tempfile
from pathlib import Path

import pytest

from notemark.config import ConfigError, load_config


def test_load_config_defaults():
    """Test loading config with defaults when no file exists."""
    with tempfile.TemporaryDirectory() as tmpdir:
        original_cwd = os.getcwd()
        try:
            os.chdir(tmpdir)
            config = load_config()
        finally:
            os.chdir(original_cwd)

    assert config.parser.cache is True
    assert config.parser.tables is True
    assert config.logging.level == "WARNING"
    assert config.source is None


def test_load_config_from_file():
    """Test loading config from a file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "notemark.toml"
        config_path.write_text("""
[parser]
cache = false
tables = false

[logging]
level = "debug"
""")

        config = load_config(config_path=config_path)

        assert config.parser.cache is False
        assert config.parser.tables is False
        assert config.logging.level == "DEBUG"
        assert config.source == config_path


def test_load_config_search_dir():
    """Test fallback to the search directory."""
    with tempfile.TemporaryDirectory() as cwd, tempfile.TemporaryDirectory() as notes:
        (Path(notes) / "notemark.toml").write_text("[parser]\ntables = false\n")
        original_cwd = os.getcwd()
        try:
            os.chdir(cwd)
            config = load_config(search_dir=Path(notes))
        finally:
            os.chdir(original_cwd)

        assert config.parser.tables is False
        assert config.parser.cache is True


def test_load_config_cwd_wins_over_search_dir():
    """Test cwd/notemark.toml is found before search_dir."""
    with tempfile.TemporaryDirectory() as cwd, tempfile.TemporaryDirectory() as notes:
        (Path(cwd) / "notemark.toml").write_text("[logging]\nlevel = \"INFO\"\n")
        (Path(notes) / "notemark.toml").write_text("[logging]\nlevel = \"ERROR\"\n")
        original_cwd = os.getcwd()
        try:
            os.chdir(cwd)
            config = load_config(search_dir=Path(notes))
        finally:
            os.chdir(original_cwd)

        assert config.logging.level == "INFO"


def test_load_config_invalid_toml():
    """Test syntax errors become ConfigError."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "notemark.toml"
        config_path.write_text("[parser\ncache = ")

        with pytest.raises(ConfigError):
            load_config(config_path=config_path)


def test_load_config_wrong_type():
    """Test wrongly typed values become ConfigError."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "notemark.toml"
        config_path.write_text('[parser]\ncache = "yes"\n')

        with pytest.raises(ConfigError):
            load_config(config_path=config_path)
