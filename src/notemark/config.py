"""Configuration loader for notemark.toml."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

CONFIG_NAME = "notemark.toml"


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""


@dataclass
class ParserConfig:
    """Parser configuration."""
    cache: bool = True
    tables: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"


@dataclass
class NotemarkConfig:
    """Complete notemark configuration."""
    parser: ParserConfig = field(default_factory=ParserConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    source: Path | None = None


def _table(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{name}] must be a table")
    return value


def _typed(table: dict[str, Any], section: str, key: str, kind: type, default: Any) -> Any:
    value = table.get(key, default)
    if not isinstance(value, kind):
        raise ConfigError(f"{section}.{key} must be {kind.__name__}, got {type(value).__name__}")
    return value


def load_config(config_path: Path | None = None, search_dir: Path | None = None) -> NotemarkConfig:
    """
    Load configuration from notemark.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/notemark.toml
    3. search_dir/notemark.toml

    Args:
        config_path: Explicit path to config file
        search_dir: Directory for fallback search, usually the notes root

    Returns:
        NotemarkConfig with resolved settings; defaults when no file exists
    """
    toml_data: dict[str, Any] = {}
    source = None

    search_paths = []
    if config_path:
        search_paths.append(Path(config_path))
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if search_dir:
        search_paths.append(Path(search_dir) / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            try:
                with open(path, "rb") as f:
                    toml_data = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                raise ConfigError(f"Cannot read {path}: {e}") from e
            source = path
            break

    parser_data = _table(toml_data, "parser")
    parser_config = ParserConfig(
        cache=_typed(parser_data, "parser", "cache", bool, True),
        tables=_typed(parser_data, "parser", "tables", bool, True),
    )

    logging_data = _table(toml_data, "logging")
    logging_config = LoggingConfig(
        level=_typed(logging_data, "logging", "level", str, "WARNING").upper()
    )

    return NotemarkConfig(parser=parser_config, logging=logging_config, source=source)
