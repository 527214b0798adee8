"""
Scan configuration.

Settings are layered with the usual precedence:
explicit overrides (CLI flags) > ``DOCSTOAPI_*`` environment variables >
configuration file (TOML, YAML or JSON) > defaults.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigLoadError

__all__ = [
    "DEFAULT_SCRIPT_REFERENCE_PATH",
    "LogFormat",
    "LogLevel",
    "OutputFormat",
    "ScanSettings",
    "load_config_mapping",
    "load_settings",
]

DEFAULT_SCRIPT_REFERENCE_PATH = Path("Documentation/en/ScriptReference")
CONFIG_SECTION = "docstoapi"


class LogLevel(str, Enum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Supported log output formats."""

    CONSOLE = "console"
    JSON = "json"


class OutputFormat(str, Enum):
    """Catalog export formats."""

    XML = "xml"
    JSON = "json"


class ScanSettings(BaseSettings):
    """Configuration for a documentation sweep."""

    model_config = SettingsConfigDict(
        env_prefix="DOCSTOAPI_",
        case_sensitive=False,
        extra="ignore",
    )

    script_reference_path: Path = Field(
        DEFAULT_SCRIPT_REFERENCE_PATH,
        description="Script reference directory, relative to each documentation root",
    )
    output_format: OutputFormat = Field(OutputFormat.XML, description="Catalog export format")
    workers: int = Field(1, ge=1, le=64, description="Threads used to extract pages")
    log_level: LogLevel = Field(LogLevel.INFO, description="Root logging level")
    log_format: LogFormat = Field(LogFormat.CONSOLE, description="Console text or JSON lines")

    @field_validator("script_reference_path")
    @classmethod
    def _relative_reference_path(cls, value: Path) -> Path:
        if value.is_absolute():
            raise ValueError("script_reference_path must be relative to the documentation root")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @field_validator("log_format", "output_format", mode="before")
    @classmethod
    def _lower_choice(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    def as_dict(self) -> Dict[str, Any]:
        return json.loads(self.model_dump_json())


def load_config_mapping(path: Path) -> Dict[str, Any]:
    """Load a configuration mapping from JSON, YAML, or TOML."""

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Cannot read configuration file {path}: {exc}") from exc

    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        import yaml

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigLoadError(f"Failed to parse YAML configuration {path}: {exc}") from exc
    elif suffix == ".toml":
        import tomllib

        try:
            data = tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigLoadError(f"Failed to parse TOML configuration {path}: {exc}") from exc
    else:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigLoadError(f"Failed to parse JSON configuration {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(
            f"Configuration file {path} must contain an object; received {type(data).__name__}."
        )
    section = data.get(CONFIG_SECTION)
    return dict(section) if isinstance(section, dict) else data


def load_settings(config_path: Optional[Path] = None, **overrides: Any) -> ScanSettings:
    """Build :class:`ScanSettings` from a config file, the environment and ``overrides``.

    ``None`` overrides are ignored so CLI options that were not given fall
    through to lower layers.
    """

    layered: Dict[str, Any] = {}
    if config_path is not None:
        layered.update(load_config_mapping(Path(config_path)))

    from_env = ScanSettings()
    layered.update({name: getattr(from_env, name) for name in from_env.model_fields_set})
    layered.update({key: value for key, value in overrides.items() if value is not None})
    return ScanSettings(**layered)
