"""Tests for layered scan configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from DocsToApi.EventFunctions.errors import ConfigLoadError
from DocsToApi.EventFunctions.settings import (
    DEFAULT_SCRIPT_REFERENCE_PATH,
    LogFormat,
    LogLevel,
    OutputFormat,
    load_config_mapping,
    load_settings,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("SCRIPT_REFERENCE_PATH", "OUTPUT_FORMAT", "WORKERS", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(f"DOCSTOAPI_{name}", raising=False)


def test_defaults():
    settings = load_settings()
    assert settings.script_reference_path == DEFAULT_SCRIPT_REFERENCE_PATH
    assert settings.output_format is OutputFormat.XML
    assert settings.workers == 1
    assert settings.log_level is LogLevel.INFO
    assert settings.log_format is LogFormat.CONSOLE


def test_precedence_file_env_overrides(tmp_path: Path, monkeypatch):
    config = tmp_path / "docstoapi.toml"
    config.write_text(
        '[docstoapi]\nworkers = 2\noutput_format = "json"\nlog_level = "debug"\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("DOCSTOAPI_WORKERS", "3")

    settings = load_settings(config)
    assert settings.workers == 3
    assert settings.output_format is OutputFormat.JSON
    assert settings.log_level is LogLevel.DEBUG

    settings = load_settings(config, workers=5, log_level=None)
    assert settings.workers == 5
    assert settings.log_level is LogLevel.DEBUG


def test_yaml_and_json_files(tmp_path: Path):
    yaml_file = tmp_path / "settings.yaml"
    yaml_file.write_text("script_reference_path: Docs/ScriptReference\n", encoding="utf-8")
    assert load_settings(yaml_file).script_reference_path == Path("Docs/ScriptReference")

    json_file = tmp_path / "settings.json"
    json_file.write_text('{"log_format": "JSON"}', encoding="utf-8")
    assert load_settings(json_file).log_format is LogFormat.JSON


@pytest.mark.parametrize(
    ("filename", "content"),
    [
        ("broken.toml", "workers = ["),
        ("broken.json", "{not json"),
        ("broken.yaml", "a: [unclosed"),
        ("list.json", "[1, 2]"),
    ],
)
def test_malformed_files_raise_config_load_error(tmp_path: Path, filename, content):
    path = tmp_path / filename
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigLoadError):
        load_config_mapping(path)


def test_missing_file_raises_config_load_error(tmp_path: Path):
    with pytest.raises(ConfigLoadError):
        load_settings(tmp_path / "absent.toml")


def test_invalid_values_are_rejected():
    with pytest.raises(ValidationError):
        load_settings(workers=0)
    with pytest.raises(ValidationError):
        load_settings(script_reference_path=Path("/abs/ScriptReference"))
