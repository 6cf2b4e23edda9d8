# tests/5_core/test_load_and_validate_config.py

from argparse import Namespace
from pathlib import Path

import pytest

import bundlemap.config as mod_config
import bundlemap.logs as mod_logs
from tests.utils import write_config_file


def test_returns_none_without_config(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    # --- setup ---
    monkeypatch.chdir(tmp_path)

    # --- execute and verify ---
    assert mod_config.load_and_validate_config(Namespace(config=None)) is None


def test_returns_path_config_and_summary(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    # --- setup ---
    path = write_config_file(tmp_path, {"root_dir": "dist"})
    monkeypatch.chdir(tmp_path)

    # --- execute ---
    result = mod_config.load_and_validate_config(Namespace(config=None))

    # --- verify ---
    assert result is not None
    config_path, cfg, summary = result
    assert config_path == path
    assert cfg == {"root_dir": "dist"}
    assert summary.valid


def test_invalid_config_raises_silent_value_error(
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    # --- setup ---
    write_config_file(tmp_path, {"external": "react"})
    monkeypatch.chdir(tmp_path)

    # --- execute ---
    with pytest.raises(ValueError, match="validation errors") as exc_info:
        mod_config.load_and_validate_config(Namespace(config=None))

    # --- verify ---
    assert getattr(exc_info.value, "silent", False)
    assert not exc_info.value.data.valid  # type: ignore[attr-defined]
    err = capsys.readouterr().err
    assert "Failed to validate configuration file .bundlemap.json" in err
    assert "`external` expected list[str]" in err


def test_config_log_level_applies_when_cli_is_silent(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    # --- setup ---
    write_config_file(tmp_path, {"log_level": "warning"})
    monkeypatch.chdir(tmp_path)

    # --- execute ---
    mod_config.load_and_validate_config(Namespace(config=None, log_level=None))

    # --- verify ---
    assert mod_logs.getAppLogger().levelName == "WARNING"


def test_cli_log_level_beats_config(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    # --- setup ---
    write_config_file(tmp_path, {"log_level": "warning"})
    monkeypatch.chdir(tmp_path)

    # --- execute ---
    mod_config.load_and_validate_config(Namespace(config=None, log_level="debug"))

    # --- verify ---
    assert mod_logs.getAppLogger().levelName == "DEBUG"
