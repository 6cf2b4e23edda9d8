# tests/5_core/test_parse_config.py

from typing import Any

import pytest

import bundlemap.config as mod_config


@pytest.mark.parametrize("raw", [None, {}, []])
def test_parse_config_empty_is_none(raw: Any) -> None:
    assert mod_config.parse_config(raw) is None


def test_parse_config_flat_dict_is_copied() -> None:
    # --- setup ---
    raw = {"root_dir": "dist"}

    # --- execute ---
    parsed = mod_config.parse_config(raw)

    # --- verify ---
    assert parsed == raw
    assert parsed is not raw


def test_parse_config_rejects_list() -> None:
    with pytest.raises(TypeError, match="expected an object"):
        mod_config.parse_config(["dist"])


def test_parse_config_flattens_bundle_section() -> None:
    # --- execute ---
    parsed = mod_config.parse_config(
        {
            "log_level": "debug",
            "strict_config": False,
            "bundle": {"root_dir": "dist", "external": ["react"]},
        }
    )

    # --- verify ---
    assert parsed == {
        "log_level": "debug",
        "strict_config": False,
        "root_dir": "dist",
        "external": ["react"],
    }


def test_parse_config_bundle_section_wins_and_warns(
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- execute ---
    parsed = mod_config.parse_config(
        {"root_dir": "outer", "bundle": {"root_dir": "inner"}}
    )

    # --- verify ---
    assert parsed == {"root_dir": "inner"}
    assert "merged into it: root_dir" in capsys.readouterr().err


def test_parse_config_bundle_must_be_object() -> None:
    with pytest.raises(TypeError, match="'bundle' must be an object"):
        mod_config.parse_config({"bundle": ["dist"]})
