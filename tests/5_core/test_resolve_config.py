# tests/5_core/test_resolve_config.py

from argparse import Namespace
from pathlib import Path
from types import MappingProxyType

import pytest

import bundlemap.config as mod_config
import bundlemap.constants as mod_constants
from bundlemap.config import BundleConfig


def _args(**kwargs: object) -> Namespace:
    defaults: dict[str, object] = {
        "root_dir": None,
        "workspace": None,
        "downlevel": None,
        "mappings": None,
    }
    defaults.update(kwargs)
    return Namespace(**defaults)


def test_defaults_without_config(tmp_path: Path) -> None:
    # --- execute ---
    settings = mod_config.resolve_config(None, config_dir=tmp_path, cwd=tmp_path)

    # --- verify ---
    assert settings.workspace_name == ""
    assert settings.root_dir == "."
    assert settings.base_dir == str(tmp_path)
    assert settings.banner_file is None
    assert settings.stamp_data is None
    assert dict(settings.module_mappings) == {}
    assert settings.downlevel_to_es5 is False
    assert settings.node_modules_root == "node_modules"
    assert settings.external == ()
    assert settings.version_placeholder == mod_constants.DEFAULT_VERSION_PLACEHOLDER
    assert settings.stamp_version_key == mod_constants.DEFAULT_STAMP_VERSION_KEY
    assert settings.main_fields == tuple(mod_constants.DEFAULT_MAIN_FIELDS)
    assert settings.resolve_extensions == (".js", ".json", ".node")
    assert settings.module_format_extensions == (".mjs",)
    assert settings.node_executable == "node"


def test_config_values_are_frozen(tmp_path: Path) -> None:
    # --- setup ---
    cfg: BundleConfig = {
        "module_mappings": {"@lib": "lib"},
        "globals": {"react": "React"},
        "external": ["react"],
    }

    # --- execute ---
    settings = mod_config.resolve_config(cfg, config_dir=tmp_path, cwd=tmp_path)

    # --- verify ---
    assert isinstance(settings.module_mappings, MappingProxyType)
    assert isinstance(settings.globals, MappingProxyType)
    assert settings.external == ("react",)
    with pytest.raises(TypeError):
        settings.module_mappings["@x"] = "x"  # type: ignore[index]
    # the caller's dict is not shared
    cfg["module_mappings"]["@x"] = "x"
    assert "@x" not in settings.module_mappings


def test_file_paths_are_relative_to_config_dir(tmp_path: Path) -> None:
    # --- setup ---
    config_dir = tmp_path / "conf"
    cwd = tmp_path / "exec"
    cfg: BundleConfig = {"banner_file": "banner.txt", "stamp_data": "/abs/status.txt"}

    # --- execute ---
    settings = mod_config.resolve_config(cfg, config_dir=config_dir, cwd=cwd)

    # --- verify ---
    assert settings.banner_file == (config_dir / "banner.txt").resolve()
    assert settings.stamp_data == Path("/abs/status.txt").resolve()
    assert settings.base_dir == str(cwd)


def test_cli_overrides_win(tmp_path: Path) -> None:
    # --- setup ---
    cfg: BundleConfig = {
        "root_dir": "dist",
        "workspace_name": "ws",
        "downlevel_to_es5": True,
        "module_mappings": {"@lib": "lib", "@util": "util"},
    }
    args = _args(
        root_dir="bazel-bin",
        workspace="other",
        downlevel=False,
        mappings=["@lib=packages/lib", "@new=new/index.d.ts"],
    )

    # --- execute ---
    settings = mod_config.resolve_config(cfg, args, config_dir=tmp_path, cwd=tmp_path)

    # --- verify ---
    assert settings.root_dir == "bazel-bin"
    assert settings.workspace_name == "other"
    assert settings.downlevel_to_es5 is False
    assert dict(settings.module_mappings) == {
        "@lib": "packages/lib",
        "@util": "util",
        "@new": "new/index.d.ts",
    }


def test_unset_cli_flags_keep_config(tmp_path: Path) -> None:
    # --- setup ---
    cfg: BundleConfig = {"root_dir": "dist", "downlevel_to_es5": True}

    # --- execute ---
    settings = mod_config.resolve_config(
        cfg, _args(), config_dir=tmp_path, cwd=tmp_path
    )

    # --- verify ---
    assert settings.root_dir == "dist"
    assert settings.downlevel_to_es5 is True


@pytest.mark.parametrize("bad", ["@lib", "=lib", "@lib=", "@lib/=lib"])
def test_parse_mapping_overrides_rejects_malformed(bad: str) -> None:
    with pytest.raises(ValueError, match="Invalid --map"):
        mod_config.parse_mapping_overrides([bad])


def test_parse_mapping_overrides_later_pairs_win() -> None:
    result = mod_config.parse_mapping_overrides(["@a=one", " @a = two "])
    assert result == {"@a": "two"}


def test_output_root_is_absolute(tmp_path: Path) -> None:
    # --- execute ---
    settings = mod_config.resolve_config(
        {"root_dir": "dist/../out"}, config_dir=tmp_path, cwd=tmp_path
    )

    # --- verify ---
    assert settings.output_root == str(tmp_path / "out")
