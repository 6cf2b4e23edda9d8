# src/bundlemap/config/config_resolve.py


import argparse
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from bundlemap.constants import (
    DEFAULT_DOWNLEVEL_TO_ES5,
    DEFAULT_MAIN_FIELDS,
    DEFAULT_MODULE_FORMAT_EXTENSIONS,
    DEFAULT_NODE_EXECUTABLE,
    DEFAULT_NODE_MODULES_ROOT,
    DEFAULT_RESOLVE_EXTENSIONS,
    DEFAULT_ROOT_DIR,
    DEFAULT_STAMP_VERSION_KEY,
    DEFAULT_VERSION_PLACEHOLDER,
    DEFAULT_WORKSPACE_NAME,
)
from bundlemap.logs import getAppLogger

from .config_types import BundleConfig, BundleSettings


# --------------------------------------------------------------------------- #
# helpers
# --------------------------------------------------------------------------- #


def parse_mapping_overrides(values: Iterable[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` pairs from the command line (later pairs win)."""
    mappings: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        key = key.strip()
        value = value.strip()
        if not sep or not key or not value:
            xmsg = f"Invalid --map value '{item}' (expected KEY=VALUE)"
            raise ValueError(xmsg)
        if key.endswith("/"):
            xmsg = f"Invalid --map key '{key}': must not end with '/'"
            raise ValueError(xmsg)
        mappings[key] = value
    return mappings


def _resolve_file(value: str | None, config_dir: Path) -> Path | None:
    """Config-relative path for banner/stamp files; empty means unset."""
    if not value:
        return None
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = config_dir / path
    return path.resolve()


def _string_list(value: Any, default: list[str]) -> list[str]:
    if isinstance(value, list):
        return [str(v) for v in value]
    return list(default)


# --------------------------------------------------------------------------- #
# main resolver
# --------------------------------------------------------------------------- #


def resolve_config(
    cfg: BundleConfig | None,
    args: argparse.Namespace | None = None,
    *,
    config_dir: Path,
    cwd: Path,
) -> BundleSettings:
    """Turn a validated config plus CLI overrides into BundleSettings.

    Precedence: CLI flag → config → default. File paths in the config are
    relative to the config file's directory; `root_dir` and
    `node_modules_root` stay relative to `cwd`, which becomes `base_dir`.
    """
    logger = getAppLogger()
    cfg = cfg or BundleConfig()

    workspace_name = cfg.get("workspace_name", DEFAULT_WORKSPACE_NAME)
    root_dir = cfg.get("root_dir", DEFAULT_ROOT_DIR)
    downlevel = cfg.get("downlevel_to_es5", DEFAULT_DOWNLEVEL_TO_ES5)
    mappings = dict(cfg.get("module_mappings") or {})

    if args is not None:
        if getattr(args, "root_dir", None):
            root_dir = args.root_dir
        if getattr(args, "workspace", None) is not None:
            workspace_name = args.workspace
        if getattr(args, "downlevel", None) is not None:
            downlevel = args.downlevel
        overrides = getattr(args, "mappings", None)
        if overrides:
            mappings.update(parse_mapping_overrides(overrides))

    settings = BundleSettings(
        workspace_name=workspace_name,
        root_dir=root_dir,
        base_dir=str(cwd),
        banner_file=_resolve_file(cfg.get("banner_file"), config_dir),
        stamp_data=_resolve_file(cfg.get("stamp_data"), config_dir),
        module_mappings=mappings,
        downlevel_to_es5=bool(downlevel),
        node_modules_root=cfg.get("node_modules_root", DEFAULT_NODE_MODULES_ROOT),
        external=tuple(cfg.get("external") or ()),
        globals=dict(cfg.get("globals") or {}),
        version_placeholder=cfg.get("version_placeholder", DEFAULT_VERSION_PLACEHOLDER),
        stamp_version_key=cfg.get("stamp_version_key", DEFAULT_STAMP_VERSION_KEY),
        main_fields=tuple(_string_list(cfg.get("main_fields"), DEFAULT_MAIN_FIELDS)),
        resolve_extensions=tuple(
            _string_list(cfg.get("resolve_extensions"), DEFAULT_RESOLVE_EXTENSIONS)
        ),
        module_format_extensions=tuple(
            _string_list(
                cfg.get("module_format_extensions"), DEFAULT_MODULE_FORMAT_EXTENSIONS
            )
        ),
        node_executable=cfg.get("node_executable", DEFAULT_NODE_EXECUTABLE),
    )
    logger.trace(
        f"[resolve_config] root_dir={settings.root_dir!r}"
        f" workspace={settings.workspace_name!r}"
        f" mappings={len(settings.module_mappings)}"
    )
    return settings
