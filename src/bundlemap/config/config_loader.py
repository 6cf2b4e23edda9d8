# src/bundlemap/config/config_loader.py


import argparse
import sys
import traceback
from pathlib import Path
from typing import Any, cast

from apathetic_logging import getLevelNumber
from apathetic_schema import ApatheticSchema_ValidationSummary as ValidationSummary
from apathetic_utils import (
    cast_hint,
    load_jsonc,
    load_toml,
    plural,
    remove_path_in_error_message,
)
from bundlemap.logs import getAppLogger
from bundlemap.meta import PROGRAM_CONFIG

from .config_types import BundleConfig
from .config_validate import validate_config


PYPROJECT_NAME = "pyproject.toml"

# keys allowed next to a nested "bundle" section
ROOT_KEYS = {"log_level", "strict_config"}


def _pyproject_has_section(path: Path) -> bool:
    data = load_toml(path)
    if data is None:
        return False
    tool = data.get("tool")
    return isinstance(tool, dict) and PROGRAM_CONFIG in tool


def find_config(
    args: argparse.Namespace,
    cwd: Path,
    *,
    missing_level: str = "error",
) -> Path | None:
    """Locate a configuration file.

    missing_level: log-level for failing to find a configuration file.

    Search order:
      1. Explicit path from CLI (--config)
      2. In the current working directory and then each parent:
         .{PROGRAM_CONFIG}.py, .{PROGRAM_CONFIG}.jsonc, .{PROGRAM_CONFIG}.json,
         then pyproject.toml with a [tool.{PROGRAM_CONFIG}] table

    Returns the first matching path, or None if no config was found.
    """
    logger = getAppLogger()

    try:
        getLevelNumber(missing_level)
    except ValueError:
        logger.error("Invalid log level name in find_config(): %s", missing_level)
        missing_level = "error"

    # --- 1. Explicit config path ---
    if getattr(args, "config", None):
        config = Path(args.config).expanduser().resolve()
        logger.trace(f"[find_config] Checking explicit path: {config}")
        if not config.exists():
            xmsg = f"Specified config file not found: {config}"
            raise FileNotFoundError(xmsg)
        if config.is_dir():
            xmsg = f"Specified config path is a directory, not a file: {config}"
            raise ValueError(xmsg)
        return config

    # --- 2. Default candidates (closest directory wins) ---
    candidate_names = [
        f".{PROGRAM_CONFIG}.py",
        f".{PROGRAM_CONFIG}.jsonc",
        f".{PROGRAM_CONFIG}.json",
    ]
    current = cwd
    found: list[Path] = []
    while True:
        found = [current / name for name in candidate_names if (current / name).exists()]
        if not found:
            pyproject = current / PYPROJECT_NAME
            if pyproject.is_file() and _pyproject_has_section(pyproject):
                found = [pyproject]
        if found:
            break
        parent = current.parent
        if parent == current:  # reached filesystem root
            break
        current = parent

    if not found:
        logger.logDynamic(missing_level, f"No config file found in {cwd} or parents")
        return None

    # --- 3. Multiple matches at the same level (.py > .jsonc > .json) ---
    if len(found) > 1:
        names = ", ".join(p.name for p in found)
        logger.warning(
            "Multiple config files detected (%s); using %s.",
            names,
            found[0].name,
        )
    return found[0]


def _load_python_config(config_path: Path) -> dict[str, Any] | None:
    logger = getAppLogger()
    config_globals: dict[str, Any] = {}

    # Allow local imports in Python configs (e.g. from helpers import foo)
    parent_dir = str(config_path.parent)
    added_to_sys_path = parent_dir not in sys.path
    if added_to_sys_path:
        sys.path.insert(0, parent_dir)

    try:
        source = config_path.read_text(encoding="utf-8")
        exec(compile(source, str(config_path), "exec"), config_globals)  # noqa: S102
        logger.trace(f"[EXEC] globals after exec: {list(config_globals.keys())}")
    except Exception as e:
        tb = traceback.format_exc()
        xmsg = (
            f"Error while executing Python config: {config_path.name}\n"
            f"{type(e).__name__}: {e}\n{tb}"
        )
        raise RuntimeError(xmsg) from e
    finally:
        if added_to_sys_path and sys.path[0] == parent_dir:
            sys.path.pop(0)

    if "config" not in config_globals:
        xmsg = f"{config_path.name} did not define `config`"
        raise ValueError(xmsg)

    result = config_globals["config"]
    if not isinstance(result, (dict, type(None))):
        xmsg = (
            f"config in {config_path.name} must be a dict or None"
            f", not {type(result).__name__}"
        )
        raise TypeError(xmsg)
    return cast("dict[str, Any] | None", result)


def load_config(config_path: Path) -> dict[str, Any] | list[Any] | None:
    """Load configuration data from a file.

    Supports:
      - Python configs: .py files defining `config`
      - JSON/JSONC configs: .json, .jsonc files
      - pyproject.toml: the [tool.bundlemap] table

    Returns:
        The raw object defined in the config (dict, list, or None).
        Returns None for intentionally empty configs
          (e.g. empty files or `config = None`).
    """
    logger = getAppLogger()
    logger.trace(f"[load_config] Loading from {config_path} ({config_path.suffix})")

    if config_path.suffix == ".py":
        return _load_python_config(config_path)

    if config_path.name == PYPROJECT_NAME:
        try:
            data = load_toml(config_path, required=True) or {}
        except ValueError as e:
            clean_msg = remove_path_in_error_message(str(e), config_path)
            xmsg = f"Error while loading '{config_path.name}': {clean_msg}"
            raise ValueError(xmsg) from e
        section = data.get("tool", {}).get(PROGRAM_CONFIG)
        return cast("dict[str, Any] | None", section)

    try:
        return load_jsonc(config_path)
    except ValueError as e:
        clean_msg = remove_path_in_error_message(str(e), config_path)
        xmsg = (
            f"Error while loading configuration file '{config_path.name}': {clean_msg}"
        )
        raise ValueError(xmsg) from e


def parse_config(
    raw_config: dict[str, Any] | list[Any] | None,
) -> dict[str, Any] | None:
    """Normalize user config into the flat BundleConfig shape (no filesystem work).

    Accepted forms:
      - None / {}                        → None (no config)
      - {...}                            → used as is
      - {"bundle": {...}, "log_level"}   → bundle section flattened, with
                                           log_level / strict_config kept

    Unknown keys are preserved for the validation phase.
    """
    logger = getAppLogger()
    logger.trace(f"[parse_config] Parsing {type(raw_config).__name__}")

    if not raw_config:
        return None

    if not isinstance(raw_config, dict):
        xmsg = (
            f"Invalid top-level value: {type(raw_config).__name__} "
            "(expected an object with named keys)"
        )
        raise TypeError(xmsg)

    if "bundle" not in raw_config:
        return dict(raw_config)

    section = raw_config["bundle"]
    if not isinstance(section, dict):
        xmsg = f"Config key 'bundle' must be an object, not {type(section).__name__}"
        raise TypeError(xmsg)

    parsed = {k: v for k, v in raw_config.items() if k != "bundle"}
    stray = sorted(set(parsed) - ROOT_KEYS)
    if stray:
        logger.warning(
            "Config keys next to 'bundle' are merged into it: %s", ", ".join(stray)
        )
    for key, value in section.items():
        parsed[key] = value
    return parsed


def _validation_summary(
    summary: ValidationSummary,
    config_path: Path,
) -> None:
    """Pretty-print a validation summary."""
    logger = getAppLogger()
    mode = "strict mode" if summary.strict else "lenient mode"

    counts: list[str] = []
    if summary.errors:
        counts.append(f"{len(summary.errors)} error{plural(summary.errors)}")
    if summary.strict_warnings:
        counts.append(
            f"{len(summary.strict_warnings)} strict warning"
            f"{plural(summary.strict_warnings)}",
        )
    if summary.warnings:
        counts.append(
            f"{len(summary.warnings)} normal warning{plural(summary.warnings)}",
        )
    counts_msg = f"\nFound {', '.join(counts)}." if counts else ""

    if not summary.valid:
        logger.error(
            "Failed to validate configuration file %s (%s).%s",
            config_path.name,
            mode,
            counts_msg,
        )
    elif counts:
        logger.warning(
            "Validated configuration file %s (%s) with warnings.%s",
            config_path.name,
            mode,
            counts_msg,
        )
    else:
        logger.debug("Validated %s (%s) successfully.", config_path.name, mode)

    if summary.errors:
        logger.error("\nErrors:\n  • %s", "\n  • ".join(summary.errors))
    if summary.strict_warnings:
        logger.error(
            "\nStrict warnings (treated as errors):\n  • %s",
            "\n  • ".join(summary.strict_warnings),
        )
    if summary.warnings:
        logger.warning("\nWarnings (non-fatal):\n  • %s", "\n  • ".join(summary.warnings))


def load_and_validate_config(
    args: argparse.Namespace,
) -> tuple[Path, BundleConfig, ValidationSummary] | None:
    """Find, load, parse, and validate the user's configuration.

    Also applies the config's log_level early (CLI and env still win), so
    logging is settled before resolution starts.

    Returns:
        (config_path, bundle_cfg, validation_summary)
        if a config file was found, or None if no config was found.
    """
    logger = getAppLogger()
    cwd = Path.cwd().resolve()

    config_path = find_config(args, cwd, missing_level="debug")
    if config_path is None:
        return None

    raw_config = load_config(config_path)
    if raw_config is None:
        return None

    try:
        parsed_cfg = parse_config(raw_config)
    except TypeError as e:
        xmsg = f"Could not parse config {config_path.name}: {e}"
        raise TypeError(xmsg) from e
    if parsed_cfg is None:
        return None

    raw_log_level = parsed_cfg.get("log_level")
    if isinstance(raw_log_level, str) and raw_log_level:
        logger.setLevel(
            logger.determineLogLevel(args=args, root_log_level=raw_log_level)
        )

    validation_result = validate_config(parsed_cfg)
    _validation_summary(validation_result, config_path)
    if not validation_result.valid:
        xmsg = f"Configuration file {config_path.name} contains validation errors."
        exception = ValueError(xmsg)
        exception.silent = True  # type: ignore[attr-defined]
        exception.data = validation_result  # type: ignore[attr-defined]
        raise exception

    bundle_cfg: BundleConfig = cast_hint(BundleConfig, parsed_cfg)
    return config_path, bundle_cfg, validation_result
