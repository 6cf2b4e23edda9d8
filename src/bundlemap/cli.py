# src/bundlemap/cli.py

import argparse
import json
import platform
import sys
from dataclasses import dataclass
from difflib import get_close_matches
from pathlib import Path

from apathetic_logging import LEVEL_ORDER, safeLog
from apathetic_utils import cast_hint

from .assembler import BundlerConfig, assemble_config
from .config import (
    BundleConfig,
    BundleSettings,
    load_and_validate_config,
    resolve_config,
)
from .logs import getAppLogger
from .meta import PROGRAM_DISPLAY, PROGRAM_SCRIPT, get_metadata
from .resolver import ModuleMappingResolver
from .utils import shorten_path_for_display


# --------------------------------------------------------------------------- #
# CLI setup and helpers
# --------------------------------------------------------------------------- #


class HintingArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        # Build known option strings: ["-v", "--verbose", "--log-level", ...]
        known_opts: list[str] = []
        for action in self._actions:
            known_opts.extend([s for s in action.option_strings if s])

        hint_lines: list[str] = []
        # Argparse message for bad flags is typically
        # "unrecognized arguments: --romt-dir ..."
        if "unrecognized arguments:" in message:
            bad = message.split("unrecognized arguments:", 1)[1].strip()
            bad_args = [tok for tok in bad.split() if tok.startswith("-")]
            for arg in bad_args:
                close = get_close_matches(arg, known_opts, n=1, cutoff=0.6)
                if close:
                    hint_lines.append(f"Hint: did you mean {close[0]}?")

        self.print_usage(sys.stderr)
        full = f"{self.prog}: error: {message}"
        if hint_lines:
            full += "\n" + "\n".join(hint_lines)
        self.exit(2, full + "\n")


def _setup_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = HintingArgumentParser(
        prog=PROGRAM_SCRIPT,
        description="Resolve mapped module names and assemble bundler settings.",
    )

    parser.add_argument("-c", "--config", help="Path to the bundle config file.")

    # --- Overrides ---
    parser.add_argument(
        "--root-dir",
        help="Override the output root the mapped modules are looked up in.",
    )
    parser.add_argument("--workspace", help="Override the workspace name.")
    parser.add_argument(
        "--map",
        dest="mappings",
        action="append",
        metavar="KEY=VALUE",
        help="Add or override a module mapping (repeatable).",
    )
    downlevel = parser.add_mutually_exclusive_group()
    downlevel.add_argument(
        "--downlevel",
        dest="downlevel",
        action="store_const",
        const=True,
        help="Downlevel bundle output to ES5.",
    )
    downlevel.add_argument(
        "--no-downlevel",
        dest="downlevel",
        action="store_const",
        const=False,
        help="Leave bundle output as ES2015.",
    )
    downlevel.set_defaults(downlevel=None)

    # --- Color ---
    color = parser.add_mutually_exclusive_group()
    color.add_argument(
        "--no-color",
        dest="use_color",
        action="store_const",
        const=False,
        help="Disable ANSI color output.",
    )
    color.add_argument(
        "--color",
        dest="use_color",
        action="store_const",
        const=True,
        help="Force-enable ANSI color output (overrides auto-detect).",
    )
    color.set_defaults(use_color=None)

    # --- Version and verbosity ---
    parser.add_argument("--version", action="store_true", help="Show version info.")

    log_level = parser.add_mutually_exclusive_group()
    log_level.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="Suppress non-critical output (same as --log-level warning).",
    )
    log_level.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const="debug",
        dest="log_level",
        help="Verbose output (same as --log-level debug).",
    )
    log_level.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        default=None,
        dest="log_level",
        help="Set log verbosity level.",
    )

    # --- Commands ---
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    resolve = commands.add_parser(
        "resolve", help="Resolve one import specifier and print the file path."
    )
    resolve.add_argument("specifier", help="Import specifier, e.g. '@lib/util'.")
    resolve.add_argument(
        "--importer",
        help="Path of the importing module (required for './x' specifiers).",
    )

    config = commands.add_parser(
        "config", help="Show the assembled bundler configuration."
    )
    config.add_argument("--json", action="store_true", help="Print as JSON.")

    commands.add_parser("banner", help="Print the banner with the version stamped in.")

    return parser


def _initialize_logger(args: argparse.Namespace) -> None:
    """Initialize logger with CLI args, env vars, and defaults."""
    logger = getAppLogger()
    log_level = logger.determineLogLevel(args=args)
    logger.setLevel(log_level)
    use_color = getattr(args, "use_color", None)
    logger.enable_color = (
        use_color if use_color is not None else logger.determineColorEnabled()
    )
    logger.trace("[BOOT] log-level initialized: %s", logger.levelName)

    logger.debug(
        "Runtime: Python %s (%s)\n    %s",
        platform.python_version(),
        platform.python_implementation(),
        sys.version.replace("\n", " "),
    )


@dataclass
class _LoadedConfig:
    config_path: Path | None
    bundle_cfg: BundleConfig
    settings: BundleSettings
    config_dir: Path
    cwd: Path


def _load_and_resolve_config(args: argparse.Namespace) -> _LoadedConfig:
    """Load config and resolve it with CLI overrides into settings."""
    logger = getAppLogger()

    config_path: Path | None = None
    bundle_cfg: BundleConfig | None = None
    config_result = load_and_validate_config(args)
    if config_result is not None:
        config_path, bundle_cfg, _validation_summary = config_result

    logger.trace("[CONFIG] log-level re-resolved from config: %s", logger.levelName)

    cwd = Path.cwd().resolve()
    config_dir = config_path.parent if config_path else cwd

    if bundle_cfg is None:
        logger.debug("No config file found; using CLI flags and defaults.")
        bundle_cfg = cast_hint(BundleConfig, {})

    settings = resolve_config(bundle_cfg, args, config_dir=config_dir, cwd=cwd)
    return _LoadedConfig(
        config_path=config_path,
        bundle_cfg=bundle_cfg,
        settings=settings,
        config_dir=config_dir,
        cwd=cwd,
    )


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


def _run_resolve(config: _LoadedConfig, args: argparse.Namespace) -> int:
    logger = getAppLogger()
    resolver = ModuleMappingResolver(config.settings)
    resolved = resolver.resolve(args.specifier, args.importer)
    if resolved is None:
        logger.warning(
            "No mapping for '%s'; deferring to node module resolution.",
            args.specifier,
        )
        return 0
    print(resolved)
    return 0


def _run_config(config: _LoadedConfig, args: argparse.Namespace) -> int:
    logger = getAppLogger()
    bundler: BundlerConfig = assemble_config(config.settings)
    if args.json:
        print(json.dumps(bundler.to_dict(), indent=2))
        return 0

    if config.config_path:
        logger.info(
            "Using config: %s",
            shorten_path_for_display(
                config.config_path, cwd=config.cwd, config_dir=config.config_dir
            ),
        )
    else:
        logger.info("Running without a config file.")
    settings = config.settings
    logger.info("Output root: %s", settings.root_dir)
    logger.info("Workspace: %s", settings.workspace_name or "(none)")
    logger.info("Plugins: %s", ", ".join(bundler.plugin_names))
    for key, value in settings.module_mappings.items():
        logger.info("  %s → %s", key, value)
    if bundler.external:
        logger.info("External: %s", ", ".join(bundler.external))
    for name, global_name in bundler.output.globals.items():
        logger.info("  %s = %s", name, global_name)
    return 0


def _run_banner(config: _LoadedConfig, args: argparse.Namespace) -> int:  # noqa: ARG001
    bundler = assemble_config(config.settings)
    if bundler.output.banner:
        sys.stdout.write(bundler.output.banner)
        if not bundler.output.banner.endswith("\n"):
            sys.stdout.write("\n")
    return 0


COMMANDS = {
    "resolve": _run_resolve,
    "config": _run_config,
    "banner": _run_banner,
}


# --------------------------------------------------------------------------- #
# Main entry
# --------------------------------------------------------------------------- #


def main(argv: list[str] | None = None) -> int:
    logger = getAppLogger()  # init (use env + defaults)

    try:
        parser = _setup_parser()
        args = parser.parse_args(argv)

        # --- Early runtime init (use CLI + env + defaults) ---
        _initialize_logger(args)

        if args.version:
            meta = get_metadata()
            logger.info("%s %s (%s)", PROGRAM_DISPLAY, meta.version, meta.commit)
            return 0

        if args.command is None:
            parser.print_help(sys.stderr)
            return 2

        config = _load_and_resolve_config(args)
        return COMMANDS[args.command](config, args)

    except (FileNotFoundError, ValueError, TypeError, RuntimeError) as e:
        # controlled termination
        silent = getattr(e, "silent", False)
        if not silent:
            try:
                logger.errorIfNotDebug(str(e))
            except Exception:  # noqa: BLE001
                safeLog(f"[FATAL] Logging failed while reporting: {e}")
        return 1

    except Exception as e:  # noqa: BLE001
        # unexpected internal error
        try:
            logger.criticalIfNotDebug("Unexpected internal error: %s", e)
        except Exception:  # noqa: BLE001
            safeLog(f"[FATAL] Logging failed while reporting: {e}")
        return 1
