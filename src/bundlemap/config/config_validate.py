# src/bundlemap/config/config_validate.py


from typing import Any

from apathetic_logging import LEVEL_ORDER
from apathetic_schema import ApatheticSchema_ValidationSummary as ValidationSummary
from apathetic_schema import check_schema_conformance, collect_msg
from apathetic_utils import cast_hint, schema_from_typeddict
from bundlemap.constants import DEFAULT_STRICT_CONFIG
from bundlemap.logs import getAppLogger

from .config_types import BundleConfig


# --- constants ------------------------------------------------------

# Field-specific type examples for better error messages
# Dict format: {field_pattern: example_value}
# Wildcard patterns (with *) are supported for matching multiple fields
FIELD_EXAMPLES: dict[str, str] = {
    "root.workspace_name": '"my_workspace"',
    "root.root_dir": '"bazel-out/k8-fastbuild/bin"',
    "root.node_modules_root": '"external/npm/node_modules"',
    "root.banner_file": '"LICENSE.banner.txt"',
    "root.stamp_data": '"bazel-out/volatile-status.txt"',
    "root.version_placeholder": '"0.0.0-PLACEHOLDER"',
    "root.stamp_version_key": '"BUILD_SCM_VERSION"',
    "root.module_mappings": '{"@lib": "packages/lib"}',
    "root.module_mappings.*": '"packages/lib/index.d.ts"',
    "root.external": '["react", "rxjs"]',
    "root.globals": '{"react": "React"}',
    "root.main_fields": '["module", "main"]',
    "root.resolve_extensions": '[".js", ".json"]',
    "root.module_format_extensions": '[".mjs"]',
    "root.downlevel_to_es5": "true",
    "root.node_executable": '"node"',
    "root.log_level": '"debug"',
    "root.strict_config": "true",
}


# ---------------------------------------------------------------------------
# field checks beyond the schema
# ---------------------------------------------------------------------------


def _validate_mappings(
    mappings: dict[str, Any],
    *,
    summary: ValidationSummary,  # modified
) -> None:
    for key in mappings:
        if not key:
            collect_msg(
                "`module_mappings` keys must not be empty.",
                strict=True,
                summary=summary,
                is_error=True,
            )
        elif key.endswith("/"):
            collect_msg(
                f"`module_mappings` key `{key}` must not end with '/'"
                f" (use `{key.rstrip('/')}`; sub-paths match automatically).",
                strict=True,
                summary=summary,
                is_error=True,
            )


def _validate_globals(
    parsed_cfg: dict[str, Any],
    *,
    summary: ValidationSummary,  # modified
) -> None:
    globals_cfg = parsed_cfg.get("globals")
    if not isinstance(globals_cfg, dict) or not globals_cfg:
        return
    external = parsed_cfg.get("external")
    external_set = set(external) if isinstance(external, list) else set()
    missing = [name for name in globals_cfg if name not in external_set]
    if missing:
        joined = ", ".join(f"`{m}`" for m in missing)
        collect_msg(
            f"`globals` names modules that are not `external`: {joined}"
            " (they will be bundled, so the global is unused).",
            strict=False,
            summary=summary,
        )


def _validate_log_level(
    parsed_cfg: dict[str, Any],
    *,
    summary: ValidationSummary,  # modified
) -> None:
    level = parsed_cfg.get("log_level")
    if isinstance(level, str) and level.lower() not in LEVEL_ORDER:
        options = ", ".join(LEVEL_ORDER)
        collect_msg(
            f"`log_level` `{level}` is not a known level (one of: {options}).",
            strict=True,
            summary=summary,
            is_error=True,
        )


# ---------------------------------------------------------------------------
# main validator
# ---------------------------------------------------------------------------


def validate_config(
    parsed_cfg: dict[str, Any],
    *,
    strict: bool | None = None,
) -> ValidationSummary:
    """Validate a normalized config (as returned by parse_config()).

    Strictness comes from `strict`, then the config's own strict_config,
    then the default. In strict mode unknown keys fail validation.

    Returns a ValidationSummary; `valid` is False if there are errors or
    strict warnings.
    """
    logger = getAppLogger()
    logger.trace(f"[validate_config] Validating {len(parsed_cfg)} keys")

    strict_config = DEFAULT_STRICT_CONFIG
    strict_from_cfg: Any = parsed_cfg.get("strict_config")
    if strict is not None:
        strict_config = strict
    elif isinstance(strict_from_cfg, bool):
        strict_config = strict_from_cfg

    summary = ValidationSummary(
        valid=True,
        errors=[],
        strict_warnings=[],
        warnings=[],
        strict=strict_config,
    )

    ok = check_schema_conformance(
        parsed_cfg,
        schema_from_typeddict(BundleConfig),
        "in top-level configuration",
        strict_config=strict_config,
        summary=summary,
        base_path="root",
        field_examples=FIELD_EXAMPLES,
    )
    if not ok and not (summary.errors or summary.strict_warnings):
        collect_msg(
            "Top-level configuration invalid.",
            strict=True,
            summary=summary,
            is_error=True,
        )

    mappings = parsed_cfg.get("module_mappings")
    if isinstance(mappings, dict):
        _validate_mappings(cast_hint(dict[str, Any], mappings), summary=summary)
    _validate_globals(parsed_cfg, summary=summary)
    _validate_log_level(parsed_cfg, summary=summary)

    summary.valid = not summary.errors and not summary.strict_warnings
    return summary
