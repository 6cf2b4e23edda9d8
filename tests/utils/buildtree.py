# tests/utils/buildtree.py
"""Builders for on-disk output trees, settings and config files."""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from bundlemap.config import BundleSettings
from bundlemap.meta import PROGRAM_CONFIG


def make_output_tree(base: Path, files: Iterable[str]) -> list[Path]:
    """Create empty files (POSIX-relative paths) under `base`."""
    created: list[Path] = []
    for rel in files:
        path = base / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"// {rel}\n", encoding="utf-8")
        created.append(path)
    return created


def make_settings(base: Path, **overrides: Any) -> BundleSettings:
    """BundleSettings rooted at `base` with test-friendly overrides."""
    overrides.setdefault("base_dir", str(base))
    return BundleSettings(**overrides)


def make_config_content(data: dict[str, Any], fmt: str = "json") -> str:
    if fmt == "py":
        return f"config = {data!r}\n"
    if fmt == "toml":
        lines = [f"[tool.{PROGRAM_CONFIG}]"]
        for key, value in data.items():
            lines.append(f"{key} = {json.dumps(value)}")
        return "\n".join(lines) + "\n"
    return json.dumps(data, indent=2)


def write_config_file(
    directory: Path,
    data: dict[str, Any],
    *,
    fmt: str = "json",
) -> Path:
    """Write a config file the way a user would and return its path."""
    names = {
        "json": f".{PROGRAM_CONFIG}.json",
        "jsonc": f".{PROGRAM_CONFIG}.jsonc",
        "py": f".{PROGRAM_CONFIG}.py",
        "toml": "pyproject.toml",
    }
    path = directory / names[fmt]
    content_fmt = "json" if fmt == "jsonc" else fmt
    path.write_text(make_config_content(data, content_fmt), encoding="utf-8")
    return path
