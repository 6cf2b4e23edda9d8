# src/bundlemap/utils/utils_paths.py

"""Path helpers with the join/relative semantics bundler configs expect.

Import specifiers and mapping values are always POSIX-style; filesystem
paths use the host separator. `join_paths` follows node's `path.join`: an
absolute part in the middle does not restart the path, it is appended.
"""

import os
from pathlib import Path


def normalize_specifier(specifier: str) -> str:
    """Return the specifier with backslashes turned into forward slashes."""
    return specifier.replace("\\", "/")


def join_paths(*parts: str) -> str:
    """Join and normalize path segments without resetting on absolute parts.

    >>> join_paths("/work", "dist", "/abs/file")
    '/work/dist/abs/file'
    """
    kept = [p for p in parts if p]
    if not kept:
        return "."
    return os.path.normpath("/".join(kept))


def escapes_upward(relative: str) -> bool:
    """True if a relative path climbs out of its base (`..` or `../x`)."""
    rel = relative.replace("\\", "/")
    return rel == ".." or rel.startswith("../")


def relative_within(path: str, root: str) -> str | None:
    """Return `path` relative to `root`, or None if it lies outside `root`.

    The root itself yields "" (not "."), so joining onto the result is a no-op.
    """
    try:
        rel = os.path.relpath(path, root)
    except ValueError:
        # different drives on Windows
        return None
    if escapes_upward(rel) or os.path.isabs(rel):
        return None
    return "" if rel == os.curdir else rel


def strip_suffix(value: str, suffix: str) -> str:
    """Remove a single trailing suffix if present."""
    return value[: -len(suffix)] if suffix and value.endswith(suffix) else value


def shorten_path_for_display(
    path: Path | str,
    *,
    cwd: Path | None = None,
    config_dir: Path | None = None,
) -> str:
    """Shorten an absolute path for display purposes.

    Tries to make the path relative to cwd first, then config_dir, and picks
    the shortest result. If neither works, returns the absolute path as a string.
    """
    path_obj = Path(path).resolve()

    candidates: list[str] = []
    for base in (cwd, config_dir):
        if base is None:
            continue
        try:
            candidates.append(str(path_obj.relative_to(Path(base).resolve())))
        except ValueError:
            pass

    if candidates:
        return min(candidates, key=len)
    return str(path_obj)
