# src/bundlemap/utils/__init__.py

from .utils_paths import (
    escapes_upward,
    join_paths,
    normalize_specifier,
    relative_within,
    shorten_path_for_display,
    strip_suffix,
)


__all__ = [  # noqa: RUF022
    # utils_paths
    "escapes_upward",
    "join_paths",
    "normalize_specifier",
    "relative_within",
    "shorten_path_for_display",
    "strip_suffix",
]
