# src/bundlemap/config/__init__.py

from .config_loader import (
    find_config,
    load_and_validate_config,
    load_config,
    parse_config,
)
from .config_resolve import parse_mapping_overrides, resolve_config
from .config_types import BundleConfig, BundleSettings
from .config_validate import validate_config


__all__ = [  # noqa: RUF022
    # config_loader
    "find_config",
    "load_and_validate_config",
    "load_config",
    "parse_config",
    # config_resolve
    "parse_mapping_overrides",
    "resolve_config",
    # config_types
    "BundleConfig",
    "BundleSettings",
    # config_validate
    "validate_config",
]
