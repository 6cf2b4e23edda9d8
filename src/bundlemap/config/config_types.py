# src/bundlemap/config/config_types.py


import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TypedDict

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
from bundlemap.utils import join_paths


# Raw config as written by the build orchestrator (all keys optional)
class BundleConfig(TypedDict, total=False):
    # identity and layout
    workspace_name: str
    root_dir: str  # output root, relative to the working directory
    node_modules_root: str  # search root for third-party packages

    # banner
    banner_file: str | None
    stamp_data: str | None  # bazel-style "KEY value" status file
    version_placeholder: str  # token in the banner replaced by the version
    stamp_version_key: str  # stamp key holding the version

    # resolution
    module_mappings: dict[str, str]  # symbolic name → root-relative path
    resolve_extensions: list[str]
    module_format_extensions: list[str]
    main_fields: list[str]

    # output
    external: list[str]  # module names left out of the bundle
    globals: dict[str, str]  # external module → global variable name

    # transforms
    downlevel_to_es5: bool
    node_executable: str

    # runtime behavior
    log_level: str
    strict_config: bool


def _freeze_mapping(value: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(value))


@dataclass(frozen=True)
class BundleSettings:
    """Resolved, immutable parameters for one bundling run.

    Built once at start-up and handed to the resolver and the assembler.
    Mappings are read-only views and sequences are tuples; plain dicts and
    lists passed to the constructor are frozen on the way in.
    """

    workspace_name: str = DEFAULT_WORKSPACE_NAME
    root_dir: str = DEFAULT_ROOT_DIR
    base_dir: str = field(default_factory=os.getcwd)
    banner_file: Path | None = None
    stamp_data: Path | None = None
    module_mappings: Mapping[str, str] = field(default_factory=dict)
    downlevel_to_es5: bool = DEFAULT_DOWNLEVEL_TO_ES5
    node_modules_root: str = DEFAULT_NODE_MODULES_ROOT
    external: tuple[str, ...] = ()
    globals: Mapping[str, str] = field(default_factory=dict)
    version_placeholder: str = DEFAULT_VERSION_PLACEHOLDER
    stamp_version_key: str = DEFAULT_STAMP_VERSION_KEY
    main_fields: tuple[str, ...] = tuple(DEFAULT_MAIN_FIELDS)
    resolve_extensions: tuple[str, ...] = tuple(DEFAULT_RESOLVE_EXTENSIONS)
    module_format_extensions: tuple[str, ...] = tuple(DEFAULT_MODULE_FORMAT_EXTENSIONS)
    node_executable: str = DEFAULT_NODE_EXECUTABLE

    def __post_init__(self) -> None:
        # frozen: bypass __setattr__ to normalize container types once
        object.__setattr__(
            self, "module_mappings", _freeze_mapping(self.module_mappings)
        )
        object.__setattr__(self, "globals", _freeze_mapping(self.globals))
        for name in (
            "external",
            "main_fields",
            "resolve_extensions",
            "module_format_extensions",
        ):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        object.__setattr__(self, "base_dir", os.path.abspath(self.base_dir))

    @property
    def output_root(self) -> str:
        """Absolute path of the output root."""
        return join_paths(self.base_dir, self.root_dir)
