# src/bundlemap/__init__.py

"""Bundlemap: resolve mapped module names for a JavaScript bundler.

Full developer API
==================
This package re-exports all non-private symbols from its submodules,
making it suitable for programmatic use or for wiring into a bundling
driver. Anything prefixed with "_" is considered internal and may change.

Highlights:
    - main()                   → CLI entrypoint
    - ModuleMappingResolver    → (specifier, importer) → file or DEFER
    - assemble_config()        → Plugin pipeline, externals, banner
    - resolve_config()         → Merge CLI args with config files
    - get_metadata()           → Retrieve version / commit info
"""

from .assembler import (
    BundlerConfig,
    ConfigAssembler,
    OutputOptions,
    assemble_config,
)
from .banner import build_banner, parse_stamp, stamp_version
from .cli import main
from .config import (
    BundleConfig,
    BundleSettings,
    find_config,
    load_and_validate_config,
    load_config,
    parse_config,
    resolve_config,
    validate_config,
)
from .constants import (
    DEFAULT_ENV_LOG_LEVEL,
    DEFAULT_ENV_VERBOSE_LOGS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_STAMP_VERSION_KEY,
    DEFAULT_STRICT_CONFIG,
    DEFAULT_VERSION_PLACEHOLDER,
)
from .downlevel import (
    NodeTypeScriptTranspiler,
    TranspileError,
    downlevel_compiler_options,
    make_downlevel_plugin,
)
from .logs import getAppLogger
from .meta import (
    PROGRAM_CONFIG,
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    Metadata,
    get_metadata,
)
from .resolver import (
    DEFER,
    FullyQualifiedStrategy,
    ModuleMappingResolver,
    ModuleMappingStrategy,
    RelativeImportStrategy,
    ResolutionStrategy,
    ResolveRequest,
    RootDirLocator,
    UsageError,
    WorkspaceFallbackStrategy,
)
from .types import (
    DefaultResolver,
    FileExists,
    NodeResolveOptions,
    Plugin,
    TransformResult,
    TranspileOutput,
    Transpiler,
)


__all__ = [  # noqa: RUF022
    # assembler
    "assemble_config",
    "BundlerConfig",
    "ConfigAssembler",
    "OutputOptions",
    # banner
    "build_banner",
    "parse_stamp",
    "stamp_version",
    # cli
    "main",
    # config
    "BundleConfig",
    "BundleSettings",
    "find_config",
    "load_and_validate_config",
    "load_config",
    "parse_config",
    "resolve_config",
    "validate_config",
    # constants
    "DEFAULT_ENV_LOG_LEVEL",
    "DEFAULT_ENV_VERBOSE_LOGS",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_STAMP_VERSION_KEY",
    "DEFAULT_STRICT_CONFIG",
    "DEFAULT_VERSION_PLACEHOLDER",
    # downlevel
    "downlevel_compiler_options",
    "make_downlevel_plugin",
    "NodeTypeScriptTranspiler",
    "TranspileError",
    # logs
    "getAppLogger",
    # meta
    "get_metadata",
    "Metadata",
    "PROGRAM_CONFIG",
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    # resolver
    "DEFER",
    "FullyQualifiedStrategy",
    "ModuleMappingResolver",
    "ModuleMappingStrategy",
    "RelativeImportStrategy",
    "ResolutionStrategy",
    "ResolveRequest",
    "RootDirLocator",
    "UsageError",
    "WorkspaceFallbackStrategy",
    # types
    "DefaultResolver",
    "FileExists",
    "NodeResolveOptions",
    "Plugin",
    "TransformResult",
    "TranspileOutput",
    "Transpiler",
]
