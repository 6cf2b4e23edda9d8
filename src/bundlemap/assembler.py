# src/bundlemap/assembler.py

"""Assemble the bundler configuration value.

The result is what the bundling engine consumes: the ordered plugin
pipeline, the external module list, and output options (globals for the
externals, banner text).
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .banner import build_banner
from .config.config_types import BundleSettings
from .constants import PLUGIN_COMMONJS, PLUGIN_NODE_RESOLVE, PLUGIN_SOURCEMAPS
from .downlevel import NodeTypeScriptTranspiler, make_downlevel_plugin
from .logs import getAppLogger
from .resolver import ModuleMappingResolver
from .types import (
    DefaultResolver,
    FileExists,
    NodeResolveOptions,
    Plugin,
    TransformHook,
    TransformResult,
    Transpiler,
)


@dataclass(frozen=True)
class OutputOptions:
    globals: Mapping[str, str] = field(default_factory=dict)
    banner: str = ""


@dataclass(frozen=True)
class BundlerConfig:
    plugins: tuple[Plugin, ...]
    external: tuple[str, ...]
    output: OutputOptions

    @property
    def plugin_names(self) -> list[str]:
        return [p.name for p in self.plugins]

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe summary (hooks are reduced to plugin names and options)."""
        return {
            "plugins": [
                {"name": p.name, "options": _jsonable(p.options)} for p in self.plugins
            ],
            "external": list(self.external),
            "output": {
                "globals": dict(self.output.globals),
                "banner": self.output.banner,
            },
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, NodeResolveOptions):
        return {
            "main_fields": list(value.main_fields),
            "jail": value.jail,
            "module_directory": value.module_directory,
        }
    return value


# --- pipeline steps ---------------------------------------------------------


def passthrough(code: str, file_path: str) -> TransformResult | None:  # noqa: ARG001
    """Transform that leaves every module as it is."""
    return None


def node_resolve_options(settings: BundleSettings) -> NodeResolveOptions:
    return NodeResolveOptions(
        main_fields=settings.main_fields,
        jail=settings.base_dir,
        module_directory=settings.node_modules_root,
    )


def make_node_resolve_plugin(
    settings: BundleSettings,
    default_resolver: DefaultResolver | None = None,
) -> Plugin:
    options = node_resolve_options(settings)

    def resolve_id(specifier: str, importer: str | None) -> str | None:
        if default_resolver is None:
            return None
        return default_resolver(specifier, importer, options)

    return Plugin(
        name=PLUGIN_NODE_RESOLVE,
        resolve_id=resolve_id,
        options={"resolve": options},
    )


def make_commonjs_plugin(transform: TransformHook | None = None) -> Plugin:
    return Plugin(
        name=PLUGIN_COMMONJS,
        transform=transform or passthrough,
        options={"ignore_global": True},
    )


def make_sourcemaps_plugin(transform: TransformHook | None = None) -> Plugin:
    return Plugin(name=PLUGIN_SOURCEMAPS, transform=transform or passthrough)


# --- assembler ----------------------------------------------------------------


class ConfigAssembler:
    """Wire settings and collaborators into a `BundlerConfig`.

    Every collaborator is optional. Without a default resolver the
    node-resolve step defers; without interop/source-map transforms those
    steps pass code through; without a transpiler, downleveling (when
    enabled) runs TypeScript through node.
    """

    def __init__(
        self,
        settings: BundleSettings,
        *,
        default_resolver: DefaultResolver | None = None,
        commonjs: TransformHook | None = None,
        sourcemaps: TransformHook | None = None,
        transpiler: Transpiler | None = None,
        file_exists: FileExists = os.path.isfile,
    ) -> None:
        self.settings = settings
        self.default_resolver = default_resolver
        self.commonjs = commonjs
        self.sourcemaps = sourcemaps
        self.transpiler = transpiler
        self.file_exists = file_exists

    def default_transpiler(self) -> Transpiler:
        settings = self.settings
        return NodeTypeScriptTranspiler(
            settings.node_executable,
            cwd=settings.base_dir,
            node_path=os.path.join(settings.base_dir, settings.node_modules_root),
        )

    def build_plugins(self) -> tuple[Plugin, ...]:
        settings = self.settings
        resolver = ModuleMappingResolver(settings, file_exists=self.file_exists)
        plugins = [
            resolver.as_plugin(),
            make_node_resolve_plugin(settings, self.default_resolver),
            make_commonjs_plugin(self.commonjs),
            make_sourcemaps_plugin(self.sourcemaps),
        ]
        if settings.downlevel_to_es5:
            plugins.append(
                make_downlevel_plugin(self.transpiler or self.default_transpiler())
            )
        return tuple(plugins)

    def build_banner(self) -> str:
        settings = self.settings
        return build_banner(
            settings.banner_file,
            settings.stamp_data,
            placeholder=settings.version_placeholder,
            version_key=settings.stamp_version_key,
        )

    def assemble(self) -> BundlerConfig:
        logger = getAppLogger()
        settings = self.settings
        logger.trace(
            "running with\n"
            f"  cwd: {settings.base_dir}\n"
            f"  workspaceName: {settings.workspace_name}\n"
            f"  rootDir: {settings.root_dir}\n"
            f"  bannerFile: {settings.banner_file}\n"
            f"  stampData: {settings.stamp_data}\n"
            f"  moduleMappings: {dict(settings.module_mappings)}\n"
            f"  nodeModulesRoot: {settings.node_modules_root}"
        )

        missing_globals = sorted(set(settings.globals) - set(settings.external))
        if missing_globals:
            logger.debug(
                "Globals defined for non-external modules: %s",
                ", ".join(missing_globals),
            )

        return BundlerConfig(
            plugins=self.build_plugins(),
            external=settings.external,
            output=OutputOptions(
                globals=MappingProxyType(dict(settings.globals)),
                banner=self.build_banner(),
            ),
        )


def assemble_config(
    settings: BundleSettings,
    **collaborators: Any,
) -> BundlerConfig:
    """Shorthand for ``ConfigAssembler(settings, **collaborators).assemble()``."""
    return ConfigAssembler(settings, **collaborators).assemble()
