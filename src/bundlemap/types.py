# src/bundlemap/types.py

"""Collaborator interfaces and the small value types passed between them.

The bundling engine, its default resolver and the transpiler are outside
this package; they are modeled here as plain callables so that real
implementations and test fakes plug in the same way.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol


FileExists = Callable[[str], bool]
"""path → True if it names an existing regular file."""

ResolveIdHook = Callable[[str, str | None], str | None]
"""(specifier, importer) → resolved path, or None to defer."""

TransformHook = Callable[[str, str], "TransformResult | None"]
"""(code, file_path) → transformed output, or None to leave untouched."""


@dataclass(frozen=True)
class TransformResult:
    code: str
    map: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class NodeResolveOptions:
    """Options handed to the default (node-style) resolver."""

    main_fields: tuple[str, ...]
    jail: str  # resolution may not escape this directory
    module_directory: str  # where third-party packages live


class DefaultResolver(Protocol):
    def __call__(
        self,
        specifier: str,
        importer: str | None,
        options: NodeResolveOptions,
    ) -> str | None: ...


@dataclass(frozen=True)
class TranspileOutput:
    output_text: str
    source_map_text: str


class Transpiler(Protocol):
    def __call__(
        self,
        code: str,
        file_path: str,
        compiler_options: Mapping[str, Any],
    ) -> TranspileOutput: ...


@dataclass(frozen=True)
class Plugin:
    """One step of the bundler pipeline.

    Either hook may be absent; the engine skips steps that have nothing to
    say for a given phase.
    """

    name: str
    resolve_id: ResolveIdHook | None = None
    transform: TransformHook | None = None
    options: Mapping[str, Any] = field(default_factory=dict)
