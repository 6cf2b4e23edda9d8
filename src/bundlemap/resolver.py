# src/bundlemap/resolver.py

"""Resolve import specifiers against the build's output tree.

Mimics TypeScript path mapping: short module names are translated through a
mapping table and looked up under the output root, instead of leaving them
to node-style package resolution.

Strategies run in a fixed order and the first one that finds a file wins:

1. fully-qualified: the specifier already names a file
2. relative: ``./x`` or ``../x`` next to the importer, rebased into the
   output root
3. module mapping: ``key`` or ``key/sub`` translated through the table
4. workspace fallback: the specifier relative to the workspace name

If none of them finds anything the resolver returns ``DEFER`` and the
bundler's default resolution takes over.
"""

import json
import os
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass

from .config.config_types import BundleSettings
from .constants import (
    JS_SOURCE_EXTENSION,
    PLUGIN_RESOLVE_MAPPINGS,
    RELATIVE_PREFIXES,
    TYPE_DECLARATION_SUFFIX,
)
from .logs import getAppLogger
from .types import FileExists, Plugin
from .utils import (
    escapes_upward,
    join_paths,
    normalize_specifier,
    relative_within,
    strip_suffix,
)


DEFER = None
"""Resolution outcome meaning "no opinion, use default resolution"."""


class UsageError(ValueError):
    """A resolution request that cannot be answered as asked."""


@dataclass(frozen=True)
class ResolveRequest:
    specifier: str
    importer: str | None = None

    @property
    def normalized(self) -> str:
        # mappings are always POSIX paths
        return normalize_specifier(self.specifier)

    @property
    def is_relative(self) -> bool:
        return self.normalized.startswith(RELATIVE_PREFIXES)


# --------------------------------------------------------------------------- #
# Output-root lookups
# --------------------------------------------------------------------------- #


class RootDirLocator:
    """Find candidate files under the output root.

    Probing follows node's ``require.resolve`` for a path: the exact file,
    the file with each known extension, then the directory's
    ``package.json`` main entry and ``index`` file.
    """

    def __init__(
        self,
        settings: BundleSettings,
        *,
        file_exists: FileExists = os.path.isfile,
    ) -> None:
        self.settings = settings
        self.file_exists = file_exists

    def _anchored(
        self, candidate: str, *, allow_root_prefixed: bool = False
    ) -> Iterator[str]:
        base = self.settings.base_dir
        root = self.settings.root_dir
        yield join_paths(base, root, candidate)
        if not allow_root_prefixed:
            return

        # candidates spelled with the root prefix already (e.g. "dist/lib")
        root_prefix = normalize_specifier(os.path.normpath(root))
        if root_prefix not in ("", ".") and normalize_specifier(candidate).startswith(
            root_prefix + "/"
        ):
            yield join_paths(base, candidate)

    def _probe_file(self, path: str) -> str | None:
        if self.file_exists(path):
            return path
        for ext in self.settings.resolve_extensions:
            if self.file_exists(path + ext):
                return path + ext
        return None

    def _package_main(self, directory: str) -> str | None:
        manifest = os.path.join(directory, "package.json")
        if not self.file_exists(manifest):
            return None
        try:
            with open(manifest, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            getAppLogger().trace(f"ignoring unreadable {manifest}: {e}")
            return None
        main = data.get("main") if isinstance(data, dict) else None
        return main if isinstance(main, str) and main else None

    def _probe_directory(self, path: str) -> str | None:
        main = self._package_main(path)
        if main is not None:
            main_path = join_paths(path, main)
            found = self._probe_file(main_path) or self._probe_index(main_path)
            if found:
                return found
        return self._probe_index(path)

    def _probe_index(self, path: str) -> str | None:
        for ext in self.settings.resolve_extensions:
            index = os.path.join(path, "index" + ext)
            if self.file_exists(index):
                return index
        return None

    def locate(
        self, candidate: str, *, allow_root_prefixed: bool = False
    ) -> str | None:
        """Return the absolute path `candidate` denotes under the root, or None.

        With `allow_root_prefixed`, a candidate that already starts with the
        root directory (a mapping value like "dist/lib") is also tried as is.
        """
        logger = getAppLogger()
        anchored = self._anchored(candidate, allow_root_prefixed=allow_root_prefixed)
        for path in anchored:
            logger.trace(f"try to resolve '{candidate}' at '{path}'")
            found = self._probe_file(path) or self._probe_directory(path)
            if found:
                return found
        return None

    def prefer_module_format(self, path: str) -> str:
        """Swap a resolved .js file for a sibling .mjs (etc.) if one was built."""
        if not path.endswith(JS_SOURCE_EXTENSION):
            return path
        stem = path[: -len(JS_SOURCE_EXTENSION)]
        for ext in self.settings.module_format_extensions:
            sibling = stem + ext
            if self.file_exists(sibling):
                return sibling
        return path


# --------------------------------------------------------------------------- #
# Strategies
# --------------------------------------------------------------------------- #


class ResolutionStrategy(ABC):
    """One way of turning a specifier into a file."""

    name: str = "strategy"
    # verbatim results are returned exactly as found (no .mjs upgrade)
    verbatim: bool = False

    @abstractmethod
    def attempt(self, request: ResolveRequest) -> str | None:
        """Return a concrete path, or None for "no opinion"."""


class FullyQualifiedStrategy(ResolutionStrategy):
    name = "fully-qualified"
    verbatim = True

    def __init__(self, file_exists: FileExists = os.path.isfile) -> None:
        self.file_exists = file_exists

    def attempt(self, request: ResolveRequest) -> str | None:
        if self.file_exists(request.specifier):
            getAppLogger().trace(f"resolved fully qualified '{request.specifier}'")
            return request.specifier
        return None


class RelativeImportStrategy(ResolutionStrategy):
    """``./x`` and ``../x``, looked up next to the importer inside the root.

    An importer living inside the output root is rebased to be root-relative
    first, so the join lands back in the generated tree.
    """

    name = "relative"

    def __init__(self, locator: RootDirLocator) -> None:
        self.locator = locator

    def attempt(self, request: ResolveRequest) -> str | None:
        if not request.is_relative:
            return None
        if not request.importer:
            xmsg = (
                f"cannot resolve relative path '{request.specifier}' "
                "without an importer"
            )
            raise UsageError(xmsg)

        settings = self.locator.settings
        importer_dir = os.path.dirname(request.importer)
        rebased = relative_within(
            os.path.join(settings.base_dir, importer_dir), settings.output_root
        )
        if rebased is not None:
            importer_dir = rebased

        return self.locator.locate(join_paths(importer_dir, request.normalized))


class ModuleMappingStrategy(ResolutionStrategy):
    """Translate ``key`` / ``key/sub`` through the module mapping table.

    Mapping values may point at type declarations (``index.d.ts``); the
    suffix is dropped to get the runtime path. A match whose file does not
    exist does not stop the scan: later entries are still tried.
    """

    name = "module-mapping"

    def __init__(
        self,
        locator: RootDirLocator,
        mappings: Mapping[str, str] | None = None,
    ) -> None:
        self.locator = locator
        self.mappings = (
            mappings if mappings is not None else locator.settings.module_mappings
        )

    @staticmethod
    def matches(key: str, specifier: str) -> bool:
        return specifier == key or specifier.startswith(key + "/")

    def attempt(self, request: ResolveRequest) -> str | None:
        logger = getAppLogger()
        normalized = request.normalized
        for key, value in self.mappings.items():
            if not self.matches(key, normalized):
                continue
            target = strip_suffix(value, TYPE_DECLARATION_SUFFIX)
            mapped = join_paths(target, normalized[len(key) + 1 :])
            logger.trace(f"module mapped '{request.specifier}' to '{mapped}'")
            found = self.locator.locate(mapped, allow_root_prefixed=True)
            if found:
                return found
        return None


class WorkspaceFallbackStrategy(ResolutionStrategy):
    """Treat the specifier as a workspace path (``ws/pkg/x`` → ``pkg/x``)."""

    name = "workspace"

    def __init__(self, locator: RootDirLocator, workspace_name: str | None = None) -> None:
        self.locator = locator
        self.workspace_name = (
            workspace_name
            if workspace_name is not None
            else locator.settings.workspace_name
        )

    def attempt(self, request: ResolveRequest) -> str | None:
        specifier = request.specifier
        try:
            in_workspace = os.path.relpath(specifier, self.workspace_name or os.curdir)
        except ValueError:
            in_workspace = specifier
        candidate = specifier if escapes_upward(in_workspace) else in_workspace
        return self.locator.locate(candidate)


# --------------------------------------------------------------------------- #
# Resolver
# --------------------------------------------------------------------------- #


class ModuleMappingResolver:
    """Resolve ``(specifier, importer)`` pairs to files under the output root.

    Stateless between calls: nothing is cached, every call re-checks the
    filesystem.
    """

    def __init__(
        self,
        settings: BundleSettings,
        *,
        file_exists: FileExists = os.path.isfile,
        strategies: Sequence[ResolutionStrategy] | None = None,
    ) -> None:
        self.settings = settings
        self.locator = RootDirLocator(settings, file_exists=file_exists)
        self.strategies: tuple[ResolutionStrategy, ...] = tuple(
            strategies
            if strategies is not None
            else self.default_strategies(file_exists=file_exists)
        )

    def default_strategies(
        self, *, file_exists: FileExists = os.path.isfile
    ) -> list[ResolutionStrategy]:
        return [
            FullyQualifiedStrategy(file_exists),
            RelativeImportStrategy(self.locator),
            ModuleMappingStrategy(self.locator),
            WorkspaceFallbackStrategy(self.locator),
        ]

    def resolve(self, specifier: str, importer: str | None = None) -> str | None:
        """Return the file `specifier` denotes, or DEFER.

        Raises:
            UsageError: relative specifier without an importer.
        """
        logger = getAppLogger()
        logger.trace(f"resolving '{specifier}' from {importer}")

        if not specifier:
            xmsg = "cannot resolve an empty import specifier"
            raise UsageError(xmsg)

        request = ResolveRequest(specifier, importer)
        for strategy in self.strategies:
            resolved = strategy.attempt(request)
            if resolved is None:
                continue
            if not strategy.verbatim:
                resolved = self.locator.prefer_module_format(resolved)
            logger.trace(f"resolved to {resolved} ({strategy.name})")
            return resolved

        logger.trace(
            f"allowing default resolution to resolve '{specifier}' "
            "with node module resolution"
        )
        return DEFER

    __call__ = resolve

    def as_plugin(self) -> Plugin:
        return Plugin(name=PLUGIN_RESOLVE_MAPPINGS, resolve_id=self.resolve)
