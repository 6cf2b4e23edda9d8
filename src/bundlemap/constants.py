# src/bundlemap/constants.py
"""Central constants used across the project."""

# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"
DEFAULT_ENV_VERBOSE_LOGS: str = "VERBOSE_LOGS"

# --- program defaults ---
DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_VERBOSE_LOG_LEVEL: str = "trace"

# --- config defaults ---
DEFAULT_STRICT_CONFIG: bool = True
DEFAULT_WORKSPACE_NAME: str = ""
DEFAULT_ROOT_DIR: str = "."
DEFAULT_NODE_MODULES_ROOT: str = "node_modules"
DEFAULT_DOWNLEVEL_TO_ES5: bool = False

# --- banner / stamping ---
# Placeholder written into banners by the release tooling; replaced at bundle time.
DEFAULT_VERSION_PLACEHOLDER: str = "0.0.0-PLACEHOLDER"
DEFAULT_STAMP_VERSION_KEY: str = "BUILD_SCM_VERSION"

# --- resolution ---
JS_SOURCE_EXTENSION: str = ".js"
TYPE_DECLARATION_SUFFIX: str = ".d.ts"
RELATIVE_PREFIXES: tuple[str, ...] = ("./", "../")

# Probed in order, like node's require.resolve on a path.
DEFAULT_RESOLVE_EXTENSIONS: list[str] = [".js", ".json", ".node"]
# Sibling formats preferred over a resolved .js file, in order.
DEFAULT_MODULE_FORMAT_EXTENSIONS: list[str] = [".mjs"]
# package.json fields consulted by default resolution, in order.
DEFAULT_MAIN_FIELDS: list[str] = ["browser", "es2015", "module", "jsnext:main", "main"]

# --- plugin names ---
PLUGIN_RESOLVE_MAPPINGS: str = "resolve-module-mappings"
PLUGIN_NODE_RESOLVE: str = "node-resolve"
PLUGIN_COMMONJS: str = "commonjs"
PLUGIN_SOURCEMAPS: str = "sourcemaps"
PLUGIN_DOWNLEVEL: str = "downlevel-to-es5"

# --- downleveling ---
DEFAULT_NODE_EXECUTABLE: str = "node"
