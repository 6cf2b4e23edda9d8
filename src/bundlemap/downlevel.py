# src/bundlemap/downlevel.py

"""Downlevel ES2015 output to ES5 for UMD bundles.

The transform itself belongs to a transpiler collaborator; this module only
builds its options, calls it once per file, and hands the result back to the
bundler as code plus a parsed source map.
"""

import json
import os
import subprocess
from collections.abc import Mapping
from typing import Any

from .constants import DEFAULT_NODE_EXECUTABLE, PLUGIN_DOWNLEVEL
from .logs import getAppLogger
from .types import Plugin, TransformResult, TranspileOutput, Transpiler


class TranspileError(RuntimeError):
    """The transpiler could not be run or rejected its input."""


def downlevel_compiler_options(file_path: str) -> dict[str, Any]:
    return {
        "target": "ES5",
        "module": "ES2015",
        "allowJs": True,
        "sourceMap": True,
        "downlevelIteration": True,
        "importHelpers": True,
        "mapRoot": os.path.dirname(file_path),
    }


def make_downlevel_plugin(transpiler: Transpiler) -> Plugin:
    """Wrap a transpiler as the ``downlevel-to-es5`` transform step."""

    def transform(code: str, file_path: str) -> TransformResult:
        logger = getAppLogger()
        logger.trace(f"downleveling {file_path}")
        output = transpiler(code, file_path, downlevel_compiler_options(file_path))
        try:
            source_map = json.loads(output.source_map_text)
        except ValueError as e:
            xmsg = f"Transpiler returned an invalid source map for {file_path}: {e}"
            raise TranspileError(xmsg) from e
        return TransformResult(code=output.output_text, map=source_map)

    return Plugin(name=PLUGIN_DOWNLEVEL, transform=transform)


# Reads {code, fileName, compilerOptions} as JSON on stdin and writes
# {outputText, sourceMapText} as JSON on stdout.
_TRANSPILE_SCRIPT = r"""
const ts = require('typescript');
let input = '';
process.stdin.setEncoding('utf8');
process.stdin.on('data', (chunk) => { input += chunk; });
process.stdin.on('end', () => {
  const req = JSON.parse(input);
  const opts = req.compilerOptions;
  const compilerOptions = Object.assign({}, opts, {
    target: ts.ScriptTarget[opts.target],
    module: ts.ModuleKind[opts.module],
  });
  const out = ts.transpileModule(req.code, {compilerOptions, fileName: req.fileName});
  process.stdout.write(JSON.stringify({
    outputText: out.outputText,
    sourceMapText: out.sourceMapText,
  }));
});
"""


class NodeTypeScriptTranspiler:
    """Run ``typescript.transpileModule`` in a node subprocess.

    ``typescript`` is looked up from `cwd` and `node_path` (NODE_PATH), the
    same way the bundler would find it.
    """

    def __init__(
        self,
        node: str = DEFAULT_NODE_EXECUTABLE,
        *,
        cwd: str | None = None,
        node_path: str | None = None,
    ) -> None:
        self.node = node
        self.cwd = cwd
        self.node_path = node_path

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        if self.node_path:
            existing = env.get("NODE_PATH")
            env["NODE_PATH"] = (
                f"{self.node_path}{os.pathsep}{existing}" if existing else self.node_path
            )
        return env

    def __call__(
        self,
        code: str,
        file_path: str,
        compiler_options: Mapping[str, Any],
    ) -> TranspileOutput:
        payload = json.dumps(
            {
                "code": code,
                "fileName": file_path,
                "compilerOptions": dict(compiler_options),
            }
        )
        try:
            result = subprocess.run(  # noqa: S603
                [self.node, "-e", _TRANSPILE_SCRIPT],
                input=payload,
                capture_output=True,
                text=True,
                check=False,
                cwd=self.cwd,
                env=self._env(),
            )
        except FileNotFoundError as e:
            xmsg = f"Cannot downlevel {file_path}: '{self.node}' was not found."
            raise TranspileError(xmsg) from e

        if result.returncode != 0:
            xmsg = (
                f"Downleveling {file_path} failed (exit {result.returncode}):\n"
                f"{result.stderr.strip()}"
            )
            raise TranspileError(xmsg)

        try:
            data = json.loads(result.stdout)
            return TranspileOutput(
                output_text=data["outputText"],
                source_map_text=data["sourceMapText"],
            )
        except (ValueError, KeyError, TypeError) as e:
            xmsg = f"Unexpected transpiler output for {file_path}: {e}"
            raise TranspileError(xmsg) from e
