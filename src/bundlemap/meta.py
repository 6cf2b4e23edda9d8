# src/bundlemap/meta.py
"""Program identity and version metadata."""

import re
import subprocess
from contextlib import suppress
from dataclasses import dataclass
from importlib import metadata as importlib_metadata
from pathlib import Path


PROGRAM_PACKAGE = "bundlemap"
PROGRAM_SCRIPT = "bundlemap"
PROGRAM_DISPLAY = "Bundlemap"
PROGRAM_CONFIG = "bundlemap"
PROGRAM_ENV = "BUNDLEMAP"


@dataclass(frozen=True)
class Metadata:
    version: str
    commit: str

    def __str__(self) -> str:
        return f"{self.version} ({self.commit})"


def _version_from_pyproject(root: Path) -> str | None:
    pyproject = root / "pyproject.toml"
    if not pyproject.exists():
        return None
    text = pyproject.read_text(encoding="utf-8")
    match = re.search(r'(?m)^\s*version\s*=\s*["\']([^"\']+)["\']', text)
    return match.group(1) if match else None


def get_metadata() -> Metadata:
    """Return version and commit for this tool.

    - Installed distribution → importlib.metadata
    - Source checkout → pyproject.toml + git
    """
    version = "unknown"
    commit = "unknown"
    root = Path(__file__).resolve().parents[2]

    try:
        version = importlib_metadata.version(PROGRAM_PACKAGE)
    except importlib_metadata.PackageNotFoundError:
        version = _version_from_pyproject(root) or version

    # git is optional; a tarball install has no repository
    with suppress(OSError, subprocess.CalledProcessError):
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            cwd=root,
            capture_output=True,
            text=True,
            check=True,
        )
        commit = result.stdout.strip() or commit

    return Metadata(version, commit)
