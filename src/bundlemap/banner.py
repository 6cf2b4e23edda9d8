# src/bundlemap/banner.py

"""Banner text for the bundle output, with version stamping.

Stamp files use the workspace-status format: one ``KEY value`` pair per
line, split on the first space.
"""

from pathlib import Path

from .constants import DEFAULT_STAMP_VERSION_KEY, DEFAULT_VERSION_PLACEHOLDER
from .logs import getAppLogger


def parse_stamp(text: str) -> dict[str, str]:
    """Parse ``KEY value`` lines into a dict; the first occurrence of a key wins."""
    values: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        key, _, value = line.partition(" ")
        values.setdefault(key, value.strip())
    return values


def read_stamp_file(path: Path) -> dict[str, str]:
    return parse_stamp(path.read_text(encoding="utf-8"))


def stamp_version(
    banner: str,
    stamp: dict[str, str],
    *,
    placeholder: str = DEFAULT_VERSION_PLACEHOLDER,
    version_key: str = DEFAULT_STAMP_VERSION_KEY,
) -> str:
    """Replace the placeholder with the stamped version, if the stamp has one."""
    raw = stamp.get(version_key)
    if not raw:
        getAppLogger().debug(
            "Stamp has no %s; leaving banner version unstamped.", version_key
        )
        return banner
    version = raw.split()[0]
    return banner.replace(placeholder, version)


def build_banner(
    banner_file: Path | None,
    stamp_data: Path | None = None,
    *,
    placeholder: str = DEFAULT_VERSION_PLACEHOLDER,
    version_key: str = DEFAULT_STAMP_VERSION_KEY,
) -> str:
    """Read the banner file and stamp the version into it.

    Missing files degrade instead of failing: no banner file gives an empty
    banner, no stamp file gives the banner as written.
    """
    logger = getAppLogger()
    if banner_file is None:
        return ""

    try:
        banner = banner_file.read_text(encoding="utf-8")
    except OSError as e:
        logger.debug("Banner file %s could not be read (%s); no banner.", banner_file, e)
        return ""

    if stamp_data is None:
        return banner

    try:
        stamp = read_stamp_file(stamp_data)
    except OSError as e:
        logger.debug(
            "Stamp file %s could not be read (%s); banner left unstamped.",
            stamp_data,
            e,
        )
        return banner

    return stamp_version(
        banner, stamp, placeholder=placeholder, version_key=version_key
    )
