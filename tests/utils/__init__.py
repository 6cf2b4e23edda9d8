# tests/utils/__init__.py

from .buildtree import (
    make_config_content,
    make_output_tree,
    make_settings,
    write_config_file,
)
from .config_validate import make_summary
from .constants import DEFAULT_TEST_LOG_LEVEL, PROJ_ROOT
from .patch_everywhere import patch_everywhere


__all__ = [  # noqa: RUF022
    # buildtree
    "make_config_content",
    "make_output_tree",
    "make_settings",
    "write_config_file",
    # config_validate
    "make_summary",
    # constants
    "DEFAULT_TEST_LOG_LEVEL",
    "PROJ_ROOT",
    # patch_everywhere
    "patch_everywhere",
]
