# tests/utils/constants.py

from pathlib import Path


PROJ_ROOT = Path(__file__).resolve().parent.parent.parent

# most verbose level: traces show up in captured output when a test fails
DEFAULT_TEST_LOG_LEVEL = "trace"
