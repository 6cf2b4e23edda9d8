# src/bundlemap/logs.py
"""Application logger.

Registers the bundlemap logger with ``apathetic_logging``. Diagnostic
records (TRACE/DEBUG) carry the base name of the file that emitted them,
e.g. ``[TRACE] [resolver.py] resolved to dist/lib/util.mjs``. Setting
``VERBOSE_LOGS`` in the environment turns them on.
"""

import argparse
import io
import logging
import os
import sys
import traceback
from typing import cast

import apathetic_logging
from apathetic_logging import (
    DualStreamHandler,
    Logger,
    TagFormatter,
    getLogLevelEnvVars,
    registerDefaultLogLevel,
    registerLogger,
    registerLogLevelEnvVars,
)

from .constants import (
    DEFAULT_ENV_LOG_LEVEL,
    DEFAULT_ENV_VERBOSE_LOGS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_VERBOSE_LOG_LEVEL,
)
from .meta import PROGRAM_ENV, PROGRAM_PACKAGE


FALSY_ENV_VALUES = {"0", "false", "no", "off"}

# frames in these files belong to the logging machinery, not the caller
_LOGGING_DIRS = tuple(
    os.path.dirname(os.path.normcase(os.path.abspath(path))) + os.sep
    for path in (logging.__file__, apathetic_logging.__file__)
)
_THIS_FILE = os.path.normcase(os.path.abspath(__file__))


def _is_logging_frame(filename: str) -> bool:
    filename = os.path.normcase(os.path.abspath(filename))
    return filename == _THIS_FILE or filename.startswith(_LOGGING_DIRS)


def verbose_logs_enabled() -> bool:
    """True when the VERBOSE_LOGS toggle is set to a non-falsy value."""
    raw = os.getenv(DEFAULT_ENV_VERBOSE_LOGS, "").strip().lower()
    return bool(raw) and raw not in FALSY_ENV_VALUES


class DiagnosticTagFormatter(TagFormatter):
    """TagFormatter that names the emitting file on TRACE/DEBUG records."""

    def formatMessage(self, record: logging.LogRecord) -> str:  # noqa: N802
        message = super().formatMessage(record)
        if record.levelno <= logging.DEBUG:
            return f"[{record.filename}] {message}"
        return message


class AppLogger(Logger):
    """App-specific logger class."""

    def manageHandlers(self, *, manage_handlers: bool | None = None) -> None:  # noqa: N802
        super().manageHandlers(manage_handlers=manage_handlers)
        for handler in self.handlers:
            if isinstance(handler, DualStreamHandler):
                handler.enable_color = self.enable_color
                if not isinstance(handler.formatter, DiagnosticTagFormatter):
                    handler.setFormatter(DiagnosticTagFormatter("%(message)s"))

    def determineLogLevel(  # noqa: N802
        self,
        *,
        args: argparse.Namespace | None = None,
        root_log_level: str | None = None,
    ) -> str:
        """Resolve log level from CLI → env → VERBOSE_LOGS → root config → default."""
        explicit = getattr(args, "log_level", None) is not None or any(
            os.getenv(env_var) for env_var in getLogLevelEnvVars()
        )
        if not explicit and verbose_logs_enabled():
            return DEFAULT_VERBOSE_LOG_LEVEL.upper()
        return super().determineLogLevel(args=args, root_log_level=root_log_level)

    def findCaller(  # noqa: N802
        self,
        stack_info: bool = False,  # noqa: FBT001, FBT002
        stacklevel: int = 1,
    ) -> tuple[str, int, str, str | None]:
        """Report the first frame outside the logging machinery.

        Logger methods are wrapped by the library, so the stock lookup
        would name the library's own source file.
        """
        frame = sys._getframe(1)  # noqa: SLF001
        while frame is not None and _is_logging_frame(frame.f_code.co_filename):
            frame = frame.f_back
        for _ in range(stacklevel - 1):
            if frame is None or frame.f_back is None:
                break
            frame = frame.f_back
        if frame is None:
            return "(unknown file)", 0, "(unknown function)", None

        sinfo = None
        if stack_info:
            with io.StringIO() as sio:
                sio.write("Stack (most recent call last):\n")
                traceback.print_stack(frame, file=sio)
                sinfo = sio.getvalue().rstrip("\n")
        code = frame.f_code
        return code.co_filename, frame.f_lineno, code.co_name, sinfo


# --- Logger initialization ---------------------------------------------------

# Register log level environment variables and default
# This must happen before any loggers are created so they use the registered values
registerLogLevelEnvVars(
    [f"{PROGRAM_ENV}_{DEFAULT_ENV_LOG_LEVEL}", DEFAULT_ENV_LOG_LEVEL]
)
registerDefaultLogLevel(DEFAULT_LOG_LEVEL)

# Registers TRACE and SILENT and makes AppLogger the logger class
registerLogger(PROGRAM_PACKAGE, AppLogger)

_APP_LOGGER = cast("AppLogger", logging.getLogger(PROGRAM_PACKAGE))
# own handlers, so color and stream changes apply to this logger directly
_APP_LOGGER.setPropagate(False)
_APP_LOGGER.setLevel(_APP_LOGGER.determineLogLevel())


# --- Convenience utils ---------------------------------------------------------


def getAppLogger() -> AppLogger:  # noqa: N802
    """Return the configured app logger."""
    return _APP_LOGGER
