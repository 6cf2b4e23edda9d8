# tests/5_core/test_logs.py

import logging
from argparse import Namespace

import pytest
from apathetic_logging import TAG_STYLES, DualStreamHandler

import bundlemap.logs as mod_logs
import bundlemap.meta as mod_meta


ENV_LOG_LEVEL = f"{mod_meta.PROGRAM_ENV}_LOG_LEVEL"


# --- level resolution ------------------------------------------------------


def test_determine_log_level_default(direct_logger: mod_logs.AppLogger) -> None:
    assert direct_logger.determineLogLevel() == "INFO"


def test_determine_log_level_precedence(
    monkeypatch: pytest.MonkeyPatch,
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- setup ---
    monkeypatch.setenv("VERBOSE_LOGS", "1")
    monkeypatch.setenv("LOG_LEVEL", "error")
    monkeypatch.setenv(ENV_LOG_LEVEL, "warning")

    # --- execute and verify ---
    assert (
        direct_logger.determineLogLevel(
            args=Namespace(log_level="debug"), root_log_level="critical"
        )
        == "DEBUG"
    )
    assert direct_logger.determineLogLevel(root_log_level="critical") == "WARNING"
    monkeypatch.delenv(ENV_LOG_LEVEL)
    assert direct_logger.determineLogLevel(root_log_level="critical") == "ERROR"
    monkeypatch.delenv("LOG_LEVEL")
    assert direct_logger.determineLogLevel(root_log_level="critical") == "TRACE"
    monkeypatch.delenv("VERBOSE_LOGS")
    assert direct_logger.determineLogLevel(root_log_level="critical") == "CRITICAL"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("1", True),
        ("yes", True),
        ("anything", True),
        ("", False),
        ("0", False),
        ("false", False),
        ("OFF", False),
    ],
)
def test_verbose_logs_enabled(
    monkeypatch: pytest.MonkeyPatch, value: str, expected: bool
) -> None:
    monkeypatch.setenv("VERBOSE_LOGS", value)
    assert mod_logs.verbose_logs_enabled() is expected


def test_app_logger_is_registered_and_owns_its_output() -> None:
    logger = mod_logs.getAppLogger()

    assert logger is logging.getLogger(mod_meta.PROGRAM_PACKAGE)
    assert isinstance(logger, mod_logs.AppLogger)
    assert logger.propagate is False


# --- output ----------------------------------------------------------------


def test_info_goes_to_stdout_and_problems_to_stderr(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- execute ---
    direct_logger.info("hello")
    direct_logger.warning("careful")
    direct_logger.error("broken")

    # --- verify ---
    out, err = capsys.readouterr()
    assert out == "hello\n"
    assert f"{TAG_STYLES['WARNING'][1]} careful" in err
    assert f"{TAG_STYLES['ERROR'][1]} broken" in err


def test_diagnostics_carry_emitting_file_name(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- execute ---
    direct_logger.trace("tracing")
    direct_logger.debug("debugging")
    direct_logger.warning("plain")

    # --- verify ---
    err = capsys.readouterr().err
    assert "[TRACE] [test_logs.py] tracing" in err
    assert "[DEBUG] [test_logs.py] debugging" in err
    assert "[test_logs.py] plain" not in err


def test_find_caller_skips_logging_frames(direct_logger: mod_logs.AppLogger) -> None:
    # --- execute ---
    filename, lineno, func, sinfo = direct_logger.findCaller()

    # --- verify ---
    assert filename.endswith("test_logs.py")
    assert func == "test_find_caller_skips_logging_frames"
    assert lineno > 0
    assert sinfo is None


def test_silent_level_suppresses_everything(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- setup ---
    direct_logger.setLevel("silent")

    # --- execute ---
    direct_logger.critical("nope")

    # --- verify ---
    out, err = capsys.readouterr()
    assert out == ""
    assert err == ""


def test_handler_uses_diagnostic_formatter_and_follows_color(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- setup ---
    direct_logger.info("warm up")
    direct_logger.enable_color = True

    # --- execute ---
    direct_logger.debug("colored")

    # --- verify ---
    handlers = [h for h in direct_logger.handlers if isinstance(h, DualStreamHandler)]
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, mod_logs.DiagnosticTagFormatter)
    assert handlers[0].enable_color is True
    color, tag = TAG_STYLES["DEBUG"]
    assert f"{color}{tag}" in capsys.readouterr().err
