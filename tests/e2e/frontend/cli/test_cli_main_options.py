"""End-to-end tests for the top-level ``kvbench`` options.

Exercises verbosity flags, logger-level overrides, debug formatting, and the
flight recorder by invoking the test-only `log-demo` command.
"""

import re
from pathlib import Path

import pytest

from kvbench.entrypoints.cli.main import kvbench

# pylint: disable=unused-argument

pytestmark = [pytest.mark.e2e]


def assert_in_output(pattern: str, output: str) -> None:
    """Assert that regex `pattern` occurs in `output`."""
    if not re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' not found in output:\n{output}")


def assert_not_in_output(pattern: str, output: str) -> None:
    """Assert that regex `pattern` does not occur in `output`."""
    if re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' found in output:\n{output}")


@pytest.mark.parametrize(
    ("flags", "shown", "hidden"),
    [
        ([], "WARNING", "INFO"),
        (["-v"], "INFO", "DEBUG"),
        (["-vv"], "DEBUG", None),
        (["-q"], "ERROR", "WARNING"),
        (["-qq"], "CRITICAL", "ERROR"),
    ],
    ids=["default", "v", "vv", "q", "qq"],
)
def test_verbosity(registered_log_demo, runner, fs, flags, shown, hidden):
    """Each -v lowers and each -q raises the console threshold by one level."""
    result = runner.invoke(kvbench, [*flags, "--no-flight-recorder", "log-demo"])

    assert result.exit_code == 0, result.output
    assert_in_output(shown, result.output)
    if hidden:
        assert_not_in_output(hidden, result.output)


@pytest.mark.parametrize(
    ("env", "cli_args"),
    [
        ({}, ["-vv", "-L", "some.thirdparty=INFO"]),
        ({"KVBENCH_LOGGER_LEVELS": "some.thirdparty=INFO"}, ["-vv"]),
    ],
    ids=["cli-flag", "env-var"],
)
def test_logger_level_silences_debug(registered_log_demo, runner, fs, env, cli_args):
    """A per-logger level hides that logger's DEBUG lines but keeps INFO+."""
    result = runner.invoke(
        kvbench, [*cli_args, "--no-flight-recorder", "log-demo"], env=env
    )

    assert result.exit_code == 0, result.output
    assert_not_in_output("debug-level third-party test message", result.output)
    assert_in_output("info-level third-party test message", result.output)


def test_third_party_records_are_prefixed(registered_log_demo, runner, fs):
    """Outside debug mode, third-party lines carry a [logger] prefix."""
    result = runner.invoke(kvbench, ["--no-flight-recorder", "log-demo"])

    assert_in_output(r"\[some\] This is a warning-level third-party", result.output)


def test_debug_mode_shows_paths(registered_log_demo, runner, fs):
    """--debug adds source paths to console lines."""
    result = runner.invoke(kvbench, ["--debug", "--no-flight-recorder", "log-demo"])

    assert result.exit_code == 0
    assert_in_output(r"conftest\.py:\d+\b", result.output)


def test_flight_recorder_flush_on_warning(registered_log_demo, runner, fs):
    """Buffered DEBUG lines are written out when a WARNING arrives."""
    log_path = "flight_recorder.log"
    result = runner.invoke(
        kvbench, ["--log-path", log_path, "-L", "some.thirdparty=INFO", "log-demo"]
    )

    assert result.exit_code == 0
    content = Path(log_path).read_text(encoding="utf-8")
    assert_in_output("This is a debug-level test message.", content)
    assert_in_output("This is a critical-level test message.", content)
    assert_in_output("info-level third-party test message", content)
    assert_not_in_output("debug-level third-party test message", content)
    # nothing after the last WARNING+ record is flushed without --force-flush
    assert_not_in_output("This is a final debug-level test message.", content)


def test_flight_recorder_force_flush(registered_log_demo, runner, fs):
    """--force-flush writes the rest of the buffer on exit."""
    log_path = "flight_recorder.log"
    result = runner.invoke(kvbench, ["--log-path", log_path, "--force-flush", "log-demo"])

    assert result.exit_code == 0
    content = Path(log_path).read_text(encoding="utf-8")
    assert_in_output("This is a final debug-level test message.", content)


def test_flight_recorder_can_be_disabled(registered_log_demo, runner, fs):
    """--no-flight-recorder never writes the log file."""
    log_path = "flight_recorder.log"
    result = runner.invoke(
        kvbench, ["--log-path", log_path, "--no-flight-recorder", "log-demo"]
    )

    assert result.exit_code == 0
    assert not Path(log_path).exists()


def test_flight_recorder_creates_parent_dirs(registered_log_demo, runner, fs):
    """A log path in a missing directory is created on demand."""
    log_path = Path("logs") / "nested" / "kvbench.log"
    result = runner.invoke(kvbench, ["--log-path", str(log_path), "log-demo"])

    assert result.exit_code == 0
    assert log_path.is_file()


def test_startup_logging(registered_log_demo, runner, fs):
    """The startup summary and diagnostics land in the flight recorder."""
    log_path = "startup.log"
    result = runner.invoke(
        kvbench, ["--log-path", log_path, "--force-flush", "log-demo"]
    )

    assert result.exit_code == 0
    content = Path(log_path).read_text(encoding="utf-8")
    assert_in_output(r"KVBENCH \d+\.\d+\.\d+", content)
    assert_in_output(r"console=WARNING", content)
    assert_in_output(r"flight-recorder=ON", content)
    assert_in_output(r"Python: \d+\.\d+\.\d+", content)
    assert_in_output(r"Stack: .*'SQLAlchemy': '\d+\.\d+", content)
    assert_in_output(
        r"Flight recorder: path=startup\.log, capacity=2000, flush_on_close=True",
        content,
    )
    assert_in_output(
        r"Per-logger overrides: {'sqlalchemy': 'WARNING', 'alembic': 'WARNING'}",
        content,
    )
