import sys

import pytest

from acaupdater.errors import UpdaterError
from acaupdater.services.command_runner import CommandRunner


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


def test_command_runner_captures_stdout():
    runner = CommandRunner(logger=DummyLogger())

    result = runner.run([sys.executable, "-c", "print('00000000-0000-0000-0000-000000000000')"])

    assert result.returncode == 0
    assert result.stdout.strip() == "00000000-0000-0000-0000-000000000000"


def test_command_runner_raises_with_stderr():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(UpdaterError, match="boom"):
        runner.run(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(1)"],
            check=True,
        )


def test_command_runner_returns_when_check_disabled():
    runner = CommandRunner(logger=DummyLogger())

    result = runner.run([sys.executable, "-c", "import sys; sys.exit(1)"], check=False)

    assert result.returncode == 1


def test_command_runner_reports_missing_executable():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(UpdaterError, match="Required command not found"):
        runner.run(["definitely-not-an-installed-command-acaupdater"])


def test_command_runner_timeout_raises_error():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(UpdaterError, match="timed out"):
        runner.run(
            [sys.executable, "-c", "import time; time.sleep(2)"],
            check=True,
            timeout=0.1,
        )
