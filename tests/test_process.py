"""Tests for the external tool runner."""

import threading

import pytest

from jre_trim.events import CancellationToken
from jre_trim.exceptions import ExternalToolError, OperationCancelledError
from jre_trim.process import run_tool
from toolgen import posix_only, write_script


@posix_only
class TestRunTool:
    def test_captures_both_streams(self, tmp_path):
        script = write_script(tmp_path / "tool", "echo one\necho two\necho oops >&2\nexit 0\n")
        seen = []
        run = run_tool([script], on_stdout_line=seen.append)
        assert run.succeeded
        assert run.stdout == "one\ntwo"
        assert run.stderr == "oops"
        assert seen == ["one", "two"]
        assert run.tool == "tool"

    def test_nonzero_exit_is_returned(self, tmp_path):
        script = write_script(tmp_path / "jdeps", "echo bad >&2\nexit 4\n")
        run = run_tool([script, "--flag"])
        assert run.exit_code == 4
        assert not run.succeeded
        with pytest.raises(ExternalToolError) as exc_info:
            run.raise_for_status()
        error = exc_info.value
        assert error.exit_code == 4
        assert "--flag" in str(error)
        assert "bad" in str(error)

    def test_missing_executable(self, tmp_path):
        with pytest.raises(ExternalToolError) as exc_info:
            run_tool([tmp_path / "does-not-exist"])
        assert exc_info.value.exit_code == -1

    def test_cancellation_kills_child(self, tmp_path):
        script = write_script(tmp_path / "slow", "sleep 30\n")
        token = CancellationToken()
        timer = threading.Timer(0.3, token.cancel)
        timer.start()
        try:
            with pytest.raises(OperationCancelledError):
                run_tool([script], cancel_token=token)
        finally:
            timer.cancel()
