from unittest import mock

import pytest

from swssdb.shellexec import EXEC_ERROR_SIGNALED, ExecError, run


def test_echo_output_and_status():
    assert run("echo hello") == (0, "hello\n")


def test_nonzero_exit_status_is_returned():
    rc, output = run("exit 3")
    assert rc == 3
    assert output == ""


def test_multiline_output_is_kept_whole():
    rc, output = run("printf 'a\\nb\\n'")
    assert rc == 0
    assert output.splitlines() == ["a", "b"]


def test_stderr_is_not_captured():
    rc, output = run("echo out; echo err 1>&2")
    assert rc == 0
    assert output == "out\n"


def test_killed_by_signal_reports_signaled():
    rc, _ = run("kill -9 $$")
    assert rc == EXEC_ERROR_SIGNALED
    assert EXEC_ERROR_SIGNALED == -2


def test_failure_to_start_raises():
    with mock.patch("subprocess.Popen", side_effect=OSError("no shell")):
        with pytest.raises(ExecError, match=r"popen\(echo x\) failed!"):
            run("echo x")