"""Run a shell command and collect what it writes to standard output."""

from __future__ import annotations

import logging
import subprocess

_log = logging.getLogger(__name__)

# Return code reported when the command was terminated by a signal.
EXEC_ERROR_SIGNALED = -2


class ExecError(RuntimeError):
    """Raised when the shell for a command cannot be started."""


def run(cmd: str) -> tuple[int, str]:
    """Run ``cmd`` through the shell.

    Returns the exit status and everything the command wrote to standard
    output. Standard error is not captured. A command killed by a signal
    reports ``EXEC_ERROR_SIGNALED``.
    """
    try:
        proc = subprocess.Popen(cmd, shell=True, stdout=subprocess.PIPE)
    except OSError as exc:
        message = f"popen({cmd}) failed!"
        _log.error("exec: %s", message)
        raise ExecError(message) from exc

    raw, _ = proc.communicate()
    output = raw.decode("utf-8", errors="replace")

    status = proc.returncode
    if status >= 0:
        rc = status
        detail = f"Exited with rc={rc}"
    else:
        rc = EXEC_ERROR_SIGNALED
        detail = f"Killed with signal={-status}"

    _log.debug("%s : %s : %s", cmd, output, detail)
    return rc, output