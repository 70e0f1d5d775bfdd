# This file is part of oci-vnic. See LICENSE file for license information.
"""Run external commands, such as ``ip link show``."""

import collections
import logging
import os
import subprocess
import time
from typing import List, Optional, Union

LOG = logging.getLogger(__name__)

SubpResult = collections.namedtuple("SubpResult", ["stdout", "stderr"])

# Commands slower than this get their run time logged
SLOW_COMMAND_SECS = 0.1


def _indent(text, width=8):
    """Indent every line of text but the first."""
    return text.rstrip("\n").replace("\n", "\n" + " " * width)


class ProcessExecutionError(IOError):
    """A command could not be run or exited non-zero."""

    description = "Unexpected error while running command."
    empty_attr = "-"
    fields = (
        ("Command", "cmd"),
        ("Exit code", "exit_code"),
        ("Reason", "reason"),
        ("Stdout", "stdout"),
        ("Stderr", "stderr"),
    )

    def __init__(
        self,
        stdout=None,
        stderr=None,
        exit_code=None,
        cmd=None,
        reason=None,
        errno=None,
    ):
        self.cmd = cmd or self.empty_attr
        if not isinstance(exit_code, int):
            exit_code = self.empty_attr
        self.exit_code = exit_code
        self.reason = reason or self.empty_attr
        self.stdout = _indent(stdout) if stdout else self.empty_attr
        self.stderr = _indent(stderr) if stderr else self.empty_attr

        lines = [self.description]
        for label, attr in self.fields:
            lines.append("%s: %s" % (label, getattr(self, attr)))
        IOError.__init__(self, "\n".join(lines))
        if errno:
            self.errno = errno


def subp(args: List[str]) -> SubpResult:
    """Run args with no stdin and return its decoded output.

    Undecodable bytes in the output are replaced.

    :raises ProcessExecutionError: if the command cannot be run or exits
        non-zero.
    """
    LOG.debug("Running command %s", args)
    start = time.monotonic()
    try:
        proc = subprocess.Popen(
            args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        raise ProcessExecutionError(
            cmd=args, reason=e, errno=e.errno
        ) from e
    out, err = proc.communicate()

    elapsed = time.monotonic() - start
    if elapsed > SLOW_COMMAND_SECS:
        LOG.debug("%s took %.3fs to run", args, elapsed)

    out = out.decode("utf-8", "replace")
    err = err.decode("utf-8", "replace")
    if proc.returncode != 0:
        raise ProcessExecutionError(
            stdout=out, stderr=err, exit_code=proc.returncode, cmd=args
        )
    return SubpResult(out, err)


def is_exe(fpath: Union[str, os.PathLike]) -> bool:
    return os.path.isfile(fpath) and os.access(fpath, os.X_OK)


def which(program) -> Optional[str]:
    """Return the path of executable program, or None if not found.

    A program containing a path separator is checked as is. Otherwise each
    directory of $PATH is tried in order.
    """
    if os.path.sep in program:
        return program if is_exe(program) else None

    for directory in os.environ.get("PATH", "").split(os.pathsep):
        directory = directory.strip('"')
        if not directory:
            continue
        candidate = os.path.join(os.path.abspath(directory), program)
        if is_exe(candidate):
            return candidate
    return None
