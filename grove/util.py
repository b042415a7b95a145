"""Helpers for running shell commands and switching directories."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


def shell_command_args(shell: str, cmd: str) -> list[str]:
    """Return the argument vector that runs ``cmd`` through ``shell``."""
    base = os.path.basename(shell).lower()
    if base in ("powershell", "pwsh"):
        return [shell, "-Command", cmd]
    if base in ("cmd", "cmd.exe"):
        return [shell, "/C", cmd]
    return [shell, "-i", "-c", cmd]


def exec_shell_cmd(shell: str, cmd: str) -> None:
    """Run ``cmd`` in ``shell``, sharing this process's output streams.

    Raises ``subprocess.CalledProcessError`` when the command fails.
    """
    result = subprocess.run(shell_command_args(shell, cmd), stdin=subprocess.DEVNULL)
    result.check_returncode()


@contextmanager
def in_directory(path: str | os.PathLike[str]) -> Iterator[None]:
    """Make ``path`` the working directory for the duration of the block."""
    previous = os.getcwd()
    logger.debug("changing directory to %s", path)
    os.chdir(path)
    try:
        yield
    finally:
        logger.debug("changing directory to %s", previous)
        try:
            os.chdir(previous)
        except OSError as exc:
            logger.error("error restoring working directory %s: %s", previous, exc)