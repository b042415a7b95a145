"""Thin wrappers around the ``git`` command line."""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_WORKTREE_LINE = re.compile(r"^(.*)\s+([a-f0-9]+)\s+\[(.*)\]")


class GitError(Exception):
    """A git command could not be run or exited with an error."""

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        returncode: int | None = None,
        output: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.output = output


class WorkTreeNotFoundError(LookupError):
    """No worktree has the requested branch checked out."""


@dataclass(frozen=True)
class WorkTree:
    """One entry of ``git worktree list``."""

    path: str
    head: str
    branch: str

    def __str__(self) -> str:
        return f"{self.path} {self.head} [{self.branch}]"


def validate_git_installation() -> str:
    """Return the path of the git executable, or raise ``GitError``."""
    path = shutil.which("git")
    if path is None:
        raise GitError('executable file "git" not found in PATH')
    return path


def execute(command: str) -> str:
    """Run ``git`` with ``command`` split on spaces; return combined output."""
    logger.debug("executing git command: %s", command)
    result = subprocess.run(
        ["git", *command.split(" ")],
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
    )
    output = result.stdout or ""
    logger.debug("git command output for %s: %s", command, output)
    if result.returncode != 0:
        raise GitError(
            f"git {command}: exit status {result.returncode}",
            command=command,
            returncode=result.returncode,
            output=output,
        )
    return output


def is_git_repository() -> bool:
    """Tell whether the working directory is inside a git work tree."""
    return execute("rev-parse --is-inside-work-tree").strip() == "true"


def pull() -> None:
    """Pull the current branch."""
    execute("pull")


def fetch(*args: str) -> None:
    """Fetch with the given extra arguments."""
    execute(f"fetch {' '.join(args)}")


def branch_exists(name: str) -> bool:
    """Tell whether ``name`` exists locally or on ``origin``."""
    try:
        if execute(f"branch --list {name}").strip():
            return True
        return bool(execute(f"ls-remote --heads origin {name}").strip())
    except (GitError, OSError):
        return False


def parse_branch_list(output: str) -> list[str]:
    """Turn ``for-each-ref`` output into unique branch names, remote prefix removed."""
    names = (line.strip(" '").removeprefix("origin/") for line in output.split("\n"))
    unique = dict.fromkeys(names)
    return [name for name in unique if name and name != "remote"]


def list_branches() -> list[str]:
    """List local and remote branch names."""
    return parse_branch_list(
        execute("for-each-ref --format='%(refname:short)' refs/heads/ refs/remotes/")
    )


def execute_worktree(command: str) -> str:
    """Run a ``git worktree`` subcommand."""
    return execute(f"worktree {command}")


def parse_worktree(line: str) -> WorkTree:
    """Parse one line of ``git worktree list``; raise ``ValueError`` if malformed."""
    match = _WORKTREE_LINE.match(line)
    if match is None:
        raise ValueError("invalid worktree format")
    path, head, branch = (group.strip() for group in match.groups())
    return WorkTree(path=path, head=head, branch=branch)


def parse_worktree_list(output: str) -> list[WorkTree]:
    """Parse ``git worktree list`` output, skipping lines that do not match."""
    worktrees = []
    for line in output.split("\n"):
        try:
            worktrees.append(parse_worktree(line))
        except ValueError:
            continue
    return worktrees


def list_worktrees() -> list[WorkTree]:
    """List the worktrees of the current repository."""
    return parse_worktree_list(execute_worktree("list"))


def find_worktree(branch: str) -> WorkTree:
    """Return the worktree that has ``branch`` checked out."""
    for worktree in list_worktrees():
        if worktree.branch == branch:
            return worktree
    raise WorkTreeNotFoundError(f"worktree for branch {branch!r} not found")


def create_worktree_from_branch(worktrees_path: str, branch: str) -> WorkTree:
    """Add a worktree for an existing branch under ``worktrees_path``."""
    path = os.path.normpath(os.path.join(worktrees_path, branch))
    execute_worktree(f"add {path} {branch}")
    return find_worktree(branch)


def create_worktree_from_new_branch(worktrees_path: str, branch: str) -> WorkTree:
    """Create ``branch`` from ``main`` in a new worktree under ``worktrees_path``."""
    path = os.path.normpath(os.path.join(worktrees_path, branch))
    execute_worktree(f"add -b {branch} {path} main")
    return find_worktree(branch)