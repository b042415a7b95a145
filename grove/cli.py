"""Command line entry point for grove."""

from __future__ import annotations

import argparse
import logging
import os
import subprocess
import sys
from collections.abc import Callable, Sequence
from importlib import metadata

from grove import core, git

logger = logging.getLogger(__name__)

_DISTRIBUTION = "grove"
_LOG_FORMAT = "%(levelname)s %(message)s"
_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}
_VERSION_FLAGS = ("-v", "--version")
_HELP_WORDS = ("-h", "--help", "help")


class BuildInfoUnavailableError(Exception):
    """The installed version of grove cannot be determined."""

    def __init__(self, message: str = "build information unavailable") -> None:
        super().__init__(message)


_HANDLED_ERRORS = (
    core.GroveError,
    git.GitError,
    git.WorkTreeNotFoundError,
    BuildInfoUnavailableError,
    subprocess.SubprocessError,
    OSError,
    ValueError,
)


def configure_logging(level: str | None) -> int:
    """Send grove's log records to stdout at ``level`` (default info).

    Returns the numeric level; raises ``ValueError`` for an unknown name.
    """
    numeric = logging.INFO
    if level:
        try:
            numeric = _LEVELS[level.strip().lower()]
        except KeyError:
            raise ValueError(f"invalid log level {level}") from None

    package_logger = logging.getLogger("grove")
    package_logger.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(numeric)
    return numeric


def _run_checkout(namespace: argparse.Namespace) -> None:
    core.load()
    core.get_instance().checkout(namespace.branch)


def _run_init(namespace: argparse.Namespace) -> None:
    core.create()


def _run_version(namespace: argparse.Namespace) -> None:
    try:
        installed = metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        raise BuildInfoUnavailableError() from None
    print(installed)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the grove subcommands."""
    parser = argparse.ArgumentParser(
        prog="grove",
        description="Grove is a wrapper around the `git worktree` command.",
        epilog="Arguments that are not a grove subcommand are passed to `git worktree`.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    checkout = subparsers.add_parser(
        "checkout",
        aliases=["create", "co"],
        help="Checkout a branch in a new worktree",
    )
    checkout.add_argument("branch", help="branch name; prefix aliases and slug prefixes are resolved")
    checkout.set_defaults(handler=_run_checkout)

    init = subparsers.add_parser(
        "init",
        help="Initialize a new worktree manager in the current directory",
    )
    init.set_defaults(handler=_run_init)

    version = subparsers.add_parser("version", help="Gets the current version of Grove")
    version.set_defaults(handler=_run_version)

    return parser


def _subcommand_names(parser: argparse.ArgumentParser) -> set[str]:
    names: set[str] = set()
    for action in parser._actions:
        if isinstance(action, argparse._SubParsersAction):
            names.update(action.choices)
    return names


def _passthrough(args: Sequence[str]) -> None:
    joined = " ".join(args)
    logger.debug("no subcommand found, passing through args to git worktree command: %s", joined)
    print(git.execute_worktree(joined), end="")


def main(argv: Sequence[str] | None = None) -> int:
    """Run grove with ``argv`` (default: the process arguments); return the exit code."""
    args = list(sys.argv[1:] if argv is None else argv)
    configure_logging(os.environ.get("LOG_LEVEL"))
    parser = build_parser()

    try:
        git.validate_git_installation()

        if not args or args[0] in _HELP_WORDS:
            print(parser.format_help(), end="")
            return 0

        if args[0] in _VERSION_FLAGS:
            args = ["version", *args[1:]]

        if args[0] not in _subcommand_names(parser):
            _passthrough(args)
            return 0

        try:
            namespace = parser.parse_args(args)
        except SystemExit as exc:
            return exc.code if isinstance(exc.code, int) else 1

        handler: Callable[[argparse.Namespace], None] = namespace.handler
        handler(namespace)
    except KeyboardInterrupt:
        return 130
    except _HANDLED_ERRORS as exc:
        logger.error("%s", exc)
        return 1
    return 0