"""Grove configuration stored as YAML inside the ``.grove`` directory."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_WORKTREES_DIRECTORY = "./worktrees"
DEFAULT_BRANCH_DELIMITER = "/"
_WINDOWS_FALLBACK_SHELL = "C:\\Windows\\system32\\cmd.exe"
_POSIX_FALLBACK_SHELL = "/bin/sh"


@dataclass
class Hooks:
    """Commands run at points of the worktree lifecycle."""

    shell: str = ""
    after_checkout: list[str] = field(default_factory=list)


@dataclass
class BranchResolver:
    """Settings used to expand short branch names into full ones."""

    branch_delimiter: str = ""
    prefix_aliases: dict[str, str] = field(default_factory=dict)


@dataclass
class Config:
    """The whole grove configuration."""

    worktrees_directory: str = ""
    branch_resolver: BranchResolver = field(default_factory=BranchResolver)
    hooks: Hooks = field(default_factory=Hooks)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration in its YAML layout."""
        return {
            "worktrees-directory": self.worktrees_directory,
            "branch-resolver": {
                "branch-delimiter": self.branch_resolver.branch_delimiter,
                "prefix-aliases": dict(self.branch_resolver.prefix_aliases),
            },
            "hooks": {
                "shell": self.hooks.shell,
                "after-checkout": list(self.hooks.after_checkout),
            },
        }

    def save(self, path: str | os.PathLike[str]) -> None:
        """Write the configuration to ``path`` as YAML."""
        text = yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False)
        Path(path).write_text(text, encoding="utf-8")


def default_shell() -> str:
    """Return the shell hooks run in when none is configured."""
    if sys.platform == "win32":
        return os.environ.get("ComSpec") or _WINDOWS_FALLBACK_SHELL
    return os.environ.get("SHELL") or _POSIX_FALLBACK_SHELL


def default_config() -> Config:
    """Return the configuration written by ``grove init``."""
    return Config(
        worktrees_directory=DEFAULT_WORKTREES_DIRECTORY,
        branch_resolver=BranchResolver(
            branch_delimiter=DEFAULT_BRANCH_DELIMITER,
            prefix_aliases={},
        ),
        hooks=Hooks(shell=default_shell(), after_checkout=[]),
    )


def _mapping(value: Any, where: str) -> dict[Any, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{where}: expected a mapping")
    return value


def _string(value: Any, where: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"{where}: expected a string")


def _string_list(value: Any, where: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{where}: expected a sequence")
    return [_string(item, where) for item in value]


def load_config(path: str | os.PathLike[str]) -> Config:
    """Read the configuration stored at ``path``.

    Missing keys keep empty values; malformed content raises ``ValueError``.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(str(exc)) from exc

    root = _mapping(data, "config")
    resolver = _mapping(root.get("branch-resolver"), "branch-resolver")
    hooks = _mapping(root.get("hooks"), "hooks")
    aliases = _mapping(resolver.get("prefix-aliases"), "prefix-aliases")

    return Config(
        worktrees_directory=_string(root.get("worktrees-directory"), "worktrees-directory"),
        branch_resolver=BranchResolver(
            branch_delimiter=_string(resolver.get("branch-delimiter"), "branch-delimiter"),
            prefix_aliases={
                _string(alias, "prefix-aliases"): _string(prefix, "prefix-aliases")
                for alias, prefix in aliases.items()
            },
        ),
        hooks=Hooks(
            shell=_string(hooks.get("shell"), "shell"),
            after_checkout=_string_list(hooks.get("after-checkout"), "after-checkout"),
        ),
    )