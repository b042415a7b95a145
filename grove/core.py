"""The grove itself: its on-disk layout, loading, and branch checkout."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass

from grove import git
from grove.config import Config, default_config, load_config
from grove.util import exec_shell_cmd, in_directory

logger = logging.getLogger(__name__)

GROVE_DIRECTORY_NAME = ".grove"
SEED_DIRECTORY_NAME = "seed"
CONFIG_FILE_NAME = "config.yaml"
MAIN_BRANCH = "main"


class GroveError(Exception):
    """Base class for grove failures."""


class NotAGitRepositoryError(GroveError):
    """The working directory is not inside a git repository."""

    def __init__(self, message: str = "not a git repository") -> None:
        super().__init__(message)


class AlreadyInitializedError(GroveError):
    """A ``.grove`` directory already exists for this location."""

    def __init__(self, message: str = "already initialized") -> None:
        super().__init__(message)


class NotInitializedError(GroveError):
    """No ``.grove`` directory was found here or in any parent."""

    def __init__(self, message: str = "not initialized") -> None:
        super().__init__(message)


class NotLoadedError(GroveError):
    """The grove has not been loaded into memory yet."""

    def __init__(self, message: str = "not loaded, call load() first") -> None:
        super().__init__(message)


class ConfigNotFoundError(GroveError):
    """The ``.grove`` directory holds no configuration file."""

    def __init__(self, message: str = "config not found") -> None:
        super().__init__(message)


class SeedDirectoryNotFoundError(GroveError):
    """The ``.grove`` directory holds no seed directory."""

    def __init__(self, message: str = "seed directory not found") -> None:
        super().__init__(message)


def _split(value: str, delimiter: str) -> list[str]:
    if delimiter == "":
        return list(value)
    return value.split(delimiter)


@dataclass
class Grove:
    """A worktree manager rooted at a repository's ``.grove`` directory."""

    config: Config
    repository_path: str = ""
    grove_path: str = ""
    worktrees_path: str = ""
    seed_path: str = ""

    def persist(self) -> None:
        """Create the ``.grove`` and seed directories and write the config."""
        os.mkdir(self.grove_path, 0o755)
        os.mkdir(self.seed_path, 0o755)
        self.config.save(os.path.join(self.grove_path, CONFIG_FILE_NAME))

    def resolve_branch(self, value: str, branches: list[str]) -> str:
        """Expand prefix aliases and a slug prefix in ``value`` into a branch name."""
        resolver = self.config.branch_resolver
        delimiter = resolver.branch_delimiter
        parts = _split(value, delimiter)

        for i, part in enumerate(parts):
            if i != len(parts) - 1:
                parts[i] = resolver.prefix_aliases.get(part, part)
                continue

            wanted = delimiter.join(parts)
            if wanted in branches:
                return wanted

            resolved_prefix = delimiter.join(parts[:-1])
            for branch in branches:
                branch_parts = _split(branch, delimiter)
                if not branch_parts:
                    continue
                slug = branch_parts[-1]
                prefix = delimiter.join(branch_parts[:-1])
                if slug.startswith(part) and prefix == resolved_prefix:
                    parts[i] = slug
                    break

        return delimiter.join(parts)

    def seed_worktree(self, worktree: git.WorkTree) -> None:
        """Copy the seed directory's contents into ``worktree``."""
        logger.debug("seeding worktree %s from %s", worktree.path, self.seed_path)
        shutil.copytree(self.seed_path, worktree.path, symlinks=True, dirs_exist_ok=True)

    def execute_after_checkout_hooks(self) -> None:
        """Run each after-checkout hook in order, stopping at the first failure."""
        hooks = self.config.hooks
        logger.debug("executing %d after checkout hooks", len(hooks.after_checkout))
        for hook in hooks.after_checkout:
            logger.info("executing hook: %s", hook)
            try:
                exec_shell_cmd(hooks.shell, hook)
            except (subprocess.CalledProcessError, OSError) as exc:
                raise GroveError(f"error executing hook {hook}: {exc}") from exc
        logger.debug("after checkout hooks executed")

    def checkout(self, branch: str) -> git.WorkTree:
        """Switch to a worktree for ``branch``, creating it if needed."""
        with in_directory(self.repository_path):
            resolved = self.resolve_branch(branch, git.list_branches())
            logger.info("checking out %s", resolved)

            try:
                worktree = git.find_worktree(resolved)
            except git.WorkTreeNotFoundError:
                pass
            else:
                logger.info("worktree already exists, switching to it")
                self._enter_worktree(worktree)
                return worktree

            git.fetch("-p")

            worktrees_directory = self.config.worktrees_directory
            if git.branch_exists(resolved):
                logger.info("branch exists on remote, creating new worktree from branch")
                worktree = git.create_worktree_from_branch(worktrees_directory, resolved)
                self._enter_worktree(worktree)
                return worktree

            try:
                main_worktree = git.find_worktree(MAIN_BRANCH)
            except (git.GitError, git.WorkTreeNotFoundError) as exc:
                raise GroveError(f"error finding main worktree: {exc}") from exc

            with in_directory(main_worktree.path):
                logger.info("pulling %s", MAIN_BRANCH)
                git.pull()

            logger.info("creating new worktree based on %s: %s", MAIN_BRANCH, resolved)
            worktree = git.create_worktree_from_new_branch(worktrees_directory, resolved)
            self._enter_worktree(worktree)
            return worktree

    def _enter_worktree(self, worktree: git.WorkTree) -> None:
        logger.debug("checking out worktree %s", worktree.path)
        os.chdir(worktree.path)
        try:
            git.pull()
        except (git.GitError, OSError):
            pass
        self.seed_worktree(worktree)
        self.execute_after_checkout_hooks()
        logger.info("checked out worktree %s", worktree.path)


_instance: Grove | None = None


def locate_grove_dir(start_path: str | os.PathLike[str]) -> str:
    """Find the nearest ``.grove`` directory at or above ``start_path``."""
    directory = os.path.abspath(start_path)
    while True:
        candidate = os.path.join(directory, GROVE_DIRECTORY_NAME)
        if os.path.isdir(candidate):
            return candidate
        parent = os.path.dirname(directory)
        if parent == directory:
            raise NotInitializedError()
        directory = parent


def _require(path: str, error: GroveError) -> None:
    try:
        os.stat(path)
    except FileNotFoundError:
        raise error from None


def read_grove(start_path: str | os.PathLike[str]) -> Grove:
    """Read the grove that contains ``start_path`` from disk."""
    grove_dir = locate_grove_dir(start_path)

    seed_path = os.path.join(grove_dir, SEED_DIRECTORY_NAME)
    _require(seed_path, SeedDirectoryNotFoundError())

    config_path = os.path.join(grove_dir, CONFIG_FILE_NAME)
    _require(config_path, ConfigNotFoundError())

    try:
        config = load_config(config_path)
    except (ValueError, OSError) as exc:
        raise GroveError(f"invalid config: {exc}") from exc

    return Grove(
        config=config,
        repository_path=os.path.dirname(grove_dir),
        grove_path=grove_dir,
        seed_path=seed_path,
    )


def load() -> Grove:
    """Load the grove for the working directory and keep it as the current one."""
    global _instance
    _instance = read_grove(os.getcwd())
    return _instance


def get_instance() -> Grove:
    """Return the grove loaded by ``load``."""
    if _instance is None:
        raise NotLoadedError()
    return _instance


def create() -> Grove:
    """Create a default grove in the working directory, which must be a git repository."""
    if not git.is_git_repository():
        raise NotAGitRepositoryError()

    try:
        load()
    except NotInitializedError:
        pass
    else:
        raise AlreadyInitializedError()

    working_dir = os.getcwd()
    grove_dir = os.path.join(working_dir, GROVE_DIRECTORY_NAME)
    grove = Grove(
        config=default_config(),
        repository_path=working_dir,
        grove_path=grove_dir,
        seed_path=os.path.join(grove_dir, SEED_DIRECTORY_NAME),
    )
    grove.persist()
    return grove