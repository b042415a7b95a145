import logging
import subprocess
from importlib import metadata
from unittest import mock

import pytest

from grove import cli


def _completed(stdout, returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)


@pytest.fixture
def git_installed():
    with mock.patch("shutil.which", return_value="/usr/bin/git"):
        yield


@pytest.mark.parametrize(
    "level, expected",
    [
        (None, logging.INFO),
        ("", logging.INFO),
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("WARN", logging.WARNING),
        ("error", logging.ERROR),
    ],
)
def test_configure_logging_levels(level, expected):
    assert cli.configure_logging(level) == expected
    assert logging.getLogger("grove").level == expected


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError, match="invalid log level"):
        cli.configure_logging("loud")


def test_configure_logging_does_not_stack_handlers():
    assert cli.configure_logging("info") == logging.INFO
    assert cli.configure_logging("debug") == logging.DEBUG
    assert len(logging.getLogger("grove").handlers) == 1


def test_parser_checkout_and_aliases_share_handler():
    parser = cli.build_parser()
    full = parser.parse_args(["checkout", "u/fm-331"])
    short = parser.parse_args(["co", "u/fm-331"])
    created = parser.parse_args(["create", "u/fm-331"])
    assert full.branch == "u/fm-331"
    assert full.handler is short.handler is created.handler


def test_parser_checkout_requires_exactly_one_branch():
    parser = cli.build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["checkout"])
    with pytest.raises(SystemExit):
        parser.parse_args(["checkout", "a", "b"])


def test_main_fails_without_git():
    with mock.patch("shutil.which", return_value=None):
        assert cli.main([]) == 1


def test_main_without_args_prints_help(git_installed, capsys):
    assert cli.main([]) == 0
    out = capsys.readouterr().out
    assert "checkout" in out
    assert "init" in out


def test_main_passes_unknown_args_to_git_worktree(git_installed, capsys):
    with mock.patch("subprocess.run", return_value=_completed("/repo abc123 [main]\n")) as run:
        assert cli.main(["list"]) == 0
    assert run.call_args.args[0] == ["git", "worktree", "list"]
    assert capsys.readouterr().out == "/repo abc123 [main]\n"


def test_main_passthrough_failure_returns_one(git_installed):
    with mock.patch("subprocess.run", return_value=_completed("fatal\n", returncode=128)):
        assert cli.main(["prune"]) == 1


def test_main_checkout_with_missing_branch_argument(git_installed):
    assert cli.main(["checkout"]) == 2


def test_main_init_outside_repository(git_installed, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with mock.patch("subprocess.run", return_value=_completed("false\n")):
        assert cli.main(["init"]) == 1
    assert not (tmp_path / ".grove").exists()


def test_main_init_creates_grove_then_refuses_second_time(git_installed, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with mock.patch("subprocess.run", return_value=_completed("true\n")):
        assert cli.main(["init"]) == 0
        assert (tmp_path / ".grove" / "config.yaml").is_file()
        assert (tmp_path / ".grove" / "seed").is_dir()
        assert cli.main(["init"]) == 1


def test_main_checkout_when_not_initialized(git_installed, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert cli.main(["checkout", "feature"]) == 1


@pytest.mark.parametrize("argv", [["version"], ["-v"], ["--version"]])
def test_main_version_prints_installed_version(git_installed, capsys, argv):
    with mock.patch("importlib.metadata.version", return_value="1.2.3"):
        assert cli.main(argv) == 0
    assert capsys.readouterr().out == "1.2.3\n"


def test_main_version_unavailable(git_installed):
    with mock.patch(
        "importlib.metadata.version",
        side_effect=metadata.PackageNotFoundError("grove"),
    ):
        assert cli.main(["version"]) == 1