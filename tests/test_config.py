import sys

import pytest
import yaml

from grove.config import (
    BranchResolver,
    Config,
    Hooks,
    default_config,
    default_shell,
    load_config,
)


def test_default_config_values(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("SHELL", "/bin/zsh")
    cfg = default_config()
    assert cfg.worktrees_directory == "./worktrees"
    assert cfg.branch_resolver.branch_delimiter == "/"
    assert cfg.branch_resolver.prefix_aliases == {}
    assert cfg.hooks.shell == "/bin/zsh"
    assert cfg.hooks.after_checkout == []


def test_default_shell_posix_fallback(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.delenv("SHELL", raising=False)
    assert default_shell() == "/bin/sh"


def test_default_shell_windows(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.delenv("ComSpec", raising=False)
    assert default_shell() == "C:\\Windows\\system32\\cmd.exe"
    monkeypatch.setenv("ComSpec", "D:\\tools\\cmd.exe")
    assert default_shell() == "D:\\tools\\cmd.exe"


def test_to_dict_layout():
    cfg = Config(
        worktrees_directory="./wt",
        branch_resolver=BranchResolver(branch_delimiter="/", prefix_aliases={"u": "user1"}),
        hooks=Hooks(shell="/bin/bash", after_checkout=["make setup"]),
    )
    assert cfg.to_dict() == {
        "worktrees-directory": "./wt",
        "branch-resolver": {"branch-delimiter": "/", "prefix-aliases": {"u": "user1"}},
        "hooks": {"shell": "/bin/bash", "after-checkout": ["make setup"]},
    }


def test_save_and_load_round_trip(tmp_path):
    cfg = Config(
        worktrees_directory="./trees",
        branch_resolver=BranchResolver(branch_delimiter="-", prefix_aliases={"j": "johndoe"}),
        hooks=Hooks(shell="/bin/sh", after_checkout=["npm install", "echo done"]),
    )
    path = tmp_path / "config.yaml"
    cfg.save(path)
    assert load_config(path) == cfg


def test_saved_file_uses_yaml_keys(tmp_path):
    path = tmp_path / "config.yaml"
    default_config().save(path)
    data = yaml.safe_load(path.read_text())
    assert set(data) == {"worktrees-directory", "branch-resolver", "hooks"}
    assert data["branch-resolver"]["branch-delimiter"] == "/"


def test_load_empty_file_gives_empty_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == Config()


def test_load_partial_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("worktrees-directory: ./w\nhooks:\n  after-checkout:\n    - ls\n")
    cfg = load_config(path)
    assert cfg.worktrees_directory == "./w"
    assert cfg.hooks.after_checkout == ["ls"]
    assert cfg.hooks.shell == ""
    assert cfg.branch_resolver == BranchResolver()


def test_load_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("hooks: [unclosed\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_load_wrong_shape(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")