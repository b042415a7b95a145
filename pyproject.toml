[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "grove"
version = "0.1.0"
description = "A wrapper around `git worktree` that resolves branch aliases, seeds new worktrees and runs hooks."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["git", "worktree", "branch", "cli", "developer-tools"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control :: Git",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
grove = "grove.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["grove"]

[tool.pytest.ini_options]
addopts = "-ra"
