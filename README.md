# grove

`grove` is a small command-line tool that wraps `git worktree`. It keeps one
worktree per branch under a configurable directory and expands short branch
names into full ones. It also copies a set of "seed" files into each worktree
it checks out and runs hook commands after each checkout.

## Requirements

- Python 3.10 or later
- `git` on your `PATH`. Every invocation checks for it first, including `help`.

## Installation

```sh
pip install .
```

This installs the `grove` command.

## Getting started

Run `init` inside a git repository:

```sh
grove init
```

If the current directory is not inside a git work tree, `init` fails with
"not a git repository". It also fails with "already initialized" if a `.grove`
directory exists here or in any parent directory. Otherwise it creates
`.grove` in the current directory, which holds:

- `config.yaml`: the grove configuration, filled with the defaults
- `seed/`: files that are copied into every worktree you check out

## Checking out a branch

```sh
grove checkout u/fm-331
```

`create` and `co` are aliases for `checkout`. The command finds the nearest
`.grove` directory at or above the current directory. It then works from the
directory that contains `.grove`:

1. It lists local and remote branches, with the `origin/` prefix removed, and
   resolves the name you gave. Every segment except the last one is looked up
   in `prefix-aliases` and replaced when it matches. If the expanded name is an
   existing branch, that branch is used. If not, the first branch with the same
   prefix whose last segment starts with your last segment is used. If nothing
   matches, the expanded name is used as given.
2. If a worktree already has that branch checked out, grove uses it.
3. If not, grove runs `git fetch -p`. If the branch exists locally or on
   `origin`, grove adds a worktree for it at
   `<worktrees-directory>/<branch>`.
4. If the branch exists in neither place, grove runs `git pull` in the worktree
   that has `main` checked out, then creates the branch from `main` in a new
   worktree at `<worktrees-directory>/<branch>`. If no worktree has `main`
   checked out, the command fails.
5. Inside the worktree, grove runs `git pull` and ignores any failure. It then
   copies the contents of `.grove/seed` into the worktree, overwriting files
   that are already there, and runs the `after-checkout` hooks in order. If a
   hook fails, grove stops at that hook and reports the error.

## Passing through to `git worktree`

If the first argument is not a grove subcommand, grove passes all the
arguments to `git worktree` and prints what git outputs:

```sh
grove list
grove remove worktrees/old-branch
```

## Configuration

`.grove/config.yaml` looks like this:

```yaml
worktrees-directory: ./worktrees
branch-resolver:
  branch-delimiter: /
  prefix-aliases:
    u: user1
hooks:
  shell: /bin/sh
  after-checkout:
    - npm install
```

- `worktrees-directory`: where new worktrees are created. A relative path is
  taken from the directory that contains `.grove`. The default is
  `./worktrees`.
- `branch-resolver.branch-delimiter`: the separator between branch name
  segments. The default is `/`.
- `branch-resolver.prefix-aliases`: short names for leading segments. There
  are none by default.
- `hooks.shell`: the shell the hooks run in. The default is `$SHELL`, or
  `/bin/sh` if that is not set. On Windows the default is `%ComSpec%`, or
  `C:\Windows\system32\cmd.exe`. How a hook is passed to the shell depends on
  the shell's name. For `powershell` and `pwsh` grove uses `-Command`, for
  `cmd` and `cmd.exe` it uses `/C`, and for any other shell it uses `-i -c`.
- `hooks.after-checkout`: commands to run after each checkout. There are none
  by default.

With the `u: user1` alias and an existing branch `user1/fm-331-fix-login`, this
command checks out `user1/fm-331-fix-login`:

```sh
grove checkout u/fm-331
```

## Logging

Log messages go to standard output. The `LOG_LEVEL` environment variable sets
how much is logged. It accepts `debug`, `info`, `warn`, `warning` or `error`,
in any letter case, and defaults to `info`.

```sh
LOG_LEVEL=debug grove checkout main
```

## Other commands

```sh
grove version     # also: grove -v, grove --version
grove help        # also: grove -h, grove --help, or grove with no arguments
```

`version` prints the installed version of the `grove` distribution. When an
error occurs, grove logs it and exits with status 1.

## Using it from Python

- `grove.core.load()` reads the grove for the current directory and returns a
  `Grove`.
- `Grove.checkout(branch)` does what `grove checkout` does and returns the
  `grove.git.WorkTree` it checked out.
- `Grove.resolve_branch(value, branches)` resolves a name without calling git.
- `grove.core.create()` does what `grove init` does.
- `grove.config.load_config(path)` and `Config.save(path)` read and write
  `config.yaml`.
- `grove.git` has small wrappers around git commands, such as
  `list_branches()`, `list_worktrees()` and `find_worktree(branch)`.

## Limitations

- Git commands are built by joining their arguments with spaces and splitting
  them again on single spaces. Branch names and paths that contain spaces do
  not work, and neither do passthrough arguments that contain spaces.
- New branches are always created from `main`. The base branch cannot be
  configured.
- grove changes its own working directory to the new worktree. It cannot change
  the directory of the shell you ran it from, so `cd` into the worktree
  yourself.
- grove has no list or remove commands of its own. Use the passthrough to
  `git worktree` for those.