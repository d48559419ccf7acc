"""Finding the program a command name refers to."""

from __future__ import annotations

import os
import sys

from minishell.builtins import is_builtin
from minishell.environment import get_env
from minishell.redirect import check_fd
from minishell.state import Shell, ShellExit

_EXPLICIT = ("/", "./", "../")
_RELATIVE = ("./", "../")


def _relative_to_pwd(cmd: str, env: list[str]) -> str:
    return f"{get_env('PWD', env) or ''}/{cmd}"


def _exists(path: str) -> bool:
    return os.access(path, os.F_OK)


def _executable(path: str) -> bool:
    return os.access(path, os.X_OK)


def file_check(path: str, env: list[str]) -> bool:
    """Vet a command name that contains a slash.

    Returns True for a bare name that still has to be looked up in PATH and
    False for a path to an existing executable. Leaves with status 126 for a
    directory or a file that cannot be run, and 127 for a missing file.
    """
    if "/" not in path:
        return True
    check_fd(path)
    if path.startswith(_RELATIVE):
        rel = _relative_to_pwd(path, env)
        if _exists(rel) and _executable(rel):
            return False
        if _exists(rel):
            raise ShellExit(126)
    if _exists(path) and _executable(path):
        return False
    if _exists(path):
        raise ShellExit(126)
    print(f"minishell: {path}: command not found", file=sys.stderr)
    raise ShellExit(127)


def check_permissions(cmd: str, env: list[str]) -> str:
    """Return the runnable path for ``cmd``, leaving with status 126 if denied.

    Paths starting with ./ or ../ are taken relative to $PWD.
    """
    target = _relative_to_pwd(cmd, env) if cmd.startswith(_RELATIVE) else cmd
    if _executable(target):
        return target
    print(f"minishell: {target}: Permission denied", file=sys.stderr)
    raise ShellExit(126)


def find_path(shell: Shell, name: str) -> str | None:
    """Resolve a command name to a program path.

    Explicit paths are checked and returned as given; other names are
    searched for in $PATH. Returns None for a builtin that is not found
    there, and leaves with status 127 for any other unknown command.
    """
    if name.startswith(_EXPLICIT):
        file_check(name, shell.env)
        check_permissions(name, shell.env)
        return name
    dirs = [d for d in (get_env("PATH", shell.env) or "").split(":") if d]
    file_check(name, shell.env)
    suffix = f"/{name}"
    for directory in dirs:
        candidate = directory + suffix
        if _exists(candidate):
            return check_permissions(candidate, shell.env)
    if not is_builtin(name):
        print(f"minishell: {name}: command not found", file=sys.stderr)
        raise ShellExit(127)
    return None