"""The commands the shell runs itself: cd, echo, env, exit, export, pwd, unset."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence

from minishell.environment import check_var, format_env
from minishell.state import Command, Shell, ShellExit

BUILTINS = frozenset({"cd", "env", "export", "echo", "pwd", "unset", "exit"})

_WHITESPACE = "\t\n\v\f\r "
_INT_MAX = 2**31 - 1
_INT_MIN = -(2**31)


def _out(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def _err(text: str) -> None:
    sys.stderr.write(text)
    sys.stderr.flush()


def is_builtin(name: str | None) -> bool:
    """Whether ``name`` is one of the shell's own commands."""
    return bool(name) and name in BUILTINS


def run_builtin(shell: Shell, command: Command, in_pipeline: bool = False) -> int:
    """Run a builtin command; return the shell's exit status afterwards.

    A command whose redirections failed sets status 1, and inside a pipeline
    it leaves the (child) shell with that status.
    """
    if command.fd_in == -1 or command.fd_out == -1:
        shell.exit_status = 1
        if in_pipeline:
            raise ShellExit(shell.exit_status)
        return shell.exit_status
    argv = command.argv or []
    name = argv[0] if argv else ""
    if not is_builtin(name):
        _err("no such file or directory\n")
        shell.exit_status = 1
        return shell.exit_status
    handlers: dict[str, Callable[[], object]] = {
        "env": lambda: builtin_env(shell),
        "cd": lambda: builtin_cd(shell, argv),
        "export": lambda: builtin_export(shell, argv),
        "echo": lambda: builtin_echo(argv),
        "pwd": lambda: builtin_pwd(argv),
        "unset": lambda: builtin_unset(shell, argv),
        "exit": lambda: builtin_exit(shell, argv, in_pipeline),
    }
    handlers[name]()
    return shell.exit_status


def builtin_env(shell: Shell) -> int:
    """Print every environment entry."""
    _out(format_env(shell.env))
    return 0


def _store_cwd(env: list[str], name: str) -> None:
    """Set an existing ``name`` entry to the current directory."""
    try:
        cwd = os.getcwd()
    except OSError:
        return
    for i, entry in enumerate(env):
        if entry.partition("=")[0] == name:
            env[i] = f"{name}={cwd}"


def builtin_cd(shell: Shell, args: Sequence[str]) -> int:
    """Change directory (to $HOME without an argument), keeping PWD and OLDPWD."""
    if not args or args[0] != "cd":
        return 0
    _store_cwd(shell.env, "OLDPWD")
    target = args[1] if len(args) > 1 else os.environ.get("HOME")
    try:
        if target is None:
            raise FileNotFoundError(target)
        os.chdir(target)
    except OSError:
        _err(" No such file or directory\n")
        shell.exit_status = 1
    _store_cwd(shell.env, "PWD")
    return 0


def builtin_pwd(args: Sequence[str]) -> int:
    """Print the current directory."""
    if args and args[0].startswith("pwd"):
        try:
            _out(f"{os.getcwd()}\n")
        except OSError as exc:
            _err(f"failed: {exc.strerror}\n")
    return 0


def _is_n_flag(word: str) -> bool:
    return word.startswith("-") and set(word[1:]) <= {"n"}


def builtin_echo(args: Sequence[str]) -> int:
    """Print the arguments; leading -n options suppress the final newline."""
    words = list(args[1:])
    if not words:
        _out("\n")
        return 0
    start = 0
    while start < len(words) - 1 and _is_n_flag(words[start]):
        start += 1
    if _is_n_flag(words[start]):
        return 0
    text = " ".join(words[start:])
    _out(text + ("\n" if start == 0 else ""))
    return 0


def parse_exit_code(text: str) -> int:
    """Read a leading signed decimal number; anything unparsable gives 0."""
    rest = text.lstrip(_WHITESPACE)
    sign = 1
    if rest.startswith("-"):
        sign = -1
        rest = rest[1:]
    if rest.startswith("+"):
        rest = rest[1:]
    digits = ""
    for c in rest:
        if not ("0" <= c <= "9"):
            break
        digits += c
    return sign * int(digits) if digits else 0


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 2**32 if value > _INT_MAX else value


def builtin_exit(shell: Shell, args: Sequence[str], in_pipeline: bool = False) -> int:
    """Leave the shell, by raising ShellExit, unless given too many arguments."""
    if len(args) > 2:
        _err("exit: too many arguments\n")
        shell.exit_status = 1
        return 1
    if len(args) == 2:
        status = _to_int32(parse_exit_code(args[1]))
        if status in (_INT_MAX, _INT_MIN, 0):
            _err("exit: numeric argument required\n")
            status = 255
        shell.exit_status = status
    if not in_pipeline:
        _out("exit\n")
    raise ShellExit(shell.exit_status & 0xFF)


def _set_var(env: list[str], assignment: str) -> None:
    prefix = assignment.partition("=")[0] + "="
    replaced = False
    for i, entry in enumerate(env):
        if entry.startswith(prefix):
            env[i] = assignment
            replaced = True
    if not replaced:
        env.append(assignment)


def builtin_export(shell: Shell, args: Sequence[str]) -> int:
    """Set NAME=value pairs, or list the environment without arguments."""
    if len(args) < 2:
        _out("".join(f"declare -x {entry}\n" for entry in shell.env))
        return 0
    for arg in args[1:]:
        kind = check_var(arg)
        if kind == -1:
            continue
        if kind == 0:
            shell.exit_status = 1
            _err(f"minishell: export: `{arg}': not a valid identifier\n")
            continue
        _set_var(shell.env, arg)
    return 0


def builtin_unset(shell: Shell, args: Sequence[str]) -> int:
    """For each argument, remove the first entry that starts with it."""
    for name in args[1:]:
        for i, entry in enumerate(shell.env):
            if entry.startswith(name):
                del shell.env[i]
                break
    return 0