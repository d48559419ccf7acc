"""Running parsed commands: builtins in-process, programs as child processes."""

from __future__ import annotations

import contextlib
import os
import subprocess
import sys
from collections.abc import Callable, Iterator
from typing import NoReturn

from minishell.builtins import is_builtin, run_builtin
from minishell.path import find_path
from minishell.state import Command, Shell, ShellExit

Waiter = Callable[[], int]


def _environ(env: list[str]) -> dict[str, str]:
    return {key: value for key, _, value in (e.partition("=") for e in env)}


def _exit_code(returncode: int) -> int:
    # A child killed by a signal reports no exit status of its own.
    return returncode if returncode >= 0 else 0


def _close(fd: int) -> None:
    with contextlib.suppress(OSError):
        os.close(fd)


def _close_redirections(command: Command) -> None:
    for fd in (command.fd_in, command.fd_out):
        if fd > 2:
            _close(fd)


def _finished(status: int) -> Waiter:
    return lambda: status


@contextlib.contextmanager
def _builtin_output(command: Command) -> Iterator[None]:
    """Send builtin output to the command's output redirection, if any."""
    if command.fd_out < 0 or command.fd_out == 1:
        yield
    else:
        with os.fdopen(command.fd_out, "w", closefd=False) as stream:
            with contextlib.redirect_stdout(stream):
                yield


def _spawn(
    shell: Shell,
    command: Command,
    stdin: int | None,
    stdout: int | None,
    env: dict[str, str],
) -> Waiter:
    """Start an external program; return a function that waits for its status."""
    argv = command.argv or []
    try:
        path = find_path(shell, argv[0])
    except ShellExit as exc:
        return _finished(exc.status)
    if path is None:
        return _finished(127)
    try:
        proc = subprocess.Popen(
            argv, executable=path, stdin=stdin, stdout=stdout, env=env
        )
    except OSError as exc:
        print(f"minishell: {argv[0]}: {exc.strerror}", file=sys.stderr)
        return _finished(126)
    shell.pids.append(proc.pid)
    return lambda: _exit_code(proc.wait())


def _run_forked_builtin(
    shell: Shell, command: Command, stdout: int | None
) -> NoReturn:
    status = 1
    try:
        sys.stdout = os.fdopen(1 if stdout is None else stdout, "w", closefd=False)
        sys.stderr = os.fdopen(2, "w", closefd=False)
        status = run_builtin(shell, command, in_pipeline=True)
    except ShellExit as exc:
        status = exc.status
    finally:
        with contextlib.suppress(Exception):
            sys.stdout.flush()
        with contextlib.suppress(Exception):
            sys.stderr.flush()
        os._exit(status & 0xFF)


def _fork_builtin(shell: Shell, command: Command, stdout: int | None) -> Waiter:
    """Run a builtin in a child process, as a pipeline stage does."""
    sys.stdout.flush()
    sys.stderr.flush()
    pid = os.fork()
    if pid == 0:
        _run_forked_builtin(shell, command, stdout)
    shell.pids.append(pid)
    return lambda: os.WEXITSTATUS(os.waitpid(pid, 0)[1])


def _start_stage(
    shell: Shell,
    command: Command,
    stdin: int | None,
    stdout: int | None,
    env: dict[str, str],
) -> Waiter:
    if command.fd_in == -1 or command.fd_out == -1:
        return _finished(1)
    if not command.argv:
        return _finished(0)
    if is_builtin(command.argv[0]):
        return _fork_builtin(shell, command, stdout)
    return _spawn(shell, command, stdin, stdout, env)


def execute(shell: Shell) -> int:
    """Run the parsed line in ``shell``; return the resulting exit status."""
    if not shell.command:
        return shell.exit_status
    count = shell.command_count()
    if count == 0:
        return exec_without_pipe(shell)
    if count > 0:
        return run_pipeline(shell)
    return shell.exit_status


def exec_without_pipe(shell: Shell) -> int:
    """Run a single command: a builtin in this process, anything else as a child."""
    command = shell.commands[0]
    if not command.argv:
        return shell.exit_status
    if command.argv[0] != "exit":
        shell.exit_status = 0
    try:
        if is_builtin(command.argv[0]):
            with _builtin_output(command):
                run_builtin(shell, command)
        else:
            execute_external(shell, command)
    finally:
        _close_redirections(command)
    return shell.exit_status


def execute_external(shell: Shell, command: Command) -> int:
    """Run a program with the command's redirections and wait for it."""
    if command.fd_in == -1 or command.fd_out == -1:
        shell.exit_status = 1
        return shell.exit_status
    if not command.argv:
        return shell.exit_status
    stdin = command.fd_in if command.fd_in != 0 else None
    stdout = command.fd_out if command.fd_out != 1 else None
    wait = _spawn(shell, command, stdin, stdout, _environ(shell.env))
    shell.exit_status = wait()
    return shell.exit_status


def run_pipeline(shell: Shell) -> int:
    """Run every command with pipes between them; the last one sets the status."""
    env = _environ(shell.env)
    shell.pids = []
    waiters: list[Waiter] = []
    read_end: int | None = None
    try:
        for i, command in enumerate(shell.commands):
            if i < len(shell.commands) - 1:
                next_read, write_end = os.pipe()
            else:
                next_read, write_end = None, None
            stdin = command.fd_in if command.fd_in != 0 else read_end
            stdout = command.fd_out if command.fd_out != 1 else write_end
            try:
                waiters.append(_start_stage(shell, command, stdin, stdout, env))
            finally:
                for fd in (read_end, write_end):
                    if fd is not None:
                        _close(fd)
                _close_redirections(command)
            read_end = next_read
    finally:
        if read_end is not None:
            _close(read_end)
    statuses = [wait() for wait in waiters]
    if statuses:
        shell.exit_status = statuses[-1]
    return shell.exit_status