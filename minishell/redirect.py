"""Opening the files named by redirections and reading here-documents."""

from __future__ import annotations

import contextlib
import os
import stat
import sys
from collections.abc import Callable, Iterable

from minishell.state import ArgType, Command, ShellExit

ReadLine = Callable[[str], "str | None"]

HEREDOC_PATH = ".heredoc"
_FILE_MODE = 0o644
_WHITESPACE = "\t\n\v\f\r "
_OUTPUTS = (ArgType.OUT, ArgType.APPEND)
_INPUTS = (ArgType.IN, ArgType.HEREDOC)


def _prompt(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def _open(path: str, flags: int) -> int:
    try:
        return os.open(path, flags, _FILE_MODE)
    except OSError:
        return -1


def _close(fd: int) -> None:
    with contextlib.suppress(OSError):
        os.close(fd)


def check_fd(filename: str) -> bool:
    """Refuse a directory as a redirection target by leaving with status 126."""
    try:
        info = os.stat(filename)
    except OSError:
        return False
    if stat.S_ISDIR(info.st_mode):
        print(f"minishell: {filename}: is a directory", file=sys.stderr)
        raise ShellExit(126)
    return False


def write_heredoc(
    delimiter: str, read_line: ReadLine | None = None, path: str = HEREDOC_PATH
) -> int:
    """Collect lines up to ``delimiter`` into ``path``; return a descriptor on it."""
    read_line = read_line or _prompt
    fd = os.open(path, os.O_RDWR | os.O_TRUNC | os.O_CREAT, _FILE_MODE)
    while True:
        line = read_line("> ")
        if line is None:
            return fd
        if line == delimiter:
            break
        os.write(fd, f"{line}\n".encode())
    os.close(fd)
    return os.open(path, os.O_RDONLY)


def open_redirection(
    target: str, kind: ArgType, command: Command, read_line: ReadLine | None = None
) -> bool:
    """Open ``target`` for one redirection and store the descriptor on ``command``."""
    if not target:
        return False
    if kind in _OUTPUTS and command.fd_out != 1:
        _close(command.fd_out)
    if kind is ArgType.OUT:
        command.fd_out = _open(target, os.O_RDWR | os.O_TRUNC | os.O_CREAT)
    elif kind is ArgType.APPEND:
        command.fd_out = _open(target, os.O_RDWR | os.O_APPEND | os.O_CREAT)
    if kind in _INPUTS and command.fd_in != 0:
        _close(command.fd_in)
    if kind is ArgType.IN:
        command.fd_in = _open(target, os.O_RDONLY)
    elif kind is ArgType.HEREDOC:
        command.fd_in = write_heredoc(target, read_line)
    if command.fd_in == -1 or command.fd_out == -1:
        print(f"minishell: No such file or directory: {target}", file=sys.stderr)
        return False
    return True


def _target(kind: ArgType, text: str) -> str:
    start = 2 if kind in (ArgType.HEREDOC, ArgType.APPEND) else 1
    return text[start:].lstrip(_WHITESPACE)


def apply_redirections(
    command: Command,
    args: Iterable[tuple[ArgType, str]],
    read_line: ReadLine | None = None,
) -> list[str]:
    """Open every redirection in order, stopping at the first failure.

    Returns the plain arguments with all redirections removed.
    """
    args = list(args)
    for kind, text in args:
        if kind is ArgType.ARG:
            continue
        target = _target(kind, text)
        if check_fd(target) or not open_redirection(target, kind, command, read_line):
            break
    return [text for kind, text in args if kind is ArgType.ARG]