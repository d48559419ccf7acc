"""The interactive loop: prompting, line continuation and signal handling."""

from __future__ import annotations

import contextlib
import os
import signal
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from types import FrameType

from minishell.environment import expand
from minishell.executor import execute
from minishell.parser import parse_input
from minishell.redirect import ReadLine
from minishell.state import Shell, ShellExit
from minishell.syntax import Flag, ShellSyntaxError, check_syntax

try:
    import readline
except ImportError:  # pragma: no cover - platforms without GNU readline
    readline = None  # type: ignore[assignment]

try:
    import termios
except ImportError:  # pragma: no cover - platforms without termios
    termios = None  # type: ignore[assignment]

PROMPT = "minishell> "
CONTINUATION_PROMPT = "> "

_LABELS = (
    (Flag.S_QUOTE, "quote"),
    (Flag.D_QUOTE, "dquote"),
    (Flag.PIPE, "pipe"),
)


@dataclass
class _RunState:
    """Whether a command is running, which changes how Ctrl-C is handled."""

    running: bool = False


_STATE = _RunState()


def _prompt(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def _add_history(line: str) -> None:
    if readline is not None:
        readline.add_history(line)


def _clear_history() -> None:
    if readline is not None:
        readline.clear_history()


def _label(flag: Flag) -> str:
    for bit, name in _LABELS:
        if flag & bit:
            return name
    return ""


def check_cmd(text: str, read_line: ReadLine | None = None) -> str:
    """Ask for more input while ``text`` has open quotes or a trailing pipe.

    Returns the completed line, with continuation lines joined by newlines.
    If input ends before the line is complete, the line is returned as it is.
    Raises ShellSyntaxError for a line that cannot be parsed.
    """
    read_line = read_line or _prompt
    while True:
        flag = check_syntax(text)
        if not flag:
            return text
        sys.stderr.write(_label(flag))
        sys.stderr.flush()
        line = read_line(CONTINUATION_PROMPT)
        if line is None:
            return text
        text = f"{text}\n{line}"


def read_command(shell: Shell, read_line: ReadLine | None = None) -> bool:
    """Read, check, expand and parse one input line into ``shell``.

    Returns True when there is something to execute. End of input leaves
    the shell with status 0 by raising ShellExit.
    """
    read_line = read_line or _prompt
    line = read_line(PROMPT)
    if line is None:
        raise ShellExit(0)
    if not line:
        return False
    try:
        text = check_cmd(line, read_line)
    except ShellSyntaxError as exc:
        _add_history(line)
        print(exc, file=sys.stderr)
        shell.command = None
        return False
    _add_history(text)
    shell.command = expand(text, shell.env, shell.exit_status)
    parse_input(shell, read_line)
    return True


def _on_interrupt(signum: int, frame: FrameType | None) -> None:
    sys.stderr.write("\n")
    sys.stderr.flush()
    if not _STATE.running:
        raise KeyboardInterrupt


def install_signal_handlers() -> None:
    """Make Ctrl-C drop the line being typed and ignore Ctrl-\\."""
    signal.signal(signal.SIGINT, _on_interrupt)
    sigquit = getattr(signal, "SIGQUIT", None)
    if sigquit is not None:
        signal.signal(sigquit, signal.SIG_IGN)


def _configure_terminal() -> None:
    """Keep echo and signals on, but stop the terminal echoing ^C."""
    if termios is None:
        return
    try:
        if not sys.stdin.isatty():
            return
        fd = sys.stdin.fileno()
    except (AttributeError, OSError, ValueError):
        return
    with contextlib.suppress(termios.error, OSError):
        attrs = termios.tcgetattr(fd)
        lflag = attrs[3] | termios.ECHO | termios.ICANON | termios.ISIG
        attrs[3] = lflag & ~getattr(termios, "ECHOCTL", 0)
        termios.tcsetattr(fd, termios.TCSANOW, attrs)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the interactive shell until it exits; return its exit status."""
    shell = Shell(env=[f"{key}={value}" for key, value in os.environ.items()])
    install_signal_handlers()
    _configure_terminal()
    while True:
        try:
            if read_command(shell):
                _STATE.running = True
                execute(shell)
        except KeyboardInterrupt:
            pass
        except ShellExit as exc:
            _clear_history()
            return exc.status & 0xFF
        finally:
            _STATE.running = False
        shell.reset()