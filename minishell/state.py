"""Shell state: the parsed commands of one input line and the session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ArgType(Enum):
    """Kind of a word on a command line."""

    ARG = 0
    IN = 1
    OUT = 2
    HEREDOC = 3
    APPEND = 4


class ShellExit(Exception):
    """Raised to leave the shell with a given exit status."""

    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"exit {status}")


@dataclass
class Command:
    """One pipeline segment: its text, arguments and file descriptors."""

    text: str
    argv: list[str] | None = None
    fd_in: int = 0
    fd_out: int = 1


@dataclass
class Shell:
    """The running shell session."""

    env: list[str] = field(default_factory=list)
    command: str | None = None
    commands: list[Command] = field(default_factory=list)
    exit_status: int = 0
    flag: int = 0
    pids: list[int] = field(default_factory=list)

    def reset(self) -> int:
        """Drop the current line's commands; return the exit status."""
        self.command = None
        self.commands = []
        return self.exit_status

    def command_count(self) -> int:
        """Number of pipes in the line, or -1 when there is nothing to run."""
        if not self.commands or not self.commands[0].text:
            return -1
        return len(self.commands) - 1

    def describe(self) -> str:
        """A readable dump of the parsed commands."""
        parts = ["\n--displaying struct--\n"]
        for cmd in self.commands:
            parts.append(f"next command: fd_in {cmd.fd_in}, fd_out {cmd.fd_out}\n")
            parts.append("args:\n")
            parts.extend(f"{arg}\n" for arg in cmd.argv or [])
            parts.append("\n")
        return "".join(parts)