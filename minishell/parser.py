"""Splitting an input line into commands, arguments and redirections."""

from __future__ import annotations

from collections.abc import Iterator

from minishell.redirect import ReadLine, apply_redirections
from minishell.state import ArgType, Command, Shell
from minishell.syntax import is_token, is_whitespace, valid_redir

_WHITESPACE = "\t\n\v\f\r "
_QUOTES = ("'", '"')
_REDIRS = ("<", ">")


def skip_quote(text: str, pos: int = 0) -> int:
    """Length of the quoted section starting at ``pos``, both quotes included."""
    quote = text[pos]
    end = text.find(quote, pos + 1)
    if end == -1:
        return len(text) - pos
    return end - pos + 1


def _unquoted_pipes(text: str) -> Iterator[int]:
    quote = ""
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = ""
        elif ch in _QUOTES:
            quote = ch
        elif ch == "|":
            yield i


def count_pipes(text: str) -> int:
    """Number of pipes outside quotes."""
    return sum(1 for _ in _unquoted_pipes(text))


def split_commands(text: str) -> list[str]:
    """Cut a line at unquoted pipes; each piece is stripped of whitespace."""
    pieces = []
    start = 0
    for pipe in _unquoted_pipes(text):
        pieces.append(text[start:pipe])
        start = pipe + 1
    pieces.append(text[start:])
    return [piece.strip(_WHITESPACE) for piece in pieces]


def _skip_arg(text: str, i: int) -> int:
    n = len(text)
    while i < n and not is_whitespace(text[i]):
        if text[i] in _QUOTES:
            i += skip_quote(text, i)
        elif text[i] in _REDIRS:
            break
        else:
            i += 1
    return min(i, n)


def _skip_redir(text: str, i: int) -> int:
    n = len(text)
    i += 1
    if i < n and text[i] in _REDIRS:
        i += 1
    while i < n and is_whitespace(text[i]):
        i += 1
    while i < n and not is_whitespace(text[i]):
        if text[i] in _QUOTES:
            i += skip_quote(text, i)
        elif is_token(text[i]):
            break
        else:
            i += 1
    return min(i, n)


def split_args(text: str) -> list[str]:
    """Split one command into words; a redirection keeps its target with it.

    Returns an empty list for an empty command or an invalid redirection.
    """
    if not text or not valid_redir(text):
        return []
    args = []
    i = 0
    n = len(text)
    while True:
        while i < n and is_whitespace(text[i]):
            i += 1
        if i >= n:
            break
        end = _skip_redir(text, i) if text[i] in _REDIRS else _skip_arg(text, i)
        args.append(text[i:end])
        i = end
    return args


def arg_type(arg: str) -> ArgType:
    """Classify a word by its leading redirection operator."""
    first, second = arg[:1], arg[1:2]
    if first == second == "<":
        return ArgType.HEREDOC
    if first == second == ">":
        return ArgType.APPEND
    if first == ">":
        return ArgType.OUT
    if first == "<":
        return ArgType.IN
    return ArgType.ARG


def remove_quotes(text: str) -> str:
    """Drop quote characters, keeping what they enclose."""
    out = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in _QUOTES:
            end = text.find(ch, i + 1)
            if end == -1:
                end = n
            out.append(text[i + 1 : end])
            i = end + 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def parse_command(command: Command, read_line: ReadLine | None = None) -> None:
    """Fill ``command.argv`` and open its redirections."""
    args = split_args(command.text)
    if not args:
        return
    typed = [(arg_type(arg), remove_quotes(arg)) for arg in args]
    plain = apply_redirections(command, typed, read_line)
    command.argv = plain or None


def parse_input(shell: Shell, read_line: ReadLine | None = None) -> None:
    """Split ``shell.command`` into commands and parse each one in turn."""
    shell.commands = [Command(text) for text in split_commands(shell.command or "")]
    for command in shell.commands:
        parse_command(command, read_line)
        if shell.exit_status:
            return