"""Syntax checks on a raw input line: quotes, pipes and redirections."""

from __future__ import annotations

from enum import IntFlag

_WHITESPACE = "\t\n\v\f\r "
_QUOTES = ("'", '"')
_REDIRS = ("<", ">")
_TOKENS = ("'", '"', ">", "<", "|")


class Flag(IntFlag):
    """State of an input line: open quotes, a trailing pipe, or an error."""

    S_QUOTE = 1 << 0
    D_QUOTE = 1 << 1
    PIPE = 1 << 2
    DPIPE = 1 << 3
    REDIR = 1 << 4


_QUOTED = Flag.S_QUOTE | Flag.D_QUOTE
_ERRORS = Flag.DPIPE | Flag.REDIR


def _message_for(token: str) -> str:
    shown = "newline" if token == "\n" else token
    return f"minishell: syntax error near unexpected token '{shown}'"


class ShellSyntaxError(Exception):
    """Raised when an input line cannot be parsed."""

    def __init__(self, flag: Flag, token: str) -> None:
        self.flag = flag
        self.token = token
        super().__init__(_message_for(token))


def _at(text: str, i: int) -> str:
    return text[i] if 0 <= i < len(text) else ""


def is_whitespace(c: str) -> bool:
    """True for a single whitespace character (tab to carriage return, space)."""
    return len(c) == 1 and c in _WHITESPACE


def is_token(c: str) -> bool:
    """True for characters that start a quote, pipe or redirection."""
    return c in _TOKENS


def inside_quote(text: str, pos: int) -> Flag:
    """Return the quote state in effect just before position ``pos``."""
    flag = Flag(0)
    for ch in text[:pos]:
        if ch == "'" and not flag & Flag.D_QUOTE:
            flag ^= Flag.S_QUOTE
        elif ch == '"' and not flag & Flag.S_QUOTE:
            flag ^= Flag.D_QUOTE
    return flag


def _check_redir(text: str, i: int) -> int:
    """Length of the operator at ``i`` if a valid target follows, else 0."""
    j = i + 1
    skip = 1
    if _at(text, j) in _REDIRS:
        if text[j] != text[i]:
            return 0
        j += 1
        skip = 2
    while is_whitespace(_at(text, j)):
        j += 1
    c = _at(text, j)
    if not c or (c in _QUOTES and c == _at(text, j + 1)) or c in ("|", ">", "<"):
        return 0
    return skip


def valid_redir(text: str) -> bool:
    """Check that every redirection outside quotes has a usable target."""
    i = 0
    while i < len(text):
        if text[i] in _REDIRS and not inside_quote(text, i):
            skip = _check_redir(text, i)
            if not skip:
                return False
            i += skip
        else:
            i += 1
    return True


def get_flag(text: str) -> Flag:
    """Classify a line: open quotes, dangling pipe, or a syntax error."""
    if not valid_redir(text):
        return Flag.REDIR
    rest = text.lstrip(_WHITESPACE)
    if rest.startswith("|"):
        return Flag.DPIPE
    flag = Flag(0)
    for ch in rest:
        if ch == "'" and not flag & Flag.D_QUOTE:
            flag ^= Flag.S_QUOTE
        elif ch == '"' and not flag & Flag.S_QUOTE:
            flag ^= Flag.D_QUOTE
        elif flag & Flag.PIPE and ch == "|" and not flag & _QUOTED:
            return Flag.DPIPE
        elif flag & Flag.PIPE and not is_whitespace(ch):
            flag ^= Flag.PIPE
        elif ch == "|" and not flag & _QUOTED:
            flag |= Flag.PIPE
    return flag


def _error_redir(text: str) -> str:
    if not text:
        return ""
    i = 0
    while i < len(text) and not (text[i] in _REDIRS and not inside_quote(text, i)):
        i += 1
    i += 1
    if _at(text, i) == _at(text, i - 1):
        i += 1
    elif _at(text, i) in _REDIRS and _at(text, i) != _at(text, i - 1):
        return text[i]
    while is_whitespace(_at(text, i)):
        i += 1
    c = _at(text, i)
    if not c:
        return "\n"
    if (c in _QUOTES and c == _at(text, i + 1)) or is_token(c):
        return c
    return "\n"


def _error_pipe(text: str) -> str:
    if not text:
        return ""
    i = 0
    while i < len(text) and not (text[i] == "|" and not inside_quote(text, i)):
        i += 1
    while is_whitespace(_at(text, i)):
        i += 1
    return "|" if _at(text, i) == "|" else "\n"


def error_token(flag: Flag, text: str) -> str:
    """The offending token for an error flag; a newline means end of input."""
    token = ""
    if flag & Flag.REDIR:
        token = _error_redir(text)
    if flag & Flag.DPIPE:
        token = _error_pipe(text)
    return token


def syntax_error_message(flag: Flag, text: str) -> str:
    """The error message printed for a line with a syntax error."""
    return _message_for(error_token(flag, text))


def check_syntax(text: str) -> Flag:
    """Return the line's incomplete-input flags, raising on a syntax error."""
    flag = get_flag(text)
    if flag & _ERRORS:
        raise ShellSyntaxError(flag, error_token(flag, text))
    return flag