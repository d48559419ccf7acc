"""Environment lookup, variable names and ``$`` expansion."""

from __future__ import annotations

import os

from minishell.syntax import Flag, inside_quote, is_whitespace


def _is_alpha(c: str) -> bool:
    return c.isascii() and c.isalpha()


def _is_alnum(c: str) -> bool:
    return c.isascii() and c.isalnum()


def valid_var_name(c: str, index: int) -> bool:
    """Whether ``c`` may appear at position ``index`` of a variable name."""
    if index == 0:
        return _is_alpha(c) or c == "_"
    return _is_alnum(c) or c == "_"


def check_var(arg: str) -> int:
    """1 for a valid NAME=value, -1 for a valid name without '=', 0 if invalid."""
    for j, c in enumerate(arg):
        if c == "=":
            return 0 if j == 0 else 1
        if not valid_var_name(c, j):
            return 0
    return -1


def _entry_name(entry: str) -> str:
    return entry.partition("=")[0]


def get_env(name: str, env: list[str]) -> str | None:
    """Value of ``name`` in a list of NAME=value entries, or None."""
    for entry in env:
        key, _, value = entry.partition("=")
        if key == name:
            return value
    return None


def in_env(name: str, env: list[str]) -> bool:
    """Whether ``name`` is defined in ``env``."""
    return get_env(name, env) is not None


def _var_name(text: str) -> str | None:
    if not text:
        return None
    if text[0] in ("$", "?"):
        return text[0]
    length = 0
    for c in text:
        if not (_is_alnum(c) or c == "_"):
            break
        length += 1
    return text[:length]


def env_next(
    text: str, env: list[str], exit_status: int, inquotes: bool
) -> tuple[str, int]:
    """Expand the next piece of ``text``; return it and the characters consumed."""
    skip = 1
    if text.startswith("$"):
        rest = text[1:]
        if (
            not rest
            or inquotes
            or (not valid_var_name(rest[0], 0) and rest[0] not in ("?", "$"))
        ):
            return "$", 1
        name = _var_name(rest) or ""
        skip += len(name)
        if name == "$":
            return str(os.getpid()), skip
        if name == "?":
            return str(exit_status), skip
        if (not name and not is_whitespace(rest[0])) or not in_env(name, env):
            return "", skip
        return get_env(name, env) or "", skip
    while skip < len(text) and text[skip] != "$":
        skip += 1
    return text[:skip], skip


def expand(text: str, env: list[str], exit_status: int) -> str:
    """Replace ``$NAME``, ``$?`` and ``$$`` outside single quotes."""
    pieces = []
    i = 0
    while i < len(text):
        quoted = bool(inside_quote(text, i) & Flag.S_QUOTE)
        piece, skip = env_next(text[i:], env, exit_status, quoted)
        pieces.append(piece)
        i += skip
    return "".join(pieces)


def format_env(env: list[str]) -> str:
    """The output of the ``env`` builtin: one entry per line."""
    return "".join(f"{entry}\n" for entry in env)