import pytest

from minishell.syntax import (
    Flag,
    ShellSyntaxError,
    check_syntax,
    error_token,
    get_flag,
    inside_quote,
    is_token,
    is_whitespace,
    syntax_error_message,
    valid_redir,
)


@pytest.mark.parametrize("c", [" ", "\t", "\n", "\v", "\f", "\r"])
def test_whitespace_chars(c):
    assert is_whitespace(c) is True


@pytest.mark.parametrize("c", ["a", "", "|", "_"])
def test_non_whitespace(c):
    assert is_whitespace(c) is False


def test_is_token():
    assert all(is_token(c) for c in "'\"<>|")
    assert not is_token("a")


def test_inside_quote():
    assert inside_quote("'ab'", 2) == Flag.S_QUOTE
    assert inside_quote("\"a'b\"", 3) == Flag.D_QUOTE
    assert inside_quote("'a'", 3) == Flag(0)


@pytest.mark.parametrize(
    "line,expected",
    [
        ("echo > out", True),
        ("cat << EOF", True),
        ("echo '>' x", True),
        ("echo >", False),
        ("cat <> f", False),
        ("a >| b", False),
        ("a > ''", False),
    ],
)
def test_valid_redir(line, expected):
    assert valid_redir(line) is expected


@pytest.mark.parametrize(
    "line,expected",
    [
        ("echo 'hi", Flag.S_QUOTE),
        ('echo "hi', Flag.D_QUOTE),
        ("ls |", Flag.PIPE),
        ("| ls", Flag.DPIPE),
        ("ls || wc", Flag.DPIPE),
        ("ls | wc", Flag(0)),
        ("cat <", Flag.REDIR),
        ("echo '|'", Flag(0)),
    ],
)
def test_get_flag(line, expected):
    assert get_flag(line) == expected


def test_error_token_redirections():
    assert error_token(Flag.REDIR, "cat <") == "\n"
    assert error_token(Flag.REDIR, "cat < |") == "|"
    assert error_token(Flag.REDIR, "cat <>") == ">"


def test_error_token_pipe():
    assert error_token(Flag.DPIPE, "ls || wc") == "|"


def test_syntax_error_message_newline():
    assert (
        syntax_error_message(Flag.REDIR, "cat <")
        == "minishell: syntax error near unexpected token 'newline'"
    )


def test_syntax_error_message_pipe():
    message = syntax_error_message(Flag.DPIPE, "| ls")
    assert message.startswith("minishell: syntax error near unexpected token '")
    assert message.endswith("|'")


def test_check_syntax_raises():
    with pytest.raises(ShellSyntaxError) as info:
        check_syntax("ls || wc")
    assert info.value.token == "|"
    assert info.value.flag == Flag.DPIPE
    assert str(info.value) == syntax_error_message(Flag.DPIPE, "ls || wc")


def test_check_syntax_incomplete_and_complete():
    assert check_syntax("echo 'open") == Flag.S_QUOTE
    assert check_syntax("ls | wc -l") == Flag(0)