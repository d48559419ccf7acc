import os

import pytest

from minishell.redirect import (
    apply_redirections,
    check_fd,
    open_redirection,
    write_heredoc,
)
from minishell.state import ArgType, Command, ShellExit


def _lines(*items):
    it = iter(items)
    return lambda prompt: next(it, None)


def _read_all(fd):
    chunks = []
    while True:
        data = os.read(fd, 4096)
        if not data:
            break
        chunks.append(data)
    return b"".join(chunks)


def _close(command):
    for fd in (command.fd_in, command.fd_out):
        if fd > 2:
            os.close(fd)


def test_check_fd_directory_exits_126(tmp_path):
    with pytest.raises(ShellExit) as info:
        check_fd(str(tmp_path))
    assert info.value.status == 126


def test_check_fd_file_and_missing(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("x")
    assert check_fd(str(path)) is False
    assert check_fd(str(tmp_path / "missing")) is False


def test_write_heredoc_stops_at_delimiter(tmp_path):
    path = str(tmp_path / "hd")
    fd = write_heredoc("EOF", _lines("a", "b", "EOF", "c"), path)
    try:
        assert _read_all(fd) == b"a\nb\n"
    finally:
        os.close(fd)


def test_write_heredoc_end_of_input_keeps_lines(tmp_path):
    path = tmp_path / "hd"
    fd = write_heredoc("EOF", _lines("one"), str(path))
    os.close(fd)
    assert path.read_text() == "one\n"


def test_open_redirection_out_and_append(tmp_path):
    target = str(tmp_path / "out.txt")
    cmd = Command("x")
    assert open_redirection(target, ArgType.OUT, cmd)
    os.write(cmd.fd_out, b"first\n")
    assert open_redirection(target, ArgType.APPEND, cmd)
    os.write(cmd.fd_out, b"second\n")
    _close(cmd)
    assert (tmp_path / "out.txt").read_text() == "first\nsecond\n"


def test_open_redirection_out_truncates(tmp_path):
    path = tmp_path / "out.txt"
    path.write_text("old content")
    cmd = Command("x")
    assert open_redirection(str(path), ArgType.OUT, cmd)
    _close(cmd)
    assert path.read_text() == ""


def test_open_redirection_missing_input(tmp_path, capsys):
    cmd = Command("x")
    target = str(tmp_path / "missing")
    assert open_redirection(target, ArgType.IN, cmd) is False
    assert cmd.fd_in == -1
    assert "No such file or directory: " + target in capsys.readouterr().err


def test_open_redirection_empty_target():
    cmd = Command("x")
    assert open_redirection("", ArgType.OUT, cmd) is False
    assert cmd.fd_out == 1


def test_apply_redirections_removes_redirs(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "in.txt").write_text("data")
    cmd = Command("x")
    args = [
        (ArgType.ARG, "cat"),
        (ArgType.IN, "<in.txt"),
        (ArgType.ARG, "-n"),
        (ArgType.OUT, "> out.txt"),
    ]
    plain = apply_redirections(cmd, args)
    try:
        assert plain == ["cat", "-n"]
        assert _read_all(cmd.fd_in) == b"data"
        assert (tmp_path / "out.txt").exists()
    finally:
        _close(cmd)


def test_apply_redirections_stops_at_failure(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cmd = Command("x")
    args = [(ArgType.IN, "<missing"), (ArgType.OUT, ">out"), (ArgType.ARG, "ls")]
    assert apply_redirections(cmd, args) == ["ls"]
    assert not (tmp_path / "out").exists()
    assert cmd.fd_in == -1


def test_apply_redirections_heredoc(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cmd = Command("x")
    plain = apply_redirections(
        cmd, [(ArgType.ARG, "cat"), (ArgType.HEREDOC, "<< END")], _lines("hi", "END")
    )
    try:
        assert plain == ["cat"]
        assert _read_all(cmd.fd_in) == b"hi\n"
    finally:
        _close(cmd)


def test_apply_redirections_directory_target(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "dir").mkdir()
    with pytest.raises(ShellExit) as info:
        apply_redirections(Command("x"), [(ArgType.OUT, ">dir")])
    assert info.value.status == 126