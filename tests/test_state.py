from minishell.state import ArgType, Command, Shell, ShellExit


def test_command_defaults():
    cmd = Command("ls")
    assert (cmd.text, cmd.argv, cmd.fd_in, cmd.fd_out) == ("ls", None, 0, 1)


def test_new_shell_defaults():
    shell = Shell(env=["A=1"])
    assert shell.exit_status == 0
    assert shell.commands == []
    assert shell.command is None
    assert shell.env == ["A=1"]


def test_command_count_pipeline():
    shell = Shell(commands=[Command("ls"), Command("wc"), Command("cat")])
    assert shell.command_count() == len(shell.commands) - 1


def test_command_count_single_and_empty():
    assert Shell(commands=[Command("ls")]).command_count() == 0
    assert Shell(commands=[Command("")]).command_count() == -1
    assert Shell().command_count() == -1


def test_reset_clears_line_and_returns_status():
    shell = Shell(env=["A=1"], command="ls", commands=[Command("ls")], exit_status=7)
    assert shell.reset() == 7
    assert shell.commands == []
    assert shell.command is None
    assert shell.env == ["A=1"]


def test_describe():
    shell = Shell(commands=[Command("echo hi", argv=["echo", "hi"])])
    expected = (
        "\n--displaying struct--\n"
        "next command: fd_in 0, fd_out 1\n"
        "args:\n"
        "echo\nhi\n"
        "\n"
    )
    assert shell.describe() == expected


def test_describe_without_argv():
    shell = Shell(commands=[Command("x", fd_in=-1)])
    assert "next command: fd_in -1, fd_out 1\nargs:\n\n" in shell.describe()


def test_shell_exit_carries_status():
    assert ShellExit(3).status == 3
    assert ShellExit(0).status == 0


def test_arg_types_order_and_lookup():
    assert [t.name for t in ArgType] == ["ARG", "IN", "OUT", "HEREDOC", "APPEND"]
    assert ArgType(ArgType.ARG.value) is ArgType.ARG
    assert ArgType["HEREDOC"] is ArgType.HEREDOC