# minishell

A small interactive command shell for POSIX systems. It reads a line,
checks its syntax, expands variables, splits it into pipeline stages and
runs each stage, either as a built-in command or as an external program
found on `PATH`.

## Installing

```
pip install .
```

## Running

```
minishell
```

The prompt is `minishell> `. End the session with `exit` or Ctrl-D.
Ctrl-C drops the line being typed; Ctrl-\ is ignored.

## What it understands

- Pipelines: `ls -l | grep py | wc -l`. The exit status of the last
  stage becomes the shell's status.
- Redirections: `< file`, `> file`, `>> file`, and here-documents with
  `<< DELIM`. Here-document text is written to a file named `.heredoc`
  in the current directory before the command runs.
- Single and double quotes. A line with an open quote or a trailing pipe
  prompts for more input with `> `, and the lines are joined with
  newlines.
- Variable expansion: `$NAME`, `$?` (status of the last command) and
  `$$` (the shell's process id). Nothing is expanded inside single quotes.
- Built-ins: `echo` (with `-n`), `cd`, `pwd`, `export`, `unset`, `env`
  and `exit`.
  - `cd` with no argument changes to `$HOME` as the shell was started
    with, and updates existing `PWD` and `OLDPWD` entries.
  - `export NAME=value` sets a variable; `export` alone lists the
    environment as `declare -x` lines. A name without `=` is ignored.
  - `unset NAME` removes the first environment entry that starts with
    `NAME`.
  - `exit N` leaves with status `N`; a missing, zero or non-numeric
    argument given as `N` is reported and gives status 255.

Syntax errors such as `ls | | wc` or `cat <` are reported as
`minishell: syntax error near unexpected token '...'`. The line is then
ignored, but it is still kept in the history.

## Using it from Python

The parsing and expansion steps can be used on their own:

```python
from minishell.syntax import check_syntax
from minishell.environment import expand
from minishell.parser import split_commands, split_args, remove_quotes

check_syntax("echo hi | cat")                  # raises ShellSyntaxError if invalid
expand("echo $HOME", ["HOME=/home/user"], 0)   # 'echo /home/user'
split_commands("ls -l | wc -l")                # ['ls -l', 'wc -l']
split_args("cat <in >out")                     # ['cat', '<in', '>out']
remove_quotes("'a b'c")                        # 'a bc'
```

A whole line can be run against a `Shell` object:

```python
from minishell.state import Shell
from minishell.parser import parse_input
from minishell.executor import execute

shell = Shell(env=["PATH=/usr/bin:/bin"])
shell.command = "echo hello | tr a-z A-Z"
parse_input(shell)
execute(shell)                                 # prints HELLO, returns 0
```

The modules are:

- `minishell.syntax`: quote, pipe and redirection checks (`check_syntax`,
  `get_flag`, `Flag`, `ShellSyntaxError`).
- `minishell.environment`: `$` expansion and `NAME=value` lookups.
- `minishell.parser`: splitting a line into commands and words.
- `minishell.redirect`: opening redirection targets and reading
  here-documents.
- `minishell.builtins`: the built-in commands.
- `minishell.path`: resolving a command name to a program.
- `minishell.executor`: running single commands and pipelines.
- `minishell.repl`: the interactive loop and its `main` entry point.
- `minishell.state`: `Shell`, `Command`, `ArgType` and `ShellExit`.

## What it does not do

It is an interactive shell only: it does not read script files or run
commands given as arguments. There is no command list syntax (`;`, `&&`,
`||`), no background jobs or job control, no globbing and no shell
functions or aliases.