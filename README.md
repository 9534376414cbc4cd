# shrs

A framework for building and configuring your own interactive shell on
POSIX systems. It gives you the parts of a shell and a builder that puts
them together:

- `shrs.lexer`: a tokenizer for the POSIX shell command language
- `shrs.posix`: `PosixLang`, a small command language built on that lexer
- `shrs.job`, `shrs.process`, `shrs.jobio`, `shrs.jobutil`: process groups,
  pipelines and foreground/background job control
- `shrs.alias`: aliases, with optional conditions
- `shrs.env`: environment variables
- `shrs.hooks`: hooks called on shell events
- `shrs.builtin_cmds`: builtin commands
- `shrs.state`: a store that holds one value per type
- `shrs.plugin`: plugins that change the configuration before the shell starts
- `shrs.shell_config`: `ShellBuilder`, `ShellConfig` and the main loop

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running the default shell

The package installs a command that starts a shell with all defaults:

```
shrs
```

It reads lines from standard input with the prompt `$ `. While a line is
incomplete (a trailing backslash, an open quote or bracket), it asks for
more with `> `. The shell stops at end of input (Ctrl-D). It takes over
job control of the terminal, so it has to be run from an interactive
terminal.

## Building your own shell

The smallest working shell:

```python
from shrs.shell_config import ShellBuilder

myshell = ShellBuilder().build()
myshell.run()
```

Every `with_*` method of `ShellBuilder` returns the builder. The available
methods are `with_hooks`, `with_builtins`, `with_readline`, `with_alias`,
`with_env`, `with_theme`, `with_lang`, `with_plugin` and `with_state`.
Anything you do not set gets its default.

### Aliases

```python
from shrs.alias import Alias, AliasInfo
from shrs.prompt import top_pwd
from shrs.shell_config import ShellBuilder

alias = Alias.from_pairs([("l", "ls"), ("la", "ls -a"), ("g", "git")])
alias.set("inhome", AliasInfo.with_rule("true", lambda ctx: top_pwd() == "~"))
alias.set("inhome", AliasInfo.with_rule("false", lambda ctx: top_pwd() != "~"))

myshell = ShellBuilder().with_alias(alias).build()
myshell.run()
```

One name can have several definitions. `Alias.get` returns the
substitutions whose rule accepts the given `AliasRuleCtx`. The shell
replaces the first word of a line with the last of them. `Alias.unset`
removes every definition of a name, and `Alias.clear` removes all
aliases.

### Environment variables

The shell's environment starts empty. To inherit the calling process's
variables, load them yourself:

```python
from shrs.env import Env
from shrs.shell_config import ShellBuilder

env = Env()
env.load()                 # copy os.environ
env.set("EDITOR", "vim")

myshell = ShellBuilder().with_env(env).build()
```

An empty name, or a name containing `=` or NUL, raises `InvalidKeyError`.
A value containing NUL raises `InvalidValueError`. `Env.get` on an unset
variable raises `NotFoundError`. All three derive from `EnvError`.
`Env.remove` on an unset variable does nothing.

### Hooks

A hook is called as `hook(sh, sh_ctx, sh_rt, ctx)`, where `ctx` is the
event object. Hooks are registered under the type of event they handle
and run in order of registration:

```python
from shrs.hooks import AfterCommandCtx, Hooks
from shrs.shell_config import ShellBuilder

def report(sh, sh_ctx, sh_rt, ctx):
    print(f"ran {ctx.command!r}: status {ctx.cmd_output.status}")

hooks = Hooks.default()
hooks.register(AfterCommandCtx, report)

myshell = ShellBuilder().with_hooks(hooks).build()
```

The event types are `StartupCtx`, `BeforeCommandCtx`, `AfterCommandCtx`,
`ChangeDirCtx` and `JobExitCtx`. With `Hooks.default()`, startup prints
`welcome to shrs!` and a finished job prints `[exit +<status>]`. The
default hooks for the other events do nothing. `Hooks()` starts with no
hooks at all. `AfterCommandCtx.cmd_output` holds the exit status and the
text that the command wrote through `ctx.out`.

### Builtins

Builtins run inside the shell and have access to its context. `args[0]`
is the command name. The defaults are:

| name      | what it does |
|-----------|--------------|
| `cd`      | change directory; no argument goes to `$HOME`, `-` goes to `$OLDPWD` |
| `exit`    | leave the shell |
| `export`  | `VAR=val` sets, `-n VAR` removes, `-p` lists variables |
| `alias`   | `name=value` sets an alias, `name` shows it |
| `unalias` | remove the named aliases, or all of them with `-a` |
| `source`  | run a file with its `#!` interpreter, or else line by line in the shell |
| `jobs`    | list the ids of tracked jobs |
| `help`    | list the builtin commands |
| `history` | accepts `clear`, `run INDEX` and `search QUERY` (see below) |
| `debug`   | `debug env` lists the environment |

To add your own builtin, subclass `BuiltinCmd`:

```python
from shrs.builtin_cmds import BuiltinCmd, Builtins
from shrs.cmd_output import CmdOutput
from shrs.shell_config import ShellBuilder

class Hello(BuiltinCmd):
    def run(self, sh, ctx, rt, args):
        ctx.out.println("hello")
        return CmdOutput.success()

builtins = Builtins.default()
builtins.insert("hello", Hello())

myshell = ShellBuilder().with_builtins(builtins).build()
```

Bad arguments to a builtin raise `BuiltinArgsError`. The main loop reports
it as an error and goes on.

### State and plugins

`State` holds at most one value per type. `State.get(kind)` returns the
value or `None`, and `State.get_or_default(kind)` stores `kind()` first
when there is none.

```python
from dataclasses import dataclass

from shrs.plugin import FailMode, Plugin, PluginMeta
from shrs.shell_config import ShellBuilder

@dataclass
class Counter:
    value: int = 0

class CounterPlugin(Plugin):
    def init(self, shell):
        shell.state.get_or_default(Counter).value += 1

    def meta(self):
        return PluginMeta(name="counter", description="counts things")

    def fail_mode(self):
        return FailMode.WARN

myshell = ShellBuilder().with_state(Counter(5)).with_plugin(CounterPlugin()).build()
```

Plugins are initialised in the order they were added, when `run()`
starts. `init` receives the `ShellConfig` and can change any of its
fields. If `init` raises, the plugin's fail mode decides what happens.
With `FailMode.ABORT` (the default), `run()` raises `RuntimeError`. With
`FailMode.WARN`, a warning is logged and start-up continues.

### Languages and line input

The command language is a `Lang`, which has `eval`, `name` and
`needs_line_check`. When none is given, the shell creates a `PosixLang`
as it starts. Creating one sets up terminal job control;
`PosixLang(init_job_control=False)` skips that. Line input is a
`Readline`. Its `read_line` returns one line and raises `EOFError` to end
the shell. Pass your own with `with_lang` and `with_readline`.

### Prompt helpers

`shrs.prompt` has `full_pwd()`, `top_pwd()` (which gives `~` at home and
`/` at the root), `username()` and `hostname()`.

## What the package does not do

- `PosixLang` understands only plain words, joined by `|` into pipelines
  and separated by `&` or newlines. Commands separated by `;` are parsed
  but not run: `UnsupportedCommandError` is reported instead. `&&`, `||`,
  redirections, assignments, subshells, `if`/`while`/`for`/`case` and
  function definitions are not accepted. `shrs.syntax` describes these
  forms, but nothing parses or runs them.
- No variable, tilde or glob expansion is done, and quotes are not
  removed from arguments.
- The default line input has no line editing, completion or
  highlighting. No command history is recorded, so `history run` and
  `history search` only report an error.
- `Theme` holds named colours. Nothing in the package draws with them.