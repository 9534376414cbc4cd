"""Shell configuration, its builder and the main loop."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from shrs.alias import Alias, AliasRuleCtx
from shrs.builtin_cmds import Builtins
from shrs.cmd_output import CmdOutput
from shrs.env import Env
from shrs.hooks import AfterCommandCtx, BeforeCommandCtx, Hooks, JobExitCtx, StartupCtx
from shrs.job import JobManager
from shrs.jobs import Jobs
from shrs.lang import Lang
from shrs.output_writer import OutputWriter
from shrs.plugin import FailMode, Plugin
from shrs.posix import PosixLang
from shrs.shell import Context, Runtime, Shell
from shrs.signals import Signals
from shrs.state import State
from shrs.theme import Theme

logger = logging.getLogger(__name__)


class Readline(ABC):
    """Source of command lines for the shell."""

    @abstractmethod
    def read_line(self, sh: Shell, ctx: Context, rt: Runtime) -> str:
        """Read one command line; raise EOFError when input is exhausted."""


class _InputReadline(Readline):
    """Reads lines from standard input, continuing incomplete ones."""

    def __init__(self, prompt: str = "$ ", continuation: str = "> ") -> None:
        self.prompt = prompt
        self.continuation = continuation

    def read_line(self, sh: Shell, ctx: Context, rt: Runtime) -> str:
        line = input(self.prompt)
        while sh.lang is not None and sh.lang.needs_line_check(line):
            line += "\n" + input(self.continuation)
        return line


@dataclass
class ShellConfig:
    """Everything needed to start a shell."""

    hooks: Hooks = field(default_factory=Hooks.default)
    builtins: Builtins = field(default_factory=Builtins.default)
    readline: Readline = field(default_factory=_InputReadline)
    alias: Alias = field(default_factory=Alias)
    env: Env = field(default_factory=Env)
    theme: Theme = field(default_factory=Theme)
    # The POSIX language takes over the terminal, so it is created only when the shell runs.
    lang: Lang | None = None
    plugins: list[Plugin] = field(default_factory=list)
    state: State = field(default_factory=State)

    def _init_plugins(self) -> None:
        plugins, self.plugins = self.plugins, []
        for plugin in plugins:
            meta = plugin.meta()
            logger.info("Initializing plugin '%s'...", meta.name)
            try:
                plugin.init(self)
            except Exception as err:  # noqa: BLE001 - handled by the plugin's fail mode
                message = f"Plugin '{meta.name}' failed to initialize with {err}"
                if plugin.fail_mode() is FailMode.WARN:
                    logger.warning(message)
                else:
                    raise RuntimeError(message) from err

    def run(self) -> None:
        """Initialize plugins, then run the main loop until input ends."""
        self._init_plugins()

        ctx = Context(
            out=OutputWriter(),
            state=self.state,
            jobs=Jobs(),
            startup_time=time.monotonic(),
            alias=self.alias,
        )
        rt = Runtime(
            working_dir=Path(os.getcwd()),
            env=self.env,
            name="shrs",
            args=[],
            exit_status=0,
        )
        sh = Shell(
            job_manager=JobManager(),
            hooks=self.hooks,
            builtins=self.builtins,
            theme=self.theme,
            lang=self.lang if self.lang is not None else PosixLang(),
            signals=Signals(),
        )
        run_shell(sh, ctx, rt, self.readline)


class ShellBuilder:
    """Builds a ShellConfig; every setting has a default."""

    def __init__(self) -> None:
        self._hooks: Hooks | None = None
        self._builtins: Builtins | None = None
        self._readline: Readline | None = None
        self._alias: Alias | None = None
        self._env: Env | None = None
        self._theme: Theme | None = None
        self._lang: Lang | None = None
        self._plugins: list[Plugin] = []
        self._state: State | None = None

    def with_hooks(self, hooks: Hooks) -> ShellBuilder:
        self._hooks = hooks
        return self

    def with_builtins(self, builtins: Builtins) -> ShellBuilder:
        self._builtins = builtins
        return self

    def with_readline(self, line: Readline) -> ShellBuilder:
        self._readline = line
        return self

    def with_alias(self, alias: Alias) -> ShellBuilder:
        self._alias = alias
        return self

    def with_env(self, env: Env) -> ShellBuilder:
        self._env = env
        return self

    def with_theme(self, theme: Theme) -> ShellBuilder:
        self._theme = theme
        return self

    def with_lang(self, lang: Lang) -> ShellBuilder:
        self._lang = lang
        return self

    def with_plugin(self, plugin: Plugin) -> ShellBuilder:
        """Add a plugin; plugins are initialized in the order added."""
        self._plugins.append(plugin)
        return self

    def with_state(self, state: object) -> ShellBuilder:
        """Put a value in the state store, indexed by its type."""
        if self._state is None:
            self._state = State()
        self._state.insert(state)
        return self

    def build(self) -> ShellConfig:
        return ShellConfig(
            hooks=self._hooks if self._hooks is not None else Hooks.default(),
            builtins=self._builtins if self._builtins is not None else Builtins.default(),
            readline=self._readline if self._readline is not None else _InputReadline(),
            alias=self._alias if self._alias is not None else Alias(),
            env=self._env if self._env is not None else Env(),
            theme=self._theme if self._theme is not None else Theme(),
            lang=self._lang,
            plugins=list(self._plugins),
            state=self._state if self._state is not None else State(),
        )


def _trim_start_matches(s: str, prefix: str) -> str:
    while prefix and s.startswith(prefix):
        s = s[len(prefix):]
    return s


def _split_words(line: str) -> list[str]:
    words = (_trim_start_matches(part, "\\\n").strip() for part in line.split(" "))
    return [word for word in words if word]


def run_shell(sh: Shell, ctx: Context, rt: Runtime, readline: Readline) -> None:
    """Main loop: read, expand aliases, run, report; returns when input ends."""
    try:
        sh.hooks.run(
            sh,
            ctx,
            rt,
            StartupCtx(startup_time=timedelta(seconds=time.monotonic() - ctx.startup_time)),
        )
    except Exception as err:  # noqa: BLE001 - a failing startup hook does not stop the shell
        logger.error("startup hook failed: %s", err)

    while True:
        try:
            line = readline.read_line(sh, ctx, rt)
        except EOFError:
            return

        words = _split_words(line)
        if words:
            # Only the last matching alias is used.
            expanded = ctx.alias.get(AliasRuleCtx(words[0], sh, ctx, rt))
            if expanded:
                words[0] = expanded[-1]
        line = " ".join(words)

        sh.hooks.run(sh, ctx, rt, BeforeCommandCtx(raw_command=line, command=line))

        if not words:
            continue

        builtin = sh.builtins.get(words[0])
        cmd_output = CmdOutput.error()
        ctx.out.begin_collecting()
        try:
            if builtin is not None:
                cmd_output = builtin.run(sh, ctx, rt, words)
            else:
                cmd_output = sh.lang.eval(sh, ctx, rt, line)
        except Exception as err:  # noqa: BLE001 - reported, the shell goes on
            print(f"error: {err!r}", file=sys.stderr)
        out, err_text = ctx.out.end_collecting()
        cmd_output.set_output(out, err_text)

        try:
            sh.hooks.run(sh, ctx, rt, AfterCommandCtx(command=line, cmd_output=cmd_output))
        except Exception as err:  # noqa: BLE001 - ignored like any after-command failure
            logger.debug("after command hook failed: %s", err)

        statuses: list[int] = []
        ctx.jobs.retain(statuses.append)
        for status in statuses:
            sh.hooks.run(sh, ctx, rt, JobExitCtx(status=status))


def main(argv: list[str] | None = None) -> int:
    """Start the default shell."""
    parser = argparse.ArgumentParser(prog="shrs", description="Run an interactive shell.")
    parser.parse_args(argv)
    ShellBuilder().build().run()
    return 0