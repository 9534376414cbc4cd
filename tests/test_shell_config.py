import io
import logging
import signal
import subprocess
import sys

import pytest

from shrs.alias import Alias, AliasInfo
from shrs.builtin_cmds import BuiltinCmd, Builtins
from shrs.cmd_output import CmdOutput
from shrs.hooks import AfterCommandCtx, BeforeCommandCtx, Hooks, JobExitCtx, StartupCtx
from shrs.lang import Lang
from shrs.output_writer import OutputWriter
from shrs.plugin import FailMode, Plugin, PluginMeta
from shrs.shell import Context, Runtime, Shell
from shrs.shell_config import Readline, ShellBuilder, ShellConfig, run_shell


class ScriptedReadline(Readline):
    def __init__(self, lines):
        self.lines = list(lines)

    def read_line(self, sh, ctx, rt):
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


class RecordingLang(Lang):
    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def eval(self, sh, ctx, rt, cmd):
        self.calls.append(cmd)
        if self.fail:
            raise RuntimeError("boom")
        return CmdOutput.success()

    def name(self):
        return "recording"

    def needs_line_check(self, cmd):
        return False


class RecordingBuiltin(BuiltinCmd):
    def __init__(self, text=""):
        self.calls = []
        self.text = text

    def run(self, sh, ctx, rt, args):
        self.calls.append(list(args))
        if self.text:
            ctx.out.print(self.text)
        return CmdOutput.success()


def make_env(builtin=None, name="rec", lang=None, hooks=None, alias=None):
    builtins = Builtins()
    if builtin is not None:
        builtins.insert(name, builtin)
    sh = Shell(hooks=hooks or Hooks(), builtins=builtins, lang=lang or RecordingLang())
    ctx = Context(out=OutputWriter(io.StringIO(), io.StringIO()), alias=alias or Alias())
    rt = Runtime()
    return sh, ctx, rt


def test_default_build_constructs():
    config = ShellBuilder().build()
    assert "cd" in config.builtins
    assert config.plugins == []
    assert config.lang is None


def test_builder_settings_are_kept():
    lang = RecordingLang()
    alias = Alias.from_pairs([("l", "ls")])
    config = ShellBuilder().with_lang(lang).with_alias(alias).with_state(5).with_state("x").build()
    assert config.lang is lang
    assert config.alias is alias
    assert config.state.get(int) == 5
    assert config.state.get(str) == "x"


def test_builder_collects_plugins_in_order():
    class P(Plugin):
        def init(self, shell):
            pass

    first, second = P(), P()
    config = ShellBuilder().with_plugin(first).with_plugin(second).build()
    assert config.plugins == [first, second]


def test_builtin_receives_words():
    builtin = RecordingBuiltin()
    sh, ctx, rt = make_env(builtin)
    run_shell(sh, ctx, rt, ScriptedReadline(["rec  a   b"]))
    assert builtin.calls == [["rec", "a", "b"]]


def test_alias_expanded_to_builtin():
    builtin = RecordingBuiltin()
    sh, ctx, rt = make_env(builtin, alias=Alias.from_pairs([("ll", "rec")]))
    run_shell(sh, ctx, rt, ScriptedReadline(["ll x"]))
    assert builtin.calls == [["rec", "x"]]


def test_last_matching_alias_wins():
    alias = Alias()
    alias.set("go", AliasInfo.always("first"))
    alias.set("go", AliasInfo.always("rec"))
    alias.set("go", AliasInfo.with_rule("never", lambda _ctx: False))
    builtin = RecordingBuiltin()
    sh, ctx, rt = make_env(builtin, alias=alias)
    run_shell(sh, ctx, rt, ScriptedReadline(["go"]))
    assert builtin.calls == [["rec"]]


def test_non_builtin_goes_to_lang():
    lang = RecordingLang()
    sh, ctx, rt = make_env(lang=lang)
    run_shell(sh, ctx, rt, ScriptedReadline(["echo   hi  there", "", "   "]))
    assert lang.calls == ["echo hi there"]


def test_after_command_receives_collected_output():
    seen = []
    hooks = Hooks()
    hooks.register(AfterCommandCtx, lambda sh, c, r, hc: seen.append(hc))
    sh, ctx, rt = make_env(RecordingBuiltin(text="hi"), hooks=hooks)
    run_shell(sh, ctx, rt, ScriptedReadline(["rec"]))
    assert len(seen) == 1
    assert seen[0].command == "rec"
    assert seen[0].cmd_output.stdout == "hi"
    assert seen[0].cmd_output.status == 0


def test_lang_error_reported_and_status_is_error(capsys):
    seen = []
    hooks = Hooks()
    hooks.register(AfterCommandCtx, lambda sh, c, r, hc: seen.append(hc.cmd_output.status))
    sh, ctx, rt = make_env(lang=RecordingLang(fail=True), hooks=hooks)
    run_shell(sh, ctx, rt, ScriptedReadline(["broken"]))
    assert seen == [1]
    assert "error:" in capsys.readouterr().err


def test_before_command_hook_error_propagates():
    def failing(sh, c, r, hc):
        raise ValueError("stop")

    hooks = Hooks()
    hooks.register(BeforeCommandCtx, failing)
    sh, ctx, rt = make_env(hooks=hooks)
    with pytest.raises(ValueError, match="stop"):
        run_shell(sh, ctx, rt, ScriptedReadline(["anything"]))


def test_startup_hook_error_is_swallowed():
    def failing(sh, c, r, hc):
        raise ValueError("startup")

    hooks = Hooks()
    hooks.register(StartupCtx, failing)
    lang = RecordingLang()
    sh, ctx, rt = make_env(lang=lang, hooks=hooks)
    run_shell(sh, ctx, rt, ScriptedReadline(["ok"]))
    assert lang.calls == ["ok"]


def test_finished_job_runs_exit_hook():
    statuses = []
    hooks = Hooks()
    hooks.register(JobExitCtx, lambda sh, c, r, hc: statuses.append(hc.status))
    sh, ctx, rt = make_env(hooks=hooks)
    child = subprocess.Popen([sys.executable, "-c", "pass"])
    child.wait()
    ctx.jobs.push(child, "pass")
    run_shell(sh, ctx, rt, ScriptedReadline(["noop"]))
    assert statuses == [0]
    assert len(ctx.jobs) == 0


def test_exit_builtin_leaves_loop():
    sh, ctx, rt = make_env()
    sh.builtins = Builtins.default()
    with pytest.raises(SystemExit):
        run_shell(sh, ctx, rt, ScriptedReadline(["exit", "never"]))


def test_run_aborts_on_failing_plugin():
    class Broken(Plugin):
        def init(self, shell):
            raise ValueError("bad")

        def meta(self):
            return PluginMeta(name="broken")

    config = ShellBuilder().with_plugin(Broken()).with_lang(RecordingLang()).build()
    with pytest.raises(RuntimeError, match="Plugin 'broken' failed to initialize"):
        config.run()


def test_run_initializes_plugins_and_warns(caplog):
    probe = RecordingBuiltin()

    class AddsBuiltin(Plugin):
        def init(self, shell: ShellConfig):
            shell.builtins.insert("probe", probe)

        def meta(self):
            return PluginMeta(name="adds")

    class Flaky(Plugin):
        def init(self, shell):
            raise ValueError("flaky")

        def meta(self):
            return PluginMeta(name="flaky")

        def fail_mode(self):
            return FailMode.WARN

    config = (
        ShellBuilder()
        .with_hooks(Hooks())
        .with_lang(RecordingLang())
        .with_readline(ScriptedReadline(["probe arg"]))
        .with_plugin(Flaky())
        .with_plugin(AddsBuiltin())
        .build()
    )
    previous = signal.getsignal(signal.SIGINT)
    try:
        with caplog.at_level(logging.WARNING, logger="shrs.shell_config"):
            config.run()
    finally:
        signal.signal(signal.SIGINT, previous)
    assert probe.calls == [["probe", "arg"]]
    assert any("flaky" in r.getMessage() for r in caplog.records)
    assert config.plugins == []