"""Builtin commands, which have access to the shell's context while they run."""

from __future__ import annotations

import argparse
import re
import subprocess
import sys
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import NoReturn

from shrs.alias import AliasInfo, AliasRuleCtx
from shrs.cmd_output import CmdOutput
from shrs.env import NotFoundError
from shrs.shell import set_working_dir

_SHEBANG = re.compile(r"#!(?P<interp>.+)")


class BuiltinArgsError(ValueError):
    """Arguments given to a builtin could not be parsed."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise BuiltinArgsError(f"{self.prog}: {message}")

    def exit(self, status: int = 0, message: str | None = None) -> NoReturn:
        raise BuiltinArgsError(message or f"{self.prog}: exited with status {status}")


def _parse(parser: _Parser, args: Sequence[str]) -> argparse.Namespace:
    if args:
        parser.prog = args[0]
    return parser.parse_args(list(args[1:]))


def _debug_str(s: str) -> str:
    escaped = (
        s.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


class BuiltinCmd(ABC):
    """A command run inside the shell itself."""

    @abstractmethod
    def run(self, sh, ctx, rt, args: Sequence[str]) -> CmdOutput:
        """Run with args, whose first item is the command name."""


class Builtins:
    """Registry of builtin commands by name."""

    def __init__(self) -> None:
        self._builtins: dict[str, BuiltinCmd] = {}

    @classmethod
    def default(cls) -> Builtins:
        """Registry holding the standard builtins."""
        builtins = cls()
        for name, cmd in (
            ("history", HistoryBuiltin()),
            ("exit", ExitBuiltin()),
            ("cd", CdBuiltin()),
            ("debug", DebugBuiltin()),
            ("export", ExportBuiltin()),
            ("alias", AliasBuiltin()),
            ("unalias", UnaliasBuiltin()),
            ("source", SourceBuiltin()),
            ("jobs", JobsBuiltin()),
            ("help", HelpBuiltin()),
        ):
            builtins.insert(name, cmd)
        return builtins

    def insert(self, name: str, builtin: BuiltinCmd) -> None:
        """Register a builtin, replacing any of the same name."""
        self._builtins[name] = builtin

    def items(self) -> Iterator[tuple[str, BuiltinCmd]]:
        """Iterate over (name, builtin) pairs."""
        return iter(list(self._builtins.items()))

    def get(self, name: str) -> BuiltinCmd | None:
        """The builtin of that name, or None."""
        return self._builtins.get(name)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._builtins))

    def __contains__(self, name: object) -> bool:
        return name in self._builtins

    def __len__(self) -> int:
        return len(self._builtins)


class AliasBuiltin(BuiltinCmd):
    """`alias name=value` sets an alias; `alias name` shows it."""

    def run(self, sh, ctx, rt, args):
        parser = _Parser(prog="alias")
        parser.add_argument("alias")
        cli = _parse(parser, args)

        name, sep, definition = cli.alias.partition("=")
        if sep:
            ctx.alias.set(name, AliasInfo.always(definition))
            return CmdOutput.success()

        substs = ctx.alias.get(AliasRuleCtx(name, sh, ctx, rt))
        if substs:
            for subst in substs:
                ctx.out.println(f"alias {name}={subst}")
        else:
            ctx.out.eprintln(f"{name} not defined")
        return CmdOutput.success()


class CdBuiltin(BuiltinCmd):
    """Change the working directory; `cd -` returns to the previous one."""

    def run(self, sh, ctx, rt, args):
        parser = _Parser(prog="cd")
        parser.add_argument("path", nargs="?")
        cli = _parse(parser, args)

        if cli.path is None:
            path = Path(rt.env.get("HOME"))
        elif cli.path == "-":
            try:
                path = Path(rt.env.get("OLDPWD"))
            except NotFoundError:
                ctx.out.eprintln("no OLDPWD")
                return CmdOutput.error()
        else:
            path = Path(rt.working_dir) / cli.path

        try:
            set_working_dir(sh, ctx, rt, path, True)
        except ValueError as err:
            ctx.out.eprintln(err)
            return CmdOutput.error()
        return CmdOutput.success()


class DebugBuiltin(BuiltinCmd):
    """Inspect the shell's state."""

    def run(self, sh, ctx, rt, args):
        parser = _Parser(prog="debug")
        sub = parser.add_subparsers(dest="command")
        sub.add_parser("env")
        cli = _parse(parser, args)

        if cli.command is None:
            ctx.out.println("debug utility")
        else:
            for var, val in rt.env.items():
                ctx.out.println(f"{_debug_str(var)} = {_debug_str(val)}")
        return CmdOutput.success()


class ExitBuiltin(BuiltinCmd):
    """Leave the shell."""

    def run(self, sh, ctx, rt, args):
        sys.exit(0)


class ExportBuiltin(BuiltinCmd):
    """Set (`VAR=val`), remove (`-n`) or list (`-p`) environment variables."""

    def run(self, sh, ctx, rt, args):
        parser = _Parser(prog="export")
        parser.add_argument("vars", nargs="*")
        parser.add_argument("-p", action="store_true")
        parser.add_argument("-n", action="store_true")
        cli = _parse(parser, args)

        if cli.n:
            for var in cli.vars:
                rt.env.remove(var)
            return CmdOutput.success()

        if cli.p:
            for var, val in rt.env.items():
                ctx.out.println(f"export {_debug_str(var)}={_debug_str(val)}")
            return CmdOutput.success()

        for assignment in cli.vars:
            var, _, val = assignment.partition("=")
            rt.env.set(var, val)
        return CmdOutput.success()


class HelpBuiltin(BuiltinCmd):
    """List the builtin commands."""

    def run(self, sh, ctx, rt, args):
        ctx.out.println("Builtin Commands")
        for name in sh.builtins:
            ctx.out.println(name)
        return CmdOutput.success()


class HistoryBuiltin(BuiltinCmd):
    """Command history; `clear`, `run INDEX` and `search QUERY`."""

    def run(self, sh, ctx, rt, args):
        parser = _Parser(prog="history")
        sub = parser.add_subparsers(dest="command")
        sub.add_parser("clear")
        run_parser = sub.add_parser("run")
        run_parser.add_argument("index", type=int)
        search_parser = sub.add_parser("search")
        search_parser.add_argument("query")
        cli = _parse(parser, args)

        if cli.command in ("run", "search"):
            ctx.out.eprintln(f"history {cli.command}: no history is recorded")
            return CmdOutput.error()
        return CmdOutput.success()


class JobsBuiltin(BuiltinCmd):
    """List the ids of tracked jobs."""

    def run(self, sh, ctx, rt, args):
        for job_id, _ in ctx.jobs.items():
            ctx.out.println(str(job_id))
        return CmdOutput.success()


class SourceBuiltin(BuiltinCmd):
    """Run a script with its shebang interpreter, or line by line in this shell."""

    def run(self, sh, ctx, rt, args):
        parser = _Parser(prog="source")
        parser.add_argument("source_file")
        cli = _parse(parser, args)

        contents = Path(cli.source_file).read_text()
        lines = contents.splitlines()
        match = _SHEBANG.search(lines[0]) if lines else None

        if match is not None:
            interp = match.group("interp")
            ctx.out.println(f"using interp {interp} at {cli.source_file}")
            child = subprocess.Popen([interp, cli.source_file])
            ctx.jobs.push(child, f"{interp} {cli.source_file}")
            return CmdOutput.success()

        output = CmdOutput.success()
        for line in lines:
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            output = sh.lang.eval(sh, ctx, rt, stripped)
        return output


class UnaliasBuiltin(BuiltinCmd):
    """Remove aliases; `-a` removes all of them."""

    def run(self, sh, ctx, rt, args):
        parser = _Parser(prog="unalias")
        parser.add_argument("aliases", nargs="*")
        parser.add_argument("-a", action="store_true")
        cli = _parse(parser, args)

        if cli.a:
            ctx.alias.clear()
            return CmdOutput.success()
        for alias in cli.aliases:
            ctx.alias.unset(alias)
        return CmdOutput.success()