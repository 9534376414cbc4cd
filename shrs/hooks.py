"""Shell runtime hooks called on shell events."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any

from shrs.cmd_output import CmdOutput

HookFn = Callable[[Any, Any, Any, Any], None]


@dataclass
class StartupCtx:
    """Runs when the shell starts up."""

    startup_time: timedelta


@dataclass
class BeforeCommandCtx:
    """Runs before a command is executed."""

    raw_command: str
    command: str


@dataclass
class AfterCommandCtx:
    """Runs after a command is executed."""

    command: str
    cmd_output: CmdOutput


@dataclass
class ChangeDirCtx:
    """Runs when the working directory changes."""

    old_dir: Path
    new_dir: Path


@dataclass
class JobExitCtx:
    """Runs when a job completes."""

    status: int | None


def _expect(ctx: object, kind: type) -> None:
    if not isinstance(ctx, kind):
        raise TypeError(f"expected {kind.__name__}, got {type(ctx).__name__}")


def startup_hook(sh, sh_ctx, sh_rt, ctx: StartupCtx) -> None:
    """Default startup handler: greets the user."""
    _expect(ctx, StartupCtx)
    print("welcome to shrs!")


def before_command_hook(sh, sh_ctx, sh_rt, ctx: BeforeCommandCtx) -> None:
    """Default handler before a command; accepts the event without acting on it."""
    _expect(ctx, BeforeCommandCtx)


def after_command_hook(sh, sh_ctx, sh_rt, ctx: AfterCommandCtx) -> None:
    """Default handler after a command; accepts the event without acting on it."""
    _expect(ctx, AfterCommandCtx)


def change_dir_hook(sh, sh_ctx, sh_rt, ctx: ChangeDirCtx) -> None:
    """Default handler for directory changes; accepts the event without acting on it."""
    _expect(ctx, ChangeDirCtx)


def job_exit_hook(sh, sh_ctx, sh_rt, ctx: JobExitCtx) -> None:
    """Default handler for finished jobs: reports the exit status."""
    print(f"[exit +{ctx.status}]")


class Hooks:
    """Hooks registered per context type."""

    def __init__(self) -> None:
        self._hooks: dict[type, list[HookFn]] = {}

    @classmethod
    def default(cls) -> Hooks:
        """Hooks with the default handlers registered."""
        hooks = cls()
        hooks.register(StartupCtx, startup_hook)
        hooks.register(BeforeCommandCtx, before_command_hook)
        hooks.register(AfterCommandCtx, after_command_hook)
        hooks.register(ChangeDirCtx, change_dir_hook)
        hooks.register(JobExitCtx, job_exit_hook)
        return hooks

    def register(self, ctx_type: type, hook: HookFn) -> None:
        """Add a hook for events carrying a context of ctx_type."""
        self._hooks.setdefault(ctx_type, []).append(hook)

    def run(self, sh, sh_ctx, sh_rt, ctx: object) -> None:
        """Run every hook for the context's type in order; errors propagate."""
        for hook in list(self._hooks.get(type(ctx), [])):
            hook(sh, sh_ctx, sh_rt, ctx)