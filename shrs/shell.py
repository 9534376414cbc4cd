"""Types that make up the internal context of the shell."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

from shrs.alias import Alias
from shrs.env import Env
from shrs.hooks import ChangeDirCtx, Hooks
from shrs.job import JobManager
from shrs.jobs import Jobs
from shrs.lang import Lang
from shrs.output_writer import OutputWriter
from shrs.signals import Signals
from shrs.state import State
from shrs.theme import Theme

if TYPE_CHECKING:
    from shrs.builtin_cmds import Builtins

logger = logging.getLogger(__name__)


def _default_builtins() -> Builtins:
    from shrs.builtin_cmds import Builtins

    return Builtins.default()


@dataclass
class Shell:
    """Shell data that generally stays constant while the shell runs."""

    job_manager: JobManager = field(default_factory=JobManager)
    hooks: Hooks = field(default_factory=Hooks.default)
    builtins: Any = field(default_factory=_default_builtins)
    theme: Theme = field(default_factory=Theme)
    lang: Lang | None = None
    signals: Signals | None = None


@dataclass
class Context:
    """Global shell context shared by every subshell."""

    out: OutputWriter = field(default_factory=OutputWriter)
    state: State = field(default_factory=State)
    jobs: Jobs = field(default_factory=Jobs)
    startup_time: float = field(default_factory=time.monotonic)
    alias: Alias = field(default_factory=Alias)


@dataclass
class Runtime:
    """Context local to each subshell."""

    working_dir: Path = field(default_factory=Path.cwd)
    env: Env = field(default_factory=Env)
    name: str = "shrs"
    args: list[str] = field(default_factory=list)
    exit_status: int = 0

    def copy(self) -> Runtime:
        """Independent copy, as used for a subshell."""
        return replace(self, env=self.env.copy(), args=list(self.args))


def set_working_dir(sh: Shell, ctx: Context, rt: Runtime, wd: os.PathLike | str, run_hook: bool) -> None:
    """Change the working directory of the shell and of the process.

    Raises ValueError if wd is not an existing directory.
    """
    try:
        path = Path(wd).resolve(strict=True)
    except (OSError, RuntimeError):
        raise ValueError("Invalid path") from None
    if not path.is_dir():
        raise ValueError("Invalid path")

    old_path = Path(get_working_dir(rt))
    rt.env.set("OLDPWD", str(old_path))
    rt.env.set("PWD", str(path))
    rt.working_dir = path

    os.chdir(path)

    if run_hook:
        try:
            sh.hooks.run(sh, ctx, rt, ChangeDirCtx(old_dir=old_path, new_dir=path))
        except Exception as err:  # noqa: BLE001 - a failing hook must not undo the change
            logger.error("Error running change dir hook %r", err)


def get_working_dir(rt: Runtime) -> Path:
    """The shell's current working directory."""
    return rt.working_dir