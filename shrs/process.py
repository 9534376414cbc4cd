"""Processes that make up a job."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from shrs.jobio import Output, Stdin, StreamKind
from shrs.jobutil import get_terminal

logger = logging.getLogger(__name__)

_DEFAULT_SIGNALS = (
    signal.SIGINT,
    signal.SIGQUIT,
    signal.SIGTSTP,
    signal.SIGTTIN,
    signal.SIGTTOU,
    signal.SIGCHLD,
)


class ProcessStatus(Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    COMPLETED = "completed"


class Process(ABC):
    """A process taking part in a job."""

    @abstractmethod
    def id(self) -> int | None:
        """Operating system process id, None for builtins."""

    @abstractmethod
    def argv(self) -> str:
        """Program and arguments joined by spaces."""

    @abstractmethod
    def status(self) -> ProcessStatus:
        """Current status."""

    @abstractmethod
    def status_code(self) -> int | None:
        """Exit status once known."""

    @abstractmethod
    def stdout(self) -> Stdin | None:
        """Take the output stream, for use as the input of another process."""

    @abstractmethod
    def kill(self) -> None:
        """Terminate the process."""

    @abstractmethod
    def wait(self) -> int:
        """Block until the process exits and return its status."""

    @abstractmethod
    def try_wait(self) -> int | None:
        """Exit status if the process has exited, without blocking."""

    def __repr__(self) -> str:
        ident = self.id()
        return f"Process {{ id: {'(builtin)' if ident is None else ident} }}"


@dataclass
class ProcessGroup:
    """Processes sharing a process group."""

    id: int | None
    processes: list[Process] = field(default_factory=list)
    foreground: bool = True


class BuiltinProcess(Process):
    """A builtin command that already finished inside the shell."""

    def __init__(
        self,
        program: str,
        args: Sequence[str],
        status_code: int,
        stdout: Stdin | None = None,
    ) -> None:
        self._argv = [str(program), *map(str, args)]
        self._status_code = status_code
        self._stdout = stdout

    def id(self) -> int | None:
        return None

    def argv(self) -> str:
        return " ".join(self._argv)

    def status(self) -> ProcessStatus:
        return ProcessStatus.COMPLETED

    def status_code(self) -> int | None:
        return self._status_code

    def stdout(self) -> Stdin | None:
        stream, self._stdout = self._stdout, None
        return stream

    def kill(self) -> None:
        return None

    def wait(self) -> int:
        return self._status_code

    def try_wait(self) -> int | None:
        return self._status_code


class ExternalProcess(Process):
    """A process started from a program on disk."""

    def __init__(self, program: str, args: Sequence[str], child: subprocess.Popen) -> None:
        self._argv = [str(program), *map(str, args)]
        self._child = child
        self._status = ProcessStatus.RUNNING
        self._status_code: int | None = None

    def id(self) -> int | None:
        return self._child.pid

    def argv(self) -> str:
        return " ".join(self._argv)

    def status(self) -> ProcessStatus:
        return self._status

    def status_code(self) -> int | None:
        return self._status_code

    def stdout(self) -> Stdin | None:
        stream, self._child.stdout = self._child.stdout, None
        return None if stream is None else Stdin.child(stream)

    def kill(self) -> None:
        self._child.kill()

    def _completed(self, code: int) -> int:
        self._status = ProcessStatus.COMPLETED
        self._status_code = code
        return code

    def wait(self) -> int:
        return self._completed(self._child.wait())

    def try_wait(self) -> int | None:
        code = self._child.poll()
        return None if code is None else self._completed(code)


def _job_control_enabled(terminal: int) -> bool:
    try:
        return os.isatty(terminal)
    except OSError:
        return False


def _child_setup(stdin_fd, stdout_fd, stderr_fd, pgid, job_control, terminal):
    def setup() -> None:
        if job_control:
            pid = os.getpid()
            group = pgid if pgid is not None else pid
            os.setpgid(pid, group)
            os.tcsetpgrp(terminal, group)
            for sig in _DEFAULT_SIGNALS:
                signal.signal(sig, signal.SIG_DFL)
        for fd, target in ((stdin_fd, 0), (stdout_fd, 1), (stderr_fd, 2)):
            if fd is not None and fd != target:
                os.dup2(fd, target)
                os.close(fd)

    return setup


def run_external_command(
    program: str,
    args: Sequence[str],
    stdin: Stdin,
    stdout: Output,
    stderr: Output,
    pgid: int | None = None,
) -> tuple[Process, int]:
    """Spawn a program in the given process group; return it and its group id."""
    stdout_fd = stdout.target if stdout.kind is StreamKind.FILE_DESCRIPTOR else None
    stderr_fd = stderr.target if stderr.kind is StreamKind.FILE_DESCRIPTOR else None
    terminal = get_terminal()
    job_control = _job_control_enabled(terminal)
    setup = _child_setup(stdin.as_raw_fd(), stdout_fd, stderr_fd, pgid, job_control, terminal)

    try:
        child = subprocess.Popen(
            [str(program), *map(str, args)],
            stdout=None if stdout_fd is not None else stdout.to_popen(),
            stderr=None if stderr_fd is not None else stderr.to_popen(),
            preexec_fn=setup,
        )
    except Exception:
        if job_control:
            logger.warning("failed to spawn child, resetting terminal's pgrp")
            os.tcsetpgrp(terminal, os.getpgrp())
        raise
    finally:
        if stdin.kind is StreamKind.CHILD:
            stdin.target.close()

    group = pgid if pgid is not None else child.pid
    if job_control:
        try:
            os.setpgid(child.pid, group)
        except OSError as err:
            logger.error("failed to set pgid (%s) for pid (%s): %s", group, child.pid, err)

    return ExternalProcess(program, args, child), group