"""Tracking of background and foreground processes."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Iterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)

JobId = int


@dataclass
class JobInfo:
    """A tracked child process and the command that started it."""

    child: subprocess.Popen
    cmd: str


class Jobs:
    """Keeps track of all currently running jobs."""

    def __init__(self) -> None:
        self._next_id: JobId = 0
        self._jobs: dict[JobId, JobInfo] = {}
        self._foreground: subprocess.Popen | None = None

    def push(self, child: subprocess.Popen, cmd: str) -> None:
        """Track a new job."""
        self._next_id += 1
        self._jobs[self._next_id] = JobInfo(child, cmd)

    def items(self) -> Iterator[tuple[JobId, JobInfo]]:
        """Iterate over (id, job) pairs."""
        return iter(list(self._jobs.items()))

    def __len__(self) -> int:
        return len(self._jobs)

    def retain(self, exit_handler: Callable[[int], None]) -> None:
        """Drop finished jobs, passing each exit status to exit_handler."""
        for job_id, info in list(self._jobs.items()):
            try:
                status = info.child.poll()
            except OSError as err:
                logger.warning("failed waiting for job %s: %s", job_id, err)
                del self._jobs[job_id]
                continue
            if status is not None:
                exit_handler(status)
                del self._jobs[job_id]

    def set_foreground(self, child: subprocess.Popen) -> None:
        """Make child the foreground process."""
        if self._foreground is not None:
            raise RuntimeError("There is already a foreground process")
        self._foreground = child

    def wait_foreground(self) -> int:
        """Wait for the foreground process to terminate and return its status."""
        if self._foreground is None:
            raise RuntimeError("No running foreground process")
        child, self._foreground = self._foreground, None
        return child.wait()