"""Jobs made of process groups, and the manager that tracks them."""

from __future__ import annotations

import logging
import os
import signal
import termios
import time
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any

from shrs.jobutil import get_terminal
from shrs.process import Process, ProcessGroup, ProcessStatus

logger = logging.getLogger(__name__)

JobId = int

_POLL_INTERVAL = 0.001


class NoSuchJobError(LookupError):
    """The requested job is not tracked."""

    def __init__(self, job: str) -> None:
        super().__init__(f"no such job {job}")
        self.job = job


class JobStatus(Enum):
    RUNNING = "Running"
    STOPPED = "Stopped"
    COMPLETED = "Completed"

    def __str__(self) -> str:
        return self.value


def _get_tmodes(terminal: int) -> Any:
    try:
        return termios.tcgetattr(terminal)
    except (termios.error, OSError):
        return None


def _is_tty(terminal: int) -> bool:
    try:
        return os.isatty(terminal)
    except OSError:
        return False


@contextmanager
def _job_owns_terminal(pgid: int | None) -> Iterator[None]:
    """Hand the terminal to the job's group, giving it back to the shell on exit."""
    terminal = get_terminal()
    if pgid is None or not _is_tty(terminal):
        yield
        return

    logger.debug("setting terminal process group to job's process group")
    os.tcsetpgrp(terminal, pgid)
    prev_pgid = os.getpgrp()
    prev_tmodes = _get_tmodes(terminal)
    try:
        yield
    finally:
        logger.debug("putting shell back into foreground and restoring shell's terminal modes")
        os.tcsetpgrp(terminal, prev_pgid)
        if prev_tmodes is not None:
            try:
                termios.tcsetattr(terminal, termios.TCSADRAIN, prev_tmodes)
            except termios.error as err:
                logger.error("error restoring terminal configuration for shell: %s", err)


class Job:
    """A group of processes started from one command line."""

    def __init__(
        self,
        id: JobId,
        input: str,
        pgid: int | None,
        processes: list[Process],
    ) -> None:
        self.id = id
        self.input = input
        self.pgid = pgid
        self.processes = list(processes)
        # Known already when every process finished before the job was created.
        self.last_status_code: int | None = next(
            (code for code in (p.status_code() for p in reversed(self.processes)) if code is not None),
            None,
        )
        self.last_running_in_foreground = True
        self.notified_stopped_job = False
        self.tmodes = _get_tmodes(get_terminal())

    def display(self) -> str:
        """One-line summary: id, status and command."""
        return f"[{self.id}] {self.status()}\t{self.input}"

    def status(self) -> JobStatus:
        if self.is_stopped():
            return JobStatus.STOPPED
        if self.is_completed():
            return JobStatus.COMPLETED
        return JobStatus.RUNNING

    def is_stopped(self) -> bool:
        return all(p.status() is ProcessStatus.STOPPED for p in self.processes)

    def is_completed(self) -> bool:
        return all(p.status() is ProcessStatus.COMPLETED for p in self.processes)

    def try_wait(self) -> int | None:
        """Poll every process and return the latest known exit status."""
        for process in self.processes:
            code = process.try_wait()
            if code is not None:
                self.last_status_code = code
        return self.last_status_code

    def kill(self) -> None:
        for process in self.processes:
            process.kill()

    def __str__(self) -> str:
        return self.display()

    def __repr__(self) -> str:
        return f"id: {self.id}\tinput: {self.input}"


class JobManager:
    """Tracks jobs and moves them between foreground and background."""

    def __init__(self) -> None:
        self._jobs: list[Job] = []
        self._job_count = 0
        self.current_job: JobId | None = None

    def create_job(self, input: str, process_group: ProcessGroup) -> JobId:
        """Track a new job for the process group and return its id."""
        self._job_count += 1
        job_id = self._job_count
        self._jobs.append(Job(job_id, input, process_group.id, process_group.processes))
        return job_id

    def has_jobs(self) -> bool:
        return bool(self._jobs)

    def get_jobs(self) -> list[Job]:
        return list(self._jobs)

    def _find_job(self, job_id: JobId) -> Job | None:
        return next((job for job in self._jobs if job.id == job_id), None)

    def _require_job(self, job_id: JobId) -> Job:
        job = self._find_job(job_id)
        if job is None:
            raise NoSuchJobError(str(job_id))
        return job

    def _job_is_running(self, job_id: JobId) -> bool:
        job = self._require_job(job_id)
        return not job.is_stopped() and not job.is_completed()

    def wait_for_job(self, job_id: JobId) -> int | None:
        """Wait until the job stops or completes, updating every job meanwhile."""
        while self._job_is_running(job_id):
            for job in self._jobs:
                job.try_wait()
            if self._job_is_running(job_id):
                time.sleep(_POLL_INTERVAL)
        return self._require_job(job_id).last_status_code

    def _resolve(self, job_id: JobId | None) -> JobId:
        resolved = job_id if job_id is not None else self.current_job
        if resolved is None:
            raise NoSuchJobError("current")
        return resolved

    def put_job_in_foreground(self, job_id: JobId | None, cont: bool) -> int | None:
        """Run the job (or the current job) in the foreground and wait for it."""
        job_id = self._resolve(job_id)
        logger.debug("putting job [%s] in foreground", job_id)

        job = self._require_job(job_id)
        job.last_running_in_foreground = True

        with _job_owns_terminal(job.pgid):
            if cont:
                if job.tmodes is not None:
                    try:
                        termios.tcsetattr(get_terminal(), termios.TCSADRAIN, job.tmodes)
                    except termios.error as err:
                        logger.error(
                            "error setting terminal configuration for job (%s): %s", job_id, err
                        )
                if job.pgid is not None:
                    os.killpg(job.pgid, signal.SIGCONT)
            return self.wait_for_job(job_id)

    def put_job_in_background(self, job_id: JobId | None, cont: bool) -> None:
        """Leave the job (or the current job) running and make it current."""
        job_id = self._resolve(job_id)
        logger.debug("putting job [%s] in background", job_id)

        job = self._require_job(job_id)
        job.last_running_in_foreground = False

        if cont and job.pgid is not None:
            os.killpg(job.pgid, signal.SIGCONT)

        self.current_job = job_id

    def kill_job(self, job_id: JobId) -> Job | None:
        """Kill every process of the job; return the job, or None if unknown."""
        job = self._find_job(job_id)
        if job is None:
            return None
        job.kill()
        return job

    def update_job_statuses(self) -> None:
        """Poll every job without blocking."""
        for job in self._jobs:
            job.try_wait()

    def do_job_notification(self) -> None:
        """Report stopped and finished background jobs and forget finished ones."""
        try:
            self.update_job_statuses()
        except Exception as err:  # noqa: BLE001 - reported, then notification goes on
            logger.error("do_job_notification: %s", err)

        for job in self._jobs:
            if job.is_completed() and not job.last_running_in_foreground:
                print(job)
            elif job.is_stopped() and not job.notified_stopped_job:
                print(job)
                job.notified_stopped_job = True

        self._jobs = [job for job in self._jobs if not job.is_completed()]

    def __repr__(self) -> str:
        header = f"{len(self._jobs)} jobs\tjob_count: {self._job_count}\n"
        return header + "".join(repr(job) for job in self._jobs)