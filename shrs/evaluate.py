"""Evaluation of parsed commands into jobs of processes."""

from __future__ import annotations

from shrs.job import JobManager
from shrs.jobio import Output, Stdin
from shrs.process import Process, ProcessGroup, run_external_command
from shrs.syntax import AsyncList, Command, NoOp, Pipeline, SimpleCommand


class UnsupportedCommandError(NotImplementedError):
    """The command form cannot be evaluated."""

    def __init__(self, cmd: object) -> None:
        super().__init__(f"unsupported command: {type(cmd).__name__}")
        self.cmd = cmd


def run_job(
    job_manager: JobManager,
    procs: list[Process],
    pgid: int | None,
    foreground: bool,
) -> None:
    """Track the processes as a job and run it in the foreground or background."""
    group = ProcessGroup(id=pgid, processes=procs, foreground=foreground)
    job_id = job_manager.create_job("", group)
    if group.foreground:
        job_manager.put_job_in_foreground(job_id, False)
    else:
        job_manager.put_job_in_background(job_id, False)


def eval_command(
    job_manager: JobManager,
    cmd: Command,
    stdin: Stdin | None = None,
    stdout: Output | None = None,
) -> tuple[list[Process], int | None]:
    """Start the processes of a command; return them and their process group id."""
    if isinstance(cmd, SimpleCommand):
        if not cmd.args:
            raise ValueError("empty command")
        program, *args = cmd.args
        proc, pgid = run_external_command(
            program,
            args,
            stdin if stdin is not None else Stdin.inherit(),
            stdout if stdout is not None else Output.inherit(),
            Output.inherit(),
            None,
        )
        return [proc], pgid

    if isinstance(cmd, Pipeline):
        a_procs, _ = eval_command(job_manager, cmd.left, stdin, Output.create_pipe())
        if not a_procs:
            raise ValueError("left side of pipeline started no process")
        b_procs, b_pgid = eval_command(job_manager, cmd.right, a_procs[-1].stdout(), stdout)
        return a_procs + b_procs, b_pgid

    if isinstance(cmd, AsyncList):
        procs, pgid = eval_command(job_manager, cmd.left)
        run_job(job_manager, procs, pgid, False)
        if cmd.right is not None:
            return eval_command(job_manager, cmd.right)
        return [], None

    if isinstance(cmd, NoOp):
        return [], None

    raise UnsupportedCommandError(cmd)