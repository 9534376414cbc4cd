import os

import pytest

from shrs.evaluate import UnsupportedCommandError, eval_command, run_job
from shrs.job import JobManager
from shrs.jobio import Output
from shrs.syntax import And, AsyncList, NoOp, Pipeline, SimpleCommand


@pytest.fixture(autouse=True)
def no_terminal(monkeypatch):
    monkeypatch.setattr(os, "isatty", lambda fd: False)


@pytest.fixture
def manager():
    return JobManager()


def test_noop_starts_nothing(manager):
    assert eval_command(manager, NoOp()) == ([], None)


def test_simple_command_is_own_group(manager):
    procs, pgid = eval_command(manager, SimpleCommand(args=["true"]))
    assert len(procs) == 1
    assert pgid == procs[0].id()
    assert procs[0].wait() == 0


def test_simple_command_output_pipe(manager):
    procs, _ = eval_command(
        manager, SimpleCommand(args=["echo", "hello"]), None, Output.create_pipe()
    )
    stream = procs[0].stdout()
    data = stream.target.read()
    stream.target.close()
    assert procs[0].wait() == 0
    assert data == b"hello\n"


def test_pipeline_feeds_right_side(manager):
    cmd = Pipeline(SimpleCommand(args=["echo", "hello"]), SimpleCommand(args=["cat"]))
    procs, pgid = eval_command(manager, cmd, None, Output.create_pipe())
    assert len(procs) == 2
    assert pgid == procs[1].id()
    stream = procs[-1].stdout()
    data = stream.target.read()
    stream.target.close()
    assert [p.wait() for p in procs] == [0, 0]
    assert data == b"hello\n"


def test_async_list_puts_job_in_background(manager):
    procs, pgid = eval_command(manager, AsyncList(SimpleCommand(args=["true"])))
    assert (procs, pgid) == ([], None)
    jobs = manager.get_jobs()
    assert len(jobs) == 1
    assert manager.current_job == jobs[0].id
    assert jobs[0].last_running_in_foreground is False
    assert manager.wait_for_job(jobs[0].id) == 0


def test_async_list_runs_right_side(manager):
    cmd = AsyncList(SimpleCommand(args=["true"]), SimpleCommand(args=["false"]))
    procs, _ = eval_command(manager, cmd)
    assert len(procs) == 1
    assert procs[0].wait() == 1
    assert manager.has_jobs()


def test_run_job_foreground_waits(manager):
    procs, pgid = eval_command(manager, SimpleCommand(args=["true"]))
    run_job(manager, procs, pgid, True)
    job = manager.get_jobs()[0]
    assert job.is_completed()
    assert job.last_status_code == 0
    assert job.input == ""


def test_unsupported_command(manager):
    cmd = And(SimpleCommand(args=["true"]), SimpleCommand(args=["true"]))
    with pytest.raises(UnsupportedCommandError):
        eval_command(manager, cmd)


def test_empty_simple_command(manager):
    with pytest.raises(ValueError):
        eval_command(manager, SimpleCommand(args=[]))