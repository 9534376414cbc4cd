import subprocess
import sys

import pytest

from shrs.jobs import JobInfo, Jobs


def spawn(code):
    return subprocess.Popen([sys.executable, "-c", code])


def test_push_assigns_increasing_ids():
    jobs = Jobs()
    first, second = spawn("pass"), spawn("pass")
    jobs.push(first, "one")
    jobs.push(second, "two")
    assert [job_id for job_id, _ in jobs.items()] == [1, 2]
    assert [info.cmd for _, info in jobs.items()] == ["one", "two"]
    first.wait()
    second.wait()


def test_retain_reports_and_drops_finished_jobs():
    jobs = Jobs()
    child = spawn("raise SystemExit(3)")
    child.wait()
    jobs.push(child, "fail")
    statuses = []
    jobs.retain(statuses.append)
    assert statuses == [3]
    assert list(jobs.items()) == []


def test_retain_keeps_running_jobs():
    jobs = Jobs()
    child = spawn("import time; time.sleep(30)")
    jobs.push(child, "sleep")
    statuses = []
    try:
        jobs.retain(statuses.append)
        assert statuses == []
        assert len(jobs) == 1
    finally:
        child.kill()
        child.wait()


def test_foreground_wait_returns_status():
    jobs = Jobs()
    jobs.set_foreground(spawn("raise SystemExit(5)"))
    assert jobs.wait_foreground() == 5
    with pytest.raises(RuntimeError):
        jobs.wait_foreground()


def test_second_foreground_is_rejected():
    jobs = Jobs()
    child = spawn("pass")
    jobs.set_foreground(child)
    other = spawn("pass")
    with pytest.raises(RuntimeError):
        jobs.set_foreground(other)
    other.wait()
    assert jobs.wait_foreground() == 0


def test_wait_without_foreground_fails():
    with pytest.raises(RuntimeError):
        Jobs().wait_foreground()


def test_job_info_holds_command():
    child = spawn("pass")
    info = JobInfo(child, "ls -a")
    assert info.cmd == "ls -a"
    assert info.child.wait() == 0