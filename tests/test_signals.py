import signal

import pytest

from shrs.signals import Signals


@pytest.fixture
def restore_sigint():
    previous = signal.getsignal(signal.SIGINT)
    yield
    signal.signal(signal.SIGINT, previous)


def test_flag_starts_clear(restore_sigint):
    assert Signals().interrupted.is_set() is False


def test_sigint_sets_flag(restore_sigint):
    sigs = Signals()
    signal.raise_signal(signal.SIGINT)
    assert sigs.interrupted.wait(1.0) is True


def test_newest_instance_receives_signal(restore_sigint):
    first = Signals()
    second = Signals()
    signal.raise_signal(signal.SIGINT)
    assert second.interrupted.wait(1.0) is True
    assert first.interrupted.is_set() is False