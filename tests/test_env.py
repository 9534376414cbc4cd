import pytest

from shrs.env import Env, EnvError, InvalidKeyError, InvalidValueError, NotFoundError


def test_set_then_get_round_trip():
    env = Env()
    env.set("EDITOR", "vim")
    assert env.get("EDITOR") == "vim"
    env.set("EDITOR", "nano")
    assert env.get("EDITOR") == "nano"


def test_get_missing_raises_not_found():
    with pytest.raises(NotFoundError) as info:
        Env().get("MISSING")
    assert str(info.value) == "Key not found: MISSING"
    assert isinstance(info.value, EnvError)


@pytest.mark.parametrize("key", ["", "A=B", "A\0B"])
def test_invalid_keys_rejected(key):
    env = Env()
    with pytest.raises(InvalidKeyError):
        env.set(key, "value")
    with pytest.raises(InvalidKeyError):
        env.remove(key)
    assert len(env) == 0


def test_invalid_value_rejected():
    env = Env()
    with pytest.raises(InvalidValueError):
        env.set("KEY", "bad\0value")
    assert "KEY" not in env


def test_remove_and_remove_missing():
    env = Env()
    env.set("X", "1")
    env.remove("X")
    env.remove("X")
    assert "X" not in env


def test_from_pairs_and_iteration():
    env = Env.from_pairs([("A", "1"), ("B", "2")])
    assert sorted(env) == ["A", "B"]
    assert dict(env.items()) == {"A": "1", "B": "2"}


def test_load_reads_process_environment(monkeypatch):
    monkeypatch.setenv("SHRS_TEST_VAR", "loaded")
    env = Env()
    env.load()
    assert env.get("SHRS_TEST_VAR") == "loaded"


def test_copy_is_independent():
    env = Env.from_pairs([("A", "1")])
    other = env.copy()
    other.set("A", "2")
    assert env.get("A") == "1"
    assert other.get("A") == "2"