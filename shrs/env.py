"""Environment variables."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass


class EnvError(Exception):
    """Base class for environment variable errors."""


class InvalidKeyError(EnvError):
    """The variable name is empty or holds '=' or a NUL character."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Malformed key: {key}")
        self.key = key


class InvalidValueError(EnvError):
    """The variable value holds a NUL character."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Malformed value: {value}")
        self.value = value


class NotFoundError(EnvError):
    """The variable is not set."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Key not found: {key}")
        self.key = key


@dataclass
class EnvModifiedCtx:
    """Hook context for a modified environment variable."""

    var: str
    new_val: str | None
    old_val: str | None


def _invalid_key(var: str) -> bool:
    return not var or "=" in var or "\0" in var


def _invalid_value(val: str) -> bool:
    return "\0" in val


class Env:
    """Set and query environment variables."""

    def __init__(self) -> None:
        self._vars: dict[str, str] = {}

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[object, object]]) -> Env:
        """Build an environment from (name, value) pairs without validation."""
        env = cls()
        env._vars.update((str(k), str(v)) for k, v in pairs)
        return env

    def load(self) -> None:
        """Copy the variables of the current process."""
        for var, val in os.environ.items():
            self.set(var, val)

    def get(self, var: str) -> str:
        """Value of a variable; raises NotFoundError if it is unset."""
        try:
            return self._vars[var]
        except KeyError:
            raise NotFoundError(var) from None

    def set(self, var: str, val: str) -> None:
        """Set a variable, overriding any previous value."""
        if _invalid_key(var):
            raise InvalidKeyError(var)
        if _invalid_value(val):
            raise InvalidValueError(val)
        self._vars[var] = val

    def remove(self, var: str) -> None:
        """Unset a variable; unsetting a missing variable does nothing."""
        if _invalid_key(var):
            raise InvalidKeyError(var)
        self._vars.pop(var, None)

    def items(self) -> Iterator[tuple[str, str]]:
        """Iterate over (name, value) pairs."""
        return iter(list(self._vars.items()))

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._vars))

    def __contains__(self, var: object) -> bool:
        return var in self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def copy(self) -> Env:
        """Independent copy of this environment."""
        return Env.from_pairs(self._vars.items())