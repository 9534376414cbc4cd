"""Standard stream configuration for spawned processes."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Any

STDIN_FILENO = 0

_AFTER_FORK = "must occur after fork(2)"


class StreamKind(Enum):
    """Where a process stream comes from or goes to."""

    INHERIT = "inherit"
    FILE = "file"
    FILE_DESCRIPTOR = "file_descriptor"
    CHILD = "child"
    CREATE_PIPE = "create_pipe"


@dataclass(frozen=True)
class Stdin:
    """Input stream of a process to be spawned."""

    kind: StreamKind
    target: Any = None

    @classmethod
    def inherit(cls) -> Stdin:
        """Use the shell's own standard input."""
        return cls(StreamKind.INHERIT)

    @classmethod
    def file(cls, handle: Any) -> Stdin:
        """Read from an open file."""
        return cls(StreamKind.FILE, handle)

    @classmethod
    def descriptor(cls, fd: int) -> Stdin:
        """Read from a raw file descriptor."""
        return cls(StreamKind.FILE_DESCRIPTOR, fd)

    @classmethod
    def child(cls, stream: Any) -> Stdin:
        """Read from the output stream of another process."""
        return cls(StreamKind.CHILD, stream)

    def as_raw_fd(self) -> int:
        """The file descriptor the process will read from."""
        if self.kind is StreamKind.INHERIT:
            return STDIN_FILENO
        if self.kind is StreamKind.FILE_DESCRIPTOR:
            return self.target
        return self.target.fileno()

    def to_popen(self) -> Any:
        """Value for the stdin argument of subprocess.Popen."""
        if self.kind is StreamKind.INHERIT:
            return None
        if self.kind is StreamKind.FILE_DESCRIPTOR:
            raise ValueError(_AFTER_FORK)
        return self.target


@dataclass(frozen=True)
class Output:
    """Output or error stream of a process to be spawned."""

    kind: StreamKind
    target: Any = None

    @classmethod
    def inherit(cls) -> Output:
        """Use the shell's own stream."""
        return cls(StreamKind.INHERIT)

    @classmethod
    def file(cls, handle: Any) -> Output:
        """Write to an open file."""
        return cls(StreamKind.FILE, handle)

    @classmethod
    def descriptor(cls, fd: int) -> Output:
        """Write to a raw file descriptor."""
        return cls(StreamKind.FILE_DESCRIPTOR, fd)

    @classmethod
    def create_pipe(cls) -> Output:
        """Write to a new pipe readable by the shell."""
        return cls(StreamKind.CREATE_PIPE)

    def to_popen(self) -> Any:
        """Value for the stdout or stderr argument of subprocess.Popen."""
        if self.kind is StreamKind.INHERIT:
            return None
        if self.kind is StreamKind.FILE_DESCRIPTOR:
            raise ValueError(_AFTER_FORK)
        if self.kind is StreamKind.CREATE_PIPE:
            return subprocess.PIPE
        return self.target