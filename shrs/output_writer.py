"""Output stream that can also collect what it writes."""

from __future__ import annotations

import sys
from typing import TextIO


class OutputWriter:
    """Writes to stdout and stderr, optionally recording everything written."""

    def __init__(self, stdout: TextIO | None = None, stderr: TextIO | None = None) -> None:
        self._stdout = stdout
        self._stderr = stderr
        self._collecting = False
        self._out: list[str] = []
        self._err: list[str] = []

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def begin_collecting(self) -> None:
        """Start recording everything written."""
        self._collecting = True

    def end_collecting(self) -> tuple[str, str]:
        """Stop recording and return the recorded (stdout, stderr) text."""
        self._collecting = False
        out, err = "".join(self._out), "".join(self._err)
        self._out.clear()
        self._err.clear()
        return out, err

    def print(self, s: object) -> None:
        text = str(s)
        if self._collecting:
            self._out.append(text)
        self.stdout.write(text)
        self.stdout.flush()

    def println(self, s: object) -> None:
        self.print(s)
        self.print("\r\n")

    def eprint(self, s: object) -> None:
        text = str(s)
        if self._collecting:
            self._err.append(text)
        self.stderr.write(text)
        self.stderr.flush()

    def eprintln(self, s: object) -> None:
        self.eprint(s)
        self.eprint("\r\n")