"""Captured result of running a command."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CmdOutput:
    """Exit status together with any output collected while a command ran."""

    status: int
    stdout: str = ""
    stderr: str = ""

    @classmethod
    def success(cls) -> CmdOutput:
        """Output of a command that finished successfully."""
        return cls(0)

    @classmethod
    def error(cls) -> CmdOutput:
        """Output of a command that failed."""
        return cls(1)

    def set_output(self, out: str, err: str) -> None:
        """Replace the collected stdout and stderr text."""
        self.stdout = out
        self.stderr = err