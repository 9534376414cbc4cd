"""Interface of a shell command language."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shrs.cmd_output import CmdOutput


class Lang(ABC):
    """A command language the shell evaluates lines with."""

    @abstractmethod
    def eval(self, sh, ctx, rt, cmd: str) -> CmdOutput:
        """Evaluate a command line."""

    @abstractmethod
    def name(self) -> str:
        """Name of the language."""

    @abstractmethod
    def needs_line_check(self, cmd: str) -> bool:
        """True when the line is incomplete and more input is needed."""