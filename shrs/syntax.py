"""Syntax tree of the POSIX shell command language."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class RedirectMode(Enum):
    """File redirection modes."""

    READ = "<"
    WRITE = ">"
    READ_APPEND = "<<"
    WRITE_APPEND = ">>"
    READ_DUP = "<&"
    WRITE_DUP = ">&"
    READ_WRITE = "<>"


@dataclass
class Redirect:
    """File redirection of descriptor n (None for the default one)."""

    n: int | None
    file: str
    mode: RedirectMode


@dataclass
class Assign:
    """Variable assignment preceding a command."""

    var: str
    val: str


class SeparatorOp(Enum):
    """Separator between commands."""

    AMP = "&"
    SEMI = ";"


@dataclass
class SimpleCommand:
    """A basic command such as `ls -al`."""

    assigns: list[Assign] = field(default_factory=list)
    redirects: list[Redirect] = field(default_factory=list)
    args: list[str] = field(default_factory=list)


@dataclass
class Pipeline:
    """Two commands joined by a pipe."""

    left: Command
    right: Command


@dataclass
class And:
    """Run right only if left succeeds."""

    left: Command
    right: Command


@dataclass
class Or:
    """Run right only if left fails."""

    left: Command
    right: Command


@dataclass
class Not:
    """Negate the exit status of a command."""

    cmd: Command


@dataclass
class AsyncList:
    """Run left without waiting, then right if present."""

    left: Command
    right: Command | None = None


@dataclass
class SeqList:
    """Run left to completion, then right if present."""

    left: Command
    right: Command | None = None


@dataclass
class Subshell:
    """Run a command in a subshell."""

    cmd: Command


@dataclass
class Condition:
    """A condition and the body run when it holds, in an if or elif block."""

    cond: Command
    body: Command


@dataclass
class If:
    """If statement with its elif branches and optional else part."""

    conds: list[Condition]
    else_part: Command | None = None


@dataclass
class While:
    """Loop while the condition succeeds."""

    cond: Command
    body: Command


@dataclass
class Until:
    """Loop until the condition succeeds."""

    cond: Command
    body: Command


@dataclass
class For:
    """Run body once for each word, bound to name."""

    name: str
    wordlist: list[str]
    body: Command


@dataclass
class CaseArm:
    """One arm of a case statement."""

    pattern: list[str]
    body: Command


@dataclass
class Case:
    """Case statement."""

    word: str
    arms: list[CaseArm]


@dataclass
class Fn:
    """Function definition."""

    fname: str
    body: Command


@dataclass
class NoOp:
    """Empty command."""


Command = Union[
    SimpleCommand,
    Pipeline,
    And,
    Or,
    Not,
    AsyncList,
    SeqList,
    Subshell,
    If,
    While,
    Until,
    For,
    Case,
    Fn,
    NoOp,
]