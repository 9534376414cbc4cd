"""Helpers for building a prompt."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path


def full_pwd() -> str:
    """The full working directory."""
    return os.getcwd()


def top_pwd() -> str:
    """The last component of the working directory, '~' at home and '/' at root."""
    cur_dir = Path(os.getcwd())
    home_dir = Path(os.path.expanduser("~"))
    if cur_dir == home_dir:
        return "~"
    if cur_dir == Path("/"):
        return "/"
    return cur_dir.name


def _command_line(program: str) -> str:
    raw = subprocess.run([program], stdout=subprocess.PIPE, check=False).stdout
    return raw.decode("utf-8").removesuffix("\n")


def username() -> str:
    """Name of the current user."""
    return _command_line("whoami")


def hostname() -> str:
    """Host name of this machine."""
    return _command_line("hostname")