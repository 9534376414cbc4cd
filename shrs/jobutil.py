"""Terminal and job control set-up for the shell process."""

from __future__ import annotations

import logging
import os
import signal

from shrs.jobio import STDIN_FILENO

logger = logging.getLogger(__name__)

_IGNORED_SIGNALS = (
    signal.SIGINT,
    signal.SIGQUIT,
    signal.SIGTSTP,
    signal.SIGTTIN,
    signal.SIGTTOU,
)


def get_terminal() -> int:
    """File descriptor of the controlling terminal (standard input)."""
    return STDIN_FILENO


def initialize_job_control() -> None:
    """Wait for the foreground, ignore job-control signals and take the terminal."""
    terminal = get_terminal()

    while True:
        shell_pgid = os.getpgrp()
        if os.tcgetpgrp(terminal) == shell_pgid:
            break
        os.killpg(shell_pgid, signal.SIGTTIN)

    for sig in _IGNORED_SIGNALS:
        signal.signal(sig, signal.SIG_IGN)

    shell_pgid = os.getpid()
    os.setpgid(shell_pgid, shell_pgid)

    try:
        os.tcsetpgrp(get_terminal(), shell_pgid)
    except OSError as err:
        logger.error("failed to grab control of terminal: %s", err)