"""
Read-only external command execution.

Every metric that depends on an outside tool (docker, tmux, ps, df, uname)
goes through here. Failures never propagate: callers get an empty string and
the detailed status is only logged.
"""
import os
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional
from flask import current_app

DEFAULT_TIMEOUT = 5.0


class CommandStatus(Enum):
    """Outcome of a single command invocation."""
    OK = 'ok'
    UNAVAILABLE = 'unavailable'
    TIMED_OUT = 'timed_out'
    NON_ZERO_EXIT = 'non_zero_exit'


@dataclass(frozen=True)
class CommandResult:
    command: str
    status: CommandStatus
    output: str = ''
    returncode: Optional[int] = None
    error: str = ''

    @property
    def ok(self) -> bool:
        return self.status is CommandStatus.OK


def execute_command(command: List[str], timeout: float = DEFAULT_TIMEOUT) -> CommandResult:
    """
    Execute a read-only command and classify the outcome.

    Args:
        command: List of command arguments
        timeout: Seconds before the child is killed

    Returns:
        CommandResult with trimmed stdout when the command succeeded
    """
    display = ' '.join(command)
    env = os.environ.copy()
    env['PATH'] = env.get('PATH') or "/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"
    # Parsers expect C-locale number formatting
    env['LC_ALL'] = 'C'

    try:
        result = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
            timeout=timeout,
            env=env
        )
    except subprocess.TimeoutExpired:
        return CommandResult(display, CommandStatus.TIMED_OUT, error=f"timed out after {timeout}s")
    except (OSError, ValueError) as e:
        return CommandResult(display, CommandStatus.UNAVAILABLE, error=str(e))

    if result.returncode != 0:
        return CommandResult(
            display,
            CommandStatus.NON_ZERO_EXIT,
            returncode=result.returncode,
            error=(result.stderr or '').strip()
        )
    return CommandResult(display, CommandStatus.OK, output=(result.stdout or '').strip(), returncode=0)


def run_command(command: List[str], timeout: float = DEFAULT_TIMEOUT) -> str:
    """Run a command and return its trimmed output, or '' on any failure."""
    result = execute_command(command, timeout=timeout)
    if not result.ok:
        current_app.logger.debug(
            f"[SHELL] {result.command} -> {result.status.value}"
            f"{f' (exit {result.returncode})' if result.returncode is not None else ''}: {result.error}"
        )
        return ''
    return result.output
