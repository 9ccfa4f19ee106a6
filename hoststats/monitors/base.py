"""Shared plumbing for monitors that query external tools."""
from typing import Callable, List

from hoststats.utils.utils import DEFAULT_TIMEOUT, run_command

CommandRunner = Callable[..., str]


class CommandMonitor:
    """Base for monitors that read external command output through the shell gateway."""

    def __init__(self, run: CommandRunner = run_command, command_timeout: float = DEFAULT_TIMEOUT):
        self.run = run
        self.command_timeout = command_timeout

    def query(self, command: List[str]) -> str:
        return self.run(command, timeout=self.command_timeout)
