"""
Shared helpers for running external commands.
"""
from .utils import CommandResult, CommandStatus, execute_command, run_command

__all__ = ['CommandResult', 'CommandStatus', 'execute_command', 'run_command']
