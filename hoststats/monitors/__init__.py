"""
Metric collectors.
"""
__all__ = [
    'SystemStatsMonitor',
    'DockerMonitor',
    'SessionMonitor',
    'ProcessMonitor'
]

from .system import SystemStatsMonitor  # noqa: E402
from .docker import DockerMonitor  # noqa: E402
from .sessions import SessionMonitor  # noqa: E402
from .processes import ProcessMonitor  # noqa: E402
