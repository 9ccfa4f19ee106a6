"""Terminal multiplexer session monitoring."""
from typing import List

from hoststats.stats.models import SessionRecord
from hoststats.stats.utils import parse_sessions
from .base import CommandMonitor

LIST_SESSIONS_COMMAND = ['tmux', 'list-sessions']


class SessionMonitor(CommandMonitor):
    """Monitor tmux sessions on the host."""

    def collect_sessions(self) -> List[SessionRecord]:
        raw = self.query(LIST_SESSIONS_COMMAND)
        if not raw:
            return []
        return parse_sessions(raw)
