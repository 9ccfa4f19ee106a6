"""Top process monitoring."""
from hoststats.stats.models import ProcessRankings
from hoststats.stats.utils import PROCESS_LIMIT, parse_ps_output
from .base import CommandMonitor

BY_CPU_COMMAND = ['ps', 'aux', '--sort=-%cpu']
BY_MEM_COMMAND = ['ps', 'aux', '--sort=-%mem']


class ProcessMonitor(CommandMonitor):
    """Rank the heaviest processes by CPU and by memory."""

    def collect_processes(self) -> ProcessRankings:
        return ProcessRankings(
            by_cpu=parse_ps_output(self.query(BY_CPU_COMMAND), limit=PROCESS_LIMIT),
            by_mem=parse_ps_output(self.query(BY_MEM_COMMAND), limit=PROCESS_LIMIT),
        )
