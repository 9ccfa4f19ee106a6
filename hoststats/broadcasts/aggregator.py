"""
Snapshot aggregation.

All four collectors run concurrently in their own greenlets; a snapshot is
produced once every one of them has returned.
"""
import time
from typing import Any, Callable, Optional
import eventlet
from flask import Flask

from hoststats.stats.models import Snapshot


class SnapshotAggregator:
    """Run the collectors in parallel and merge their results into one Snapshot."""

    def __init__(self, collect_system: Callable[[], Any], collect_containers: Callable[[], Any],
                 collect_sessions: Callable[[], Any], collect_processes: Callable[[], Any],
                 app: Optional[Flask] = None):
        self.collectors = {
            'system': collect_system,
            'docker': collect_containers,
            'sessions': collect_sessions,
            'processes': collect_processes,
        }
        self.app = app

    def _run_with_context(self, collector: Callable[[], Any]) -> Any:
        # Spawned greenlets do not inherit the caller's app context
        if self.app is None:
            return collector()
        with self.app.app_context():
            return collector()

    def collect(self) -> Snapshot:
        """
        Produce one snapshot stamped with the aggregation start time.

        An exception raised by any collector propagates after every collector
        has finished; the caller treats it as a failed cycle.
        """
        started = time.time()
        threads = {
            name: eventlet.spawn(self._run_with_context, collector)
            for name, collector in self.collectors.items()
        }

        results = {}
        error = None
        for name, thread in threads.items():
            try:
                results[name] = thread.wait()
            except Exception as e:
                error = error or e
        if error is not None:
            raise error

        return Snapshot(
            system=results['system'],
            docker=results['docker'],
            sessions=results['sessions'],
            processes=results['processes'],
            timestamp=int(started * 1000),
        )
