"""Shared fixtures for the stats feed tests."""
from typing import Dict, List, Optional, Tuple

import pytest

from config import TestingConfig
from hoststats import create_app
from hoststats.broadcasts.events import broadcast_manager
from hoststats.stats.models import ProcessRankings, Snapshot


class FakeShell:
    """Stand-in for run_command returning canned output and recording calls."""

    def __init__(self, outputs: Optional[Dict[Tuple[str, ...], str]] = None):
        self.outputs = dict(outputs or {})
        self.calls: List[Tuple[str, ...]] = []

    def __call__(self, command, timeout=None):
        self.calls.append(tuple(command))
        return self.outputs.get(tuple(command), '')


class FakeAggregator:
    """Aggregator producing numbered snapshots without touching the host."""

    def __init__(self, delay: float = 0.0, error: Optional[Exception] = None):
        self.calls = 0
        self.delay = delay
        self.error = error

    def collect(self) -> Snapshot:
        self.calls += 1
        if self.delay:
            import eventlet
            eventlet.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return Snapshot(system={}, docker=[], sessions=[], processes=ProcessRankings(), timestamp=self.calls)


def drain(subscriber) -> List[int]:
    """Pop every queued snapshot timestamp from a subscriber without blocking."""
    timestamps = []
    while not subscriber.queue.empty():
        payload = subscriber.queue.get_nowait()
        if isinstance(payload, dict):
            timestamps.append(payload['timestamp'])
    return timestamps


@pytest.fixture
def app():
    """Flask app built with the testing config, with an app context pushed."""
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
    broadcast_manager.close_all()


@pytest.fixture
def fake_shell():
    return FakeShell()


@pytest.fixture
def fake_aggregator(app, monkeypatch):
    aggregator = FakeAggregator()
    monkeypatch.setattr(broadcast_manager, 'aggregator', aggregator)
    return aggregator
