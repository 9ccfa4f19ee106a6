"""
Broadcast management and scheduling.
"""
import time
from typing import Dict, Optional
import eventlet
from flask import Flask, current_app

from hoststats.monitors import DockerMonitor, ProcessMonitor, SessionMonitor, SystemStatsMonitor
from .aggregator import SnapshotAggregator
from .subscribers import Subscriber


class BroadcastManager:
    """
    Own the set of live subscribers and push every snapshot to each of them.

    Pushing never blocks: a subscriber whose queue is closed or full is
    evicted on the spot and never retried.
    """
    def __init__(self, aggregator: Optional[SnapshotAggregator] = None, queue_size: int = 8):
        self.subscribers: Dict[str, Subscriber] = {}
        self.aggregator = aggregator
        self.queue_size = queue_size

    @property
    def subscriber_count(self) -> int:
        return len(self.subscribers)

    def handle_connect(self, sid: str) -> Subscriber:
        """Register a new subscriber, giving it one snapshot before it joins the broadcast set."""
        subscriber = Subscriber(sid, maxsize=self.queue_size)
        try:
            snapshot = self.aggregator.collect()
            subscriber.offer(snapshot.to_dict())
        except Exception as e:
            current_app.logger.error(f"[BROADCAST] Initial snapshot failed for {sid}: {str(e)}")

        if not subscriber.alive:
            current_app.logger.info(f"[BROADCAST] Subscriber {sid} went away during initial push")
            return subscriber

        previous = self.subscribers.get(sid)
        if previous is not None:
            previous.close()
        self.subscribers[sid] = subscriber
        current_app.logger.info(f"[BROADCAST] New subscriber: {sid}. Subscribers: {self.subscriber_count}")
        return subscriber

    def handle_disconnect(self, sid: str) -> None:
        """Remove a subscriber whose viewer disconnected."""
        subscriber = self.subscribers.pop(sid, None)
        if subscriber is None:
            return
        subscriber.close()
        current_app.logger.info(f"[BROADCAST] Subscriber disconnected: {sid}. Subscribers left: {self.subscriber_count}")

    def evict(self, subscriber: Subscriber) -> None:
        """Drop a subscriber whose push failed."""
        subscriber.evicted = True
        subscriber.close()
        # The sid may already belong to a reconnected subscriber
        if self.subscribers.get(subscriber.sid) is subscriber:
            del self.subscribers[subscriber.sid]
        reason = str(subscriber.error) if subscriber.error else 'queue closed or full'
        current_app.logger.info(f"[BROADCAST] Evicted subscriber {subscriber.sid} ({reason}). Subscribers left: {self.subscriber_count}")

    def broadcast(self) -> int:
        """
        Aggregate one snapshot and push it to every current subscriber.

        Subscribers that join while the snapshot is being aggregated are not
        included; they wait for the next cycle. Returns the number of
        successful pushes.
        """
        recipients = list(self.subscribers.values())
        if not recipients:
            current_app.logger.debug("[BROADCAST] No subscribers. Skipping cycle.")
            return 0

        snapshot = self.aggregator.collect()
        payload = snapshot.to_dict()

        delivered = 0
        for subscriber in recipients:
            if subscriber.offer(payload):
                delivered += 1
            else:
                self.evict(subscriber)
        current_app.logger.debug(f"[BROADCAST] Pushed snapshot to {delivered}/{len(recipients)} subscribers")
        return delivered

    def close_all(self) -> None:
        for subscriber in list(self.subscribers.values()):
            subscriber.close()
        self.subscribers.clear()


class StatsScheduler:
    """
    Fire the aggregate-and-broadcast cycle on a fixed period.

    Each cycle runs in its own greenlet so a slow cycle never delays the next
    tick. A tick that fires while the previous cycle is still running is
    skipped, which keeps each delta tracker to one collector call at a time.
    """
    def __init__(self, app: Flask, manager: BroadcastManager, interval: float):
        self.app = app
        self.manager = manager
        self.interval = interval
        self.skipped_ticks = 0
        self._runner: Optional[eventlet.greenthread.GreenThread] = None
        self._cycle: Optional[eventlet.greenthread.GreenThread] = None

    @property
    def running(self) -> bool:
        return self._runner is not None

    def start(self) -> None:
        if self._runner is None:
            self._runner = eventlet.spawn(self._run)

    def stop(self) -> None:
        if self._runner is not None:
            self._runner.kill()
            self._runner = None

    def _run(self) -> None:
        with self.app.app_context():
            current_app.logger.info(f"Starting stats broadcaster (every {self.interval}s)")
            next_tick = time.monotonic()
            while True:
                next_tick += self.interval
                now = time.monotonic()
                if next_tick < now - self.interval:
                    # Fell behind by more than a period; realign instead of bursting
                    next_tick = now
                eventlet.sleep(max(0, next_tick - now))
                self.tick()

    def tick(self) -> bool:
        """Start a cycle unless the previous one is still in flight."""
        if self._cycle is not None and not self._cycle.dead:
            self.skipped_ticks += 1
            current_app.logger.warning("[BROADCAST] Previous cycle still running, skipping tick")
            return False
        self._cycle = eventlet.spawn(self.run_cycle)
        return True

    def run_cycle(self) -> None:
        with self.app.app_context():
            try:
                self.manager.broadcast()
            except Exception as e:
                current_app.logger.error(f"[BROADCAST] Broadcast error: {str(e)}")
                current_app.logger.exception("Full traceback:")


# Initialize broadcast manager
broadcast_manager = BroadcastManager()
scheduler: Optional[StatsScheduler] = None


def build_aggregator(app: Flask) -> SnapshotAggregator:
    """Wire the collectors to the shell gateway using the app's settings."""
    timeout = app.config.get('COMMAND_TIMEOUT', 5.0)
    system_monitor = SystemStatsMonitor(command_timeout=timeout)
    # Baseline sample so the first real reading is a delta
    system_monitor.prime()
    return SnapshotAggregator(
        system_monitor.collect_stats,
        DockerMonitor(command_timeout=timeout).collect_containers,
        SessionMonitor(command_timeout=timeout).collect_sessions,
        ProcessMonitor(command_timeout=timeout).collect_processes,
        app=app,
    )


def init_broadcasters(app: Flask) -> None:
    """Configure the broadcast manager and start the scheduler."""
    global scheduler
    with app.app_context():
        current_app.logger.info("Initializing broadcasters")
        broadcast_manager.aggregator = build_aggregator(app)
        broadcast_manager.queue_size = app.config.get('SUBSCRIBER_QUEUE_SIZE', 8)

        if not app.config.get('START_BROADCASTER', True):
            current_app.logger.info("Stats broadcaster disabled by configuration")
            return

        if scheduler is not None:
            scheduler.stop()
        scheduler = StatsScheduler(app, broadcast_manager, app.config.get('STATS_INTERVAL', 2.0))
        scheduler.start()


def shutdown_broadcasters() -> None:
    """Stop the scheduler and close every subscriber."""
    global scheduler
    if scheduler is not None:
        scheduler.stop()
        scheduler = None
    broadcast_manager.close_all()
