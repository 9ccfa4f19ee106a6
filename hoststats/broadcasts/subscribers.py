"""
Subscriber channels.

A subscriber is a bounded outbound queue plus a liveness flag. The broadcaster
only ever enqueues without blocking; a transport-specific consumer drains the
queue and writes to the viewer.
"""
from typing import Any, Callable, Iterator, Optional
from eventlet.queue import Full, LightQueue

_CLOSED = object()


class Subscriber:
    """One connected viewer."""

    def __init__(self, sid: str, maxsize: int = 8):
        self.sid = sid
        self.queue = LightQueue(maxsize)
        self.alive = True
        self.error: Optional[BaseException] = None
        self.evicted = False

    def offer(self, payload: Any) -> bool:
        """Enqueue a payload without blocking. Returns False if the subscriber is dead or backed up."""
        if not self.alive:
            return False
        try:
            self.queue.put_nowait(payload)
        except Full:
            self.close()
            return False
        return True

    def close(self) -> None:
        """Mark the subscriber dead and wake any consumer waiting on the queue."""
        if not self.alive:
            return
        self.alive = False
        try:
            self.queue.put_nowait(_CLOSED)
        except Full:
            # Consumer is not waiting; it sees alive=False after its next item
            pass

    def payloads(self) -> Iterator[Any]:
        """Yield queued payloads until the subscriber is closed."""
        while self.alive:
            payload = self.queue.get()
            if payload is _CLOSED or not self.alive:
                return
            yield payload

    def pump(self, send: Callable[[Any], None]) -> None:
        """Drain the queue into `send`; any write failure closes the subscriber."""
        for payload in self.payloads():
            try:
                send(payload)
            except Exception as e:
                self.error = e
                self.close()
                return
