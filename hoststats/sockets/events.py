"""
Socket.IO event handlers.

Connecting is subscribing: every socket receives the stats event until it
disconnects. The server ignores anything the client sends.
"""
import eventlet
from flask import Flask, request, current_app
from hoststats import socketio
from hoststats.broadcasts.events import broadcast_manager
from hoststats.broadcasts.subscribers import Subscriber


def emit_to(sid: str, event: str):
    """Build a sender that emits one payload to a single socket."""
    def send(payload):
        socketio.emit(event, payload, to=sid)
    return send


def pump_to_socket(app: Flask, subscriber: Subscriber, event: str) -> None:
    """
    Drain a subscriber into its socket until it is closed.

    A subscriber dropped for a backed-up queue or a failed emit has its
    socket closed as well.
    """
    subscriber.pump(emit_to(subscriber.sid, event))
    if not (subscriber.evicted or subscriber.error is not None):
        return
    with app.app_context():
        if not subscriber.evicted:
            broadcast_manager.evict(subscriber)
        current_app.logger.info(f"Closing WebSocket {subscriber.sid} after eviction")
        socketio.server.disconnect(subscriber.sid, namespace='/')


@socketio.on('connect')
def handle_connect():
    """Register the socket as a subscriber and start draining its queue."""
    sid = request.sid
    client_ip = request.headers.get('X-Forwarded-For', '').split(',')[0].strip() or request.remote_addr
    current_app.logger.info(f"New WebSocket connection: {sid} from {client_ip}")

    subscriber = broadcast_manager.handle_connect(sid)
    app = current_app._get_current_object()
    eventlet.spawn(pump_to_socket, app, subscriber, current_app.config['STATS_EVENT'])
    return True


@socketio.on('disconnect')
def handle_disconnect(*args):
    """Remove the socket's subscriber."""
    sid = request.sid
    broadcast_manager.handle_disconnect(sid)
    current_app.logger.info(f"WebSocket disconnected: {sid}")
