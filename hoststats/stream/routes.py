"""
Server-Sent Events snapshot stream.
"""
import json
import uuid
from flask import Response, current_app, request
from . import bp
from hoststats.broadcasts.events import broadcast_manager


def format_event(payload) -> str:
    """Frame one snapshot as an SSE message."""
    return f"data: {json.dumps(payload, separators=(',', ':'))}\n\n"


@bp.route('/api/stream', methods=['GET'])
def stream_stats():
    """Open a push stream; the first frame is sent immediately."""
    sid = f"sse-{uuid.uuid4().hex}"
    current_app.logger.info(f"New SSE connection: {sid} from {request.remote_addr}")
    subscriber = broadcast_manager.handle_connect(sid)
    app = current_app._get_current_object()

    def generate():
        try:
            for payload in subscriber.payloads():
                yield format_event(payload)
        finally:
            # Runs when the client goes away and the server closes the generator
            with app.app_context():
                broadcast_manager.handle_disconnect(sid)

    return Response(generate(), mimetype='text/event-stream', headers={
        'Cache-Control': 'no-cache',
        'X-Accel-Buffering': 'no',
    })
