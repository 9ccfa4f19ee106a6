"""
Flask application factory and extension initialization.
"""
import os
import json

from flask import Flask, send_from_directory
from flask_socketio import SocketIO
from flask_cors import CORS

# Initialize extensions
socketio = SocketIO(
    cors_allowed_origins="*",  # Will be updated in create_app
    async_mode='eventlet',
    logger=False,
    engineio_logger=False,
    ping_timeout=60,
    ping_interval=25,
    allow_upgrades=True,
    http_compression=True,
    websocket_compression=True,
    transports=['websocket', 'polling'],
)


def load_dynamic_config(app: Flask) -> None:
    """Apply overrides from the optional JSON config file."""
    config_path = app.config.get('HOSTSTATS_CONFIG')
    if not config_path:
        return
    if not os.path.exists(config_path):
        app.logger.warning(f"Configuration file not found at {config_path}")
        return

    app.logger.info(f"Found config at {config_path}, loading configuration...")
    try:
        with open(config_path, 'r') as f:
            config_data = json.load(f)

        stats = config_data.get('stats', {})
        if 'intervalMs' in stats:
            app.config['STATS_INTERVAL'] = float(stats['intervalMs']) / 1000
            app.logger.info(f"Loaded stats interval: {app.config['STATS_INTERVAL']}s")
        if 'commandTimeout' in stats:
            app.config['COMMAND_TIMEOUT'] = float(stats['commandTimeout'])
        if 'queueSize' in stats:
            app.config['SUBSCRIBER_QUEUE_SIZE'] = int(stats['queueSize'])

        origins = config_data.get('cors', {}).get('allowedOrigins')
        if origins:
            app.config['CORS_ORIGINS'] = origins
            app.logger.info(f"Loaded CORS origins: {origins}")
    except Exception as e:
        app.logger.error(f"Error loading configuration: {str(e)}")
        app.logger.exception("Full traceback:")


def create_app(config_object=None):
    """Create and configure the Flask application."""
    app = Flask(__name__, static_folder=None)

    if config_object:
        app.config.from_object(config_object)
    app.logger.setLevel('INFO')

    with app.app_context():
        load_dynamic_config(app)

    CORS(app, resources={
        r"/api/*": {
            "origins": app.config.get('CORS_ORIGINS', '*'),
            "methods": ["GET", "OPTIONS"],
        }
    })

    # Socket handlers must be registered before init_app creates the server
    from .sockets import bp as sockets_bp
    from .stream import bp as stream_bp

    socketio.init_app(app, cors_allowed_origins=app.config.get('CORS_ORIGINS', '*'))

    from .broadcasts.events import init_broadcasters
    init_broadcasters(app)

    # Register blueprints
    app.register_blueprint(sockets_bp)
    app.register_blueprint(stream_bp)

    @app.errorhandler(500)
    def internal_error(error):
        return {'error': 'Internal server error'}, 500

    # Serve the viewer
    static_folder = app.config.get('STATIC_FOLDER') or os.path.join(os.getcwd(), 'public')

    @app.route('/', defaults={'path': ''})
    @app.route('/<path:path>')
    def serve_viewer(path):
        if path and os.path.exists(os.path.join(static_folder, path)):
            return send_from_directory(static_folder, path)
        return send_from_directory(static_folder, 'index.html')

    return app
