"""
Voicenote Station API server.
Builds the Flask app and its Socket.IO channel around an explicit StationContext.
"""

import logging
from datetime import timedelta
from pathlib import Path

from flask import Flask, jsonify, request, send_from_directory
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.exceptions import RequestEntityTooLarge

from shared.constants import SESSION_COOKIE_NAME, SESSION_TTL_SEC
from shared.errors import StationError
from station.auth import create_auth_blueprint
from station.intake import create_intake_blueprint
from station.review import create_review_blueprint
from station.suggest import create_suggest_blueprint

logger = logging.getLogger(__name__)

WEB_UI_PATH = Path(__file__).parent / "web"


def _register_socket_handlers(socketio: SocketIO, ctx) -> None:
    subscriptions = {}

    @socketio.on('connect')
    def on_connect():
        sid = request.sid

        def deliver(event, sid=sid):
            socketio.emit(event, to=sid)

        subscriptions[sid] = ctx.broadcaster.subscribe(sid, deliver)
        logger.info("A staff member connected. Socket ID: %s", sid)

    @socketio.on('disconnect')
    def on_disconnect(*args):
        sid = request.sid
        handle = subscriptions.pop(sid, None)
        if handle is not None:
            ctx.broadcaster.unsubscribe(handle)
        logger.info("A staff member disconnected. Socket ID: %s", sid)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(StationError)
    def handle_station_error(error: StationError):
        return jsonify({"message": error.message}), error.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        return jsonify({"message": "File too large."}), 413


def create_app(ctx):
    """
    Build the station.

    Args:
        ctx: StationContext with the stores and services to use

    Returns:
        (app, socketio) tuple
    """
    settings = ctx.settings
    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=settings.session_secret,
        SESSION_COOKIE_NAME=SESSION_COOKIE_NAME,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE='Lax',
        SESSION_COOKIE_SECURE=False,
        PERMANENT_SESSION_LIFETIME=timedelta(seconds=SESSION_TTL_SEC),
        MAX_CONTENT_LENGTH=settings.max_upload_mb * 1024 * 1024,
    )
    CORS(app, origins=settings.cors_origins, supports_credentials=True)
    socketio = SocketIO(app, cors_allowed_origins=settings.cors_origins)

    app.register_blueprint(create_auth_blueprint(ctx))
    app.register_blueprint(create_review_blueprint(ctx))
    app.register_blueprint(create_intake_blueprint(ctx))
    app.register_blueprint(create_suggest_blueprint(ctx))
    _register_error_handlers(app)
    _register_socket_handlers(socketio, ctx)

    @app.route('/')
    def upload_page():
        return send_from_directory(WEB_UI_PATH, 'index.html')

    @app.route('/staff')
    def staff_page():
        return send_from_directory(WEB_UI_PATH, 'staff.html')

    @app.route('/api/health')
    def health_check():
        return jsonify({"status": "healthy"})

    return app, socketio
