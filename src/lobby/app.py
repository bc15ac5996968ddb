"""
Flask application factory and main application entry point.

This module creates and configures the Flask application instance
with WebSocket support for the lobby server.
"""

import sys

from flask import Flask
from flask_socketio import SocketIO
from flask_cors import CORS
from loguru import logger

from .lobby_server import LobbyServer

DEFAULT_CONFIG = {
    'SECRET_KEY': 'dev-key-change-in-production',
    'DEBUG': False,
    'LOG_LEVEL': 'INFO',
    'MIN_PLAYERS': 2,
    'ROOM_CODE_LENGTH': 4,
    'CORS_ORIGINS': '*',
}


def configure_logging(level):
    logger.remove()  # Remove default handler
    logger.add(
        sys.stderr,
        format="{time} | {level} | {message}",
        level=level,
        colorize=True
    )


def create_app(config=None, lobby=None):
    """
    Create and configure the Flask application.
    
    Args:
        config: Configuration dictionary overriding DEFAULT_CONFIG
        lobby: LobbyServer to serve. A fresh one is built from the
            configuration when omitted.
        
    Returns:
        (Flask application instance, SocketIO instance)
    """
    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    if config:
        app.config.update(config)

    configure_logging(app.config['LOG_LEVEL'])
    logger.info("Starting lobby server")

    origins = app.config['CORS_ORIGINS']
    CORS(app, origins=origins)
    socketio = SocketIO(app, cors_allowed_origins=origins)

    if lobby is None:
        lobby = LobbyServer(
            min_players=app.config['MIN_PLAYERS'],
            code_length=app.config['ROOM_CODE_LENGTH']
        )
    app.extensions['lobby'] = lobby

    from . import routes
    app.register_blueprint(routes.bp)

    from . import websocket_handlers
    websocket_handlers.init_socketio_handlers(socketio, lobby)

    return app, socketio
