"""
Development server entry point.

Run this script to start the lobby server with WebSocket support. The
listening address comes from the HOST and HOST_PORT environment variables.
"""

import os

from lobby.app import create_app

if __name__ == '__main__':
    app, socketio = create_app({'LOG_LEVEL': os.environ.get('LOG_LEVEL', 'INFO')})
    host = os.environ.get('HOST', '0.0.0.0')
    port = int(os.environ.get('HOST_PORT', 3000))
    socketio.run(app, host=host, port=port, allow_unsafe_werkzeug=True)
