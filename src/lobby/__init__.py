"""Real-time turn-based lobby server built on Flask-SocketIO."""
