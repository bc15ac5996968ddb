"""
WebSocket event handlers for the lobby server.

This module decodes the Socket.IO events sent by clients, runs them against
the LobbyServer, and sends the results either back to the sender or to every
connection in the room's Socket.IO room (named after the room code).
"""

from flask import request
from flask_socketio import emit, join_room, leave_room
from loguru import logger

from .lobby_state import LobbyError

WELCOME_MESSAGE = 'Welcome to the Socket.IO server!'


def room_code_from(data):
    """Extract a room code from an event payload.

    Clients send either the bare code or an object with a ``code`` key.
    Codes are matched upper case.

    """
    if isinstance(data, dict):
        data = data.get('code')
    if not isinstance(data, str):
        return None
    return data.strip().upper()


def init_socketio_handlers(socketio, lobby):
    """Initialize WebSocket event handlers bound to the given LobbyServer."""

    def broadcast_players(code, game_state):
        socketio.emit('playerListUpdated', {'players': game_state['players']}, to=code)

    def broadcast_game_state(code, game_state, *events):
        for event in events:
            socketio.emit(event, {'gameState': game_state}, to=code)

    def broadcast_departure(code, game_state):
        """Room fan-out after a member left, explicitly or by disconnecting."""
        if game_state is None:
            return
        broadcast_players(code, game_state)
        if game_state['started']:
            broadcast_game_state(code, game_state, 'updateGameState')

    @socketio.on('connect')
    def handle_connect(auth=None):
        logger.info(f"Client connected (ID: {request.sid})")

    @socketio.on('disconnect')
    def handle_disconnect(reason=None):
        """Handle WebSocket disconnection as a leave from every room."""
        logger.info(f"Client disconnected (ID: {request.sid})")
        for code, game_state in lobby.disconnect(request.sid):
            broadcast_departure(code, game_state)

    @socketio.on('register')
    def handle_register(data=None):
        if isinstance(data, dict):
            username = data.get('username', '')
        else:
            username = data if isinstance(data, str) else ''
        player = lobby.register(request.sid, username)
        emit('welcome', {'message': WELCOME_MESSAGE, 'id': player.id})

    @socketio.on('createRoom')
    def handle_create_room(data=None):
        try:
            code, game_state = lobby.create_room(request.sid)
        except LobbyError as e:
            emit('error', {'message': e.message})
            return
        join_room(code)
        emit('roomCreated', {
            'room': code,
            'gameState': game_state,
            'players': game_state['players'],
        })

    @socketio.on('joinRoom')
    def handle_join_room(data=None):
        code = room_code_from(data)
        try:
            game_state = lobby.join(code, request.sid)
        except LobbyError as e:
            emit('error', {'message': e.message})
            return

        join_room(code)
        emit('roomJoined', {
            'room': code,
            'gameState': game_state,
            'players': game_state['players'],
        })
        broadcast_players(code, game_state)

    @socketio.on('leaveRoom')
    def handle_leave_room(data=None):
        code = room_code_from(data)
        if code is not None:
            leave_room(code)
        emit('roomLeft', {'room': code})
        broadcast_departure(code, lobby.leave(code, request.sid))

    @socketio.on('startGame')
    def handle_start_game(data=None):
        code = room_code_from(data)
        try:
            game_state = lobby.start(code)
        except LobbyError as e:
            emit('error', {'message': e.message})
            return

        # Both events carry the same payload, clients listen to either
        broadcast_game_state(code, game_state, 'gameStarted', 'updateGameState')

    @socketio.on('nextTurn')
    def handle_next_turn(data=None):
        code = room_code_from(data)
        game_state = lobby.advance_turn(code)
        if game_state is None:
            return
        if game_state['players'] and game_state['currentPlayer']:
            broadcast_game_state(code, game_state, 'updateGameState')

    @socketio.on_error_default
    def handle_error(e):
        logger.exception(f"Unhandled error while processing event from {request.sid}: {e}")
        emit('error', {'message': 'Internal server error'})
