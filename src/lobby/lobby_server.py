import random
import threading
from typing import List, Optional, Tuple

from loguru import logger

from .lobby_state import InsufficientPlayers, Player, PlayerNotRegistered, Room, RoomNotFound
from .registry import ConnectionRegistry
from .room_store import RoomStore


class LobbyServer(object):
    """Represents the lobby server state.

    The model here is:
    - There is a set of registered players, one per connection.
    - There is a set of rooms, each with a unique short code.
    - Each room is either in the lobby or started. Once started, its member
      list is the turn order and one member holds the current turn.
    - A player may sit in any number of rooms. A room is deleted as soon as
      its last member leaves.

    Every public method runs under a single lock, so each transition is
    atomic with respect to the others. Methods that change a room return a
    snapshot of it (see ``game_state``) taken while the lock is held.

    """
    def __init__(self, min_players: int = 2, code_length: int = 4,
                 rng: Optional[random.Random] = None):
        """Initialize the LobbyServer with empty state."""
        self.min_players = min_players
        self.rng = rng or random.Random()
        self.players = ConnectionRegistry()
        self.rooms = RoomStore(code_length=code_length, rng=self.rng)
        self._lock = threading.RLock()

    def register(self, connection_id: str, username: str) -> Player:
        """Registers (or re-registers) the player behind a connection."""
        with self._lock:
            player = self.players.register(connection_id, username)
        logger.info(f"Player '{username}' registered (ID: {connection_id})")
        return player

    def create_room(self, connection_id: str) -> Tuple[str, dict]:
        """Creates a room owned by the given connection's player.

        Returns the new room code and its snapshot.

        Raises PlayerNotRegistered if the connection never registered.

        """
        with self._lock:
            owner = self._require_player(connection_id)
            room = self.rooms.create(owner)
            logger.info(f"Room '{room.code}' created by player '{owner.username}'")
            self._log_rooms()
            return room.code, self._snapshot(room)

    def join(self, code: str, connection_id: str) -> dict:
        """Adds the connection's player to a room.

        - Raises RoomNotFound if the code is unknown.
        - Raises PlayerNotRegistered if the connection never registered.

        Joining twice is a no-op. Joining a started room appends the player
        to the end of the turn rotation.

        """
        with self._lock:
            room = self._require_room(code)
            player = self._require_player(connection_id)
            if room.has_member(player.id):
                logger.debug(f"Player '{player.username}' already in room '{code}'")
            else:
                room.members.append(player.id)
                logger.info(f"Player '{player.username}' joined room '{code}' "
                            f"({len(room.members)} members)")
            self._log_rooms()
            return self._snapshot(room)

    def leave(self, code: str, connection_id: str) -> Optional[dict]:
        """Removes the connection's player from a room.

        Returns the room snapshot afterwards, or None if the room does not
        exist (any more). A room left without members is deleted.

        """
        with self._lock:
            room = self.rooms.get(code)
            if room is None:
                return None
            self._remove_member(room, connection_id)
            self._log_rooms()
            if room.code not in self.rooms:
                return None
            return self._snapshot(room)

    def start(self, code: str) -> dict:
        """Starts the game in a room.

        - Raises RoomNotFound if the code is unknown.
        - Raises InsufficientPlayers if the room has fewer than
          ``min_players`` members. The room is left untouched.

        The member list is shuffled into the turn order and the first member
        gets turn 1. Starting a started room returns its current state.

        """
        with self._lock:
            room = self._require_room(code)
            if room.started:
                logger.debug(f"Room '{code}' already started")
                return self._snapshot(room)
            if len(room.members) < self.min_players:
                raise InsufficientPlayers(code, len(room.members), self.min_players)

            # One random key per member, then a stable sort on the keys
            room.members = sorted(room.members, key=lambda _: self.rng.random())
            room.started = True
            room.current_player_id = room.members[0]
            room.current_turn = 1
            logger.info(f"Game started in room '{code}' with {len(room.members)} players")
            return self._snapshot(room)

    def advance_turn(self, code: str) -> Optional[dict]:
        """Passes the turn to the next member of the rotation.

        Returns the new snapshot, or None without changing anything if the
        room is unknown, not started, or has no valid current player.

        """
        with self._lock:
            room = self.rooms.get(code)
            if room is None or not room.started:
                logger.debug(f"Ignoring turn advance for room '{code}'")
                return None
            if room.is_empty() or room.current_player_id is None:
                logger.debug(f"Room '{code}' has no current player")
                return None
            try:
                current_index = room.members.index(room.current_player_id)
            except ValueError:
                logger.debug(f"Current player of room '{code}' is not a member")
                return None

            next_index = (current_index + 1) % len(room.members)
            room.current_player_id = room.members[next_index]
            room.current_turn += 1
            return self._snapshot(room)

    def disconnect(self, connection_id: str) -> List[Tuple[str, Optional[dict]]]:
        """Drops a connection's player and takes it out of every room.

        Each room is handled exactly like an explicit leave. Returns a list
        of (room code, snapshot or None if the room was deleted).

        """
        with self._lock:
            player = self.players.remove(connection_id)
            results = []
            for room in self.rooms.rooms_with_member(connection_id):
                self._remove_member(room, connection_id)
                snapshot = self._snapshot(room) if room.code in self.rooms else None
                results.append((room.code, snapshot))
            if player:
                logger.info(f"Player '{player.username}' disconnected (ID: {connection_id})")
            self._log_rooms()
            return results

    def get_room(self, code: str) -> Optional[Room]:
        return self.rooms.get(code)

    def list_rooms(self) -> List[str]:
        with self._lock:
            return self.rooms.list_codes()

    def game_state(self, code: str) -> dict:
        """Given a room code, return its wire snapshot.

        Raises RoomNotFound if the code is unknown.

        """
        with self._lock:
            return self._snapshot(self._require_room(code))

    def _require_room(self, code: str) -> Room:
        room = self.rooms.get(code)
        if room is None:
            raise RoomNotFound(code)
        return room

    def _require_player(self, connection_id: str) -> Player:
        player = self.players.lookup(connection_id)
        if player is None:
            raise PlayerNotRegistered(connection_id)
        return player

    def _remove_member(self, room: Room, player_id: str):
        """Shared removal path for leave and disconnect. Caller holds the lock."""
        if not room.has_member(player_id):
            return
        index = room.members.index(player_id)
        room.members.remove(player_id)

        if room.is_empty():
            self.rooms.delete(room.code)
            logger.info(f"Room '{room.code}' deleted (no members left)")
            return

        if room.started and room.current_player_id == player_id:
            # The member that slid into the vacated slot takes over the turn
            room.current_player_id = room.members[index % len(room.members)]

    def _player_dict(self, player_id: Optional[str]) -> Optional[dict]:
        if player_id is None:
            return None
        player = self.players.lookup(player_id)
        if player is None:
            return None
        return player.to_dict()

    def _snapshot(self, room: Room) -> dict:
        players = [self._player_dict(player_id) for player_id in room.members]
        return {
            'started': room.started,
            'players': [p for p in players if p is not None],
            'currentPlayer': self._player_dict(room.current_player_id),
            'currentTurn': room.current_turn,
            'owner': self._player_dict(room.owner_id),
        }

    def _log_rooms(self):
        logger.debug(f"Current rooms: {self.rooms.list_codes()}")
