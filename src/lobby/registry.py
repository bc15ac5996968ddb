from typing import Dict, List, Optional

from .lobby_state import Player


class ConnectionRegistry(object):
    """Maps active connection ids to registered players.

    A player exists for exactly as long as its connection is registered:
    entries are added on ``register`` and dropped on disconnect.

    """
    def __init__(self):
        self._players: Dict[str, Player] = {}  # connection_id -> Player

    def register(self, connection_id: str, username: str) -> Player:
        """Create the player for a connection, replacing any earlier entry.

        Usernames are taken as given; two connections may share one.

        """
        player = Player(id=connection_id, username=username)
        self._players[connection_id] = player
        return player

    def lookup(self, connection_id: str) -> Optional[Player]:
        return self._players.get(connection_id)

    def remove(self, connection_id: str) -> Optional[Player]:
        """Forget a connection and return the player it had, if any."""
        return self._players.pop(connection_id, None)

    def list_players(self) -> List[Player]:
        return list(self._players.values())

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._players

    def __len__(self) -> int:
        return len(self._players)
