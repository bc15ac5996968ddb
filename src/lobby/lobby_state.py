"""Contains the basic data structures that represent players and rooms.

The transitions that mutate these objects live in lobby_server.py.

"""
from dataclasses import dataclass, field
from typing import List, Optional


class LobbyError(Exception):
    """Base class for errors that are reported back to the requesting client.

    Attributes
    ----------
    message : str
        Human readable message sent to the client in the ``error`` event
    """

    message = "Request could not be completed."

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class RoomNotFound(LobbyError):
    """Raised when a room code does not resolve to a live room."""

    message = "Room does not exist."

    def __init__(self, code: str):
        self.code = code
        super().__init__()


class InsufficientPlayers(LobbyError):
    """Raised when a game is started with fewer members than required.

    Attributes
    ----------
    code : str
        The room that was asked to start
    count : int
        Number of members in the room at the time of the request
    minimum : int
        Number of members required to start
    """

    message = "Not enough players to start the game."

    def __init__(self, code: str, count: int, minimum: int):
        self.code = code
        self.count = count
        self.minimum = minimum
        super().__init__()


class PlayerNotRegistered(LobbyError):
    """Raised when a connection acts on rooms before sending ``register``."""

    message = "You must register before joining a room."

    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        super().__init__()


@dataclass
class Player(object):
    """A registered identity, bound to one connection.

    Attributes
    ----------
    id : str
        The id of the owning connection
    username : str
        Display name supplied by the client. Not validated, not unique.
    """
    id: str
    username: str

    def to_dict(self) -> dict:
        return {'id': self.id, 'username': self.username}


@dataclass
class Room(object):
    """Dataclass that contains the state of one room.

    Attributes
    ----------
    code : str
        Short human-typeable identifier, unique among live rooms
    owner_id : str
        Id of the player who created the room. Informational only.
    members : List[str]
        Player ids in join order. Once the game starts this is the turn order.
    started : bool
        Whether the game has been started
    current_player_id : Optional[str]
        Id of the member whose turn it is, None before the start
    current_turn : Optional[int]
        Turn counter, 1 on start and incremented on every advance. None
        before the start.
    """
    code: str
    owner_id: str
    members: List[str] = field(default_factory=list)
    started: bool = False
    current_player_id: Optional[str] = None
    current_turn: Optional[int] = None

    def has_member(self, player_id: str) -> bool:
        return player_id in self.members

    def is_empty(self) -> bool:
        return len(self.members) == 0
