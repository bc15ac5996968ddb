import random
import string
from typing import Dict, List, Optional

from .lobby_state import Player, Room

# Base-36 alphabet, upper case
CODE_ALPHABET = string.digits + string.ascii_uppercase


class RoomStore(object):
    """Holds every live room, keyed by room code.

    Codes are drawn at random from CODE_ALPHABET and redrawn until they
    do not clash with a live room.

    """
    def __init__(self, code_length: int = 4, rng: Optional[random.Random] = None):
        """Initialize an empty store.

        Parameters
        ----------
        code_length : int
            Number of characters in generated room codes
        rng : random.Random, optional
            Source of randomness for code generation. Defaults to a fresh
            unseeded generator.
        """
        if code_length < 1:
            raise ValueError(f"Invalid code_length {code_length}")
        self.code_length = code_length
        self.rng = rng or random.Random()
        self._rooms: Dict[str, Room] = {}

    def create(self, owner: Player) -> Room:
        """Create a room with the owner as its only member and return it."""
        code = self._fresh_code()
        room = Room(code=code, owner_id=owner.id, members=[owner.id])
        self._rooms[code] = room
        return room

    def get(self, code: str) -> Optional[Room]:
        return self._rooms.get(code)

    def delete(self, code: str):
        """Remove the given room. Unknown codes are ignored."""
        self._rooms.pop(code, None)

    def list_codes(self) -> List[str]:
        return list(self._rooms.keys())

    def rooms_with_member(self, player_id: str) -> List[Room]:
        """Lists the rooms whose membership includes the given player."""
        return [room for room in self._rooms.values() if room.has_member(player_id)]

    def __contains__(self, code: str) -> bool:
        return code in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def _fresh_code(self) -> str:
        if len(self._rooms) >= len(CODE_ALPHABET) ** self.code_length:
            raise RuntimeError("No free room codes left")
        while True:
            code = ''.join(self.rng.choices(CODE_ALPHABET, k=self.code_length))
            if code not in self._rooms:
                return code
