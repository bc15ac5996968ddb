"""
Unit tests for lobby_state module
"""

import unittest
from lobby.lobby_state import (
    Player, Room, LobbyError, RoomNotFound, InsufficientPlayers, PlayerNotRegistered
)


class TestPlayer(unittest.TestCase):
    """Test cases for the Player class"""

    def test_to_dict(self):
        """Test the wire form of a player"""
        player = Player(id="sid-1", username="alice")
        self.assertEqual(player.to_dict(), {'id': 'sid-1', 'username': 'alice'})

    def test_username_is_not_validated(self):
        """Test that any username is kept verbatim"""
        player = Player(id="sid-1", username="<b>al ice</b>")
        self.assertEqual(player.username, "<b>al ice</b>")


class TestRoom(unittest.TestCase):
    """Test cases for the Room class"""

    def test_defaults(self):
        """Test that a new room sits in the lobby"""
        room = Room(code="AB12", owner_id="sid-1", members=["sid-1"])
        self.assertFalse(room.started)
        self.assertIsNone(room.current_player_id)
        self.assertIsNone(room.current_turn)
        self.assertTrue(room.has_member("sid-1"))
        self.assertFalse(room.has_member("sid-2"))
        self.assertFalse(room.is_empty())

    def test_members_not_shared_between_rooms(self):
        """Test that the default member list is per instance"""
        room1 = Room(code="AAAA", owner_id="x")
        room2 = Room(code="BBBB", owner_id="y")
        room1.members.append("x")
        self.assertEqual(room2.members, [])
        self.assertTrue(room2.is_empty())


class TestErrors(unittest.TestCase):
    """Test cases for the error taxonomy"""

    def test_room_not_found(self):
        error = RoomNotFound("ZZZZ")
        self.assertIsInstance(error, LobbyError)
        self.assertEqual(error.code, "ZZZZ")
        self.assertEqual(error.message, "Room does not exist.")
        self.assertEqual(str(error), "Room does not exist.")

    def test_insufficient_players(self):
        error = InsufficientPlayers("ABCD", 1, 2)
        self.assertIsInstance(error, LobbyError)
        self.assertEqual((error.count, error.minimum), (1, 2))
        self.assertEqual(error.message, "Not enough players to start the game.")

    def test_player_not_registered(self):
        error = PlayerNotRegistered("sid-9")
        self.assertIsInstance(error, LobbyError)
        self.assertEqual(error.connection_id, "sid-9")

    def test_custom_message(self):
        self.assertEqual(LobbyError("nope").message, "nope")


if __name__ == '__main__':
    unittest.main()
