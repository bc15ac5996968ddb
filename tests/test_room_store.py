"""
Unit tests for the RoomStore class.
"""

import random
import re

import pytest
from lobby.lobby_state import Player
from lobby.room_store import RoomStore, CODE_ALPHABET


class FixedSequence(random.Random):
    """Random source that hands out a scripted sequence of codes."""

    def __init__(self, codes):
        super().__init__(0)
        self.codes = list(codes)

    def choices(self, population, weights=None, *, cum_weights=None, k=1):
        return list(self.codes.pop(0))


class TestRoomStore:
    """Test cases for RoomStore methods."""

    def setup_method(self):
        self.store = RoomStore(rng=random.Random(7))
        self.alice = Player(id="sid-a", username="alice")
        self.bob = Player(id="sid-b", username="bob")

    def test_create_initial_room(self):
        """Test that a new room holds only its owner and is not started."""
        room = self.store.create(self.alice)
        assert room.members == ["sid-a"]
        assert room.owner_id == "sid-a"
        assert room.started is False
        assert room.current_player_id is None
        assert room.current_turn is None
        assert self.store.get(room.code) is room

    def test_code_format(self):
        """Test that codes are four upper case base-36 characters."""
        for _ in range(50):
            room = self.store.create(self.alice)
            assert re.fullmatch(r"[0-9A-Z]{4}", room.code)

    def test_alphabet(self):
        assert CODE_ALPHABET == "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

    def test_custom_code_length(self):
        store = RoomStore(code_length=6)
        assert len(store.create(self.alice).code) == 6

    def test_invalid_code_length(self):
        with pytest.raises(ValueError):
            RoomStore(code_length=0)

    def test_collision_regenerates(self):
        """Test that a clashing code is drawn again instead of overwriting."""
        store = RoomStore(rng=FixedSequence(["AAAA", "AAAA", "BBBB"]))
        first = store.create(self.alice)
        second = store.create(self.bob)
        assert first.code == "AAAA"
        assert second.code == "BBBB"
        assert store.get("AAAA") is first
        assert len(store) == 2

    def test_exhausted_code_space(self):
        store = RoomStore(code_length=1)
        for _ in range(len(CODE_ALPHABET)):
            store.create(self.alice)
        with pytest.raises(RuntimeError):
            store.create(self.alice)

    def test_get_unknown(self):
        assert self.store.get("ZZZZ") is None

    def test_delete(self):
        room = self.store.create(self.alice)
        self.store.delete(room.code)
        assert self.store.get(room.code) is None
        assert room.code not in self.store

    def test_delete_unknown(self):
        """Test that deleting an unknown code is silently ignored."""
        self.store.delete("ZZZZ")

    def test_rooms_with_member(self):
        room1 = self.store.create(self.alice)
        room2 = self.store.create(self.bob)
        room2.members.append("sid-a")
        assert set(r.code for r in self.store.rooms_with_member("sid-a")) == {room1.code, room2.code}
        assert [r.code for r in self.store.rooms_with_member("sid-b")] == [room2.code]
        assert self.store.rooms_with_member("sid-c") == []

    def test_list_codes(self):
        room = self.store.create(self.alice)
        assert self.store.list_codes() == [room.code]
