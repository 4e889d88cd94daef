import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app
from core.room_registry import RoomRegistry
from core.state_machine import RoomStateMachine
from core.post_feed import PostFeed


@pytest.fixture()
def settings():
    return Settings(_env_file=None, log_level="WARNING")


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def registry():
    return RoomRegistry()


@pytest.fixture()
def machine():
    return RoomStateMachine(technique_max_length=40, tie_mode="all")


@pytest.fixture()
def feed():
    return PostFeed(max_stored=5, default_limit=3, max_limit=4)


@pytest.fixture()
def room_abc(registry):
    """Alice (host), Bob, Carol in lobby"""
    room, alice = registry.create_room("Alice", "a")
    registry.join_room(room.code, "Bob", "b")
    registry.join_room(room.code, "Carol", "c")
    return room
