"""
Global pytest configuration and fixtures for bridgestore tests

Provides:
- Temporary SQLite database paths
- Open connectors and initialised stores
- Fake room/user directories for schema steps 8 and 9
"""

from types import SimpleNamespace
from typing import List

import pytest
import pytest_asyncio

from bridgestore.connectors import SQLiteConnector
from bridgestore.directories import RemoteUser, RoomEntry
from bridgestore.store import BridgeStore


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom settings"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def db_path(tmp_path):
    """Path of a not yet created SQLite database file."""
    return str(tmp_path / 'bridge.db')


@pytest_asyncio.fixture
async def sqlite_db(db_path):
    """Open SQLite connector on an empty database."""
    db = SQLiteConnector(db_path)
    await db.open()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def store(db_path):
    """Store migrated to the latest schema."""
    bridge_store = BridgeStore(db_path)
    await bridge_store.init()
    yield bridge_store
    await bridge_store.close()


@pytest.fixture
def step_store(sqlite_db):
    """Minimal store stand-in for running migration steps directly."""
    return SimpleNamespace(db=sqlite_db)


# ============================================================================
# Directory Fakes
# ============================================================================

class FakeRoomDirectory:
    def __init__(self, entries: List[RoomEntry]):
        self.entries = entries
        self.calls = 0

    async def get_entries(self) -> List[RoomEntry]:
        self.calls += 1
        return self.entries


class FakeUserDirectory:
    def __init__(self, users: List[RemoteUser]):
        self.users = users
        self.calls = 0

    async def get_remote_users(self) -> List[RemoteUser]:
        self.calls += 1
        return self.users


@pytest.fixture
def room_directory():
    return FakeRoomDirectory([
        RoomEntry(
            id='entry-1',
            matrix_room_id='!general:example.org',
            remote_room_id='5555',
            remote_data={'guild': '1111', 'channel': '5555', 'name': 'general',
                         'update_name': True, 'update_topic': False},
        ),
        RoomEntry(id='entry-2', matrix_room_id='!portal:example.org'),
    ])


@pytest.fixture
def user_directory():
    return FakeUserDirectory([
        RemoteUser(
            id='4321',
            displayname='Alice',
            avatar_url='https://cdn.example.com/avatars/4321.png',
            avatar_mxc='mxc://example.org/alice',
            guild_nicks={'1111': 'ally', '2222': 'alice_b'},
        ),
        RemoteUser(id='8765', displayname='Bob'),
    ])
