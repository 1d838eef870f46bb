"""Built-in schema steps, one module per version."""

from .v01_user_tokens import UserTokens
from .v02_account_tokens import AccountTokens
from .v03_drop_user_tokens import DropUserTokens
from .v04_remote_emoji import RemoteEmoji
from .v05_event_store import EventStore
from .v06_remote_msg_store import RemoteMessageStore
from .v07_event_store_index import EventStoreIndex
from .v08_room_entries import RoomEntries
from .v09_remote_users import RemoteUsers
from .v10_room_entry_indexes import RoomEntryIndexes

__all__ = [
    'UserTokens',
    'AccountTokens',
    'DropUserTokens',
    'RemoteEmoji',
    'EventStore',
    'RemoteMessageStore',
    'EventStoreIndex',
    'RoomEntries',
    'RemoteUsers',
    'RoomEntryIndexes',
]
