"""
Room and user directory collaborators.

Older bridge releases kept room links and remote user profiles in
directory services outside the SQL database. Schema steps 8 and 9 copy
their contents into SQL tables, so init() accepts those directories and
hands them to the two steps.

Only the read side the migration needs is defined here.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol


@dataclass
class RoomEntry:
    """
    Link between a Matrix room and a remote channel.

    Attributes:
        id: Directory entry id
        matrix_room_id: Matrix room id (!room:server)
        remote_room_id: Remote channel id
        remote_data: Extra remote channel attributes (guild, name, ...)
    """

    id: str
    matrix_room_id: Optional[str] = None
    remote_room_id: Optional[str] = None
    remote_data: Dict[str, object] = field(default_factory=dict)


@dataclass
class RemoteUser:
    """
    Profile of a user on the remote network.

    Attributes:
        id: Remote user id
        displayname: Last seen display name
        avatar_url: Remote avatar URL
        avatar_mxc: Matrix content URI the avatar was uploaded to
        guild_nicks: Per-guild nicknames keyed by guild id
    """

    id: str
    displayname: Optional[str] = None
    avatar_url: Optional[str] = None
    avatar_mxc: Optional[str] = None
    guild_nicks: Dict[str, str] = field(default_factory=dict)


class RoomDirectory(Protocol):
    async def get_entries(self) -> List[RoomEntry]:
        ...


class UserDirectory(Protocol):
    async def get_remote_users(self) -> List[RemoteUser]:
        ...
