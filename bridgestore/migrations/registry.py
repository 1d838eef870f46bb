"""
Static registry of schema steps.

Maps each schema version to a factory building its step. Steps that need
collaborators (the room directory for v8, the user directory for v9) get
them from StepDependencies. Every other step ignores it.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from bridgestore.connectors import MigrationError
from bridgestore.directories import RoomDirectory, UserDirectory
from bridgestore.migrations.step import MigrationStep
from bridgestore.migrations.versions import (
    AccountTokens,
    DropUserTokens,
    EventStore,
    EventStoreIndex,
    RemoteEmoji,
    RemoteMessageStore,
    RemoteUsers,
    RoomEntries,
    RoomEntryIndexes,
    UserTokens,
)

# Latest schema version. Must match the highest key in MIGRATIONS.
CURRENT_SCHEMA = 10

SCHEMA_ROOM_STORE_REQUIRED = 8
SCHEMA_USER_STORE_REQUIRED = 9


@dataclass
class StepDependencies:
    """Collaborators supplied to init() for the steps that need them."""

    room_directory: Optional[RoomDirectory] = None
    user_directory: Optional[UserDirectory] = None
    logger: Optional[logging.Logger] = None


StepFactory = Callable[[StepDependencies], MigrationStep]

MIGRATIONS: Dict[int, StepFactory] = {
    1: lambda deps: UserTokens(),
    2: lambda deps: AccountTokens(),
    3: lambda deps: DropUserTokens(),
    4: lambda deps: RemoteEmoji(),
    5: lambda deps: EventStore(),
    6: lambda deps: RemoteMessageStore(),
    7: lambda deps: EventStoreIndex(),
    SCHEMA_ROOM_STORE_REQUIRED: lambda deps: RoomEntries(deps.room_directory, deps.logger),
    SCHEMA_USER_STORE_REQUIRED: lambda deps: RemoteUsers(deps.user_directory, deps.logger),
    10: lambda deps: RoomEntryIndexes(),
}


def latest_version(registry: Dict[int, StepFactory]) -> int:
    return max(registry) if registry else 0


def build_step(version: int, dependencies: StepDependencies,
               registry: Optional[Dict[int, StepFactory]] = None) -> MigrationStep:
    """
    Instantiate the step that upgrades the database to ``version``.

    Raises:
        MigrationError: If no step is registered for the version
    """
    registry = MIGRATIONS if registry is None else registry
    try:
        factory = registry[version]
    except KeyError:
        raise MigrationError(f"No migration registered for schema v{version}", version) from None
    return factory(dependencies)
