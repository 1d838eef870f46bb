#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Bridge data store.

Owns the database connector and composes the backup service, schema
migrations and record gateway on top of it. Also stores the link between
Matrix users, their remote accounts and the remote account tokens.

Lifecycle:
    store = BridgeStore(config)
    await store.backup()          # optional, before migrating
    await store.init()            # open + migrate to the latest schema
    ...                           # serve requests
    await store.close()
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from bridgestore.backup import BackupService
from bridgestore.config import DatabaseConfig
from bridgestore.connectors import (
    DatabaseConnector,
    FatalMigrationError,
    QueryError,
    StorageConnectionError,
    StorageError,
    create_connector,
)
from bridgestore.directories import RoomDirectory, UserDirectory
from bridgestore.migrations import (
    MigrationRunner,
    SchemaVersionTracker,
    StepDependencies,
)
from bridgestore.records import RecordEntity, RecordGateway

E = TypeVar('E', bound=RecordEntity)


class BridgeStore:
    """
    Persistence for the bridge.

    Exactly one connector is active per store, selected from the config:
    a filename selects SQLite and takes precedence over a connection
    string, which selects PostgreSQL.

    Record operations must not be issued while init() is migrating. Call
    init() before serving requests.

    Attributes:
        config: Database configuration
        db: Active connector (None until init())
        logger: Logger threaded into every component
        runner: Migration runner of the last init()
        halted: True after a fatal migration; the store then refuses
            every operation

    Example:
        store = BridgeStore('bridge.db')
        await store.init()
        await store.add_user_token('@alice:example.org', '1234', 'token')
        await store.close()
    """

    def __init__(self, config_or_file: Union[DatabaseConfig, str],
                 logger: Optional[logging.Logger] = None):
        if isinstance(config_or_file, str):
            self.config = DatabaseConfig(filename=config_or_file)
        else:
            self.config = config_or_file
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.db: Optional[DatabaseConnector] = None
        self.gateway: Optional[RecordGateway] = None
        self.runner: Optional[MigrationRunner] = None
        self.tracker: Optional[SchemaVersionTracker] = None
        self.halted = False

    async def backup(self) -> Optional[str]:
        """
        Snapshot the SQLite file to ``<filename>.backup``.

        No-op for PostgreSQL, ``:memory:`` databases and when a backup
        already exists.

        Returns:
            Path of the backup written, or None
        """
        return await BackupService(self.config.filename, self.logger).backup()

    async def init(self, override_version: int = 0,
                   room_directory: Optional[RoomDirectory] = None,
                   user_directory: Optional[UserDirectory] = None) -> int:
        """
        Open the database and migrate it to the latest schema.

        Args:
            override_version: Migrate to this version instead of the latest
                (0 means latest)
            room_directory: Source of room entries for schema v8
            user_directory: Source of remote users for schema v9

        Returns:
            Schema version after migration

        Raises:
            StorageConnectionError: If the database cannot be opened
            MigrationError: A schema step failed and was rolled back
            FatalMigrationError: A schema step and its rollback failed.
                The store is halted and closed; every later call raises
                StorageConnectionError.
        """
        self._require_not_halted()
        self.logger.info('Starting DB Init')
        await self._open_database()

        self.runner = MigrationRunner(self, self.tracker, logger=self.logger)
        dependencies = StepDependencies(
            room_directory=room_directory,
            user_directory=user_directory,
            logger=self.logger,
        )
        try:
            return await self.runner.run(override_version, dependencies)
        except FatalMigrationError:
            self.halted = True
            self.logger.critical('Database state is unknown, refusing further requests')
            await self.close()
            raise

    async def close(self) -> None:
        if self.db is not None:
            await self.db.close()

    async def get_schema_version(self) -> int:
        return await self._require_tracker().get_version()

    async def create_table(self, statement: str, table_name: str) -> None:
        """
        Run a CREATE TABLE statement.

        Raises:
            QueryError: Naming the table that could not be created
        """
        try:
            await self._require_db().exec(statement)
            self.logger.info('Created table %s', table_name)
        except StorageError as e:
            raise QueryError(f"Error creating '{table_name}': {e}") from e

    # ==================== User tokens ====================

    async def add_user_token(self, user_id: str, remote_id: str, token: str) -> None:
        """
        Link a Matrix user to a remote account and store its token.

        The two rows are written concurrently without a shared transaction.
        If the token insert fails the account link stays committed; the
        error is re-raised for the caller to handle.
        """
        self.logger.debug('SQL addUserToken => %s', user_id)
        db = self._require_db()
        try:
            await asyncio.gather(
                db.run(
                    """
                    INSERT INTO user_id_remote_id (remote_id, user_id)
                    VALUES (:remote_id, :user_id)
                    """, {'remote_id': remote_id, 'user_id': user_id}),
                db.run(
                    """
                    INSERT INTO remote_id_token (remote_id, token)
                    VALUES (:remote_id, :token)
                    """, {'remote_id': remote_id, 'token': token}),
            )
        except StorageError as e:
            self.logger.error('Error storing user token: %s', e)
            raise

    async def delete_user_token(self, remote_id: str) -> None:
        """
        Remove every link to a remote account and its token.

        Like add_user_token(), the two deletes are independent.
        """
        self.logger.debug('SQL deleteUserToken => %s', remote_id)
        db = self._require_db()
        try:
            await asyncio.gather(
                db.run('DELETE FROM user_id_remote_id WHERE remote_id = :remote_id',
                       {'remote_id': remote_id}),
                db.run('DELETE FROM remote_id_token WHERE remote_id = :remote_id',
                       {'remote_id': remote_id}),
            )
        except StorageError as e:
            self.logger.error('Error deleting user token: %s', e)
            raise

    async def get_user_remote_ids(self, user_id: str) -> List[str]:
        self.logger.debug('SQL getUserRemoteIds => %s', user_id)
        try:
            rows = await self._require_db().all(
                """
                SELECT remote_id
                FROM user_id_remote_id
                WHERE user_id = :user_id
                ORDER BY remote_id
                """, {'user_id': user_id})
        except StorageError as e:
            self.logger.error('Error getting remote ids: %s', e)
            raise
        return [row['remote_id'] for row in rows]

    async def get_token(self, remote_id: str) -> Optional[str]:
        """Token of a remote account, or None if none is stored."""
        self.logger.debug('SQL remote_id_token => %s', remote_id)
        try:
            row = await self._require_db().get(
                'SELECT token FROM remote_id_token WHERE remote_id = :remote_id',
                {'remote_id': remote_id})
        except StorageError as e:
            self.logger.error('Error getting token: %s', e)
            raise
        return row['token'] if row else None

    # ==================== Record gateway ====================

    async def get(self, entity_cls: Type[E], params: Dict[str, Any],
                  raise_errors: bool = False) -> Optional[E]:
        """See RecordGateway.get(); returns None if the query failed."""
        return await self._require_gateway().get(entity_cls, params, raise_errors)

    async def insert(self, entity: RecordEntity) -> None:
        await self._require_gateway().insert(entity)

    async def update(self, entity: RecordEntity) -> None:
        await self._require_gateway().update(entity)

    async def delete(self, entity: RecordEntity) -> None:
        await self._require_gateway().delete(entity)

    # ==================== Internals ====================

    async def _open_database(self) -> None:
        if self.db is not None and self.db.is_connected:
            return

        self.db = create_connector(self.config, self.logger)
        try:
            await self.db.open()
        except StorageConnectionError as e:
            self.logger.error('Error opening database: %s', e)
            raise StorageConnectionError(
                "Couldn't open database. The bridge won't be able to continue."
            ) from e

        self.tracker = SchemaVersionTracker(self.db, self.logger)
        self.gateway = RecordGateway(self.db, self.logger)

    def _require_not_halted(self) -> None:
        if self.halted:
            raise StorageConnectionError(
                "Store halted after a fatal migration failure, restore from backup"
            )

    def _require_db(self) -> DatabaseConnector:
        self._require_not_halted()
        if self.db is None:
            raise StorageConnectionError('Store not initialised, call init() first')
        return self.db

    def _require_tracker(self) -> SchemaVersionTracker:
        self._require_not_halted()
        if self.tracker is None:
            raise StorageConnectionError('Store not initialised, call init() first')
        return self.tracker

    def _require_gateway(self) -> RecordGateway:
        self._require_not_halted()
        if self.gateway is None:
            raise StorageConnectionError('Store not initialised, call init() first')
        return self.gateway
