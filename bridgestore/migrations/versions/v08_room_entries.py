"""
v8: room entry tables, imported from the room directory.

Room links used to live in an external room directory. This step creates
the SQL tables and copies every entry of the directory handed to init().
Without a directory the tables are created empty.
"""

import logging
from typing import Optional

from bridgestore.directories import RoomDirectory
from bridgestore.migrations.step import MigrationStep


class RoomEntries(MigrationStep):
    version = 8
    description = 'Create room store tables and import room entries'

    def __init__(self, room_directory: Optional[RoomDirectory] = None,
                 logger: Optional[logging.Logger] = None):
        self.room_directory = room_directory
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    async def run(self, store) -> None:
        await store.create_table("""
            CREATE TABLE room_entries (
                id TEXT NOT NULL PRIMARY KEY,
                matrix_id TEXT,
                remote_id TEXT
            );""", 'room_entries')
        await store.create_table("""
            CREATE TABLE remote_room_data (
                room_id TEXT NOT NULL PRIMARY KEY,
                guild_id TEXT,
                channel_id TEXT,
                name TEXT,
                update_name INTEGER,
                update_topic INTEGER
            );""", 'remote_room_data')

        if self.room_directory is None:
            self.logger.warning('No room directory given, not importing room entries')
            return

        entries = await self.room_directory.get_entries()
        self.logger.info('Importing %d room entries', len(entries))
        for entry in entries:
            await store.db.run(
                """
                INSERT INTO room_entries (id, matrix_id, remote_id)
                VALUES (:id, :matrix_id, :remote_id)
                """, {
                    'id': entry.id,
                    'matrix_id': entry.matrix_room_id,
                    'remote_id': entry.remote_room_id,
                })
            if entry.remote_room_id is None:
                continue
            data = entry.remote_data
            await store.db.run(
                """
                INSERT INTO remote_room_data
                (room_id, guild_id, channel_id, name, update_name, update_topic)
                VALUES (:room_id, :guild_id, :channel_id, :name, :update_name, :update_topic)
                """, {
                    'room_id': entry.remote_room_id,
                    'guild_id': data.get('guild'),
                    'channel_id': data.get('channel'),
                    'name': data.get('name'),
                    'update_name': int(bool(data.get('update_name'))),
                    'update_topic': int(bool(data.get('update_topic'))),
                })

    async def rollback(self, store) -> None:
        await store.db.exec("""
            DROP TABLE IF EXISTS remote_room_data;
            DROP TABLE IF EXISTS room_entries;
        """)
