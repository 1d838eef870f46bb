"""
v9: remote user tables, imported from the user directory.

Copies remote user profiles and their per-guild nicknames out of the
external user directory handed to init().
"""

import logging
from typing import Optional

from bridgestore.directories import UserDirectory
from bridgestore.migrations.step import MigrationStep


class RemoteUsers(MigrationStep):
    version = 9
    description = 'Create user store tables and import remote users'

    def __init__(self, user_directory: Optional[UserDirectory] = None,
                 logger: Optional[logging.Logger] = None):
        self.user_directory = user_directory
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    async def run(self, store) -> None:
        await store.create_table("""
            CREATE TABLE remote_user (
                remote_id TEXT NOT NULL PRIMARY KEY,
                displayname TEXT,
                avatarurl TEXT,
                avatarurl_mxc TEXT
            );""", 'remote_user')
        await store.create_table("""
            CREATE TABLE remote_user_guild_nicks (
                remote_id TEXT NOT NULL,
                guild_id TEXT NOT NULL,
                nick TEXT NOT NULL,
                PRIMARY KEY (remote_id, guild_id)
            );""", 'remote_user_guild_nicks')

        if self.user_directory is None:
            self.logger.warning('No user directory given, not importing remote users')
            return

        users = await self.user_directory.get_remote_users()
        self.logger.info('Importing %d remote users', len(users))
        for user in users:
            await store.db.run(
                """
                INSERT INTO remote_user (remote_id, displayname, avatarurl, avatarurl_mxc)
                VALUES (:remote_id, :displayname, :avatarurl, :avatarurl_mxc)
                """, {
                    'remote_id': user.id,
                    'displayname': user.displayname,
                    'avatarurl': user.avatar_url,
                    'avatarurl_mxc': user.avatar_mxc,
                })
            for guild_id, nick in user.guild_nicks.items():
                await store.db.run(
                    """
                    INSERT INTO remote_user_guild_nicks (remote_id, guild_id, nick)
                    VALUES (:remote_id, :guild_id, :nick)
                    """, {'remote_id': user.id, 'guild_id': guild_id, 'nick': nick})

    async def rollback(self, store) -> None:
        await store.db.exec("""
            DROP TABLE IF EXISTS remote_user_guild_nicks;
            DROP TABLE IF EXISTS remote_user;
        """)
