"""v6: guild and channel of each bridged remote message."""

from bridgestore.migrations.step import SqlMigrationStep


class RemoteMessageStore(SqlMigrationStep):
    version = 6
    description = 'Remote message location store'

    up_sql = """
        CREATE TABLE remote_msg_store (
            msg_id TEXT NOT NULL PRIMARY KEY,
            guild_id TEXT NOT NULL,
            channel_id TEXT NOT NULL
        );
    """

    down_sql = """
        DROP TABLE IF EXISTS remote_msg_store;
    """
