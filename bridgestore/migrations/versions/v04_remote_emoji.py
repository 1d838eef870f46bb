"""v4: cache of remote custom emoji uploaded to the media repository."""

from bridgestore.migrations.step import SqlMigrationStep


class RemoteEmoji(SqlMigrationStep):
    version = 4
    description = 'Remote custom emoji cache'

    up_sql = """
        CREATE TABLE remote_emoji (
            emoji_id TEXT NOT NULL PRIMARY KEY,
            name TEXT NOT NULL,
            animated INTEGER NOT NULL,
            mxc_url TEXT UNIQUE NOT NULL,
            created_at BIGINT NOT NULL,
            updated_at BIGINT NOT NULL
        );
    """

    down_sql = """
        DROP TABLE IF EXISTS remote_emoji;
    """
