"""v1: schema version table and the first user token table."""

from bridgestore.migrations.step import SqlMigrationStep


class UserTokens(SqlMigrationStep):
    version = 1
    description = 'Schema, Client Auth Table'

    up_sql = """
        CREATE TABLE schema (
            version INTEGER UNIQUE NOT NULL
        );
        INSERT INTO schema VALUES (0);
        CREATE TABLE user_tokens (
            user_id TEXT UNIQUE NOT NULL,
            token TEXT UNIQUE NOT NULL
        );
    """

    down_sql = """
        DROP TABLE IF EXISTS user_tokens;
        DROP TABLE IF EXISTS schema;
    """
