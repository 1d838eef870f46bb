"""v2: split tokens into an account link table and a token table."""

from bridgestore.migrations.step import SqlMigrationStep


class AccountTokens(SqlMigrationStep):
    version = 2
    description = 'Split user tokens into account and token tables'

    up_sql = """
        CREATE TABLE user_id_remote_id (
            remote_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            PRIMARY KEY (remote_id, user_id)
        );
        CREATE TABLE remote_id_token (
            remote_id TEXT NOT NULL PRIMARY KEY,
            token TEXT NOT NULL
        );
    """

    down_sql = """
        DROP TABLE IF EXISTS remote_id_token;
        DROP TABLE IF EXISTS user_id_remote_id;
    """
