"""v3: retire the v1 token table.

Its rows carry no remote account id, so they cannot be moved into the v2
tables. Users link their accounts again.
"""

from bridgestore.migrations.step import SqlMigrationStep


class DropUserTokens(SqlMigrationStep):
    version = 3
    description = 'Drop legacy user_tokens table'

    up_sql = """
        DROP TABLE IF EXISTS user_tokens;
    """

    down_sql = """
        CREATE TABLE IF NOT EXISTS user_tokens (
            user_id TEXT UNIQUE NOT NULL,
            token TEXT UNIQUE NOT NULL
        );
    """
