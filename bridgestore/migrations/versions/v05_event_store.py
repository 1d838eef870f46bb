"""v5: mapping between Matrix events and remote messages."""

from bridgestore.migrations.step import SqlMigrationStep


class EventStore(SqlMigrationStep):
    version = 5
    description = 'Matrix event to remote message store'

    up_sql = """
        CREATE TABLE event_store (
            matrix_id TEXT NOT NULL,
            remote_id TEXT NOT NULL,
            PRIMARY KEY (matrix_id, remote_id)
        );
    """

    down_sql = """
        DROP TABLE IF EXISTS event_store;
    """
