"""v7: look up events by remote message id."""

from bridgestore.migrations.step import SqlMigrationStep


class EventStoreIndex(SqlMigrationStep):
    version = 7
    description = 'Index event_store by remote id'

    up_sql = """
        CREATE INDEX idx_event_store_remote_id ON event_store (remote_id);
    """

    down_sql = """
        DROP INDEX IF EXISTS idx_event_store_remote_id;
    """
