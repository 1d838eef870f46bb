"""v10: look up room entries from either side of the bridge."""

from bridgestore.migrations.step import SqlMigrationStep


class RoomEntryIndexes(SqlMigrationStep):
    version = 10
    description = 'Index room_entries by matrix and remote id'

    up_sql = """
        CREATE INDEX idx_room_entries_matrix_id ON room_entries (matrix_id);
        CREATE INDEX idx_room_entries_remote_id ON room_entries (remote_id);
    """

    down_sql = """
        DROP INDEX IF EXISTS idx_room_entries_remote_id;
        DROP INDEX IF EXISTS idx_room_entries_matrix_id;
    """
