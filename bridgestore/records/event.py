"""
Matrix event to remote message mapping.

One Matrix event can map to several remote messages (long messages are
split) and one remote message to several Matrix events (attachments), so
a query may load many rows. next() steps through them.
"""

from typing import Any, Dict, List, Optional

from bridgestore.connectors import DatabaseConnector, QueryError
from bridgestore.records.entity import RecordEntity


class DbEvent(RecordEntity):
    """
    Rows of ``event_store`` joined with ``remote_msg_store``.

    Lookup by ``matrix_id`` or ``remote_id``. After a query the first row
    is loaded; call next() to move to the following one.

    Example:
        >>> event = await store.get(DbEvent, {'matrix_id': '$ev:example.org'})
        >>> if event and event.result:
        ...     print(event.remote_id)
        ...     while event.next():
        ...         print(event.remote_id)
    """

    def __init__(self):
        super().__init__()
        self.matrix_id: Optional[str] = None
        self.remote_id: Optional[str] = None
        self.guild_id: Optional[str] = None
        self.channel_id: Optional[str] = None
        self.rows: List[Dict[str, Any]] = []
        self._cursor = -1

    async def run_query(self, db: DatabaseConnector, params: Dict[str, Any]) -> None:
        select = """
            SELECT e.matrix_id, e.remote_id, m.guild_id, m.channel_id
            FROM event_store e
            LEFT JOIN remote_msg_store m ON m.msg_id = e.remote_id
        """
        if params.get('matrix_id') is not None:
            query = select + ' WHERE e.matrix_id = :matrix_id ORDER BY e.remote_id'
            bound = {'matrix_id': params['matrix_id']}
        elif params.get('remote_id') is not None:
            query = select + ' WHERE e.remote_id = :remote_id ORDER BY e.matrix_id'
            bound = {'remote_id': params['remote_id']}
        else:
            raise ValueError('DbEvent lookup needs matrix_id or remote_id')

        self.rows = await db.all(query, bound)
        self._cursor = -1
        self._mark_queried(len(self.rows) > 0)
        if self.rows:
            self.next()

    def next(self) -> bool:
        """
        Load the next row into the attributes.

        Returns:
            False once all rows have been consumed
        """
        if self._cursor + 1 >= len(self.rows):
            return False
        self._cursor += 1
        row = self.rows[self._cursor]
        self.matrix_id = row['matrix_id']
        self.remote_id = row['remote_id']
        self.guild_id = row['guild_id']
        self.channel_id = row['channel_id']
        return True

    async def insert(self, db: DatabaseConnector) -> None:
        await db.run(
            'INSERT INTO event_store (matrix_id, remote_id) VALUES (:matrix_id, :remote_id)',
            {'matrix_id': self.matrix_id, 'remote_id': self.remote_id},
        )
        existing = await db.get('SELECT msg_id FROM remote_msg_store WHERE msg_id = :msg_id',
                                {'msg_id': self.remote_id})
        if existing is None:
            await db.run(
                """
                INSERT INTO remote_msg_store (msg_id, guild_id, channel_id)
                VALUES (:msg_id, :guild_id, :channel_id)
                """, {
                    'msg_id': self.remote_id,
                    'guild_id': self.guild_id,
                    'channel_id': self.channel_id,
                })

    async def update(self, db: DatabaseConnector) -> None:
        raise QueryError('Event mappings are immutable, delete and insert instead')

    async def delete(self, db: DatabaseConnector) -> None:
        await db.run(
            'DELETE FROM event_store WHERE matrix_id = :matrix_id AND remote_id = :remote_id',
            {'matrix_id': self.matrix_id, 'remote_id': self.remote_id},
        )
        remaining = await db.get('SELECT matrix_id FROM event_store WHERE remote_id = :remote_id',
                                 {'remote_id': self.remote_id})
        if remaining is None:
            await db.run('DELETE FROM remote_msg_store WHERE msg_id = :msg_id',
                          {'msg_id': self.remote_id})
