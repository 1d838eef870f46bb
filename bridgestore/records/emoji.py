"""Remote custom emoji mirrored into the Matrix media repository."""

import time
from typing import Any, Dict, Optional

from bridgestore.connectors import DatabaseConnector
from bridgestore.records.entity import RecordEntity


class DbEmoji(RecordEntity):
    """
    Row of the ``remote_emoji`` table.

    Lookup by ``emoji_id`` or by ``mxc_url``. Timestamps are milliseconds
    since the epoch and are maintained by insert() and update().
    """

    def __init__(self):
        super().__init__()
        self.emoji_id: Optional[str] = None
        self.name: Optional[str] = None
        self.animated = False
        self.mxc_url: Optional[str] = None
        self.created_at: Optional[int] = None
        self.updated_at: Optional[int] = None

    async def run_query(self, db: DatabaseConnector, params: Dict[str, Any]) -> None:
        if params.get('emoji_id') is not None:
            query = 'SELECT * FROM remote_emoji WHERE emoji_id = :emoji_id'
            bound = {'emoji_id': params['emoji_id']}
        elif params.get('mxc_url') is not None:
            query = 'SELECT * FROM remote_emoji WHERE mxc_url = :mxc_url'
            bound = {'mxc_url': params['mxc_url']}
        else:
            raise ValueError('DbEmoji lookup needs emoji_id or mxc_url')

        row = await db.get(query, bound)
        if row is not None:
            self.emoji_id = row['emoji_id']
            self.name = row['name']
            self.animated = bool(row['animated'])
            self.mxc_url = row['mxc_url']
            self.created_at = row['created_at']
            self.updated_at = row['updated_at']
        self._mark_queried(row is not None)

    async def insert(self, db: DatabaseConnector) -> None:
        self.created_at = self.updated_at = _now_ms()
        await db.run(
            """
            INSERT INTO remote_emoji
            (emoji_id, name, animated, mxc_url, created_at, updated_at)
            VALUES (:emoji_id, :name, :animated, :mxc_url, :created_at, :updated_at)
            """, {
                'emoji_id': self.emoji_id,
                'name': self.name,
                'animated': int(self.animated),
                'mxc_url': self.mxc_url,
                'created_at': self.created_at,
                'updated_at': self.updated_at,
            })

    async def update(self, db: DatabaseConnector) -> None:
        self.updated_at = _now_ms()
        await db.run(
            """
            UPDATE remote_emoji
            SET name = :name, animated = :animated, mxc_url = :mxc_url,
                updated_at = :updated_at
            WHERE emoji_id = :emoji_id
            """, {
                'emoji_id': self.emoji_id,
                'name': self.name,
                'animated': int(self.animated),
                'mxc_url': self.mxc_url,
                'updated_at': self.updated_at,
            })

    async def delete(self, db: DatabaseConnector) -> None:
        await db.run('DELETE FROM remote_emoji WHERE emoji_id = :emoji_id',
                     {'emoji_id': self.emoji_id})


def _now_ms() -> int:
    return int(time.time() * 1000)
