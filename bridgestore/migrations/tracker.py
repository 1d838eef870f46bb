"""
Schema version tracking.

The applied schema version lives in the single-row ``schema`` table that
the first migration step creates.
"""

import logging
from typing import Optional

from bridgestore.connectors import DatabaseConnector, StorageError


class SchemaVersionTracker:
    """
    Read and write the persisted schema version.

    Attributes:
        db: Connector shared with the store
        logger: Logger for version changes
    """

    def __init__(self, db: DatabaseConnector, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    async def get_version(self) -> int:
        """
        Return the applied schema version.

        A database without the schema table or without its row has not
        been initialised yet and reports version 0.
        """
        self.logger.debug('_get_schema_version')
        try:
            row = await self.db.get('SELECT version FROM schema')
        except StorageError as e:
            self.logger.warning("Couldn't fetch schema version, defaulting to 0: %s", e)
            return 0

        if row is None:
            self.logger.warning('Schema table has no version row, defaulting to 0')
            return 0
        return int(row['version'])

    async def set_version(self, version: int) -> None:
        """
        Overwrite the persisted schema version.

        Raises:
            QueryError: If the update fails
        """
        self.logger.debug('_set_schema_version => %d', version)
        await self.db.run('UPDATE schema SET version = :version', {'version': version})
