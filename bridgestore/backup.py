"""
Pre-migration database backup.

Copies the SQLite file byte for byte to ``<path>.backup`` before schema
migrations run. An existing backup is never overwritten, so the first
snapshot taken survives any number of later runs.
"""

import asyncio
import logging
import os
import shutil
from typing import Optional

from bridgestore.connectors.sqlite import MEMORY_DATABASE

BACKUP_SUFFIX = '.backup'


class BackupService:
    """
    Snapshot the database file of the active connector.

    Only file backends can be backed up. Network backends and in-memory
    databases are skipped with a log message.

    Attributes:
        filename: Database file path, or None for network backends
        logger: Logger for backup events

    Example:
        >>> backup = BackupService('bridge.db')
        >>> await backup.backup()
        'bridge.db.backup'
    """

    def __init__(self, filename: Optional[str], logger: Optional[logging.Logger] = None):
        self.filename = filename
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def backup_path(self) -> Optional[str]:
        if not self.filename or self.filename == MEMORY_DATABASE:
            return None
        return self.filename + BACKUP_SUFFIX

    async def backup(self) -> Optional[str]:
        """
        Copy the database file to its backup path.

        Returns:
            Path of the new backup, or None if nothing was copied

        Raises:
            OSError: If reading the database or writing the backup fails
        """
        if self.filename is None:
            self.logger.warning('Backups not supported on non-sqlite connector')
            return None
        if self.filename == MEMORY_DATABASE:
            self.logger.info("Can't backup a :memory: database.")
            return None

        backup_path = self.backup_path
        if not os.path.exists(self.filename):
            self.logger.info('No database at %s yet, nothing to back up', self.filename)
            return None
        if os.path.exists(backup_path):
            self.logger.warning('NOT backing up database while a file already exists')
            return None

        await asyncio.to_thread(self._copy, self.filename, backup_path)
        self.logger.info('Backed up database to %s', backup_path)
        return backup_path

    @staticmethod
    def _copy(source: str, destination: str) -> None:
        # 'xb' refuses to clobber a backup created since the existence check
        with open(source, 'rb') as rd:
            wr = open(destination, 'xb')
            try:
                with wr:
                    shutil.copyfileobj(rd, wr)
            except Exception:
                # A truncated snapshot would block every later backup
                os.remove(destination)
                raise
