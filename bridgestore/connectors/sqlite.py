"""
SQLite connector implementation.

File based backend used for single-instance bridge deployments. Runs
through SQLAlchemy's aiosqlite dialect.
"""

import logging
import pathlib
import urllib.parse
from typing import Any, Dict, Optional

from sqlalchemy.pool import StaticPool

from .adapter import AsyncEngineConnector

MEMORY_DATABASE = ':memory:'


class SQLiteConnector(AsyncEngineConnector):
    """
    SQLite implementation of the DatabaseConnector interface.

    Attributes:
        db_path: Path to the SQLite database file, or ':memory:'

    Example:
        >>> db = SQLiteConnector('bridge.db')
        >>> await db.open()
        >>> await db.exec('CREATE TABLE example (id INTEGER)')
        >>> await db.close()
    """

    def __init__(self, db_path: str, logger: Optional[logging.Logger] = None):
        super().__init__(logger)
        self.db_path = db_path

    @property
    def filename(self) -> Optional[str]:
        return self.db_path

    @property
    def backend_name(self) -> str:
        return 'SQLite'

    @property
    def database_url(self) -> str:
        if self.db_path == MEMORY_DATABASE:
            return 'sqlite+aiosqlite:///:memory:'

        # Convert file path to URL (works for relative and absolute paths)
        path_obj = pathlib.Path(self.db_path)
        if not path_obj.is_absolute():
            path_obj = path_obj.resolve()
        encoded_path = urllib.parse.quote(path_obj.as_posix(), safe='/:')
        return f'sqlite+aiosqlite:///{encoded_path}'

    def _engine_kwargs(self) -> Dict[str, Any]:
        kwargs = super()._engine_kwargs()
        if self.db_path == MEMORY_DATABASE:
            # Every new connection would otherwise see an empty database
            kwargs['poolclass'] = StaticPool
        return kwargs
