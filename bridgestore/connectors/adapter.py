"""
Abstract database connector for bridge persistence.

This module defines the DatabaseConnector abstract base class that every
backend adapter must inherit from, and AsyncEngineConnector, the shared
SQLAlchemy implementation the SQLite and PostgreSQL adapters build on.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import sqlparse
from sqlalchemy import exc, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from .errors import IntegrityError, QueryError, StorageConnectionError


class DatabaseConnector(ABC):
    """
    Abstract interface for a storage backend.

    The store owns exactly one connector for its whole lifetime. Migration
    steps, the schema version tracker and record entities are all handed
    the same instance.

    Statements use named parameters (``:name``) and are committed as soon
    as they succeed.

    Attributes:
        logger: Logger instance for connector events
        is_connected: Connection status

    Example:
        >>> db = SQLiteConnector('bridge.db')
        >>> await db.open()
        >>> row = await db.get('SELECT token FROM remote_id_token WHERE remote_id = :id',
        ...                    {'id': '1234'})
        >>> await db.close()
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize connector.

        Args:
            logger: Optional logger instance. If None, creates default logger.
        """
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self._is_connected = False

    @property
    def is_connected(self) -> bool:
        """True once open() succeeded and until close() is called."""
        return self._is_connected

    @property
    def filename(self) -> Optional[str]:
        """
        Path of the backing file, or None for network backends.

        Used by the backup service to decide whether a snapshot is possible.
        """
        return None

    @abstractmethod
    async def open(self) -> None:
        """
        Establish the underlying connection.

        Raises:
            StorageConnectionError: If the target is unreachable or malformed,
                or the connector is already open
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Release the underlying connection.

        Safe to call more than once.
        """
        pass

    @abstractmethod
    async def exec(self, statement: str) -> None:
        """
        Run one or more ``;`` separated statements that return no rows.

        Raises:
            QueryError: On syntax errors or constraint violations
        """
        pass

    @abstractmethod
    async def run(self, statement: str, params: Optional[Dict[str, Any]] = None) -> None:
        """
        Run a single parameterised statement that returns no rows.

        Raises:
            QueryError: On syntax errors or constraint violations
        """
        pass

    @abstractmethod
    async def get(self, statement: str,
                  params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        Run a query expected to return at most one row.

        Returns:
            The first row as a dict, or None if nothing matched

        Raises:
            QueryError: If the statement is malformed
        """
        pass

    @abstractmethod
    async def all(self, statement: str,
                  params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Run a query returning any number of rows.

        Returns:
            Rows as dicts in result order. Empty list if nothing matched.

        Raises:
            QueryError: If the statement is malformed
        """
        pass


class AsyncEngineConnector(DatabaseConnector):
    """
    SQLAlchemy asyncio implementation of the connector contract.

    Holds a single AsyncConnection from open() to close(). Operations on it
    are serialised with a lock so callers may issue independent writes with
    asyncio.gather() without interleaving statements on the connection.

    Subclasses provide the database URL and any engine options.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        super().__init__(logger)
        self.engine: Optional[AsyncEngine] = None
        self.conn: Optional[AsyncConnection] = None
        self._lock = asyncio.Lock()

    @property
    @abstractmethod
    def database_url(self) -> str:
        """SQLAlchemy URL of the target database."""
        pass

    @property
    def backend_name(self) -> str:
        return self.__class__.__name__

    def _engine_kwargs(self) -> Dict[str, Any]:
        return {'echo': False}

    async def open(self) -> None:
        if self._is_connected:
            raise StorageConnectionError(f"Connector already open: {self.backend_name}")

        try:
            self.engine = create_async_engine(self.database_url, **self._engine_kwargs())
            self.conn = await self.engine.connect()
            # Fail here rather than on first use if the target is unusable
            await self.conn.execute(text('SELECT 1'))
            await self.conn.commit()
        except (exc.SQLAlchemyError, OSError) as e:
            self.logger.error('Error opening database: %s', e)
            await self._dispose()
            raise StorageConnectionError(
                f"Couldn't open {self.backend_name} database: {e}"
            ) from e

        self._is_connected = True
        self.logger.info('Opened %s database', self.backend_name)

    async def close(self) -> None:
        if not self._is_connected:
            return
        self._is_connected = False
        await self._dispose()
        self.logger.info('Closed %s database', self.backend_name)

    async def _dispose(self) -> None:
        if self.conn is not None:
            try:
                await self.conn.close()
            except exc.SQLAlchemyError as e:
                self.logger.warning('Error closing connection: %s', e)
            self.conn = None
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None

    def _require_connection(self) -> AsyncConnection:
        if not self._is_connected or self.conn is None:
            raise StorageConnectionError("Database is not open")
        return self.conn

    async def _execute(self, statements: List[str],
                       params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Execute statements in one transaction and commit.

        Returns the rows of the last statement. Any driver error rolls the
        transaction back and is re-raised as a QueryError.
        """
        conn = self._require_connection()
        rows: List[Dict[str, Any]] = []

        async with self._lock:
            try:
                for statement in statements:
                    result = await conn.execute(text(statement), params or {})
                    rows = [dict(row) for row in result.mappings()] if result.returns_rows else []
                await conn.commit()
            except exc.IntegrityError as e:
                await conn.rollback()
                raise IntegrityError(f"Constraint violated: {e.orig}") from e
            except exc.SQLAlchemyError as e:
                await conn.rollback()
                raise QueryError(f"Statement failed: {e}") from e

        return rows

    async def exec(self, statement: str) -> None:
        statements = [s.strip() for s in sqlparse.split(statement) if s.strip()]
        if not statements:
            return
        await self._execute(statements)

    async def run(self, statement: str, params: Optional[Dict[str, Any]] = None) -> None:
        await self._execute([statement], params)

    async def get(self, statement: str,
                  params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        rows = await self._execute([statement], params)
        return rows[0] if rows else None

    async def all(self, statement: str,
                  params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return await self._execute([statement], params)
