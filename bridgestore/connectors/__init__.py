"""
Connector layer for bridge persistence.

This package provides the DatabaseConnector interface that defines the
contract for all backends, plus the SQLite (file) and PostgreSQL (network)
adapters.
"""

from .adapter import AsyncEngineConnector, DatabaseConnector
from .errors import (
    FatalMigrationError,
    IntegrityError,
    MigrationError,
    QueryError,
    StorageConnectionError,
    StorageError,
)
from .factory import create_connector
from .postgres import PostgresConnector
from .sqlite import MEMORY_DATABASE, SQLiteConnector

__all__ = [
    # Connectors
    "DatabaseConnector",
    "AsyncEngineConnector",
    "SQLiteConnector",
    "PostgresConnector",
    "create_connector",
    "MEMORY_DATABASE",
    # Errors
    "StorageError",
    "StorageConnectionError",
    "QueryError",
    "IntegrityError",
    "MigrationError",
    "FatalMigrationError",
]
