"""
Storage-specific exceptions.

This module defines the exception hierarchy for storage operations,
enabling precise error handling at different layers of the bridge.
"""


class StorageError(Exception):
    """
    Base exception for storage errors.

    All storage-related exceptions inherit from this base class,
    allowing catch-all error handling when needed.
    """
    pass


class StorageConnectionError(StorageError):
    """
    Storage connection failed.

    Raised when:
    - No database is configured
    - The database file or server cannot be reached
    - Authentication fails
    - An operation is attempted on a closed connector
    """
    pass


class QueryError(StorageError):
    """
    Statement execution failed.

    Raised when:
    - SQL syntax error
    - Referenced table or column does not exist
    - The driver rejects the statement
    """
    pass


class IntegrityError(QueryError):
    """
    Data integrity violation.

    Raised when:
    - Unique constraint violated
    - NOT NULL constraint violated
    - Foreign key or check constraint violated
    """
    pass


class MigrationError(StorageError):
    """
    Schema migration failed and was rolled back.

    The persisted schema version still names the last step that was
    fully applied, so the migration can be retried from there.
    """

    def __init__(self, message: str, version: int = 0):
        super().__init__(message)
        self.version = version


class FatalMigrationError(MigrationError):
    """
    Schema migration failed and its rollback failed too.

    The database is in an indeterminate state. The bridge must not
    continue to serve requests.
    """
    pass
