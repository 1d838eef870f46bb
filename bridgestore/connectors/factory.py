"""Backend selection from database configuration."""

import logging
from typing import Optional

from .adapter import DatabaseConnector
from .errors import StorageConnectionError
from .postgres import PostgresConnector
from .sqlite import SQLiteConnector


def create_connector(config, logger: Optional[logging.Logger] = None) -> DatabaseConnector:
    """Build the connector named by a DatabaseConfig.

    A file path takes precedence over a connection string when both are
    configured.

    Args:
        config: DatabaseConfig (anything with filename and conn_string)
        logger: Logger handed to the connector

    Returns:
        Unopened connector

    Raises:
        StorageConnectionError: If neither a file path nor a connection
            string is configured
    """
    logger = logger or logging.getLogger(__name__)

    if config.filename:
        logger.info('Filename present in config, using sqlite')
        return SQLiteConnector(config.filename, logger=logger)
    if config.conn_string:
        logger.info('connString present in config, using postgres')
        return PostgresConnector(config.conn_string, logger=logger)

    raise StorageConnectionError(
        "No database configured: set either a filename or a connString"
    )
