"""
Record entity contract.

A record entity is a typed object that knows how to load itself from the
database and how to write itself back. Entities never hold a connector;
the gateway hands them one for each operation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from bridgestore.connectors import DatabaseConnector


class RecordEntity(ABC):
    """
    Base class for storage-backed records.

    Attributes:
        queried: True once run_query() has completed
        result: True if the last query found at least one row
    """

    def __init__(self):
        self.queried = False
        self.result = False

    @abstractmethod
    async def run_query(self, db: DatabaseConnector, params: Dict[str, Any]) -> None:
        """
        Load the record matching ``params`` into this instance.

        Must set ``result``. Finding nothing is not an error.

        Raises:
            ValueError: If ``params`` names no supported lookup key
            QueryError: If the query fails
        """
        pass

    @abstractmethod
    async def insert(self, db: DatabaseConnector) -> None:
        pass

    @abstractmethod
    async def update(self, db: DatabaseConnector) -> None:
        pass

    @abstractmethod
    async def delete(self, db: DatabaseConnector) -> None:
        pass

    def _mark_queried(self, found: bool) -> None:
        self.queried = True
        self.result = found
