"""
Migration step contract.

A migration step moves the database from schema version N-1 to N. Each
step carries a forward action and the rollback that undoes it:

- MigrationStep: abstract forward/rollback pair
- SqlMigrationStep: step whose actions are plain UP/DOWN SQL scripts

Steps are built on demand by the runner and discarded once applied. Only
their effect on the database and the schema version row is persisted.
"""

from abc import ABC, abstractmethod


class MigrationStep(ABC):
    """
    Forward/rollback action pair for one schema version.

    Attributes:
        version: Schema version this step upgrades to
        description: Human readable summary logged while applying it
    """

    version: int = 0
    description: str = ''

    @abstractmethod
    async def run(self, store) -> None:
        """
        Apply the step.

        Args:
            store: BridgeStore whose connector the step operates on

        Raises:
            Exception: Any failure; the runner then calls rollback()
        """
        pass

    @abstractmethod
    async def rollback(self, store) -> None:
        """
        Undo whatever run() may have done, including a partial run.

        Raises:
            Exception: Any failure; the runner treats it as fatal
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(v{self.version}, {self.description})>"


class SqlMigrationStep(MigrationStep):
    """
    Step defined by an UP and a DOWN SQL script.

    Scripts may hold several ``;`` separated statements. DOWN scripts
    should use ``IF EXISTS`` forms so they also undo a partially applied
    UP script.

    Example:
        >>> class AddQuotes(SqlMigrationStep):
        ...     version = 3
        ...     description = 'Quotes table'
        ...     up_sql = 'CREATE TABLE quotes (id INTEGER PRIMARY KEY);'
        ...     down_sql = 'DROP TABLE IF EXISTS quotes;'
    """

    up_sql: str = ''
    down_sql: str = ''

    async def run(self, store) -> None:
        await store.db.exec(self.up_sql)

    async def rollback(self, store) -> None:
        await store.db.exec(self.down_sql)
