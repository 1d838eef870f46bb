"""
Generic record gateway.

Routes query/insert/update/delete of any RecordEntity subclass through the
active connector. The gateway knows nothing about the SQL of the entities
it serves.
"""

import logging
from typing import Any, Dict, Optional, Type, TypeVar

from bridgestore.connectors import DatabaseConnector
from bridgestore.records.entity import RecordEntity

E = TypeVar('E', bound=RecordEntity)


class RecordGateway:
    """
    Uniform entry point for record entity operations.

    Reads and writes follow different error policies:

    - get() logs a failed query and returns None, so a None result means
      "missing or failed". Pass raise_errors=True to receive the error.
    - insert(), update() and delete() let errors propagate unchanged.

    Example:
        >>> gateway = RecordGateway(db)
        >>> emoji = await gateway.get(DbEmoji, {'emoji_id': '1234'})
        >>> if emoji and emoji.result:
        ...     print(emoji.mxc_url)
    """

    def __init__(self, db: DatabaseConnector, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    async def get(self, entity_cls: Type[E], params: Dict[str, Any],
                  raise_errors: bool = False) -> Optional[E]:
        """
        Query a fresh ``entity_cls`` instance.

        Args:
            entity_cls: RecordEntity subclass, constructible without arguments
            params: Lookup parameters understood by the entity
            raise_errors: Propagate query errors instead of returning None

        Returns:
            The queried entity (check ``result`` to see whether it matched),
            or None if the query failed
        """
        entity = entity_cls()
        name = entity_cls.__name__
        self.logger.debug('get <%s with params %s>', name, params)
        try:
            await entity.run_query(self.db, params)
        except Exception as e:
            if raise_errors:
                raise
            self.logger.warning('get <%s with params %s> FAILED with exception %s',
                                name, params, e)
            return None

        self.logger.debug('Finished query with %s', 'Results' if entity.result else 'No Results')
        return entity

    async def insert(self, entity: RecordEntity) -> None:
        self.logger.debug('insert <%s>', type(entity).__name__)
        await entity.insert(self.db)

    async def update(self, entity: RecordEntity) -> None:
        self.logger.debug('update <%s>', type(entity).__name__)
        await entity.update(self.db)

    async def delete(self, entity: RecordEntity) -> None:
        self.logger.debug('delete <%s>', type(entity).__name__)
        await entity.delete(self.db)
