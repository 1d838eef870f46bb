"""
Record entities and the generic gateway that serves them.
"""

from .emoji import DbEmoji
from .entity import RecordEntity
from .event import DbEvent
from .gateway import RecordGateway

__all__ = [
    'RecordEntity',
    'RecordGateway',
    'DbEmoji',
    'DbEvent',
]
