"""
bridgestore - persistence layer for a Matrix chat bridge.

Versioned schema migrations with per-step rollback, pre-migration
backups and a generic record gateway over SQLite or PostgreSQL.
"""

from bridgestore.config import DatabaseConfig
from bridgestore.migrations import CURRENT_SCHEMA
from bridgestore.store import BridgeStore

__version__ = '0.1.0'

__all__ = [
    'BridgeStore',
    'DatabaseConfig',
    'CURRENT_SCHEMA',
]
