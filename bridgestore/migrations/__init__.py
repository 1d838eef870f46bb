"""
Schema migration package.

This package provides:
- MigrationStep / SqlMigrationStep: forward and rollback action pair
- MIGRATIONS: static registry of built-in steps by version
- SchemaVersionTracker: persisted schema version
- MigrationRunner: sequential upgrade with per-step rollback
- MigrationResult: outcome of one step
"""

from .registry import (
    CURRENT_SCHEMA,
    MIGRATIONS,
    StepDependencies,
    build_step,
    latest_version,
)
from .runner import MigrationResult, MigrationRunner, MigrationState
from .step import MigrationStep, SqlMigrationStep
from .tracker import SchemaVersionTracker

__all__ = [
    'CURRENT_SCHEMA',
    'MIGRATIONS',
    'StepDependencies',
    'build_step',
    'latest_version',
    'MigrationStep',
    'SqlMigrationStep',
    'SchemaVersionTracker',
    'MigrationRunner',
    'MigrationResult',
    'MigrationState',
]
