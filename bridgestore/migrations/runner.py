#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Sequential schema migration runner.

Walks the database from its current schema version to the target one step
at a time. The schema version row is only written once a step's forward
action has succeeded, so an interrupted or failed run restarts from the
last step that was fully applied.

    IDLE -> UPGRADING(v) -> COMMITTED | ROLLED_BACK | FATAL
"""
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from bridgestore.connectors import FatalMigrationError, MigrationError
from bridgestore.migrations.registry import (
    CURRENT_SCHEMA,
    MIGRATIONS,
    StepDependencies,
    StepFactory,
    build_step,
    latest_version,
)
from bridgestore.migrations.step import MigrationStep
from bridgestore.migrations.tracker import SchemaVersionTracker


class MigrationState(Enum):
    IDLE = 'idle'
    UPGRADING = 'upgrading'
    COMMITTED = 'committed'
    ROLLED_BACK = 'rolled_back'
    FATAL = 'fatal'


@dataclass
class MigrationResult:
    """
    Result of one migration step.

    Attributes:
        success: Whether the step was applied and its version persisted
        version: Schema version the step upgrades to
        description: Step description
        execution_time_ms: Execution time in milliseconds
        error_message: Error message if failed (None if success)
    """
    success: bool
    version: int
    description: str
    execution_time_ms: int
    error_message: Optional[str] = None


class MigrationRunner:
    """
    Applies outstanding schema steps in version order.

    Each step runs against the store's connector. On failure the step's
    rollback is invoked and the run stops: a successful rollback raises
    MigrationError, a failed one raises FatalMigrationError.

    Attributes:
        store: BridgeStore passed to every step
        tracker: Reads and writes the persisted schema version
        registry: Version to step factory mapping
        state: Current MigrationState
        current_step: Version being applied while UPGRADING
        results: MigrationResult of every step attempted by the last run

    Example:
        runner = MigrationRunner(store)
        version = await runner.run(target=10)
    """

    def __init__(self, store, tracker: Optional[SchemaVersionTracker] = None,
                 registry: Optional[Dict[int, StepFactory]] = None,
                 logger: Optional[logging.Logger] = None):
        self.store = store
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.tracker = tracker or SchemaVersionTracker(store.db, self.logger)
        self.registry = MIGRATIONS if registry is None else registry
        self.state = MigrationState.IDLE
        self.current_step: Optional[int] = None
        self.results: List[MigrationResult] = []

    async def run(self, target: Optional[int] = None,
                  dependencies: Optional[StepDependencies] = None) -> int:
        """
        Upgrade the database to ``target``.

        Args:
            target: Version to reach. None or 0 means CURRENT_SCHEMA.
            dependencies: Collaborators for steps that need them

        Returns:
            Schema version the database is at once the run committed

        Raises:
            MigrationError: A step failed and was rolled back, or the target
                has no registered step
            FatalMigrationError: A step failed and so did its rollback
        """
        if self.state is MigrationState.UPGRADING:
            raise RuntimeError('Migration already in progress')

        dependencies = dependencies or StepDependencies(logger=self.logger)
        target = target or CURRENT_SCHEMA
        latest = latest_version(self.registry)
        if target > latest:
            raise MigrationError(
                f"Target schema v{target} is newer than the latest known step v{latest}",
                target,
            )

        self.results = []
        version = await self.tracker.get_version()
        self.logger.info('Database schema version is %d, latest version is %d',
                         version, target)
        if version > target:
            self.logger.warning('Database schema v%d is ahead of target v%d, nothing to do',
                                version, target)

        while version < target:
            next_version = version + 1
            try:
                step = build_step(next_version, dependencies, self.registry)
            except Exception:
                # Earlier steps of this run stay committed; nothing is in flight
                self.state = MigrationState.IDLE
                self.current_step = None
                raise
            self.state = MigrationState.UPGRADING
            self.current_step = next_version
            await self._apply(step, next_version)
            version = next_version

        self.state = MigrationState.COMMITTED
        self.current_step = None
        self.logger.info('Updated database to the latest schema')
        return version

    async def _apply(self, step: MigrationStep, version: int) -> None:
        self.logger.info('Updating database to v%d, "%s"', version, step.description)
        start_time = time.time()

        try:
            await step.run(self.store)
            await self.tracker.set_version(version)
        except Exception as e:
            self.logger.error("Couldn't update database to schema %d: %s", version, e,
                              exc_info=True)
            self.logger.info('Rolling back to version %d', version - 1)
            await self._rollback(step, version, e, start_time)
            self.state = MigrationState.ROLLED_BACK
            raise MigrationError('Failure to update to latest schema.', version) from e

        self.results.append(MigrationResult(
            success=True,
            version=version,
            description=step.description,
            execution_time_ms=int((time.time() - start_time) * 1000),
        ))
        self.logger.info('Updated database to version %d', version)

    async def _rollback(self, step: MigrationStep, version: int,
                        cause: Exception, start_time: float) -> None:
        try:
            await step.rollback(self.store)
        except Exception as rollback_error:
            self.state = MigrationState.FATAL
            self.results.append(MigrationResult(
                success=False,
                version=version,
                description=step.description,
                execution_time_ms=int((time.time() - start_time) * 1000),
                error_message=f'{cause}; rollback failed: {rollback_error}',
            ))
            self.logger.critical('Rollback of schema v%d failed: %s', version, rollback_error,
                                 exc_info=True)
            raise FatalMigrationError(
                'Failure to update to latest schema. And failed to rollback.', version
            ) from rollback_error

        self.results.append(MigrationResult(
            success=False,
            version=version,
            description=step.description,
            execution_time_ms=int((time.time() - start_time) * 1000),
            error_message=str(cause),
        ))
