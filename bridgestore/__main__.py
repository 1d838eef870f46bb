"""Migrate a bridge database from the command line.

    python -m bridgestore config.yaml [--backup] [--target N] [--log-level LEVEL]

Opens the configured database, optionally backs it up, applies any
outstanding schema steps and prints the resulting schema version.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from bridgestore.config import configure_logger, load_config, parse_log_level
from bridgestore.connectors import FatalMigrationError, StorageError
from bridgestore.store import BridgeStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='bridgestore',
        description='Apply bridge database schema migrations',
    )
    parser.add_argument('config', help='Path to JSON or YAML config file')
    parser.add_argument(
        '--backup',
        action='store_true',
        help='Copy the SQLite file to <filename>.backup before migrating'
    )
    parser.add_argument(
        '--target',
        type=int,
        default=0,
        help='Schema version to migrate to (default: latest)'
    )
    parser.add_argument(
        '--log-level',
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: logging.level from config, else INFO)'
    )
    return parser


async def migrate(store: BridgeStore, backup: bool, target: int) -> int:
    try:
        if backup:
            await store.backup()
        return await store.init(override_version=target)
    finally:
        await store.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    db_config, conf = load_config(args.config)

    logging_conf = conf.get('logging') or {}
    level = parse_log_level(args.log_level or logging_conf.get('level', 'info'))
    logger = configure_logger('bridgestore', log_file=logging_conf.get('file'), log_level=level)

    store = BridgeStore(db_config, logger=logger)
    try:
        version = asyncio.run(migrate(store, args.backup, args.target))
    except FatalMigrationError as e:
        logger.critical('%s Database state is unknown, restore from backup.', e)
        return 1
    except StorageError as e:
        logger.error('%s', e)
        return 1

    print(f'Database schema is at version {version}')
    return 0


if __name__ == '__main__':
    sys.exit(main())
