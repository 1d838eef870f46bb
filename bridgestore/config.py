#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import yaml

DEFAULT_LOG_FORMAT = '[%(asctime).19s] [%(name)s] [%(levelname)s] %(message)s'


@dataclass
class DatabaseConfig:
    """Database section of the bridge configuration.

    Exactly one backend is used: filename selects SQLite and wins over
    conn_string, which selects PostgreSQL.

    Attributes:
        filename: SQLite database path, or ':memory:'
        conn_string: PostgreSQL connection URL
    """

    filename: Optional[str] = None
    conn_string: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'DatabaseConfig':
        """Build from the ``database`` mapping of a config file.

        Both ``connString`` and ``conn_string`` spellings are accepted.
        """
        data = data or {}
        return cls(
            filename=data.get('filename'),
            conn_string=data.get('connString', data.get('conn_string')),
        )


def configure_logger(logger,
                     log_file=None,
                     log_format=DEFAULT_LOG_FORMAT,
                     log_level=logging.INFO):
    """Configure a logger with a file or stream handler

    Args:
        logger: Logger instance or logger name string
        log_file: File path string or file-like object (None for stderr)
        log_format: Format string for log messages
        log_level: Logging level (e.g., logging.INFO, logging.DEBUG)

    Returns:
        Configured logger instance
    """
    if isinstance(log_file, str):
        handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    else:
        handler = logging.StreamHandler(log_file)  # Default to stderr if None

    if isinstance(logger, str):
        logger = logging.getLogger(logger)

    handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(handler)
    logger.setLevel(log_level)

    return logger


def parse_log_level(level_name: str) -> int:
    """Map a level name such as 'info' to its logging constant.

    Raises:
        ValueError: If the name is not a logging level
    """
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    return level


def load_config(config_file: str) -> Tuple[DatabaseConfig, Dict[str, Any]]:
    """Load configuration from a JSON or YAML file

    Args:
        config_file: Path to the config file. ``.yaml``/``.yml`` files are
            parsed as YAML, anything else as JSON.

    Returns:
        Tuple of (database_config, conf) where conf is the full parsed
        configuration dictionary
    """
    with open(config_file, 'r', encoding='utf-8') as fp:
        if config_file.endswith(('.yaml', '.yml')):
            conf = yaml.safe_load(fp) or {}
        else:
            conf = json.load(fp)

    return DatabaseConfig.from_dict(conf.get('database')), conf
