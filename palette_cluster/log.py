"""
Logging setup.

The package logs through loguru and stays silent until configure_logging()
is called.
"""

import sys

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}"


def configure_logging(level: str = 'INFO', sink=sys.stderr) -> int:
    """
    Replace loguru's handlers with a single sink and enable package logs.

    Returns:
        The loguru handler id of the new sink
    """
    logger.remove()
    handler_id = logger.add(sink, format=LOG_FORMAT, level=level.upper())
    logger.enable('palette_cluster')
    return handler_id
