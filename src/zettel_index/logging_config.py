"""Logging setup shared by the CLI and the MCP server."""

import sys

from loguru import logger

from zettel_index.config import LOG_LEVEL

_FORMAT = "{level.icon} {message}"
_VERBOSE_FORMAT = "{time:HH:mm:ss} {level.icon} {name}:{line} {message}"


def configure_logging(*, verbose: bool = False) -> None:
    """Route loguru output to stderr.

    ``verbose`` forces DEBUG and adds source locations; otherwise the level
    comes from ``ZETTEL_LOG_LEVEL`` (default INFO). stdout is left to command
    output and the MCP stdio transport.
    """
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG", format=_VERBOSE_FORMAT)
    else:
        logger.add(sys.stderr, level=LOG_LEVEL, format=_FORMAT)
