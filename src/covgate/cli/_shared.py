from __future__ import annotations

import logging

from covgate._meta import logger
from covgate.config import LOG_FORMAT


def resolve_use_color(*, color: bool, no_color: bool, color_allowed: bool) -> bool:
    """``--no-color`` wins over ``--color``; with neither, follow the output stream."""
    return not no_color and (color or color_allowed)


def configure_logging(*, quiet: bool, verbose: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)
