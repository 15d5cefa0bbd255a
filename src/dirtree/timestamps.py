"""Local-time rendering of filesystem modification instants."""

from __future__ import annotations

import logging
from datetime import datetime

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TIMESTAMP_WIDTH = 19
UNAVAILABLE = "unavailable".ljust(TIMESTAMP_WIDTH)


def format_timestamp(instant_ns: int) -> str:
    try:
        moment = datetime.fromtimestamp(instant_ns / 1_000_000_000)
    except (OverflowError, OSError, ValueError) as exc:
        logger.debug("cannot convert mtime %s to local time: %s", instant_ns, exc)
        return UNAVAILABLE
    return moment.strftime(TIMESTAMP_FORMAT).ljust(TIMESTAMP_WIDTH)
