"""Last operational error shown to the user."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class ErrorChannel:
    """Holds the most recent user-facing error until the next success."""

    def __init__(self):
        self._last: Optional[str] = None

    @property
    def last(self) -> Optional[str]:
        return self._last

    def report(self, message: str) -> None:
        logger.error(message)
        self._last = message

    def clear(self) -> None:
        self._last = None
