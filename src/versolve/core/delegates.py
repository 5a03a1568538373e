"""Stock resolver delegates.

Delegates observe resolution progress; none of them can influence it.
"""

from __future__ import annotations

import logging
import threading
from typing import Hashable

logger = logging.getLogger(__name__)


class NullDelegate:
    """Delegate that ignores every notification."""

    def added(self, identifier: Hashable) -> None:
        pass


class LoggingDelegate:
    """Delegate that logs each container as it enters consideration."""

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    def added(self, identifier: Hashable) -> None:
        logger.log(self._level, "Considering container %s", identifier)


class RecordingDelegate:
    """Delegate that records notified identifiers in arrival order.

    Safe to share with a resolver that prefetches on worker threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._added: list[Hashable] = []

    def added(self, identifier: Hashable) -> None:
        with self._lock:
            self._added.append(identifier)

    @property
    def identifiers(self) -> list[Hashable]:
        with self._lock:
            return list(self._added)
