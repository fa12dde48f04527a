"""
Base service class for the ladder batch engine.

Provides the shared store handle and an injectable clock for all service
layer operations.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

logger = logging.getLogger(__name__)

class BaseService:
    """Base class for all batch services."""

    def __init__(self, store, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize base service with the store accessor.

        Args:
            store: PlayerStore shared by every service in the process
            clock: Returns the current aware datetime; defaults to UTC now
        """
        self.store = store
        self._clock = clock

    def now(self) -> datetime:
        """Current time from the injected clock."""
        if self._clock is not None:
            return self._clock()
        return datetime.now(timezone.utc)
