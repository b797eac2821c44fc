"""In-memory, time-boxed cache for the catalog read."""
import logging
import time
from typing import Callable, Optional, Protocol

from models.schema import SchemaDocument

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


class SchemaSource(Protocol):
    def read(self) -> SchemaDocument: ...


class SchemaCache:
    """
    Single slot holding (schema, timestamp). A stale or empty slot is refilled
    from the reader and replaced wholesale. Concurrent misses may both hit the
    reader; the last one to finish wins.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._slot: Optional[tuple[SchemaDocument, float]] = None

    def get(self, reader: SchemaSource) -> SchemaDocument:
        slot = self._slot
        now = self._clock()
        if slot is not None and now - slot[1] < self.ttl_seconds:
            logger.debug("Schema cache hit (age %.0fs)", now - slot[1])
            return slot[0]

        logger.info("Schema cache miss, reading catalog")
        schema = reader.read()
        self._slot = (schema, self._clock())
        return schema

    def invalidate(self) -> None:
        self._slot = None
