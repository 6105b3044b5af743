"""
Bounded parse cache keyed by format string.
"""

import logging
import threading
from collections import OrderedDict
from typing import Callable

from .models import ParsedFormat

logger = logging.getLogger(__name__)


class FormatCache:
    """
    Least-recently-used cache of parsed formats.

    Reads and writes hold a lock. Two threads missing on the same key may both
    parse; parsing is idempotent so the last write wins.
    """

    def __init__(self, max_size: int = 100):
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of entries kept
        """
        self.max_size = max_size
        self._entries: "OrderedDict[str, ParsedFormat]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get_or_parse(self, format_string: str, parse: Callable[[str], ParsedFormat]) -> ParsedFormat:
        """
        Return the cached parse of ``format_string``, parsing on a miss.

        Args:
            format_string: Cache key
            parse: Parser invoked outside the lock on a miss

        Returns:
            ParsedFormat for ``format_string``
        """
        with self._lock:
            parsed = self._entries.get(format_string)
            if parsed is not None:
                self._entries.move_to_end(format_string)
                self.hits += 1
                return parsed
            self.misses += 1

        logger.debug("Parse cache miss for %r", format_string)
        parsed = parse(format_string)

        with self._lock:
            self._entries[format_string] = parsed
            self._entries.move_to_end(format_string)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted %r from parse cache", evicted)
        return parsed

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, format_string: object) -> bool:
        with self._lock:
            return format_string in self._entries
