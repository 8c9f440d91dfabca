"""
Result Cache

TTL and size bounded in-process cache for resolution outcomes.

The store is split into lock-striped segments: a key only ever takes its own
segment's lock, so lookups and writes for keys in different segments do not
wait on each other. Entries are immutable and swapped in whole, so a reader
sees either the previous entry or the new one.
"""

import logging
import threading
import time
from collections import OrderedDict, namedtuple

logger = logging.getLogger(__name__)


DEFAULT_TTL_SECONDS = 300
DEFAULT_MAX_SIZE = 500
DEFAULT_SEGMENTS = 16

CacheEntry = namedtuple('CacheEntry', 'value expires_at')


def normalize_key(text):
    """Cache key for free-text city input.

    Leading/trailing whitespace is trimmed, internal runs of whitespace
    collapse to one space, and the result is lower-cased.
    """
    return ' '.join((text or '').split()).lower()


class _Segment:

    def __init__(self):
        self.lock = threading.Lock()
        self.entries = OrderedDict()


class ResultCache:
    """Passive-expiry cache that refuses non-cacheable values.

    A value whose ``cacheable`` attribute is false (a not-found or upstream
    failure outcome) is never stored.

    ``max_size`` bounds the whole cache. The entry count is kept under its
    own lock, held only while the count changes; eviction starts only once
    the count passes ``max_size`` and takes one segment lock at a time,
    beginning with the oldest entry of the segment just written.
    """

    def __init__(self, ttl_seconds=DEFAULT_TTL_SECONDS, max_size=DEFAULT_MAX_SIZE,
                 segments=DEFAULT_SEGMENTS, clock=time.monotonic, name='cache'):
        if max_size < 1:
            raise ValueError('max_size must be at least 1')
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self.clock = clock
        self.name = name
        self._segments = [_Segment() for _ in range(max(1, segments))]
        self._count = 0
        self._count_lock = threading.Lock()

    def _index(self, key):
        return hash(key) % len(self._segments)

    def _adjust_count(self, delta):
        with self._count_lock:
            self._count += delta
            return self._count

    def _over_capacity(self):
        with self._count_lock:
            return self._count > self.max_size

    def get(self, key):
        segment = self._segments[self._index(key)]
        with segment.lock:
            entry = segment.entries.get(key)
            if entry is None:
                return None
            if self.clock() >= entry.expires_at:
                del segment.entries[key]
                self._adjust_count(-1)
                logger.debug('%s: expired entry for %r', self.name, key)
                return None
            return entry.value

    def put(self, key, value, ttl=None):
        if not getattr(value, 'cacheable', True):
            logger.debug('%s: not caching %r', self.name, key)
            return False

        ttl = self.ttl_seconds if ttl is None else ttl
        entry = CacheEntry(value, self.clock() + ttl)
        index = self._index(key)
        segment = self._segments[index]
        with segment.lock:
            added = segment.entries.pop(key, None) is None
            segment.entries[key] = entry
            total = self._adjust_count(1) if added else 0
        if total > self.max_size:
            self._evict_excess(index)
        return True

    def _evict_excess(self, start):
        """Drop oldest entries until the cache is back within ``max_size``.

        The segment that was just written keeps its newest entry.
        """
        n = len(self._segments)
        for offset in range(n):
            if not self._over_capacity():
                return
            segment = self._segments[(start + offset) % n]
            keep = 1 if offset == 0 else 0
            with segment.lock:
                while len(segment.entries) > keep and self._over_capacity():
                    evicted, _ = segment.entries.popitem(last=False)
                    self._adjust_count(-1)
                    logger.debug('%s: evicted %r', self.name, evicted)

    def invalidate(self, key):
        segment = self._segments[self._index(key)]
        with segment.lock:
            if segment.entries.pop(key, None) is not None:
                self._adjust_count(-1)

    def clear(self):
        for segment in self._segments:
            with segment.lock:
                dropped = len(segment.entries)
                segment.entries.clear()
                self._adjust_count(-dropped)

    def __len__(self):
        return sum(len(segment.entries) for segment in self._segments)
