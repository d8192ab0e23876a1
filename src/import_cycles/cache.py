# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Per-session cache for import cycle analysis.

One AnalysisCache is created per analysis session and passed explicitly into
every operation; there is no module-level cache. It holds four independent maps
with two different invalidation policies:

- existence: FileId -> bool. Sticky. Once a path has been checked it is never
  re-checked for the rest of the session, even if the file is created or deleted
  afterwards. The workspace is assumed not to change mid-session.
- dependencies: FileId -> DependencyEntry. Fingerprint-validated. An entry is only
  used while the file's live fingerprint equals the stored one.
- patterns: glob string -> compiled regex. Pure memoization.
- reported_cycles: set of cycle signatures already returned to a caller.

Entries are never evicted individually; clear() resets everything.

Thread Safety:
- NOT thread-safe: one logical writer per instance
- Use one cache per worker when analyzing files in parallel
"""

import logging
from typing import Dict, Pattern, Set

from import_cycles.models import CacheStatistics, DependencyEntry

logger = logging.getLogger(__name__)


class AnalysisCache:
    """Session-scoped caches for existence checks, dependency edges and cycles.

    Usage:
        cache = AnalysisCache()
        cycles = find_circular_dependencies("/repo/src/a.ts", options, cache)
        stats = cache.statistics()
        cache.clear()
    """

    def __init__(self) -> None:
        """Initialize an empty cache."""
        # Sticky snapshot: never re-checked within a session
        self.existence: Dict[str, bool] = {}

        # Validated against the live fingerprint on every read
        self.dependencies: Dict[str, DependencyEntry] = {}

        self.patterns: Dict[str, Pattern[str]] = {}
        self.reported_cycles: Set[str] = set()

        self.stats = CacheStatistics()

    def clear(self) -> None:
        """Empty every map and reset statistics.

        The instance stays usable immediately afterwards.
        """
        self.existence.clear()
        self.dependencies.clear()
        self.patterns.clear()
        self.reported_cycles.clear()
        self.stats = CacheStatistics()

        logger.debug("Analysis cache cleared")

    def statistics(self) -> CacheStatistics:
        """Get a snapshot of the cache counters.

        Returns:
            CacheStatistics copy, safe to keep after further analysis.
        """
        return CacheStatistics(
            existence_probes=self.stats.existence_probes,
            existence_hits=self.stats.existence_hits,
            dependency_hits=self.stats.dependency_hits,
            dependency_misses=self.stats.dependency_misses,
            dependency_refreshes=self.stats.dependency_refreshes,
            reported_cycles=len(self.reported_cycles),
        )

    def __len__(self) -> int:
        return len(self.dependencies)


def create_cache() -> AnalysisCache:
    """Create a new, empty analysis cache."""
    return AnalysisCache()


def clear_cache(cache: AnalysisCache) -> None:
    """Reset a cache in place."""
    cache.clear()
