# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""File existence and change detection.

Fingerprints are built from a file's modification time and byte size. They are a
cheap change detector, compared only for equality, and never used to verify
content.

Two invalidation policies live side by side:
- exists(): sticky per session (see AnalysisCache.existence)
- is_valid(): re-stats the file on every call and compares fingerprints
"""

import logging
import os
from typing import Optional

from import_cycles.cache import AnalysisCache

logger = logging.getLogger(__name__)


def fingerprint(filepath: str) -> Optional[str]:
    """Compute the fingerprint of a file.

    Args:
        filepath: Absolute path to the file.

    Returns:
        ``"<mtime_ns>-<size>"``, or None if the file cannot be stat'd
        (missing, permission denied, invalid path).
    """
    try:
        stat_result = os.stat(filepath)
    except (OSError, ValueError) as e:
        logger.debug(f"Cannot stat {filepath}: {e}")
        return None
    return f"{stat_result.st_mtime_ns}-{stat_result.st_size}"


def is_valid(filepath: str, cache: AnalysisCache) -> bool:
    """Check whether the cached dependency entry of a file is still current.

    Args:
        filepath: Absolute path to the file.
        cache: Session cache holding the dependency entries.

    Returns:
        True iff an entry exists and its fingerprint equals the live one. False if
        there is no entry, the file is now unreadable, or the fingerprint differs.
    """
    entry = cache.dependencies.get(filepath)
    if entry is None:
        return False

    current = fingerprint(filepath)
    if current is None:
        return False

    return entry.fingerprint == current


def exists(filepath: str, cache: AnalysisCache) -> bool:
    """Check whether a path exists, consulting the sticky existence cache first.

    The filesystem is probed at most once per path per session. Directories count
    as existing.

    Args:
        filepath: Absolute path to check.
        cache: Session cache.

    Returns:
        True if the path existed when it was first checked.
    """
    cached = cache.existence.get(filepath)
    if cached is not None:
        cache.stats.existence_hits += 1
        return cached

    try:
        found = os.path.exists(filepath)
    except ValueError:
        # Embedded null bytes and similar malformed paths
        found = False

    cache.existence[filepath] = found
    cache.stats.existence_probes += 1
    return found
