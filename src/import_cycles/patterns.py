# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Glob-style ignore patterns with per-session compilation cache.

Supported syntax:
- ``**`` matches any run of characters, including ``/``
- ``*`` matches any run of characters except ``/``
- ``?`` matches exactly one character

Patterns are searched for anywhere in the normalized path (they are not anchored),
so ``*.test.*`` matches ``/repo/src/a.test.ts``.
"""

import logging
import os
import re
from typing import Iterable, Pattern

from import_cycles.cache import AnalysisCache

logger = logging.getLogger(__name__)

_GLOB_TOKEN = re.compile(r"\*\*|\*|\?")


def _translate(pattern: str) -> str:
    parts = []
    position = 0
    for match in _GLOB_TOKEN.finditer(pattern):
        parts.append(re.escape(pattern[position : match.start()]))
        token = match.group(0)
        if token == "**":
            parts.append(".*")
        elif token == "*":
            parts.append("[^/]*")
        else:
            parts.append(".")
        position = match.end()
    parts.append(re.escape(pattern[position:]))
    return "".join(parts)


def pattern_to_regex(pattern: str, cache: AnalysisCache) -> Pattern[str]:
    """Compile a glob pattern, reusing the session's compiled copy if present.

    Args:
        pattern: Glob pattern.
        cache: Session cache whose ``patterns`` map memoizes compiled regexes.

    Returns:
        Compiled regular expression.
    """
    compiled = cache.patterns.get(pattern)
    if compiled is None:
        compiled = re.compile(_translate(pattern))
        cache.patterns[pattern] = compiled
        logger.debug(f"Compiled ignore pattern {pattern!r} -> {compiled.pattern!r}")
    return compiled


def should_ignore_file(filepath: str, patterns: Iterable[str], cache: AnalysisCache) -> bool:
    """Check whether a file matches any ignore pattern.

    Args:
        filepath: Path to test. Separators are normalized to ``/``.
        patterns: Glob patterns.
        cache: Session cache for compiled patterns.

    Returns:
        True if any pattern matches.
    """
    normalized = os.path.normpath(filepath).replace("\\", "/")
    return any(pattern_to_regex(p, cache).search(normalized) for p in patterns)
