# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Cycle canonicalization and display.

A raw traversal path is the DFS stack with the repeated file appended, for
example ``[a, b, c, b]``. The minimal cycle is the loop itself (``[b, c, b]``)
and its signature is the loop rotated to start at its smallest element, so the
same structural cycle always yields the same string no matter where a traversal
entered it.
"""

import os
from typing import List, Optional, Sequence

SIGNATURE_DELIMITER = "->"
DISPLAY_DELIMITER = " -> "


def minimal_cycle(raw_path: Sequence[str]) -> List[str]:
    """Strip the non-repeating prefix from a raw traversal path.

    Args:
        raw_path: Traversal stack with the repeated file appended last.

    Returns:
        The suffix starting at the first occurrence of the last element.
        Empty and single-element inputs, and paths whose last element does not
        occur earlier, are returned unchanged.
    """
    path = list(raw_path)
    if len(path) < 2:
        return path

    closing = path[-1]
    start = path.index(closing)
    if start == len(path) - 1:
        return path
    return path[start:]


def cycle_signature(raw_path: Sequence[str]) -> str:
    """Compute the rotation-invariant signature of a cycle.

    Args:
        raw_path: Traversal stack with the repeated file appended last.

    Returns:
        Loop members joined with ``->``, starting and ending at the
        lexicographically smallest member.
    """
    cycle = minimal_cycle(raw_path)
    if len(cycle) < 2 or cycle[0] != cycle[-1]:
        return SIGNATURE_DELIMITER.join(cycle)

    body = cycle[:-1]
    pivot = body.index(min(body))
    rotated = body[pivot:] + body[:pivot]
    rotated.append(rotated[0])
    return SIGNATURE_DELIMITER.join(rotated)


def format_cycle(cycle: Sequence[str], workspace_root: Optional[str] = None) -> str:
    """Render a cycle for messages, e.g. ``src/a.ts -> src/b.ts -> src/a.ts``.

    Paths are shown relative to workspace_root when given (and on the same
    drive), always with forward slashes.
    """
    shown = []
    for filepath in cycle:
        display = filepath
        if workspace_root:
            try:
                display = os.path.relpath(filepath, workspace_root)
            except ValueError:
                display = filepath
        shown.append(display.replace("\\", "/"))
    return DISPLAY_DELIMITER.join(shown)
