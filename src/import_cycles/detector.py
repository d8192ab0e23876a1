# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Depth-first cycle detection over the import graph.

The graph is never built up front: edges are fetched lazily through imports_of
as the traversal reaches each file, so only the part reachable from the start
file is ever read.

Algorithm:
1. Push the start file onto the path stack (depth 0)
2. For each static edge of the file on top of the stack:
   - target already on the stack: a cycle. Canonicalize path + [target] and
     record it unless its signature was already reported in this session
   - otherwise descend into the target if the current depth is below max_depth
3. Pop the file once its edges are exhausted

Dynamic edges are skipped. There is no global visited set: a file may be
entered again through a different branch, because it can take part in several
distinct cycles. A file is never entered while it is already on the stack.

The traversal keeps an explicit frame stack instead of recursing, so large
max_depth values cannot exhaust the interpreter's recursion limit.
"""

import logging
from typing import Iterator, List, Set, Tuple

from import_cycles.cache import AnalysisCache
from import_cycles.canonical import cycle_signature, minimal_cycle
from import_cycles.extractor import imports_of
from import_cycles.models import CycleDetectionOptions, ImportEdge
from import_cycles.resolver import to_file_id

logger = logging.getLogger(__name__)


def find_cycles(
    start_file: str,
    max_depth: int,
    report_all_cycles: bool,
    options: CycleDetectionOptions,
    cache: AnalysisCache,
) -> List[List[str]]:
    """Find import cycles reachable from a file.

    Args:
        start_file: File to start from; normalized to a FileId.
        max_depth: Traversal ceiling. A file at depth ``d`` is only expanded into
            its imports while ``d < max_depth``; deeper branches are silently cut.
        report_all_cycles: False stops at the first newly recorded cycle; True
            explores every branch.
        options: Resolver inputs (workspace root, barrels, extensions, aliases).
        cache: Session cache. Its reported_cycles set suppresses cycles already
            returned by an earlier call.

    Returns:
        Newly recorded cycles, each a list of FileIds that starts and ends at the
        same file.
    """
    start = to_file_id(start_file)
    cycles: List[List[str]] = []
    truncated = 0

    path: List[str] = [start]
    on_path: Set[str] = {start}
    frames: List[Tuple[str, Iterator[ImportEdge], int]] = [
        (start, iter(imports_of(start, options, cache)), 0)
    ]

    while frames:
        current, edges, depth = frames[-1]
        edge = next(edges, None)

        if edge is None:
            frames.pop()
            path.pop()
            on_path.discard(current)
            continue

        if edge.dynamic or edge.resolved is None:
            continue

        target = edge.resolved

        if target in on_path:
            raw_path = path + [target]
            signature = cycle_signature(raw_path)
            if signature in cache.reported_cycles:
                continue

            cache.reported_cycles.add(signature)
            cycles.append(minimal_cycle(raw_path))
            logger.debug(f"Cycle found from {start}: {signature}")

            if not report_all_cycles:
                break
            continue

        if depth < max_depth:
            path.append(target)
            on_path.add(target)
            frames.append((target, iter(imports_of(target, options, cache)), depth + 1))
        else:
            truncated += 1

    if truncated:
        logger.debug(f"Depth limit {max_depth} cut {truncated} branches from {start}")

    return cycles


def find_circular_dependencies(
    start_file: str, options: CycleDetectionOptions, cache: AnalysisCache
) -> List[List[str]]:
    """Find import cycles reachable from a file using the bounds in options.

    Example:
        cache = create_cache()
        options = CycleDetectionOptions(max_depth=10, report_all_cycles=True)
        for cycle in find_circular_dependencies("/repo/src/a.ts", options, cache):
            print(format_cycle(cycle, "/repo"))
    """
    return find_cycles(
        start_file,
        options.max_depth,
        options.report_all_cycles,
        options,
        cache,
    )
