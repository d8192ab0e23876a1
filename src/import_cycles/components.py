# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Strongly connected components of the import graph.

Answers "is this file part of any cycle?" without enumerating cycle paths. The
static (non-dynamic) graph reachable from a start file is discovered
breadth-first through imports_of, bounded by max_depth, and loaded into a
networkx DiGraph for grouping. Components with more than one file, or a file
importing itself, contain at least one cycle.
"""

import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Sequence

import networkx as nx

from import_cycles.cache import AnalysisCache
from import_cycles.extractor import imports_of
from import_cycles.models import CycleDetectionOptions
from import_cycles.resolver import to_file_id

logger = logging.getLogger(__name__)


def _reachable_graph(
    start: str, options: CycleDetectionOptions, cache: AnalysisCache
) -> nx.DiGraph:
    """Collect the static graph reachable from start within max_depth."""
    depths: Dict[str, int] = {start: 0}
    graph = nx.DiGraph()
    graph.add_node(start)
    queue: Deque[str] = deque([start])

    while queue:
        current = queue.popleft()
        depth = depths[current]
        for edge in imports_of(current, options, cache):
            if edge.dynamic or edge.resolved is None:
                continue
            target = edge.resolved
            if target not in depths:
                if depth >= options.max_depth:
                    continue
                depths[target] = depth + 1
                queue.append(target)
            graph.add_edge(current, target)

    return graph


def _cyclic_components(graph: nx.DiGraph) -> List[List[str]]:
    """Group the graph into components that contain a cycle."""
    self_importing = {source for source, _ in nx.selfloop_edges(graph)}
    return [
        sorted(component)
        for component in nx.strongly_connected_components(graph)
        if len(component) > 1 or component & self_importing
    ]


def compute_components(
    start_file: str, options: CycleDetectionOptions, cache: AnalysisCache
) -> List[List[str]]:
    """Find the cyclic components reachable from a file.

    Args:
        start_file: File to start discovery from.
        options: Resolver inputs; max_depth bounds discovery.
        cache: Session cache.

    Returns:
        Cyclic components, each a sorted list of FileIds, ordered by first member.
    """
    graph = _reachable_graph(to_file_id(start_file), options, cache)
    components = sorted(_cyclic_components(graph))
    logger.debug(
        f"Found {len(components)} cyclic components among {graph.number_of_nodes()} files "
        f"reachable from {start_file}"
    )
    return components


def component_of(filepath: str, components: Sequence[List[str]]) -> Optional[List[str]]:
    """Return the cyclic component containing a file, or None."""
    file_id = to_file_id(filepath)
    for component in components:
        if file_id in component:
            return component
    return None
