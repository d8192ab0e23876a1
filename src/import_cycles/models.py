# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Core data models for import cycle analysis.

This module defines the data structures shared by the analysis layers:
- ImportEdge: One outgoing reference found in a source file
- DependencyEntry: Cached edge list paired with the fingerprint it was computed from
- CycleDetectionOptions: Resolver inputs and traversal bounds for one detection call
- CycleReport: A discovered cycle prepared for display
- CacheStatistics: Counters describing cache effectiveness

FileId values are plain strings (absolute, normalized paths) and fingerprints are
opaque strings, so every model serializes to JSON-compatible primitives.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

# Probed in order when a specifier has no extension
DEFAULT_EXTENSIONS: Tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx")

# Files treated as a directory's re-export entry point
DEFAULT_BARREL_NAMES: Tuple[str, ...] = ("index.ts", "index.tsx", "index.js", "index.jsx")

# Aliases resolved against the source directory rather than the workspace root
DEFAULT_ALIAS_PREFIXES: Tuple[str, ...] = ("@/", "~/")

DEFAULT_SOURCE_DIR = "src"
DEFAULT_MAX_DEPTH = 10


@dataclass(frozen=True)
class ImportEdge:
    """A reference from one file to another.

    Attributes:
        raw_specifier: The string exactly as written in the source.
        resolved: Absolute FileId of the target, or None when the specifier leaves
            the workspace (external package, built-in, unresolvable path).
        dynamic: True for call-style ``import("...")`` references.
        type_only: True for ``import type`` / ``export type`` references, or when
            every named binding of the statement is marked ``type``.
        line: 1-based line of the specifier in the source file.
    """

    raw_specifier: str
    resolved: Optional[str]
    dynamic: bool = False
    type_only: bool = False
    line: int = 1

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            "raw_specifier": self.raw_specifier,
            "resolved": self.resolved,
            "dynamic": self.dynamic,
            "type_only": self.type_only,
            "line": self.line,
        }


@dataclass
class DependencyEntry:
    """Edge list of a file together with the fingerprint it was computed from.

    Both fields are always replaced together; an entry is never updated in place.
    """

    fingerprint: Optional[str]
    edges: List[ImportEdge]


@dataclass(frozen=True)
class CycleDetectionOptions:
    """Inputs for one cycle detection call.

    ``workspace_root`` of None means the current working directory at the time
    a specifier is resolved.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    report_all_cycles: bool = False
    workspace_root: Optional[str] = None
    barrel_names: Tuple[str, ...] = DEFAULT_BARREL_NAMES
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    alias_prefixes: Tuple[str, ...] = DEFAULT_ALIAS_PREFIXES
    source_dir: str = DEFAULT_SOURCE_DIR

    @property
    def root(self) -> str:
        """Absolute, normalized workspace root."""
        return os.path.abspath(self.workspace_root or os.getcwd())


@dataclass
class CycleReport:
    """A cycle ready to be shown to a user.

    Attributes:
        cycle: FileIds starting and ending at the same file.
        signature: Rotation-invariant signature used for deduplication.
        type_only: Whether every edge of the cycle is a type-only import.
        message: Human-readable rendering, e.g. ``a.ts -> b.ts -> a.ts``.
    """

    cycle: List[str]
    signature: str
    type_only: bool
    message: str
    start_file: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "cycle": list(self.cycle),
            "signature": self.signature,
            "type_only": self.type_only,
            "message": self.message,
            "start_file": self.start_file,
        }


@dataclass
class CacheStatistics:
    """Performance counters for an AnalysisCache."""

    existence_probes: int = 0  # filesystem checks actually performed
    existence_hits: int = 0  # answered from the existence cache
    dependency_hits: int = 0  # cached edge list reused
    dependency_misses: int = 0  # first computation for a file
    dependency_refreshes: int = 0  # recomputed because the fingerprint changed
    reported_cycles: int = 0

    def to_dict(self) -> Dict[str, int]:
        """Serialize to JSON-compatible dict."""
        return {
            "existence_probes": self.existence_probes,
            "existence_hits": self.existence_hits,
            "dependency_hits": self.dependency_hits,
            "dependency_misses": self.dependency_misses,
            "dependency_refreshes": self.dependency_refreshes,
            "reported_cycles": self.reported_cycles,
        }
