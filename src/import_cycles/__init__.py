# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Circular import detection for JavaScript/TypeScript source trees.

Start with AnalysisSession, which owns a Config and an AnalysisCache:

    session = AnalysisSession(Config(), workspace_root="/repo")
    for report in session.check_files(paths):
        print(report.message)

The library only creates module-level loggers. Applications that want JSON-lines
log files and console output call import_cycles.logging_setup.setup_logging().
"""

from .cache import AnalysisCache, clear_cache, create_cache
from .canonical import cycle_signature, format_cycle, minimal_cycle
from .components import component_of, compute_components
from .config import Config, ConfigurationError
from .detector import find_circular_dependencies, find_cycles
from .extractor import has_only_type_imports, imports_of, scan_imports
from .fingerprint import exists, fingerprint, is_valid
from .models import (
    CacheStatistics,
    CycleDetectionOptions,
    CycleReport,
    DependencyEntry,
    ImportEdge,
)
from .patterns import pattern_to_regex, should_ignore_file
from .resolver import resolve_specifier
from .session import AnalysisSession

__version__ = "0.1.0"

__all__ = [
    "AnalysisCache",
    "create_cache",
    "clear_cache",
    "AnalysisSession",
    "Config",
    "ConfigurationError",
    "CacheStatistics",
    "CycleDetectionOptions",
    "CycleReport",
    "DependencyEntry",
    "ImportEdge",
    "fingerprint",
    "is_valid",
    "exists",
    "pattern_to_regex",
    "should_ignore_file",
    "resolve_specifier",
    "scan_imports",
    "imports_of",
    "has_only_type_imports",
    "find_cycles",
    "find_circular_dependencies",
    "minimal_cycle",
    "cycle_signature",
    "format_cycle",
    "compute_components",
    "component_of",
]
