# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""AnalysisSession - entry point for checking files for import cycles.

A session owns one AnalysisCache and one Config. All files checked through the
same session share existence checks, dependency edges and the set of cycles
already reported, so a cycle reachable from several files is reported once.

Workflow for check_file():
1. Skip files matching the configured ignore patterns
2. Run depth-first detection from the file
3. Classify each new cycle as type-only or runtime
4. Drop type-only cycles when allow_type_only_cycles is set
5. Return CycleReport objects with display messages
"""

import logging
from typing import Iterable, List, Optional

from import_cycles.cache import AnalysisCache
from import_cycles.canonical import cycle_signature, format_cycle
from import_cycles.components import component_of, compute_components
from import_cycles.config import Config
from import_cycles.detector import find_circular_dependencies
from import_cycles.extractor import has_only_type_imports
from import_cycles.models import CycleDetectionOptions, CycleReport
from import_cycles.patterns import should_ignore_file
from import_cycles.resolver import to_file_id

logger = logging.getLogger(__name__)


class AnalysisSession:
    """Checks files for circular imports with a session-scoped cache.

    Usage:
        session = AnalysisSession(Config(), workspace_root="/repo")
        for report in session.check_files(["/repo/src/a.ts", "/repo/src/b.ts"]):
            print(report.message)
        session.reset()
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        workspace_root: Optional[str] = None,
        cache: Optional[AnalysisCache] = None,
    ) -> None:
        """Initialize the session.

        Args:
            config: Configuration. If None, loads .import_cycles.yml from the
                current directory (or defaults).
            workspace_root: Workspace root. If None, the current directory.
            cache: Cache to use. If None, a new one is created.
        """
        self.config = config if config is not None else Config()
        self.workspace_root = to_file_id(workspace_root) if workspace_root else None
        self.cache = cache if cache is not None else AnalysisCache()
        self.options: CycleDetectionOptions = self.config.to_options(self.workspace_root)

        logger.debug(
            f"AnalysisSession initialized (root={self.options.root}, "
            f"max_depth={self.options.max_depth}, "
            f"report_all_cycles={self.options.report_all_cycles})"
        )

    def is_ignored(self, filepath: str) -> bool:
        """Check whether a file matches the configured ignore patterns."""
        return should_ignore_file(filepath, self.config.ignore_patterns, self.cache)

    def check_file(self, filepath: str) -> List[CycleReport]:
        """Check one file for cycles not yet reported in this session.

        Args:
            filepath: Path of the file to start from.

        Returns:
            Reports for newly found cycles. Empty for ignored files.
        """
        if self.is_ignored(filepath):
            logger.debug(f"Skipping ignored file {filepath}")
            return []

        start = to_file_id(filepath)
        reports: List[CycleReport] = []

        for cycle in find_circular_dependencies(start, self.options, self.cache):
            type_only = has_only_type_imports(cycle, self.cache, self.options)
            if type_only and self.config.allow_type_only_cycles:
                logger.debug(f"Ignoring type-only cycle {cycle_signature(cycle)}")
                continue

            reports.append(
                CycleReport(
                    cycle=cycle,
                    signature=cycle_signature(cycle),
                    type_only=type_only,
                    message=format_cycle(cycle, self.options.root),
                    start_file=start,
                )
            )

        if reports:
            logger.info(f"{len(reports)} import cycle(s) reachable from {start}")
        return reports

    def check_files(self, filepaths: Iterable[str]) -> List[CycleReport]:
        """Check several files, reporting each structural cycle once."""
        reports: List[CycleReport] = []
        for filepath in filepaths:
            reports.extend(self.check_file(filepath))
        return reports

    def cyclic_component(self, filepath: str) -> Optional[List[str]]:
        """Get the files sharing a cycle with filepath, or None if acyclic."""
        start = to_file_id(filepath)
        components = compute_components(start, self.options, self.cache)
        return component_of(start, components)

    def reset(self) -> None:
        """Clear the cache so the next check starts a fresh session."""
        self.cache.clear()
