# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Module specifier resolution to workspace files.

Turns the raw specifier written in an import statement into an absolute FileId,
or None when the reference leaves the analyzable workspace.

Resolution order (first success wins):
1. Relative (``./x``, ``../x``): joined onto the importing file's directory
2. Aliased: a privileged prefix (``@/x``, ``~/x``) maps onto the source directory;
   any other ``@scope/x`` maps onto the workspace root with the scope stripped
3. Bare (``react``, ``node:fs``, ``fs``): None, which terminates the graph

For steps 1 and 2 the computed base path is probed as:
a. the exact path (a directory counts, so ``./dir`` resolves to the directory
   itself even when ``dir/index.ts`` exists)
b. the base path plus each configured extension, in order
c. ``<base>/<barrel>`` for each configured barrel name, in order

All existence checks go through the session's sticky existence cache.
"""

import logging
import os
from typing import Iterable, Optional, Sequence

from import_cycles.cache import AnalysisCache
from import_cycles.fingerprint import exists
from import_cycles.models import (
    DEFAULT_ALIAS_PREFIXES,
    DEFAULT_EXTENSIONS,
    DEFAULT_SOURCE_DIR,
    CycleDetectionOptions,
)

logger = logging.getLogger(__name__)

# Node.js built-in modules. Bare specifiers never resolve, this set only lets
# callers tell built-ins apart from third-party packages.
NODE_BUILTINS = frozenset(
    [
        "assert",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "domain",
        "events",
        "fs",
        "http",
        "http2",
        "https",
        "inspector",
        "module",
        "net",
        "os",
        "path",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "repl",
        "stream",
        "string_decoder",
        "timers",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    ]
)


def to_file_id(path: str) -> str:
    """Normalize a path into a FileId (absolute, no ``.``/``..`` segments)."""
    return os.path.normpath(os.path.abspath(path))


def is_relative_specifier(specifier: str) -> bool:
    """Check for ``./`` or ``../`` specifiers."""
    return specifier.startswith("./") or specifier.startswith("../")


def is_builtin_specifier(specifier: str) -> bool:
    """Check whether a specifier names a Node.js built-in module.

    Handles the ``node:`` scheme and subpaths such as ``fs/promises``.
    """
    if specifier.startswith("node:"):
        return True
    return specifier.split("/", 1)[0] in NODE_BUILTINS


def _alias_base(
    specifier: str,
    workspace_root: str,
    alias_prefixes: Iterable[str],
    source_dir: str,
) -> Optional[str]:
    """Compute the base path for an aliased specifier, or None if not aliased."""
    for prefix in alias_prefixes:
        if specifier.startswith(prefix):
            remainder = specifier[len(prefix) :]
            return os.path.join(workspace_root, source_dir, remainder)

    if specifier.startswith("@") and "/" in specifier:
        remainder = specifier.split("/", 1)[1]
        if remainder:
            return os.path.join(workspace_root, remainder)

    return None


def _probe(
    base: str,
    extensions: Sequence[str],
    barrel_names: Sequence[str],
    cache: AnalysisCache,
) -> Optional[str]:
    """Probe exact path, then extensions, then barrel files."""
    if exists(base, cache):
        return base

    for extension in extensions:
        candidate = base + extension
        if exists(candidate, cache):
            return candidate

    for barrel in barrel_names:
        candidate = os.path.join(base, barrel)
        if exists(candidate, cache):
            return candidate

    return None


def resolve_specifier(
    specifier: str,
    from_file: str,
    workspace_root: Optional[str],
    barrel_names: Sequence[str],
    cache: AnalysisCache,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    alias_prefixes: Sequence[str] = DEFAULT_ALIAS_PREFIXES,
    source_dir: str = DEFAULT_SOURCE_DIR,
) -> Optional[str]:
    """Resolve a module specifier to a workspace file.

    Args:
        specifier: Raw specifier from the source (e.g. ``"./utils"``).
        from_file: Absolute path of the importing file.
        workspace_root: Root for alias resolution. None means the current
            working directory.
        barrel_names: Barrel file names probed inside directories, in order.
        cache: Session cache (existence checks).
        extensions: Extensions probed when the exact path is missing, in order.
        alias_prefixes: Prefixes mapped onto ``<workspace_root>/<source_dir>``.
        source_dir: Source subdirectory for privileged aliases.

    Returns:
        Absolute, normalized FileId, or None for bare, built-in and unresolvable
        specifiers.
    """
    if not specifier:
        return None

    if is_relative_specifier(specifier):
        base = os.path.join(os.path.dirname(from_file), specifier)
    else:
        root = os.path.abspath(workspace_root or os.getcwd())
        base = _alias_base(specifier, root, alias_prefixes, source_dir)
        if base is None:
            kind = "built-in module" if is_builtin_specifier(specifier) else "external package"
            logger.debug(f"Skipping {kind} {specifier!r} in {from_file}")
            return None

    resolved = _probe(to_file_id(base), extensions, barrel_names, cache)
    if resolved is None:
        logger.debug(f"Unresolved specifier {specifier!r} in {from_file}")
    return resolved


def resolve_with_options(
    specifier: str, from_file: str, options: CycleDetectionOptions, cache: AnalysisCache
) -> Optional[str]:
    """Resolve a specifier using the resolver inputs carried by options."""
    return resolve_specifier(
        specifier,
        from_file,
        options.workspace_root,
        options.barrel_names,
        cache,
        extensions=options.extensions,
        alias_prefixes=options.alias_prefixes,
        source_dir=options.source_dir,
    )
