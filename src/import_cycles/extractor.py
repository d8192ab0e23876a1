# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Import extraction from JavaScript/TypeScript source files.

This module finds the outgoing references of a file with a lightweight lexical
scan and resolves each one to a workspace file. Results are memoized in the
session cache against the file's fingerprint.

Patterns Detected:
- import x from './x', import { a, b } from './x', import * as ns from './x'
- import './x' (side-effect import)
- import type { T } from './x', import { type A, type B } from './x' (type-only)
- export { a } from './x', export * from './x', export * as ns from './x'
- export type { T } from './x' (type-only)
- import('./x') (dynamic)

Limitations:
The scan is not a grammar. Comments are blanked out before matching, but import
text inside string or template literals can still match. A "/" is taken to open
a regex literal only after an operator, an opening bracket, punctuation such as
",;:" or a keyword like ``return``. A regex literal after ``)`` or ``]`` (for
example ``if (x) /a*/.test(s)``) is read as division, so its quotes or a "/*"
inside it can still start a string or comment by mistake. Regex literals that do
not close on their own line are read as division too. Unusual syntax may be
missed. The scan never raises on any input.
"""

import bisect
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from import_cycles.cache import AnalysisCache
from import_cycles.fingerprint import fingerprint, is_valid
from import_cycles.models import CycleDetectionOptions, DependencyEntry, ImportEdge
from import_cycles.resolver import resolve_with_options

logger = logging.getLogger(__name__)

_STATIC_IMPORT_RE = re.compile(
    r"(?<![\w$.])import\s+(?P<type>type\s+)?"
    r"(?:(?P<clause>[\w$*{}\s,]+?)\s*from\s*)?"
    r"(?P<quote>['\"])(?P<spec>[^'\"\n]+)(?P=quote)"
)

_EXPORT_FROM_RE = re.compile(
    r"(?<![\w$.])export\s+(?P<type>type\s+)?"
    r"(?P<clause>\*(?:\s+as\s+[\w$]+)?|\{[^}]*\})\s*from\s*"
    r"(?P<quote>['\"])(?P<spec>[^'\"\n]+)(?P=quote)"
)

_DYNAMIC_IMPORT_RE = re.compile(
    r"(?<![\w$.])import\s*\(\s*(?P<quote>['\"`])(?P<spec>[^'\"`\n$]+)(?P=quote)\s*[,)]"
)

_TYPE_BINDING_RE = re.compile(r"type\s+\S")

# A "/" right after one of these starts a regex literal, not a division
_REGEX_PRECEDERS = frozenset("(,=:[!&|?{};+-*%<>~^")
_REGEX_KEYWORDS = frozenset(
    [
        "await",
        "case",
        "delete",
        "do",
        "else",
        "in",
        "instanceof",
        "new",
        "of",
        "return",
        "throw",
        "typeof",
        "void",
        "yield",
    ]
)


@dataclass(frozen=True)
class ScannedImport:
    """An unresolved reference found by the lexical scan."""

    specifier: str
    line: int
    dynamic: bool
    type_only: bool
    offset: int


def _regex_allowed(chars: List[str], position: int) -> bool:
    """Check whether a "/" at position can open a regex literal."""
    j = position - 1
    while j >= 0 and chars[j].isspace():
        j -= 1
    if j < 0 or chars[j] in _REGEX_PRECEDERS:
        return True

    end = j + 1
    while j >= 0 and (chars[j].isalnum() or chars[j] in "_$"):
        j -= 1
    return "".join(chars[j + 1 : end]) in _REGEX_KEYWORDS


def _regex_end(content: str, start: int) -> int:
    """Find the offset just past a regex literal opening at start.

    Escapes and character classes are honored. A literal never spans lines;
    if no closing "/" is found on the line, start + 1 is returned so the
    slash is read as a plain operator.
    """
    i = start + 1
    in_class = False
    while i < len(content):
        char = content[i]
        if char == "\\":
            i += 2
            continue
        if char == "\n":
            break
        if in_class:
            if char == "]":
                in_class = False
        elif char == "[":
            in_class = True
        elif char == "/":
            return i + 1
        i += 1
    return start + 1


def _blank_comments(content: str) -> str:
    """Replace comment text with spaces, keeping offsets and newlines intact.

    String, template and regex literals are tracked only so that ``//`` or
    ``/*`` inside them is not taken for a comment.
    """
    out = list(content)
    length = len(content)
    i = 0
    quote: Optional[str] = None

    while i < length:
        char = content[i]

        if quote is not None:
            if char == "\\":
                i += 2
                continue
            if char == quote or (char == "\n" and quote != "`"):
                quote = None
            i += 1
            continue

        if char in "'\"`":
            quote = char
            i += 1
            continue

        if char == "/":
            following = content[i + 1] if i + 1 < length else ""
            if following == "/":
                end = content.find("\n", i)
                end = length if end == -1 else end
                for j in range(i, end):
                    out[j] = " "
                i = end
                continue
            if following == "*":
                end = content.find("*/", i + 2)
                end = length if end == -1 else end + 2
                for j in range(i, end):
                    if out[j] != "\n":
                        out[j] = " "
                i = end
                continue
            if _regex_allowed(out, i):
                i = _regex_end(content, i)
                continue

        i += 1

    return "".join(out)


def _bindings_all_type_only(clause: Optional[str]) -> bool:
    """True when a braces-only clause marks every binding with ``type``."""
    if clause is None:
        return False
    clause = clause.strip()
    if not (clause.startswith("{") and clause.endswith("}")):
        return False
    bindings = [b.strip() for b in clause[1:-1].split(",") if b.strip()]
    return bool(bindings) and all(_TYPE_BINDING_RE.match(b) for b in bindings)


def scan_imports(content: str) -> List[ScannedImport]:
    """Lexically scan source text for outgoing references.

    Args:
        content: Source text of one file.

    Returns:
        References in source order.
    """
    text = _blank_comments(content)
    newlines = [i for i, char in enumerate(text) if char == "\n"]

    def line_of(offset: int) -> int:
        return bisect.bisect_right(newlines, offset) + 1

    found: List[ScannedImport] = []

    for regex in (_STATIC_IMPORT_RE, _EXPORT_FROM_RE):
        for match in regex.finditer(text):
            offset = match.start("spec")
            type_only = bool(match.group("type")) or _bindings_all_type_only(
                match.group("clause")
            )
            found.append(
                ScannedImport(
                    specifier=match.group("spec").strip(),
                    line=line_of(offset),
                    dynamic=False,
                    type_only=type_only,
                    offset=offset,
                )
            )

    for match in _DYNAMIC_IMPORT_RE.finditer(text):
        offset = match.start("spec")
        found.append(
            ScannedImport(
                specifier=match.group("spec").strip(),
                line=line_of(offset),
                dynamic=True,
                type_only=False,
                offset=offset,
            )
        )

    found.sort(key=lambda scanned: scanned.offset)
    return found


def imports_of(
    filepath: str, options: CycleDetectionOptions, cache: AnalysisCache
) -> List[ImportEdge]:
    """Get the resolved outgoing edges of a file.

    A cached list is returned as-is (same object) while the file's fingerprint is
    unchanged; callers must treat it as read-only. Unreadable files (missing,
    directory, permission denied) yield an empty list, which is cached too.

    Args:
        filepath: Absolute path of the file.
        options: Resolver inputs.
        cache: Session cache.

    Returns:
        Edges whose specifier resolved to a workspace file, in source order.
    """
    if is_valid(filepath, cache):
        cache.stats.dependency_hits += 1
        return cache.dependencies[filepath].edges

    previously_cached = filepath in cache.dependencies

    # Fingerprint before reading so a concurrent edit shows up as stale next time
    current_fingerprint = fingerprint(filepath)

    edges: List[ImportEdge] = []
    try:
        with open(filepath, encoding="utf-8", errors="replace") as f:
            content = f.read()
    except (OSError, ValueError) as e:
        logger.debug(f"Treating unreadable file {filepath} as having no imports: {e}")
    else:
        for scanned in scan_imports(content):
            resolved = resolve_with_options(scanned.specifier, filepath, options, cache)
            if resolved is None:
                continue
            edges.append(
                ImportEdge(
                    raw_specifier=scanned.specifier,
                    resolved=resolved,
                    dynamic=scanned.dynamic,
                    type_only=scanned.type_only,
                    line=scanned.line,
                )
            )

    cache.dependencies[filepath] = DependencyEntry(fingerprint=current_fingerprint, edges=edges)

    if previously_cached:
        cache.stats.dependency_refreshes += 1
    else:
        cache.stats.dependency_misses += 1

    logger.debug(
        f"Dependency {'refresh' if previously_cached else 'miss'}: {filepath} "
        f"({len(edges)} edges)"
    )
    return edges


def has_only_type_imports(
    files: Sequence[str],
    cache: AnalysisCache,
    options: Optional[CycleDetectionOptions] = None,
) -> bool:
    """Check whether every static edge along a file sequence is type-only.

    Consecutive pairs ``(files[i], files[i + 1])`` are examined, so a closed
    cycle such as ``[a, b, a]`` covers its closing edge. Dynamic edges are not
    part of the cycle graph and are ignored.

    Args:
        files: FileIds in traversal order.
        cache: Session cache with dependency entries.
        options: Resolver inputs. When given, edges are fetched (and refreshed)
            through imports_of; otherwise only already cached entries are used and
            a file without one counts as having a runtime edge.

    Returns:
        True if no runtime edge links consecutive files. Vacuously True for an
        empty or single-element sequence.
    """
    for source, target in zip(files, files[1:]):
        if options is not None:
            edges = imports_of(source, options, cache)
        else:
            entry = cache.dependencies.get(source)
            if entry is None:
                return False
            edges = entry.edges

        for edge in edges:
            if edge.resolved == target and not edge.dynamic and not edge.type_only:
                return False

    return True
