# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Tests for specifier resolution.

Tests cover:
- Relative specifiers with exact, extension and barrel resolution
- Privileged aliases and scoped aliases
- Bare and built-in specifiers terminating the graph
- Directory-versus-barrel precedence
"""

import logging
import os
from pathlib import Path

import pytest

from import_cycles.cache import AnalysisCache
from import_cycles.models import DEFAULT_BARREL_NAMES, CycleDetectionOptions
from import_cycles.resolver import (
    is_builtin_specifier,
    is_relative_specifier,
    resolve_specifier,
    resolve_with_options,
    to_file_id,
)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace with a src/ tree, a nested package and a lib/ directory."""
    src = tmp_path / "src"
    (src / "components").mkdir(parents=True)
    (src / "utils.ts").write_text("export const u = 1;\n")
    (src / "view.tsx").write_text("export const v = 1;\n")
    (src / "legacy.js").write_text("module.exports = {};\n")
    (src / "exact.ts").write_text("export {};\n")
    (src / "components" / "Button.tsx").write_text("export const B = 1;\n")
    (src / "components" / "index.ts").write_text("export * from './Button';\n")
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "shared.ts").write_text("export const s = 1;\n")
    return tmp_path


def resolve(specifier: str, from_file: Path, root: Path, cache: AnalysisCache):
    return resolve_specifier(specifier, str(from_file), str(root), DEFAULT_BARREL_NAMES, cache)


class TestSpecifierKinds:
    """Tests for specifier classification helpers."""

    def test_relative(self) -> None:
        """Test only ./ and ../ prefixes count as relative."""
        assert is_relative_specifier("./a")
        assert is_relative_specifier("../a")
        assert not is_relative_specifier(".")
        assert not is_relative_specifier("a/b")

    def test_builtin(self) -> None:
        """Test Node built-ins are recognized with and without the node: scheme."""
        assert is_builtin_specifier("fs")
        assert is_builtin_specifier("fs/promises")
        assert is_builtin_specifier("node:path")
        assert not is_builtin_specifier("react")

    def test_file_id_is_normalized(self, tmp_path: Path) -> None:
        """Test FileIds collapse '.' and '..' segments."""
        spelled = os.path.join(str(tmp_path), "src", "..", "src", ".", "a.ts")
        assert to_file_id(spelled) == os.path.join(str(tmp_path), "src", "a.ts")


class TestRelativeResolution:
    """Tests for ./ and ../ specifiers."""

    def test_extension_probe(self, workspace: Path) -> None:
        """Test extensionless specifiers probe .ts, .tsx, .js in order."""
        cache = AnalysisCache()
        importer = workspace / "src" / "main.ts"

        assert resolve("./utils", importer, workspace, cache) == str(workspace / "src" / "utils.ts")
        assert resolve("./view", importer, workspace, cache) == str(workspace / "src" / "view.tsx")
        assert resolve("./legacy", importer, workspace, cache) == str(
            workspace / "src" / "legacy.js"
        )

    def test_exact_path_wins(self, workspace: Path) -> None:
        """Test a specifier with its extension resolves to itself."""
        cache = AnalysisCache()
        importer = workspace / "src" / "main.ts"

        assert resolve("./exact.ts", importer, workspace, cache) == str(
            workspace / "src" / "exact.ts"
        )

    def test_parent_directory(self, workspace: Path) -> None:
        """Test ../ climbs out of the importing file's directory."""
        cache = AnalysisCache()
        importer = workspace / "src" / "components" / "Button.tsx"

        assert resolve("../utils", importer, workspace, cache) == str(
            workspace / "src" / "utils.ts"
        )

    def test_existing_directory_resolves_to_directory(self, workspace: Path) -> None:
        """Test an existing directory is returned as-is, not its barrel file."""
        cache = AnalysisCache()
        importer = workspace / "src" / "main.ts"

        assert resolve("./components", importer, workspace, cache) == str(
            workspace / "src" / "components"
        )

    def test_barrel_fallback(self, workspace: Path) -> None:
        """Test barrel files are used when the base path is not known to exist."""
        cache = AnalysisCache()
        importer = workspace / "src" / "main.ts"
        # Stale snapshot: the directory was recorded as missing earlier in the session
        cache.existence[str(workspace / "src" / "components")] = False

        assert resolve("./components", importer, workspace, cache) == str(
            workspace / "src" / "components" / "index.ts"
        )

    def test_missing_target_is_none(self, workspace: Path) -> None:
        """Test a relative specifier with no match resolves to None."""
        cache = AnalysisCache()
        importer = workspace / "src" / "main.ts"

        assert resolve("./nope", importer, workspace, cache) is None

    def test_stops_at_first_hit(self, workspace: Path) -> None:
        """Test no candidates are probed after the first success."""
        cache = AnalysisCache()
        importer = workspace / "src" / "main.ts"

        resolve("./utils", importer, workspace, cache)

        base = str(workspace / "src" / "utils")
        assert cache.existence == {base: False, base + ".ts": True}

    def test_idempotent(self, workspace: Path) -> None:
        """Test resolving twice yields the same FileId."""
        cache = AnalysisCache()
        importer = workspace / "src" / "main.ts"

        first = resolve("../lib/shared", importer, workspace, cache)
        second = resolve("../lib/shared", importer, workspace, cache)

        assert first == second == str(workspace / "lib" / "shared.ts")


class TestAliasResolution:
    """Tests for aliased specifiers."""

    def test_privileged_aliases_use_source_dir(self, workspace: Path) -> None:
        """Test @/ and ~/ resolve inside src/."""
        cache = AnalysisCache()
        importer = workspace / "src" / "components" / "Button.tsx"

        assert resolve("@/utils", importer, workspace, cache) == str(workspace / "src" / "utils.ts")
        assert resolve("~/components/Button", importer, workspace, cache) == str(
            workspace / "src" / "components" / "Button.tsx"
        )

    def test_scoped_alias_uses_workspace_root(self, workspace: Path) -> None:
        """Test other @scope/ prefixes are stripped and resolved from the root."""
        cache = AnalysisCache()
        importer = workspace / "src" / "main.ts"

        assert resolve("@app/lib/shared", importer, workspace, cache) == str(
            workspace / "lib" / "shared.ts"
        )

    def test_unmatched_scoped_package_is_none(self, workspace: Path) -> None:
        """Test a scoped npm package outside the workspace resolves to None."""
        cache = AnalysisCache()
        importer = workspace / "src" / "main.ts"

        assert resolve("@types/node", importer, workspace, cache) is None

    def test_custom_alias_options(self, workspace: Path) -> None:
        """Test alias prefixes and source dir come from options."""
        cache = AnalysisCache()
        options = CycleDetectionOptions(
            workspace_root=str(workspace), alias_prefixes=("#/",), source_dir="lib"
        )

        resolved = resolve_with_options("#/shared", str(workspace / "src" / "a.ts"), options, cache)

        assert resolved == str(workspace / "lib" / "shared.ts")


class TestBareSpecifiers:
    """Tests for specifiers that terminate the graph."""

    @pytest.mark.parametrize("specifier", ["react", "lodash/fp", "fs", "node:fs", ""])
    def test_bare_is_none(self, workspace: Path, specifier: str) -> None:
        """Test bare, built-in and empty specifiers never resolve."""
        cache = AnalysisCache()

        assert resolve(specifier, workspace / "src" / "main.ts", workspace, cache) is None

    def test_bare_does_not_touch_filesystem(self, workspace: Path) -> None:
        """Test bare specifiers perform no existence probes."""
        cache = AnalysisCache()

        resolve("react", workspace / "src" / "main.ts", workspace, cache)

        assert cache.existence == {}

    def test_bare_specifiers_logged_by_kind(self, workspace: Path, caplog) -> None:
        """Test skipped specifiers are logged as built-in or external."""
        cache = AnalysisCache()
        importer = workspace / "src" / "main.ts"

        with caplog.at_level(logging.DEBUG, logger="import_cycles.resolver"):
            resolve("node:fs", importer, workspace, cache)
            resolve("react", importer, workspace, cache)

        assert "Skipping built-in module 'node:fs'" in caplog.text
        assert "Skipping external package 'react'" in caplog.text
