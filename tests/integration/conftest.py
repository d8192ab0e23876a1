# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Shared fixtures for integration tests.

Provides a representative TypeScript project structure for end-to-end checks.
"""

from pathlib import Path

import pytest
import yaml

SAMPLE_SOURCES = {
    "src/app.tsx": (
        "import React from 'react';\n"
        "import { Header } from '@/components/Header';\n"
        "import { api } from './services/api';\n"
        "import { loadLazy } from './pages/lazy';\n"
        "\n"
        "export const App = () => Header;\n"
    ),
    # Runtime cycle: Header <-> store
    "src/components/Header.tsx": (
        "import { useStore } from '../store/store';\n"
        "\n"
        "export const Header = () => useStore();\n"
    ),
    "src/store/store.ts": (
        "// The store renders the header preview\n"
        "import { Header } from '@/components/Header';\n"
        "\n"
        "export const useStore = () => Header;\n"
    ),
    # Type-only cycle: api <-> user
    "src/services/api.ts": (
        "import type { User } from '../models/user';\n"
        "import path from 'node:path';\n"
        "\n"
        "export const api = { base: path.sep } as { base: string; user?: User };\n"
    ),
    "src/models/user.ts": (
        "import type { api } from '../services/api';\n"
        "\n"
        "export interface User {\n"
        "  name: string;\n"
        "  client: typeof api;\n"
        "}\n"
    ),
    # Lazy back edge to the entry point: not a cycle
    "src/pages/lazy.ts": "export const loadLazy = () => import('../app');\n",
    "src/app.test.ts": "import { App } from './app';\n",
}


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """Create a representative TypeScript project for integration testing.

    Creates a project with:
    - An aliased runtime cycle (src/components/Header.tsx <-> src/store/store.ts)
    - A type-only cycle (src/services/api.ts <-> src/models/user.ts)
    - A dynamic import back to the entry point
    - Bare and built-in imports that leave the workspace
    - A test file matched by the default ignore patterns
    - A .import_cycles.yml enabling report_all_cycles

    Returns:
        Path to the project root directory
    """
    project_root = tmp_path / "sample_project"
    project_root.mkdir()

    for name, content in SAMPLE_SOURCES.items():
        target = project_root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)

    with open(project_root / ".import_cycles.yml", "w") as f:
        yaml.dump({"report_all_cycles": True, "max_depth": 20}, f)

    return project_root
