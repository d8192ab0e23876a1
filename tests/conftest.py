# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Shared fixtures for building small source trees."""

from pathlib import Path
from typing import Callable, Dict

import pytest

TreeBuilder = Callable[[Dict[str, str]], Dict[str, str]]


@pytest.fixture
def make_tree(tmp_path: Path) -> TreeBuilder:
    """Write files under tmp_path and return their absolute paths by name.

    Usage:
        files = make_tree({"a.ts": "import './b';", "b.ts": ""})
        files["a.ts"]  # "/tmp/.../a.ts"
    """

    def build(sources: Dict[str, str]) -> Dict[str, str]:
        paths = {}
        for name, content in sources.items():
            target = tmp_path / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
            paths[name] = str(target)
        return paths

    return build
