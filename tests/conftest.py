"""Shared fixtures for scopeflat tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def project_tree(tmp_path: Path) -> Path:
    """Create a standard project tree.

    Structure::

        root/
        ├── .git/
        │   └── config
        ├── assets/
        │   └── logo.png
        ├── build/
        │   ├── keep.txt
        │   └── out.js
        ├── docs/
        │   └── guide.md
        ├── img/
        │   └── logo.PNG
        ├── node_modules/
        │   └── pkg/
        │       └── index.js
        ├── src/
        │   ├── a.js
        │   ├── b.test.js
        │   └── lib/
        │       └── util.js
        └── README.md
    """
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "config").write_text("[core]")
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "logo.png").write_bytes(b"\x89PNG")
    (tmp_path / "build").mkdir()
    (tmp_path / "build" / "keep.txt").write_text("keep")
    (tmp_path / "build" / "out.js").write_text("out")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "guide.md").write_text("# Guide\n")
    (tmp_path / "img").mkdir()
    (tmp_path / "img" / "logo.PNG").write_bytes(b"\x89PNG")
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / "pkg" / "index.js").write_text("js")
    (tmp_path / "src" / "lib").mkdir(parents=True)
    (tmp_path / "src" / "a.js").write_text("const a = 1;\n")
    (tmp_path / "src" / "b.test.js").write_text("test('b');\n")
    (tmp_path / "src" / "lib" / "util.js").write_text("export {};\n")
    (tmp_path / "README.md").write_text("readme")
    return tmp_path
