"""Pytest configuration and shared fixtures for paktxt tests."""

import os

import pytest


@pytest.fixture
def sample_files(tmp_path):
    """
    Create a sample project tree for testing.

    Contains text files at several depths, an executable script, a file
    without a trailing newline, an excluded directory and a binary file
    with a text-looking extension.
    """
    source = tmp_path / "project"
    source.mkdir()

    (source / "src").mkdir()
    (source / "src" / "pkg").mkdir()
    (source / "node_modules").mkdir()
    (source / ".git").mkdir()

    (source / "README.md").write_text("# Project\n")
    (source / "main.py").write_text("print('hello')\n")
    (source / "notes.txt").write_bytes(b"no newline at end")
    (source / "src" / "util.py").write_text("def util():\n    return 1\n")
    (source / "src" / "pkg" / "deep.txt").write_text("deep\n")
    (source / "node_modules" / "dep.js").write_text("module.exports = 1;\n")
    (source / ".git" / "config").write_text("[core]\n")

    script = source / "run.sh"
    script.write_text("#!/bin/sh\necho run\n")
    os.chmod(script, 0o755)

    # ELF header behind a harmless extension
    (source / "tool.txt").write_bytes(b"\x7fELF\x02\x01\x01" + b"\x00" * 20)

    return source


@pytest.fixture
def make_tree():
    """Return a helper that creates {relative path: bytes} below a root."""

    def _make_tree(root, files):
        for rel_path, content in files.items():
            path = root / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        return root

    return _make_tree
