"""
Shared fixtures: build small source trees on disk from a nested dict.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import pytest


def write_tree(root: Path, layout: Dict[str, Any]) -> Path:
    """
    Create ``layout`` under ``root``.

    Keys are names; a dict value is a directory, a str or bytes value is a
    file with that content.
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, value in layout.items():
        path = root / name
        if isinstance(value, dict):
            write_tree(path, value)
        elif isinstance(value, bytes):
            path.write_bytes(value)
        else:
            path.write_text(value, encoding="utf-8")
    return root


@pytest.fixture
def make_tree(tmp_path):
    def _make(layout: Dict[str, Any], name: str = "dist") -> Path:
        return write_tree(tmp_path / name, layout)
    return _make


@pytest.fixture
def restore_logging():
    """Undo root logger changes made by setup_logging during a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
