"""Shared builders for the scaffold_sentinel test suite.

Run pytest from the project root; pythonpath in pyproject.toml puts src/
on the import path.
"""

import os
from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest

from scaffold_sentinel.domain.entities import NodeVersionConfig
from scaffold_sentinel.infrastructure.gateways.filesystem_gateway import FileSystemGateway


@pytest.fixture
def filesystem() -> FileSystemGateway:
    return FileSystemGateway()


@pytest.fixture
def telemetry() -> MagicMock:
    """Mock TelemetryPort; assert on .step/.warning/.error calls."""
    return MagicMock()


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write {relative path: content} under tmp_path/project and return the root."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
            os.chmod(target, 0o644)
        return root

    return _make


@pytest.fixture
def recommended_node() -> NodeVersionConfig:
    """The default matrix's Node.js tuple: valid, LTS, no drift."""
    return NodeVersionConfig(
        runtime=">=20.0.0",
        types_package="^20.17.0",
        build_tool_version=">=10.0.0",
        image="node:20-alpine",
        is_lts=True,
    )


def snapshot(root: Path) -> dict[str, bytes]:
    """Every file under root mapped to its bytes."""
    return {
        str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()
    }


@pytest.fixture
def tree_snapshot() -> Callable[[Path], dict[str, bytes]]:
    return snapshot
