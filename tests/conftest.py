"""Pytest configuration and fixtures for diagram-migrator tests."""

import copy
import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path_factory, monkeypatch):
    """Point the config file at a throwaway directory so tests never read ~/.dmig."""
    home = tmp_path_factory.mktemp("dmig_home")
    monkeypatch.setattr("diagram_migrator.config.BASE_DIR", home)
    monkeypatch.setattr("diagram_migrator.config.CONFIG_FILE", home / "config.toml")
    monkeypatch.setattr("diagram_migrator.config_manager.CONFIG_FILE", home / "config.toml")
    return home


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def legacy_path(fixtures_dir: Path) -> Path:
    """Path to a 2.0 class diagram exercising every rewrite rule."""
    return fixtures_dir / "legacy_class_diagram.json"


@pytest.fixture
def current_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "current_class_diagram.json"


@pytest.fixture
def legacy_document(legacy_path: Path) -> Dict[str, Any]:
    return json.loads(legacy_path.read_text(encoding="utf-8"))


@pytest.fixture
def legacy_copy(temp_dir: Path, legacy_path: Path) -> Path:
    """Writable copy of the legacy fixture."""
    target = temp_dir / "legacy.json"
    shutil.copy(legacy_path, target)
    return target


@pytest.fixture
def make_document():
    """Build a minimal document from node and edge records."""

    def _make(nodes=None, edges=None, version="2.0") -> Dict[str, Any]:
        return {
            "diagram": "ClassDiagram",
            "version": version,
            "nodes": copy.deepcopy(nodes or []),
            "edges": copy.deepcopy(edges or []),
        }

    return _make


@pytest.fixture
def class_nodes():
    """Six plain class nodes so edges can refer to indices 0-5."""
    return [{"type": "ClassNode", "name": f"C{i}", "x": 0, "y": 0} for i in range(6)]
