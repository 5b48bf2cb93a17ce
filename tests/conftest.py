"""Pytest configuration and fixtures for Cartograph tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from cartograph.concept_map import ConceptMap
from cartograph.samples import SAMPLE_DSL


@pytest.fixture(autouse=True)
def temp_config(tmp_path: Path, monkeypatch) -> Path:
    """Point the config layer at a throwaway directory for every test."""
    base_dir = tmp_path / "cartograph_home"
    config_file = base_dir / "config.toml"
    monkeypatch.setattr("cartograph.config.BASE_DIR", base_dir)
    monkeypatch.setattr("cartograph.config.CONFIG_FILE", config_file)
    return config_file


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_dsl() -> str:
    return SAMPLE_DSL


@pytest.fixture
def sample_dsl_file(temp_dir: Path, sample_dsl: str) -> Path:
    path = temp_dir / "concepts.cmap"
    path.write_text(sample_dsl, encoding="utf-8")
    return path


@pytest.fixture
def path_map() -> ConceptMap:
    """Path graph A -> B -> C -> D."""
    cm = ConceptMap("path")
    a, b, c, d = (cm.add_node(name) for name in "ABCD")
    cm.add_edge(a, b, "next")
    cm.add_edge(b, c, "next")
    cm.add_edge(c, d, "next")
    return cm


@pytest.fixture
def branch_map() -> ConceptMap:
    """Graph A -> B, B -> C, A -> D."""
    cm = ConceptMap("branch")
    a, b, c, d = (cm.add_node(name) for name in "ABCD")
    cm.add_edge(a, b, "implements")
    cm.add_edge(b, c, "uses")
    cm.add_edge(a, d, "implements")
    return cm
