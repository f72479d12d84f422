"""
Pytest configuration and shared fixtures for graf tests.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from graf.api import Dispatcher
from graf.config import GrafConfig
from graf.graph import GraphStore


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after test.

    Yields:
        Path to temporary directory
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_db_path(temp_dir: Path) -> Path:
    """Provide a temporary database path for testing.

    Args:
        temp_dir: Temporary directory fixture

    Returns:
        Path to temporary database
    """
    return temp_dir / "test_graph.db"


@pytest.fixture
def config(temp_db_path: Path) -> GrafConfig:
    """Configuration with the node id band [100, 200).

    Args:
        temp_db_path: Temporary database path fixture

    Returns:
        GrafConfig for tests
    """
    return GrafConfig(
        db_path=temp_db_path,
        min_node_id=100,
        max_node_id=200,
        min_x=-1000,
        max_x=1000,
        min_y=-1000,
        max_y=1000,
        min_year=1000,
        max_year=2100,
        contention_retries=2,
    )


@pytest.fixture
def store(config: GrafConfig) -> Generator[GraphStore, None, None]:
    """Provide an initialized graph store.

    Args:
        config: Configuration fixture

    Yields:
        GraphStore with an empty schema
    """
    graph_store = GraphStore(db_path=config.db_path)
    yield graph_store
    graph_store.close()


@pytest.fixture
def dispatcher(store: GraphStore, config: GrafConfig) -> Dispatcher:
    """Provide a dispatcher bound to the test store."""
    return Dispatcher(store, config)


@pytest.fixture
def make_node(dispatcher: Dispatcher):
    """Factory creating a node through the API and returning its id."""

    def _make_node(name: str = "Ada", x: int = 10, y: int = 20,
                   year: int = 1990, sex: str = "F") -> int:
        response = dispatcher.dispatch({
            "action": "create_node",
            "name": name,
            "x": str(x),
            "y": str(y),
            "year": str(year),
            "sex": sex,
        })
        assert response["status"] == 0, response
        return response["par"]["id"]

    return _make_node
