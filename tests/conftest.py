from pathlib import Path

import pytest
from hypothesis import settings

from wavl import WAVLTree

settings.register_profile("wavl", deadline=None)
# longer runs: pytest --hypothesis-profile=thorough
settings.register_profile("thorough", max_examples=1000, deadline=None)
settings.load_profile("wavl")


def pytest_addoption(parser):
    parser.addoption("--benchmark", action="store_true", default=False, help="run benchmark tests")


def pytest_configure(config):
    config.addinivalue_line("markers", "benchmark: mark benchmark tests")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--benchmark"):
        return
    benchmark_skip_marker = pytest.mark.skip(reason="use --benchmark marker to run")
    for item in items:
        filename = Path(str(item.fspath)).name
        if "benchmark" in item.keywords or filename.startswith('test_benchmark'):
            item.add_marker(benchmark_skip_marker)


@pytest.fixture
def tree():
    yield WAVLTree()


@pytest.fixture
def example_tree():
    # insert order from the worked example: 10, 20, 5, 15, 3
    t = WAVLTree()
    for key in (10, 20, 5, 15, 3):
        t.insert(key, f"v{key}")
    yield t
