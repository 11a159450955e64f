import random

import pytest

from wavl import WAVLTree

SIZE = 10_000


@pytest.fixture(scope="module")
def shuffled_keys():
    keys = list(range(SIZE))
    random.Random(42).shuffle(keys)
    return keys


@pytest.fixture(scope="module")
def full_tree(shuffled_keys):
    tree = WAVLTree()
    for key in shuffled_keys:
        tree.insert(key, str(key))
    return tree


def build_and_drain(keys):
    tree = WAVLTree()
    for key in keys:
        tree.insert(key, str(key))
    for key in keys:
        tree.delete(key)
    return tree


@pytest.mark.benchmark
def test_insert_delete(benchmark, shuffled_keys):
    tree = benchmark(build_and_drain, shuffled_keys)
    assert tree.is_empty()


@pytest.mark.benchmark
@pytest.mark.parametrize("rank", [1, SIZE // 2, SIZE])
def test_select(benchmark, full_tree, rank):
    assert benchmark(full_tree.select, rank) == str(rank - 1)


@pytest.mark.benchmark
def test_search(benchmark, full_tree):
    assert benchmark(full_tree.search, SIZE // 3) == str(SIZE // 3)
