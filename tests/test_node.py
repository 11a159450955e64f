import pytest

from wavl import NIL, Direction, Node, NodeArena


@pytest.fixture
def arena() -> NodeArena:
    return NodeArena()


def test_new_node():
    node = Node(7, "seven")
    assert node.rank == 0
    assert node.size == 1
    assert node.parent == node.left == node.right == NIL
    assert node.is_leaf()


def test_set_child():
    node = Node(7, "seven")
    node.set_child(Direction.LEFT, 3)
    node.set_child(Direction.RIGHT, 4)
    assert node.get_child(Direction.LEFT) == 3
    assert node.get_child(Direction.RIGHT) == 4
    assert not node.is_leaf()
    with pytest.raises(ValueError):
        node.set_child(Direction.ROOT, 5)


def test_virtual_node(arena: NodeArena):
    assert arena.rank(NIL) == -1
    assert arena.size(NIL) == 0
    with pytest.raises(IndexError):
        arena[NIL]


def test_release_recycles_slots(arena: NodeArena):
    a = arena.allocate(1, "a")
    b = arena.allocate(2, "b")
    assert len(arena) == 2

    arena.release(a)
    assert len(arena) == 1
    with pytest.raises(IndexError):
        arena[a]
    with pytest.raises(IndexError):
        arena.release(a)

    c = arena.allocate(3, "c")
    assert c == a
    assert arena[c].key == 3
    assert arena[b].key == 2
    assert [index for index, _ in arena] == [a, b]


def test_link_sets_both_ends(arena: NodeArena):
    parent = arena.allocate(5, "p")
    child = arena.allocate(3, "c")
    arena.link(parent, child, Direction.LEFT)
    assert arena[parent].left == child
    assert arena[child].parent == parent
    assert arena.direction_of(child) == Direction.LEFT
    assert arena.direction_of(parent) == Direction.ROOT

    # keys play no part in linking
    arena.link(parent, child, Direction.RIGHT)
    assert arena[parent].right == child

    arena.link(parent, NIL, Direction.LEFT)
    assert arena[parent].left == NIL

    arena.link(NIL, child, Direction.ROOT)
    assert arena[child].parent == NIL


def test_navigation(arena: NodeArena):
    #        4
    #      /   \
    #     2     6
    #    / \     \
    #   1   3     7
    index = {}
    for key in (4, 2, 6, 1, 3, 7):
        index[key] = arena.allocate(key, str(key))
    arena.link(index[4], index[2], Direction.LEFT)
    arena.link(index[4], index[6], Direction.RIGHT)
    arena.link(index[2], index[1], Direction.LEFT)
    arena.link(index[2], index[3], Direction.RIGHT)
    arena.link(index[6], index[7], Direction.RIGHT)
    for key in (1, 3, 7, 2, 6, 4):
        arena.update_size(index[key])

    assert arena.size(index[4]) == 6
    assert arena.size(index[2]) == 3
    assert arena.subtree_min(index[4]) == index[1]
    assert arena.subtree_max(index[4]) == index[7]

    keys = sorted(index)
    for smaller, larger in zip(keys, keys[1:]):
        assert arena.successor(index[smaller]) == index[larger]
        assert arena.predecessor(index[larger]) == index[smaller]
    assert arena.successor(index[7]) == NIL
    assert arena.predecessor(index[1]) == NIL


def test_rank_diff(arena: NodeArena):
    parent = arena.allocate(2, "p")
    child = arena.allocate(1, "c")
    arena.link(parent, child, Direction.LEFT)
    arena[parent].promote()
    assert arena.rank_diff(parent) == (1, 2)
    arena[parent].promote()
    arena[child].demote()
    assert arena.rank_diff(parent) == (3, 3)
