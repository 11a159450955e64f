"""Classifies the local rank shape of a node into a rebalance case.

Rank differences are taken from a node to each of its two (possibly
virtual) children. A valid tree only has differences of 1 or 2; an insert
can create a 0 and a delete can create a 3 immediately below the node being
examined, and the case tells the rebalance loop how to repair it.
"""
import enum

from .errors import InvariantError
from .node import Direction, NodeArena


class Case(enum.Enum):
    OK = "ok"
    # insertion
    PROMOTE = "promote"
    INSERT_ROTATE = "insert-rotate"
    INSERT_DOUBLE_ROTATE = "insert-double-rotate"
    # deletion
    LEAF_DEMOTE = "leaf-demote"
    DEMOTE = "demote"
    DOUBLE_DEMOTE = "double-demote"
    DELETE_ROTATE = "delete-rotate"
    DELETE_DOUBLE_ROTATE = "delete-double-rotate"


INSERT_CASES = frozenset({
    Case.OK, Case.PROMOTE, Case.INSERT_ROTATE, Case.INSERT_DOUBLE_ROTATE,
})
DELETE_CASES = frozenset({
    Case.OK, Case.LEAF_DEMOTE, Case.DEMOTE, Case.DOUBLE_DEMOTE,
    Case.DELETE_ROTATE, Case.DELETE_DOUBLE_ROTATE,
})


def heavy_side(arena: NodeArena, index: int, diff: int) -> Direction:
    """Returns the side of the node whose rank difference equals `diff`"""
    left_diff, _ = arena.rank_diff(index)
    return Direction.LEFT if left_diff == diff else Direction.RIGHT


def classify(arena: NodeArena, index: int) -> Case:
    """Maps the rank shape at a present node to the case that repairs it.

    Raises:
        InvariantError: the shape is not one any rebalance step can produce
    """
    node = arena[index]
    diff = arena.rank_diff(index)
    shape = tuple(sorted(diff))

    if shape == (0, 1):
        return Case.PROMOTE

    if shape == (0, 2):
        heavy = heavy_side(arena, index, 0)
        child_diff = arena.rank_diff(node.get_child(heavy))
        outer, inner = child_diff[heavy], child_diff[1 - heavy]
        if (outer, inner) == (1, 2):
            return Case.INSERT_ROTATE
        if (outer, inner) == (2, 1):
            return Case.INSERT_DOUBLE_ROTATE
        raise InvariantError(
            f"node {node.key} is {diff} with a heavy child shaped {child_diff}")

    if shape == (2, 2) and node.is_leaf():
        return Case.LEAF_DEMOTE

    if shape in ((1, 1), (1, 2), (2, 2)):
        return Case.OK

    if shape == (2, 3):
        return Case.DEMOTE

    if shape == (1, 3):
        heavy = heavy_side(arena, index, 1)
        child_diff = arena.rank_diff(node.get_child(heavy))
        outer, inner = child_diff[heavy], child_diff[1 - heavy]
        if (outer, inner) == (2, 2):
            return Case.DOUBLE_DEMOTE
        if outer == 1 and inner in (1, 2):
            return Case.DELETE_ROTATE
        if (outer, inner) == (2, 1):
            return Case.DELETE_DOUBLE_ROTATE
        raise InvariantError(
            f"node {node.key} is {diff} with a heavy child shaped {child_diff}")

    raise InvariantError(f"node {node.key} has rank differences {diff}")
