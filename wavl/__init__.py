from .errors import DuplicateKeyError, InvariantError, NotFoundError, WAVLError
from .graph import to_networkx
from .node import NIL, Direction, Node, NodeArena
from .rebalance import Case, classify
from .tree import WAVLTree

__all__ = [
    "Case",
    "Direction",
    "DuplicateKeyError",
    "InvariantError",
    "NIL",
    "Node",
    "NodeArena",
    "NotFoundError",
    "WAVLError",
    "WAVLTree",
    "classify",
    "to_networkx",
]
