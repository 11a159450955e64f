import enum
from typing import Iterator, List, Optional, Tuple

# index of the virtual node; it has rank -1 and size 0 and is never stored
NIL = -1


class Direction(enum.IntEnum):
    ROOT = -1
    LEFT = 0
    RIGHT = 1


class Node:
    __slots__ = ("key", "value", "rank", "size", "parent", "left", "right")

    def __init__(self, key: int, value: str):
        self.key = key
        self.value = value
        self.rank = 0
        self.size = 1
        self.parent = NIL
        self.left = NIL
        self.right = NIL

    def get_child(self, direction: Direction) -> int:
        if direction == Direction.LEFT:
            return self.left
        return self.right

    def set_child(self, direction: Direction, index: int):
        if direction == Direction.LEFT:
            self.left = index
        elif direction == Direction.RIGHT:
            self.right = index
        else:
            raise ValueError(f"cannot attach a child in direction {direction.name}")

    def is_leaf(self) -> bool:
        return self.left == NIL and self.right == NIL

    def promote(self):
        self.rank += 1

    def demote(self):
        self.rank -= 1

    def __repr__(self):
        return f"Node({self.key!r}, {self.value!r}, rank={self.rank}, size={self.size})"


class NodeArena:
    """Owns every node of a tree, addressed by stable integer indices.

    Parent and child relations are indices into the arena, so nodes never
    reference each other directly. `NIL` stands for the virtual node in
    every child or parent slot.
    """

    def __init__(self):
        self._nodes: List[Optional[Node]] = []
        self._free: List[int] = []

    def __len__(self):
        return len(self._nodes) - len(self._free)

    def __getitem__(self, index: int) -> Node:
        # negative indices would wrap around in a python list
        node = self._nodes[index] if 0 <= index < len(self._nodes) else None
        if node is None:
            raise IndexError(f"no node at index {index}")
        return node

    def __iter__(self) -> Iterator[Tuple[int, Node]]:
        """Yields (index, node) for every live node, in storage order"""
        for index, node in enumerate(self._nodes):
            if node is not None:
                yield index, node

    def allocate(self, key: int, value: str) -> int:
        node = Node(key, value)
        if self._free:
            index = self._free.pop()
            self._nodes[index] = node
        else:
            index = len(self._nodes)
            self._nodes.append(node)
        return index

    def release(self, index: int):
        self[index]  # raises for NIL and free slots
        self._nodes[index] = None
        self._free.append(index)

    def clear(self):
        self._nodes = []
        self._free = []

    def rank(self, index: int) -> int:
        if index == NIL:
            return -1
        return self[index].rank

    def size(self, index: int) -> int:
        if index == NIL:
            return 0
        return self[index].size

    def rank_diff(self, index: int) -> Tuple[int, int]:
        """Returns the (left, right) rank differences of a present node"""
        node = self[index]
        return node.rank - self.rank(node.left), node.rank - self.rank(node.right)

    def link(self, parent: int, child: int, direction: Direction):
        """Makes `child` the `direction` child of `parent` on both ends.

        A `NIL` parent detaches the child at the top of the tree; a `NIL`
        child empties the parent's slot.
        """
        if parent != NIL:
            self[parent].set_child(direction, child)
        if child != NIL:
            self[child].parent = parent

    def direction_of(self, index: int) -> Direction:
        parent = self[index].parent
        if parent == NIL:
            return Direction.ROOT
        return Direction.LEFT if self[parent].left == index else Direction.RIGHT

    def update_size(self, index: int):
        node = self[index]
        node.size = 1 + self.size(node.left) + self.size(node.right)

    def subtree_min(self, index: int) -> int:
        while self[index].left != NIL:
            index = self[index].left
        return index

    def subtree_max(self, index: int) -> int:
        while self[index].right != NIL:
            index = self[index].right
        return index

    def successor(self, index: int) -> int:
        """Returns the in-order successor of a present node, or NIL"""
        node = self[index]
        if node.right != NIL:
            return self.subtree_min(node.right)
        # climb while we are a right child
        while node.parent != NIL and self.direction_of(index) == Direction.RIGHT:
            index = node.parent
            node = self[index]
        return node.parent

    def predecessor(self, index: int) -> int:
        """Returns the in-order predecessor of a present node, or NIL"""
        node = self[index]
        if node.left != NIL:
            return self.subtree_max(node.left)
        while node.parent != NIL and self.direction_of(index) == Direction.LEFT:
            index = node.parent
            node = self[index]
        return node.parent
