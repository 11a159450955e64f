import logging
from typing import Iterator, List, Optional, Tuple

from .errors import DuplicateKeyError, InvariantError, NotFoundError
from .node import NIL, Direction, NodeArena
from .rebalance import Case, classify, heavy_side

logger = logging.getLogger(__name__)


class WAVLTree:
    """A weak AVL tree mapping distinct integer keys to string values.

    Every present node keeps a rank and the size of its subtree. Ranks keep
    the height logarithmic; sizes answer order-statistic queries. Insert and
    delete return the number of rebalance steps (promotions, demotions and
    rotations) they performed.
    """

    def __init__(self):
        self.nodes = NodeArena()
        self.root = NIL
        self._min = NIL
        self._max = NIL
        # bumped by every mutation so live iterators can detect it
        self._version = 0

    def is_empty(self) -> bool:
        return self.root == NIL

    def size(self) -> int:
        return len(self.nodes)

    def __len__(self):
        return self.size()

    def __contains__(self, key: int) -> bool:
        index, _, _ = self._locate(key)
        return index != NIL

    def __iter__(self) -> Iterator[int]:
        return self.keys()

    def _locate(self, key: int) -> Tuple[int, int, Direction]:
        """Descends towards `key`.

        Returns:
            tuple: the index of the matching node (NIL on a miss), the last
                present node visited before it, and the side of that node the
                key belongs on
        """
        parent = NIL
        direction = Direction.ROOT
        index = self.root
        while index != NIL:
            node = self.nodes[index]
            if key == node.key:
                return index, parent, direction
            parent = index
            direction = Direction(int(key > node.key))
            index = node.get_child(direction)
        return NIL, parent, direction

    def _require(self, key: int) -> int:
        index, _, _ = self._locate(key)
        if index == NIL:
            raise NotFoundError(key)
        return index

    def search(self, key: int) -> Optional[str]:
        """Returns the value stored under `key`, or None"""
        index, _, _ = self._locate(key)
        if index == NIL:
            return None
        return self.nodes[index].value

    def insert(self, key: int, value: str) -> int:
        """Inserts a new key and rebalances the tree.

        Returns:
            int: the number of rebalance steps performed

        Raises:
            DuplicateKeyError: `key` is already in the tree
        """
        index, parent, direction = self._locate(key)
        if index != NIL:
            raise DuplicateKeyError(key)

        self._version += 1
        node = self.nodes.allocate(key, value)

        # first node of an empty tree; nothing to rebalance
        if parent == NIL:
            self.root = self._min = self._max = node
            return 0

        self.nodes.link(parent, node, direction)
        if key < self.nodes[self._min].key:
            self._min = node
        if key > self.nodes[self._max].key:
            self._max = node

        self._fix_sizes(parent)
        return self._rebalance_insert(parent)

    def _rebalance_insert(self, index: int) -> int:
        nodes = self.nodes
        count = 0

        while index != NIL:
            case = classify(nodes, index)
            if case == Case.OK:
                break

            node = nodes[index]
            logger.debug("insert rebalance at %s: %s", node.key, case.value)

            if case == Case.PROMOTE:
                # one child now shares our rank; raising ours may push the
                # problem up to the parent
                node.promote()
                count += 1
                index = node.parent

            elif case == Case.INSERT_ROTATE:
                # the heavy child's outer subtree is the tall one, so lifting
                # the heavy child over us settles the ranks for good
                heavy = heavy_side(nodes, index, 0)
                self._rotate_subtree(index, Direction(1 - heavy))
                node.demote()
                count += 2
                break

            elif case == Case.INSERT_DOUBLE_ROTATE:
                # the tall subtree is on the inside of the heavy child; lift
                # the inner grandchild over both of them
                heavy = heavy_side(nodes, index, 0)
                child = node.get_child(heavy)
                self._rotate_subtree(child, heavy)
                grandchild = self._rotate_subtree(index, Direction(1 - heavy))
                node.demote()
                nodes[child].demote()
                nodes[grandchild].promote()
                count += 5
                break

            else:
                raise InvariantError(
                    f"{case.value} at node {node.key} cannot follow an insert")

        return count

    def delete(self, key: int) -> int:
        """Deletes `key` and rebalances the tree.

        Returns:
            int: the number of rebalance steps performed

        Raises:
            NotFoundError: `key` is not in the tree
        """
        index = self._require(key)
        nodes = self.nodes
        self._version += 1

        # the cached extremes can only lose their node here; neither the
        # minimum nor the maximum has two children, so neither gets swapped
        if index == self._min:
            self._min = nodes.successor(index)
        if index == self._max:
            self._max = nodes.predecessor(index)

        node = nodes[index]
        if node.left != NIL and node.right != NIL:
            index = self._swap_with_successor(index)

        start = self._splice(index)
        self._fix_sizes(start)
        return self._rebalance_delete(start)

    def _swap_with_successor(self, index: int) -> int:
        """Moves the successor's payload into a binary node.

        Returns:
            int: the successor's index, which now carries the payload to be
                removed and has at most one present child
        """
        nodes = self.nodes
        node = nodes[index]
        successor = nodes.subtree_min(node.right)
        other = nodes[successor]

        node.key, other.key = other.key, node.key
        node.value, other.value = other.value, node.value

        # the successor's key now lives at `index`. the successor sits to the
        # right of `index` so it is never the minimum
        if self._max == successor:
            self._max = index
        return successor

    def _splice(self, index: int) -> int:
        """Unlinks a node with at most one present child and frees it.

        Returns:
            int: where the delete rebalance starts: the removed node's parent,
                or the new root if the root was removed
        """
        nodes = self.nodes
        node = nodes[index]
        child = node.left if node.left != NIL else node.right
        parent = node.parent

        nodes.link(parent, child, nodes.direction_of(index))
        if parent == NIL:
            self.root = child
        nodes.release(index)

        return parent if parent != NIL else child

    def _rebalance_delete(self, index: int) -> int:
        nodes = self.nodes
        count = 0

        while index != NIL:
            case = classify(nodes, index)
            if case == Case.OK:
                break

            node = nodes[index]
            logger.debug("delete rebalance at %s: %s", node.key, case.value)

            if case == Case.LEAF_DEMOTE or case == Case.DEMOTE:
                node.demote()
                count += 1
                index = node.parent

            elif case == Case.DOUBLE_DEMOTE:
                # the sibling of the short side has no tall children, so it
                # can drop a rank along with us
                heavy = heavy_side(nodes, index, 1)
                node.demote()
                nodes[node.get_child(heavy)].demote()
                count += 2
                index = node.parent

            elif case == Case.DELETE_ROTATE:
                heavy = heavy_side(nodes, index, 1)
                child = node.get_child(heavy)
                self._rotate_subtree(index, Direction(1 - heavy))
                node.demote()
                nodes[child].promote()
                count += 3
                # we may now be a rank 1 leaf; look at the same node again

            elif case == Case.DELETE_DOUBLE_ROTATE:
                heavy = heavy_side(nodes, index, 1)
                child = node.get_child(heavy)
                self._rotate_subtree(child, heavy)
                grandchild = self._rotate_subtree(index, Direction(1 - heavy))
                node.demote()
                node.demote()
                nodes[child].demote()
                nodes[grandchild].promote()
                nodes[grandchild].promote()
                count += 7
                break

            else:
                raise InvariantError(
                    f"{case.value} at node {node.key} cannot follow a delete")

        return count

    def _rotate_subtree(self, sub: int, direction: Direction) -> int:
        """Rotates `sub` down towards `direction`.

        The child on the opposite side takes `sub`'s place and that child's
        inner subtree moves under `sub`. Only the sizes of the two nodes
        involved change.

        Returns:
            int: the index of the node lifted into `sub`'s place
        """
        nodes = self.nodes
        sub_node = nodes[sub]
        sub_parent = sub_node.parent
        sub_direction = nodes.direction_of(sub)
        opposite = Direction(1 - direction)

        new_root = sub_node.get_child(opposite)
        new_child = nodes[new_root].get_child(direction)

        nodes.link(sub, new_child, opposite)
        nodes.link(new_root, sub, direction)
        nodes.link(sub_parent, new_root, sub_direction)
        if sub_parent == NIL:
            self.root = new_root

        nodes.update_size(sub)
        nodes.update_size(new_root)
        return new_root

    def _fix_sizes(self, index: int):
        """Recomputes subtree sizes from `index` up to the root"""
        while index != NIL:
            self.nodes.update_size(index)
            index = self.nodes[index].parent

    def min(self) -> Optional[str]:
        if self._min == NIL:
            return None
        return self.nodes[self._min].value

    def max(self) -> Optional[str]:
        if self._max == NIL:
            return None
        return self.nodes[self._max].value

    def min_key(self) -> Optional[int]:
        if self._min == NIL:
            return None
        return self.nodes[self._min].key

    def max_key(self) -> Optional[int]:
        if self._max == NIL:
            return None
        return self.nodes[self._max].key

    def successor(self, key: int) -> Optional[int]:
        """Returns the smallest key greater than `key`, or None"""
        index = self.nodes.successor(self._require(key))
        return None if index == NIL else self.nodes[index].key

    def predecessor(self, key: int) -> Optional[int]:
        """Returns the largest key smaller than `key`, or None"""
        index = self.nodes.predecessor(self._require(key))
        return None if index == NIL else self.nodes[index].key

    def select(self, i: int) -> Optional[str]:
        """Returns the value of the i-th smallest key (1-indexed), or None"""
        if self.is_empty() or i < 1 or i > self.size():
            return None

        nodes = self.nodes
        # the smallest i keys all sit in the first ancestor of the minimum
        # whose subtree holds at least i nodes
        index = self._min
        while nodes[index].size < i:
            index = nodes[index].parent

        while True:
            node = nodes[index]
            left_and_one = nodes.size(node.left) + 1
            if left_and_one == i:
                return node.value
            if left_and_one < i:
                i -= left_and_one
                index = node.right
            else:
                index = node.left

    def rank(self, key: int) -> int:
        """Returns the 1-indexed position of `key` in ascending order"""
        nodes = self.nodes
        index = self._require(key)
        position = nodes.size(nodes[index].left) + 1
        while nodes[index].parent != NIL:
            parent = nodes[index].parent
            if nodes.direction_of(index) == Direction.RIGHT:
                position += nodes.size(nodes[parent].left) + 1
            index = parent
        return position

    def _walk(self, version: int) -> Iterator[int]:
        """Yields node indices in ascending key order.

        `version` is read when the iterator is created, so a change made
        before the first step is caught too.
        """
        index = self._min
        while True:
            if self._version != version:
                raise RuntimeError("tree changed during iteration")
            if index == NIL:
                return
            yield index
            index = self.nodes.successor(index)

    def keys(self) -> Iterator[int]:
        return (self.nodes[index].key for index in self._walk(self._version))

    def values(self) -> Iterator[str]:
        return (self.nodes[index].value for index in self._walk(self._version))

    def items(self) -> Iterator[Tuple[int, str]]:
        return ((self.nodes[index].key, self.nodes[index].value)
                for index in self._walk(self._version))

    def keys_in_order(self) -> List[int]:
        return list(self.keys())

    def values_in_order(self) -> List[str]:
        return list(self.values())

    def clear(self):
        self._version += 1
        self.nodes.clear()
        self.root = self._min = self._max = NIL

    def height(self, node: Optional[int] = None) -> int:
        if node is None:
            node = self.root
        if node == NIL:
            return -1
        current = self.nodes[node]
        return 1 + max(self.height(current.left), self.height(current.right))

    def pprint(self, node: Optional[int] = None, depth=0) -> str:
        if node is None:
            node = self.root
        if node == NIL:
            return "\t" * depth + "|_ virtual\n"
        # recursively draw a tree
        current = self.nodes[node]
        direction = self.nodes.direction_of(node)
        return ("\t" * depth
                + f"|_ {direction.name} | {current.key}: {current.value!r} "
                + f"(rank {current.rank}, size {current.size})\n"
                + self.pprint(current.left, depth + 1)
                + self.pprint(current.right, depth + 1))

    def validate(self):
        """Checks every structural invariant of the tree.

        Raises:
            InvariantError: naming the first invariant that does not hold
        """
        checks = [
            ("BST order", self._bst_invariant),
            ("rank rule", self._rank_invariant),
            ("leaf rule", self._leaf_invariant),
            ("size rule", self._size_invariant),
            ("cached min/max", self._cache_invariant),
        ]
        for name, check in checks:
            if not check():
                raise InvariantError(f"{name} does not hold")

    def _subtree(self, index: int) -> Iterator[int]:
        """Yields the indices of a subtree in key order, without parent links"""
        stack = []
        while stack or index != NIL:
            if index != NIL:
                stack.append(index)
                index = self.nodes[index].left
            else:
                index = stack.pop()
                yield index
                index = self.nodes[index].right

    def _bst_invariant(self) -> bool:
        """Keys strictly increase in order and parent links mirror child links"""
        nodes = self.nodes
        if self.root != NIL and nodes[self.root].parent != NIL:
            return False
        previous = None
        count = 0
        for index in self._subtree(self.root):
            node = nodes[index]
            if previous is not None and node.key <= previous:
                return False
            for child in (node.left, node.right):
                if child != NIL and nodes[child].parent != index:
                    return False
            previous = node.key
            count += 1
        return count == len(nodes)

    def _rank_invariant(self) -> bool:
        """Every rank difference is 1 or 2"""
        return all(set(self.nodes.rank_diff(index)) <= {1, 2}
                   for index in self._subtree(self.root))

    def _leaf_invariant(self) -> bool:
        """Leaves have rank 0"""
        return all(self.nodes[index].rank == 0
                   for index in self._subtree(self.root)
                   if self.nodes[index].is_leaf())

    def _size_invariant(self) -> bool:
        nodes = self.nodes
        return all(
            nodes[index].size == 1 + nodes.size(nodes[index].left) + nodes.size(nodes[index].right)
            for index in self._subtree(self.root))

    def _cache_invariant(self) -> bool:
        if self.root == NIL:
            return self._min == NIL and self._max == NIL
        return (self._min == self.nodes.subtree_min(self.root)
                and self._max == self.nodes.subtree_max(self.root))
