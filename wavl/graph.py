import networkx as nx

from .node import NIL
from .tree import WAVLTree


def to_networkx(tree: WAVLTree) -> nx.DiGraph:
    """Exports the shape of a tree as a directed graph keyed by tree key.

    Graph nodes carry the `value`, `rank` and `size` of each tree node and
    every parent -> child edge carries its `direction` and `rank_diff`.
    Virtual children are left out.
    """
    G = nx.DiGraph()
    nodes = tree.nodes

    for _, node in nodes:
        G.add_node(node.key, value=node.value, rank=node.rank, size=node.size)

    for _, node in nodes:
        for direction, child in (("LEFT", node.left), ("RIGHT", node.right)):
            if child == NIL:
                continue
            G.add_edge(node.key, nodes[child].key,
                       direction=direction,
                       rank_diff=node.rank - nodes[child].rank)
    return G


def root_key(G: nx.DiGraph):
    """Returns the key at the root of an exported tree, or None if it is empty"""
    roots = [key for key, degree in G.in_degree() if degree == 0]
    return roots[0] if roots else None
