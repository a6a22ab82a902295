from __future__ import annotations

from collections.abc import Sequence

import networkx as nx
import treedata as td

from pycenter.utils import check_tree_has_key, get_keyed_edge_data, get_trees


def _add_branch_length(tree, depth_key, key_added):
    """Adds a branch length attribute to the edges of a tree."""
    check_tree_has_key(tree, depth_key)
    lengths = {(u, v): tree.nodes[v][depth_key] - tree.nodes[u][depth_key] for u, v in tree.edges}
    nx.set_edge_attributes(tree, lengths, key_added)


def add_branch_length(
    tdata: td.TreeData,
    depth_key: str = "depth",
    key_added: str = "length",
    tree: str | Sequence[str] | None = None,
    copy: bool = False,
):
    """Adds a branch length attribute to the edges of a tree.

    The length of an edge is the depth of the child minus the depth of the parent.

    Parameters
    ----------
    tdata
        TreeData object.
    depth_key
        Node attribute key storing depth.
    key_added
        Edge attribute key to store the branch length.
    tree
        The `obst` key or keys of the trees to use. If `None`, all trees are used.
    copy
        If True, returns a pd.DataFrame of branch lengths.
    """
    tree_keys = tree
    trees = get_trees(tdata, tree_keys)
    for _, t in trees.items():
        _add_branch_length(t, depth_key, key_added)
    if copy:
        return get_keyed_edge_data(tdata, key_added, tree=list(trees.keys()))
