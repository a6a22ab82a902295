from __future__ import annotations

import logging
import numbers
import warnings
from collections.abc import Hashable, Sequence

import networkx as nx
import numpy as np
import pandas as pd
import treedata as td

from pycenter.utils import check_tree_has_edge_key, get_keyed_node_data, get_trees

logger = logging.getLogger(__name__)


def _index_tree(tree: nx.Graph, weight_key: str | None):
    """Maps nodes to dense indices and builds a weighted adjacency list."""
    nodes = list(tree.nodes)
    index = {node: i for i, node in enumerate(nodes)}
    graph = tree.to_undirected(as_view=True) if tree.is_directed() else tree
    if weight_key is None:
        edges = [(u, v, 1) for u, v in graph.edges()]
    else:
        edges = list(graph.edges(data=weight_key, default=1))
    weights = np.asarray([w for _, _, w in edges])
    # integers beyond the int64 range come back as an object array
    is_integer = weights.dtype.kind in "biu" or (
        weights.dtype.kind == "O" and all(isinstance(w, numbers.Integral) for w in weights)
    )
    if not is_integer and weights.dtype.kind != "f":
        raise ValueError(f"Edge attribute {weight_key!r} must be numeric.")
    if not is_integer and not np.all(np.isfinite(weights)):
        raise ValueError(f"Edge attribute {weight_key!r} must be finite.")
    if np.any(weights < 0):
        raise ValueError(f"Edge attribute {weight_key!r} must be non-negative.")
    if not is_integer and weights.size:
        dtype = np.float64
    elif sum(int(w) for w in weights) <= np.iinfo(np.int64).max:
        dtype = np.int64
    else:
        # no path is longer than the total weight; fall back to exact Python ints
        dtype = object
    adjacency = [[] for _ in nodes]
    for (u, v, _), w in zip(edges, weights.astype(dtype), strict=True):
        i, j = index[u], index[v]
        adjacency[i].append((j, w))
        adjacency[j].append((i, w))
    return nodes, index, adjacency, dtype


def _down_pass(adjacency, root, dist, max_down):
    """Fills root distances and subtree maxima; returns the pre-order and parents."""
    parent = np.full(len(adjacency), -1, dtype=np.intp)
    order = []
    stack = [root]
    dist[root] = 0
    while stack:
        u = stack.pop()
        order.append(u)
        for v, weight in adjacency[u]:
            if v == parent[u]:
                continue
            parent[v] = u
            dist[v] = dist[u] + weight
            stack.append(v)
    # children are finished before their parent in reversed pre-order
    for u in reversed(order):
        farthest = dist[u]
        for v, _ in adjacency[u]:
            if v != parent[u]:
                farthest = max(farthest, max_down[v])
        max_down[u] = farthest
    return order, parent


def _up_pass(adjacency, order, parent, dist, max_down, ecc):
    """Fills eccentricities by pushing the best path through each ancestor down the tree."""
    above = {order[0]: None}
    for u in order:
        best = above.pop(u)
        best = 0 if best is None else max(best, 0)
        ecc[u] = max(best, max_down[u] - dist[u])
        first_max = second_max = None
        for v, _ in adjacency[u]:
            if v == parent[u]:
                continue
            if first_max is None or max_down[v] > first_max:
                second_max = first_max
                first_max = max_down[v]
            elif second_max is None or max_down[v] > second_max:
                second_max = max_down[v]
        for v, weight in adjacency[u]:
            if v == parent[u]:
                continue
            # the farthest branch must not route back into v itself
            sibling = second_max if max_down[v] == first_max else first_max
            if sibling is None:
                above[v] = best + weight
            else:
                above[v] = max(best, sibling - dist[u]) + weight


def _eccentricity(tree: nx.Graph, weight_key: str | None, root: Hashable | None, check_tree: bool):
    """Runs the down and up passes and returns the nodes with their eccentricity array."""
    if check_tree and not nx.is_tree(tree):
        raise ValueError("Graph must be a tree (connected and acyclic).")
    nodes, index, adjacency, dtype = _index_tree(tree, weight_key)
    if root is None:
        root = nodes[0]
    elif root not in index:
        raise ValueError(f"Node {root!r} not found in tree.")
    logger.debug("Rooting %d node tree at %r", len(nodes), root)
    dist = np.zeros(len(nodes), dtype=dtype)
    max_down = np.zeros(len(nodes), dtype=dtype)
    ecc = np.zeros(len(nodes), dtype=dtype)
    order, parent = _down_pass(adjacency, index[root], dist, max_down)
    _up_pass(adjacency, order, parent, dist, max_down, ecc)
    return nodes, ecc


def _is_minimum(ecc: np.ndarray) -> np.ndarray:
    """Boolean mask of the entries equal to the minimum."""
    radius = ecc.min()
    if ecc.dtype.kind == "f":
        return np.isclose(ecc, radius, rtol=1e-9, atol=1e-12)
    return ecc == radius


def tree_eccentricity(
    tree: nx.Graph,
    weight_key: str | None = "weight",
    root: Hashable | None = None,
    check_tree: bool = True,
) -> dict:
    """Computes the eccentricity of every node in a weighted tree.

    The eccentricity of a node is the largest weighted distance from that node
    to any other node. All eccentricities are computed in linear time with two
    traversals from an arbitrary root: a down-pass that collects distances from
    the root and the farthest distance inside each subtree, and an up-pass that
    combines them with the farthest path leaving each subtree through its parent.

    Parameters
    ----------
    tree
        A :class:`networkx.Graph` or :class:`networkx.DiGraph` tree. Directed
        trees are read through their undirected view.
    weight_key
        Edge attribute holding the non-negative edge weight. Edges without the
        attribute have weight 1. If `None`, every edge has weight 1.
        Weights must be finite. Integer weights whose total exceeds the int64
        range are summed as exact Python integers instead of overflowing.
    root
        Node to root the traversal at. Defaults to the first node. The result
        does not depend on this choice.
    check_tree
        If True, raise a `ValueError` when `tree` is not a tree. If False, the
        check is skipped and the result on non-trees is undefined.

    Returns
    -------
    Mapping from node to eccentricity. Empty if the tree has no nodes.
    """
    if tree.number_of_nodes() == 0:
        return {}
    nodes, ecc = _eccentricity(tree, weight_key, root, check_tree)
    return dict(zip(nodes, ecc.tolist(), strict=True))


def tree_center(
    tree: nx.Graph,
    weight_key: str | None = "weight",
    root: Hashable | None = None,
    check_tree: bool = True,
) -> set | None:
    """Finds the center of a weighted tree.

    The center is the set of nodes with minimum eccentricity. Unweighted trees
    have one or two center nodes; weighted trees can have more when
    eccentricities tie (e.g. across zero-length edges).

    Parameters
    ----------
    tree
        A :class:`networkx.Graph` or :class:`networkx.DiGraph` tree.
    weight_key
        Edge attribute holding the non-negative edge weight. If `None`, every
        edge has weight 1.
    root
        Node to root the traversal at. The result does not depend on this choice.
    check_tree
        If True, raise a `ValueError` when `tree` is not a tree.

    Returns
    -------
    Set of center nodes, or `None` if the tree has no nodes.
    """
    if tree.number_of_nodes() == 0:
        return None
    nodes, ecc = _eccentricity(tree, weight_key, root, check_tree)
    mask = _is_minimum(ecc)
    center = {node for node, is_center in zip(nodes, mask, strict=True) if is_center}
    logger.debug("Found %d center node(s) with radius %s", len(center), ecc.min())
    return center


def eccentricity(
    tdata: td.TreeData,
    weight_key: str | None = "length",
    key_added: str = "eccentricity",
    tree: str | Sequence[str] | None = None,
    copy: bool = False,
) -> None | pd.DataFrame:
    """Computes the eccentricity of every tree node.

    Parameters
    ----------
    tdata
        The TreeData object.
    weight_key
        Edge attribute storing branch length. If `None`, every edge has length 1.
    key_added
        Key to store eccentricity in.
    tree
        The `obst` key or keys of the trees to use. If `None`, all trees are used.
    copy
        If True, returns a :class:`pandas.DataFrame` with node eccentricities.

    Returns
    -------
    Returns `None` if `copy=False`, else returns a :class:`pandas.DataFrame`. Sets the following fields:

    `tdata.obs[key_added]` : :class:`pandas.Series` (dtype `float`)
        Eccentricity of each observation in its tree.
    `tdata.obst[tree].nodes[key_added]` : `float`
        Eccentricity of each node.
    """
    tree_keys = tree
    trees = get_trees(tdata, tree_keys)
    if not trees:
        warnings.warn("No non-empty trees found. No eccentricity was computed.", stacklevel=2)
    node_to_ecc = {}
    for _, t in trees.items():
        check_tree_has_edge_key(t, weight_key)
        values = tree_eccentricity(t, weight_key)
        nx.set_node_attributes(t, values, key_added)
        node_to_ecc.update(values)
    tdata.obs[key_added] = tdata.obs.index.map(node_to_ecc)
    if copy:
        return get_keyed_node_data(tdata, key_added, tree=list(trees.keys()))
