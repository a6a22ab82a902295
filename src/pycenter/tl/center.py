from __future__ import annotations

import warnings
from collections.abc import Sequence

import networkx as nx
import pandas as pd
import treedata as td

from pycenter.utils import check_tree_has_edge_key, get_trees

from .eccentricity import _eccentricity, _is_minimum


def _center(tree, weight_key, key_added):
    """Marks center nodes in a tree and returns them with the radius."""
    check_tree_has_edge_key(tree, weight_key)
    nodes, ecc = _eccentricity(tree, weight_key, root=None, check_tree=True)
    is_center = _is_minimum(ecc)
    nx.set_node_attributes(tree, dict(zip(nodes, is_center.tolist(), strict=True)), key_added)
    center = {node for node, flag in zip(nodes, is_center, strict=True) if flag}
    return center, min(ecc.tolist())


def center(
    tdata: td.TreeData,
    weight_key: str | None = "length",
    key_added: str = "center",
    tree: str | Sequence[str] | None = None,
    copy: bool = False,
) -> None | pd.DataFrame:
    """Marks the center of each tree.

    The center of a tree is the set of nodes minimizing eccentricity, the
    largest branch length distance to any other node. A tree has one or two
    center nodes when all branches have the same length, and can have more when
    weighted eccentricities tie.

    Parameters
    ----------
    tdata
        The TreeData object.
    weight_key
        Edge attribute storing branch length. If `None`, every edge has length 1.
        You can run `pycenter.pp.add_branch_length` to derive lengths from node depths.
    key_added
        Key to store center membership in.
    tree
        The `obst` key or keys of the trees to use. If `None`, all trees are used.
    copy
        If True, returns a :class:`pandas.DataFrame` with the center nodes.

    Returns
    -------
    Returns `None` if `copy=False`, else returns a :class:`pandas.DataFrame` with columns `node` and `tree`.
    Sets the following fields:

    `tdata.obs[key_added]` : :class:`pandas.Series` (dtype `bool`)
        Whether the observation is a center node of its tree.
    `tdata.obst[tree].nodes[key_added]` : `bool`
        Whether the node is a center node.
    `tdata.uns[f"{key_added}_radius"]` : `dict`
        Minimum eccentricity of each tree.
    """
    # Setup
    tree_keys = tree
    trees = get_trees(tdata, tree_keys)
    if not trees:
        warnings.warn("No non-empty trees found. No center was computed.", stacklevel=2)
    # Find centers
    node_to_center = {}
    radii = {}
    center_nodes = []
    for key, t in trees.items():
        tree_nodes, radii[key] = _center(t, weight_key, key_added)
        node_to_center.update({node: node in tree_nodes for node in t.nodes})
        center_nodes.append(pd.DataFrame({"node": sorted(tree_nodes, key=str), "tree": key}))
    # Update TreeData and return
    tdata.obs[key_added] = tdata.obs.index.map(node_to_center)
    tdata.uns[f"{key_added}_radius"] = radii
    if copy:
        if not center_nodes:
            return pd.DataFrame(columns=["node", "tree"])
        return pd.concat(center_nodes, ignore_index=True)
