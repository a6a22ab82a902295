from __future__ import annotations

from collections.abc import Mapping, Sequence

import treedata as td

from pycenter.tl.eccentricity import tree_center
from pycenter.utils import check_tree_has_edge_key, get_trees


def center(
    tdata: td.TreeData, weight_key: str | None = "length", tree: str | Sequence[str] | None = None
) -> set | Mapping[str, set]:
    """Get the center node(s) of tree(s) in ``tdata``.

    Parameters
    ----------
    tdata
        The ``treedata.TreeData`` object containing tree(s).
    weight_key
        Edge attribute storing branch length. If ``None``, every edge has length 1.
    tree
        Optional tree key or sequence of keys. If ``None`` (default),
        centers for all trees with nodes are returned.

    Returns
    -------
    set or Mapping[str, set]
        Center nodes for a single tree, or a mapping from tree key to
        center nodes when multiple trees are requested.
        Empty trees are skipped, so requesting only empty trees returns an
        empty mapping rather than a set.
    """
    trees = get_trees(tdata, tree)
    centers = {}
    for name, t in trees.items():
        check_tree_has_edge_key(t, weight_key)
        centers[name] = tree_center(t, weight_key)
    if len(centers) == 1:
        return next(iter(centers.values()))
    return centers
