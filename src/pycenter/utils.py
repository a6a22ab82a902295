from __future__ import annotations

import random
from collections.abc import Mapping, Sequence

import networkx as nx
import pandas as pd
import treedata as td


def check_tree_has_key(tree: nx.DiGraph, key: str):
    """Checks that tree nodes have a given key."""
    # sample 10 nodes to check if the key is present
    sampled_nodes = random.sample(list(tree.nodes), min(10, len(tree.nodes)))
    for node in sampled_nodes:
        if key not in tree.nodes[node]:
            raise ValueError(f"One or more nodes do not have {key} attribute.")


def check_tree_has_edge_key(tree: nx.DiGraph, key: str | None):
    """Checks that every tree edge has a given key."""
    if key is None:
        return
    for u, v, data in tree.edges(data=True):
        if key not in data:
            raise ValueError(
                f"Edge ({u!r}, {v!r}) does not have {key} attribute. "
                "You can run `pycenter.pp.add_branch_length` to add branch lengths, or pass `weight_key=None`."
            )


def get_keyed_edge_data(tdata: td.TreeData, keys: str | Sequence[str], tree: str | Sequence[str] = None) -> pd.DataFrame:
    """Gets edge data for a given key from a tree or set of trees."""
    if isinstance(keys, str):
        keys = [keys]
    trees = get_trees(tdata, tree)
    data = []
    for name, t in trees.items():
        edge_data = pd.DataFrame({key: nx.get_edge_attributes(t, key) for key in keys})
        edge_data["tree"] = name
        edge_data["edge"] = edge_data.index
        data.append(edge_data)
    if not data:
        return pd.DataFrame(columns=keys, index=pd.MultiIndex.from_tuples([], names=["tree", "edge"]))
    data = pd.concat(data)
    return data.set_index(["tree", "edge"])


def get_keyed_node_data(tdata: td.TreeData, keys: str | Sequence[str], tree: str | Sequence[str] = None) -> pd.DataFrame:
    """Gets node data for a given key from a tree or set of trees."""
    if isinstance(keys, str):
        keys = [keys]
    trees = get_trees(tdata, tree)
    data = []
    for name, t in trees.items():
        tree_data = pd.DataFrame({key: nx.get_node_attributes(t, key) for key in keys})
        tree_data["tree"] = name
        data.append(tree_data)
    if not data:
        return pd.DataFrame(columns=keys, index=pd.MultiIndex.from_tuples([], names=["tree", "node"]))
    data = pd.concat(data)
    data["node"] = data.index
    return data.set_index(["tree", "node"])


def get_trees(tdata: td.TreeData, tree: str | Sequence[str] | None) -> Mapping[str, nx.DiGraph]:
    """Gets the trees to compute centers on, skipping trees without nodes.

    Empty trees have no center, so callers never see them.
    """
    if tree is None:
        tree_keys = list(tdata.obst.keys())
    elif isinstance(tree, str):
        tree_keys = [tree]
    elif isinstance(tree, Sequence):
        tree_keys = list(tree)
    else:
        raise ValueError("Tree keys must be a string, list of strings, or None.")
    missing = [key for key in tree_keys if key not in tdata.obst.keys()]
    if missing:
        raise ValueError(f"Key {missing[0]!r} is not present in obst.")
    return {key: tdata.obst[key] for key in tree_keys if tdata.obst[key].number_of_nodes() > 0}
