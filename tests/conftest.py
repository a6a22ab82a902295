import networkx as nx
import pandas as pd
import pytest
import treedata as td


@pytest.fixture
def tdata() -> td.TreeData:
    tree1 = nx.DiGraph()
    tree1.add_weighted_edges_from(
        [("root", "A", 3), ("root", "B", 1), ("B", "C", 1), ("B", "D", 2)], weight="length"
    )
    tree2 = nx.DiGraph()
    tree2.add_weighted_edges_from([("root2", "E", 1), ("root2", "F", 1)], weight="length")
    tree3 = nx.DiGraph()
    tree3.add_weighted_edges_from([("R", "G", 1)], weight="length")
    return td.TreeData(
        obs=pd.DataFrame(index=["A", "C", "D", "E", "F", "G"]),
        obst={"tree1": tree1, "tree2": tree2, "tree3": tree3, "empty": nx.DiGraph()},
    )
