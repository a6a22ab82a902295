from .center import center
from .eccentricity import eccentricity, tree_center, tree_eccentricity

__all__ = ["center", "eccentricity", "tree_center", "tree_eccentricity"]
