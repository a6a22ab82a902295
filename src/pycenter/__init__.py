from importlib.metadata import version

from . import get, pp, tl, utils

__all__ = ["get", "pp", "tl", "utils"]

__version__ = version("pycenter")
