from .center import center

__all__ = ["center"]
