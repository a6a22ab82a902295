from .setup_tree import add_branch_length

__all__ = ["add_branch_length"]
