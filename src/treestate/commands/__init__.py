"""
treestate.commands - CLI command implementations
"""

__all__ = [
    "selected",
    "show",
]
