"""NodeDirectory module."""

from .directory import INodeDirectory, NodeDirectory, reduce

__all__ = ["INodeDirectory", "NodeDirectory", "reduce"]
