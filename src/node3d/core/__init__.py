"""Core transform hierarchy components."""

from .transform import Transform
from .node import TransformNode
from . import rotation

__all__ = ["Transform", "TransformNode", "rotation"]
