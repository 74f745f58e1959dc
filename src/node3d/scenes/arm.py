"""Robot arm scene: a chain of joints."""

import numpy as np

from ..core.node import TransformNode

SEGMENT_LENGTH = 1.0


def create_arm_scene(joint_count: int = 3) -> TransformNode:
    """Create a serial chain of joints, each one segment above its parent.

    Each joint is bent 30 degrees about its local Z axis, so the global
    transforms fan out while the summed global positions stay on the Y axis.

    Returns:
        The base joint of the chain.
    """
    base = TransformNode()
    joint = base
    for _ in range(joint_count):
        child = TransformNode(position=[0.0, SEGMENT_LENGTH, 0.0])
        child.rotate_z(np.radians(30.0))
        joint.add(child)
        joint = child

    return base
