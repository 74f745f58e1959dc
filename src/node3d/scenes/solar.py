"""Solar system scene: orbits nested under a sun."""

from ..core.node import TransformNode


def create_solar_scene() -> TransformNode:
    """Create a sun with two planets, one of which has a moon.

    Returns:
        The sun node.
    """
    sun = TransformNode().scale_mult(2.0)

    earth = TransformNode(position=[5.0, 0.0, 0.0])
    moon = TransformNode(position=[1.0, 0.0, 0.0], scale=[0.25, 0.25, 0.25])
    mars = TransformNode(position=[0.0, 0.0, 8.0], scale=[0.5, 0.5, 0.5])

    sun.add(earth).add(mars)
    earth.add(moon)
    return sun
