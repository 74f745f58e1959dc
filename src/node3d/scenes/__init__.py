"""Pre-built hierarchies for node3d."""

from .arm import create_arm_scene
from .solar import create_solar_scene

__all__ = ["create_arm_scene", "create_solar_scene"]
