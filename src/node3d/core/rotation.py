"""Quaternion and matrix helpers built on scipy's Rotation.

Quaternion convention: (w, x, y, z) - scalar first.
Matrices use the column-vector convention, so a point is mapped as ``M @ p``.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.transform import Rotation


def as_vec3(value: ArrayLike, name: str = "vector") -> NDArray[np.float64]:
    """Copy ``value`` into a new float64 array of shape (3,).

    Raises:
        ValueError: If the value does not have exactly 3 components
    """
    vec = np.array(value, dtype=np.float64)
    if vec.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {vec.shape}")
    return vec


def as_quat(value: ArrayLike, name: str = "quaternion") -> NDArray[np.float64]:
    """Copy ``value`` into a new float64 array of shape (4,)."""
    quat = np.array(value, dtype=np.float64)
    if quat.shape != (4,):
        raise ValueError(f"{name} must have 4 components (w, x, y, z), got shape {quat.shape}")
    return quat


def _to_rotation(q: ArrayLike) -> Rotation:
    quat = as_quat(q)
    if np.linalg.norm(quat) < 1e-12:
        raise ValueError("Cannot normalize a zero-length quaternion")
    return Rotation.from_quat(quat, scalar_first=True)


def _from_rotation(rotation: Rotation) -> NDArray[np.float64]:
    return rotation.as_quat(scalar_first=True)


def quat_identity() -> NDArray[np.float64]:
    """Return the identity rotation."""
    return _from_rotation(Rotation.identity())


def quat_normalize(q: ArrayLike) -> NDArray[np.float64]:
    """Return ``q`` scaled to unit length.

    Raises:
        ValueError: If ``q`` has zero length
    """
    return _from_rotation(_to_rotation(q))


def quat_multiply(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """Hamilton product ``a * b``.

    Rotating by the product applies ``b`` first, then ``a``.
    """
    return _from_rotation(_to_rotation(a) * _to_rotation(b))


def quat_from_axis_angle(axis: ArrayLike, radians: float) -> NDArray[np.float64]:
    """Create a unit quaternion rotating ``radians`` about ``axis``."""
    axis = as_vec3(axis, "axis")
    length = np.linalg.norm(axis)
    if length < 1e-12:
        raise ValueError("Rotation axis must be non-zero")
    return _from_rotation(Rotation.from_rotvec(axis / length * radians))


def quat_to_matrix(q: ArrayLike) -> NDArray[np.float64]:
    """Convert a quaternion to a 3x3 rotation matrix."""
    return _to_rotation(q).as_matrix()


def quat_from_matrix(matrix: ArrayLike) -> NDArray[np.float64]:
    """Extract a unit quaternion from the rotation block of a 3x3 or 4x4 matrix.

    Args:
        matrix: 3x3 rotation matrix or 4x4 transform (upper-left block is used)

    Returns:
        Normalized quaternion (w, x, y, z)
    """
    m = np.asarray(matrix, dtype=np.float64)
    if m.shape not in ((3, 3), (4, 4)):
        raise ValueError(f"Rotation matrix must be 3x3 or 4x4, got shape {m.shape}")
    return _from_rotation(Rotation.from_matrix(m[:3, :3]))


def rotate_vector(q: ArrayLike, v: ArrayLike) -> NDArray[np.float64]:
    """Rotate vector ``v`` by quaternion ``q``."""
    return _to_rotation(q).apply(as_vec3(v))


def compose_matrix(
    translation: ArrayLike,
    rotation: ArrayLike,
    scale: ArrayLike,
) -> NDArray[np.float64]:
    """Build a 4x4 transform from translation, rotation and scale.

    Order: Scale -> Rotate -> Translate, i.e. ``T @ R @ S``.
    """
    matrix = np.eye(4, dtype=np.float64)
    matrix[:3, :3] = quat_to_matrix(rotation) * as_vec3(scale, "scale")
    matrix[:3, 3] = as_vec3(translation, "translation")
    return matrix
