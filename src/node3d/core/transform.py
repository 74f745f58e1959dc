"""Transform class for 3D transformations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Self

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .rotation import as_quat, as_vec3, compose_matrix, quat_from_matrix, quat_identity, quat_normalize


@dataclass(eq=False)
class Transform:
    """Represents a 3D transformation with translation, rotation, and scale.

    Rotation is stored as a unit quaternion (w, x, y, z). Every field is an
    owned float64 array: values passed in are copied, never aliased.
    """

    translation: NDArray[np.float64] = field(
        default_factory=lambda: np.zeros(3, dtype=np.float64)
    )
    rotation: NDArray[np.float64] = field(default_factory=quat_identity)
    scale: NDArray[np.float64] = field(
        default_factory=lambda: np.ones(3, dtype=np.float64)
    )

    def __post_init__(self) -> None:
        self.translation = as_vec3(self.translation, "translation")
        self.rotation = quat_normalize(as_quat(self.rotation, "rotation"))
        self.scale = as_vec3(self.scale, "scale")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return (
            np.array_equal(self.translation, other.translation)
            and np.array_equal(self.rotation, other.rotation)
            and np.array_equal(self.scale, other.scale)
        )

    def to_matrix(self) -> NDArray[np.float64]:
        """Convert to a 4x4 transformation matrix.

        Order: Scale -> Rotate -> Translate (standard game engine order)
        """
        return compose_matrix(self.translation, self.rotation, self.scale)

    @classmethod
    def from_matrix(cls, matrix: ArrayLike) -> Self:
        """Decompose a 4x4 TRS matrix.

        Scale is read as the length of each rotated basis column, so shear
        (a non-uniform scale applied after a rotation) is not recovered.
        """
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.shape != (4, 4):
            raise ValueError(f"Transform matrix must be 4x4, got shape {matrix.shape}")

        scale = np.linalg.norm(matrix[:3, :3], axis=0)
        if np.any(scale < 1e-12):
            raise ValueError("Cannot decompose a matrix with a zero scale axis")

        return cls(
            translation=matrix[:3, 3],
            rotation=quat_from_matrix(matrix[:3, :3] / scale),
            scale=scale,
        )

    def copy(self) -> Self:
        """Create a deep copy of this transform."""
        return Transform(
            translation=self.translation.copy(),
            rotation=self.rotation.copy(),
            scale=self.scale.copy(),
        )
