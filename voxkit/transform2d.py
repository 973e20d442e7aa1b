"""Rigid 2-D transformations built from a rotation angle and a translation."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np


def _as_vector2(values: Sequence[float], what: str) -> np.ndarray:
    array = np.asarray(values, dtype=float).reshape(-1)
    if array.shape != (2,):
        raise ValueError(f"{what} must have 2 elements, got {array.size}")
    return array


class Transformation2D:
    """Transformation taking 2-D points from frame B to frame A.

    ``angle`` is the rotation (radians) taking vectors from B to A and
    ``position`` is the origin of B expressed in A. With no arguments the
    transformation is the identity.
    """

    __slots__ = ("angle", "position")

    def __init__(
        self, angle: float = 0.0, position: Sequence[float] | None = None
    ) -> None:
        self.angle = float(angle)
        if position is None:
            self.position = np.zeros(2)
        else:
            self.position = _as_vector2(position, "position")

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[float]]) -> Transformation2D:
        """Build from a 3x3 homogeneous transformation matrix."""
        m = np.asarray(matrix, dtype=float)
        if m.shape != (3, 3):
            raise ValueError(f"transformation matrix must be 3x3, got {m.shape}")
        angle = math.atan2(m[1, 0], m[0, 0])
        return cls(angle, m[:2, 2])

    def rotation_matrix(self) -> np.ndarray:
        """The 2x2 rotation matrix."""
        c = math.cos(self.angle)
        s = math.sin(self.angle)
        return np.array([[c, -s], [s, c]])

    def transformation_matrix(self) -> np.ndarray:
        """The 3x3 homogeneous transformation matrix."""
        matrix = np.eye(3)
        matrix[:2, :2] = self.rotation_matrix()
        matrix[:2, 2] = self.position
        return matrix

    def as_vector(self) -> np.ndarray:
        """The rotation angle and position as ``[angle, x, y]``."""
        return np.concatenate(([self.angle], self.position))

    def __mul__(self, other: object) -> Transformation2D | np.ndarray:
        if isinstance(other, Transformation2D):
            return Transformation2D(
                self.angle + other.angle,
                self.position + self.rotation_matrix() @ other.position,
            )
        try:
            return self.transform(other)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return NotImplemented

    def transform(self, point: Sequence[float]) -> np.ndarray:
        """Transform a point from frame B to frame A."""
        p = _as_vector2(point, "point")
        return self.rotation_matrix() @ p + self.position

    def transform_vectorized(self, points: Sequence[Sequence[float]]) -> np.ndarray:
        """Transform the columns of a 2xN matrix of points."""
        m = np.asarray(points, dtype=float)
        if m.ndim != 2 or m.shape[0] != 2:
            raise ValueError(f"points must be a 2xN matrix, got shape {m.shape}")
        return self.rotation_matrix() @ m + self.position[:, None]

    def inverse(self) -> Transformation2D:
        """The inverse transformation."""
        return Transformation2D(
            -self.angle, -(self.rotation_matrix().T @ self.position)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transformation2D):
            return NotImplemented
        return self.angle == other.angle and bool(
            np.array_equal(self.position, other.position)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Transformation2D(angle={self.angle}, "
            f"position={self.position.tolist()})"
        )