"""Rigid 3-D transformations built from a unit quaternion and a translation."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

_UNIT_TOLERANCE = 1e-4
_SMALL_ANGLE = 1e-12
_SLERP_EPSILON = 1e-12


def _as_vector(values: Sequence[float], size: int, what: str) -> np.ndarray:
    array = np.asarray(values, dtype=float).reshape(-1)
    if array.shape != (size,):
        raise ValueError(f"{what} must have {size} elements, got {array.size}")
    return array


def _quat_mul(q: np.ndarray, p: np.ndarray) -> np.ndarray:
    w1, x1, y1, z1 = q
    w2, x2, y2, z2 = p
    return np.array(
        [
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        ]
    )


def _quat_conjugate(q: np.ndarray) -> np.ndarray:
    return np.array([q[0], -q[1], -q[2], -q[3]])


def _quat_to_matrix(q: np.ndarray) -> np.ndarray:
    w, x, y, z = q
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ]
    )


def _matrix_to_quat(m: np.ndarray) -> np.ndarray:
    q = np.zeros(4)
    trace = m[0, 0] + m[1, 1] + m[2, 2]
    if trace > 0.0:
        t = math.sqrt(trace + 1.0)
        q[0] = 0.5 * t
        t = 0.5 / t
        q[1] = (m[2, 1] - m[1, 2]) * t
        q[2] = (m[0, 2] - m[2, 0]) * t
        q[3] = (m[1, 0] - m[0, 1]) * t
    else:
        i = int(np.argmax(np.diag(m)))
        j = (i + 1) % 3
        k = (j + 1) % 3
        t = math.sqrt(m[i, i] - m[j, j] - m[k, k] + 1.0)
        q[1 + i] = 0.5 * t
        t = 0.5 / t
        q[0] = (m[k, j] - m[j, k]) * t
        q[1 + j] = (m[j, i] + m[i, j]) * t
        q[1 + k] = (m[k, i] + m[i, k]) * t
    return q


def _quat_exp(rotation_vector: np.ndarray) -> np.ndarray:
    angle = float(np.linalg.norm(rotation_vector))
    if angle < _SMALL_ANGLE:
        q = np.concatenate(([1.0], 0.5 * rotation_vector))
        return q / np.linalg.norm(q)
    half = 0.5 * angle
    axis = rotation_vector / angle
    return np.concatenate(([math.cos(half)], math.sin(half) * axis))


def _quat_log(q: np.ndarray) -> np.ndarray:
    vec = q[1:]
    vec_norm = float(np.linalg.norm(vec))
    if vec_norm < _SMALL_ANGLE:
        return np.zeros(3)
    angle = 2.0 * math.atan2(vec_norm, abs(q[0]))
    axis = vec / vec_norm
    if q[0] < 0.0:
        axis = -axis
    return angle * axis


def _slerp(q_a: np.ndarray, q_b: np.ndarray, lam: float) -> np.ndarray:
    d = float(np.dot(q_a, q_b))
    abs_d = abs(d)
    if abs_d >= 1.0 - _SLERP_EPSILON:
        scale0 = 1.0 - lam
        scale1 = lam
    else:
        theta = math.acos(abs_d)
        sin_theta = math.sin(theta)
        scale0 = math.sin((1.0 - lam) * theta) / sin_theta
        scale1 = math.sin(lam * theta) / sin_theta
    if d < 0.0:
        scale1 = -scale1
    return scale0 * q_a + scale1 * q_b


def _check_unit(q: np.ndarray) -> None:
    squared_norm = float(np.dot(q, q))
    if abs(squared_norm - 1.0) > _UNIT_TOLERANCE:
        raise ValueError(
            f"rotation quaternion must have unit norm, got squared norm "
            f"{squared_norm}"
        )


def _check_rotation_matrix(m: np.ndarray) -> None:
    if not np.allclose(m @ m.T, np.eye(3), atol=_UNIT_TOLERANCE):
        raise ValueError("rotation part is not orthonormal")
    if np.linalg.det(m) <= 0.0:
        raise ValueError("rotation part is not a proper rotation")


class QuatTransformation:
    """Transformation taking points from frame B to frame A.

    ``rotation`` is a unit quaternion ``(w, x, y, z)`` rotating vectors from B
    to A; ``position`` is the origin of B expressed in A. With no arguments the
    transformation is the identity.
    """

    __slots__ = ("rotation", "position")

    def __init__(
        self,
        rotation: Sequence[float] | None = None,
        position: Sequence[float] | None = None,
    ) -> None:
        if rotation is None:
            self.rotation = np.array([1.0, 0.0, 0.0, 0.0])
        else:
            self.rotation = _as_vector(rotation, 4, "rotation quaternion")
            _check_unit(self.rotation)
        if position is None:
            self.position = np.zeros(3)
        else:
            self.position = _as_vector(position, 3, "position")

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[float]]) -> QuatTransformation:
        """Build from a 4x4 homogeneous transformation matrix."""
        m = np.asarray(matrix, dtype=float)
        if m.shape != (4, 4):
            raise ValueError(f"transformation matrix must be 4x4, got {m.shape}")
        rotation = m[:3, :3]
        _check_rotation_matrix(rotation)
        return cls(_matrix_to_quat(rotation), m[:3, 3])

    @classmethod
    def construct_and_renormalize_rotation(
        cls, matrix: Sequence[Sequence[float]]
    ) -> QuatTransformation:
        """Build from a 4x4 matrix whose rotation is only nearly orthonormal."""
        m = np.asarray(matrix, dtype=float)
        if m.shape != (4, 4):
            raise ValueError(f"transformation matrix must be 4x4, got {m.shape}")
        q = _matrix_to_quat(m[:3, :3])
        norm = float(np.linalg.norm(q))
        if norm == 0.0:
            raise ValueError("rotation part cannot be renormalized")
        return cls(q / norm, m[:3, 3])

    @classmethod
    def exp(cls, vec: Sequence[float]) -> QuatTransformation:
        """Exponential map of SO(3)xR(3): translation first, rotation vector last."""
        v = _as_vector(vec, 6, "exponential map vector")
        return cls(_quat_exp(v[3:]), v[:3])

    @classmethod
    def random(
        cls, norm_translation: float | None = None, angle_rad: float | None = None
    ) -> QuatTransformation:
        """Random transformation.

        Translation components lie in [-1, 1] unless ``norm_translation`` fixes
        its length; ``angle_rad`` fixes the rotation angle about a random axis.
        """
        rng = np.random.default_rng()
        if angle_rad is None:
            q = rng.normal(size=4)
            q /= np.linalg.norm(q)
        else:
            axis = rng.normal(size=3)
            axis /= np.linalg.norm(axis)
            q = _quat_exp(float(angle_rad) * axis)
        translation = rng.uniform(-1.0, 1.0, size=3)
        if norm_translation is not None:
            translation = translation / np.linalg.norm(translation)
            translation *= float(norm_translation)
        return cls(q, translation)

    def rotation_matrix(self) -> np.ndarray:
        """The 3x3 rotation matrix."""
        return _quat_to_matrix(self.rotation)

    def transformation_matrix(self) -> np.ndarray:
        """The 4x4 homogeneous transformation matrix."""
        matrix = np.eye(4)
        matrix[:3, :3] = self.rotation_matrix()
        matrix[:3, 3] = self.position
        return matrix

    def as_vector(self) -> np.ndarray:
        """The quaternion and position as ``[w, x, y, z, tx, ty, tz]``."""
        return np.concatenate((self.rotation, self.position))

    def __mul__(self, other: object) -> QuatTransformation | np.ndarray:
        if isinstance(other, QuatTransformation):
            return QuatTransformation(
                _quat_mul(self.rotation, other.rotation),
                self.position + self.rotation_matrix() @ other.position,
            )
        try:
            return self.transform(other)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return NotImplemented

    def transform(self, point: Sequence[float]) -> np.ndarray:
        """Transform a point from frame B to frame A."""
        p = _as_vector(point, 3, "point")
        return self.rotation_matrix() @ p + self.position

    def transform_vectorized(self, points: Sequence[Sequence[float]]) -> np.ndarray:
        """Transform the columns of a 3xN matrix of points."""
        m = np.asarray(points, dtype=float)
        if m.ndim != 2 or m.shape[0] != 3:
            raise ValueError(f"points must be a 3xN matrix, got shape {m.shape}")
        if m.shape[1] == 0:
            raise ValueError("points must hold at least one column")
        return self.rotation_matrix() @ m + self.position[:, None]

    def transform4(self, vector: Sequence[float]) -> np.ndarray:
        """Transform a homogeneous 4-vector."""
        v = _as_vector(vector, 4, "homogeneous vector")
        head = self.rotation_matrix() @ v[:3] + v[3] * self.position
        return np.concatenate((head, [v[3]]))

    def inverse_transform(self, point: Sequence[float]) -> np.ndarray:
        """Transform a point from frame A back to frame B."""
        p = _as_vector(point, 3, "point")
        return self.rotation_matrix().T @ (p - self.position)

    def inverse_transform4(self, vector: Sequence[float]) -> np.ndarray:
        """Transform a homogeneous 4-vector by the inverse."""
        v = _as_vector(vector, 4, "homogeneous vector")
        head = self.rotation_matrix().T @ (v[:3] - self.position * v[3])
        return np.concatenate((head, [v[3]]))

    def inverse(self) -> QuatTransformation:
        """The inverse transformation."""
        return QuatTransformation(
            _quat_conjugate(self.rotation),
            -(self.rotation_matrix().T @ self.position),
        )

    def log(self) -> np.ndarray:
        """Logarithmic map of SO(3)xR(3): translation first, rotation vector last."""
        return np.concatenate((self.position, _quat_log(self.rotation)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuatTransformation):
            return NotImplemented
        return bool(
            np.array_equal(self.rotation, other.rotation)
            and np.array_equal(self.position, other.position)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"QuatTransformation(rotation={self.rotation.tolist()}, "
            f"position={self.position.tolist()})"
        )


def interpolate_componentwise(
    t_a: QuatTransformation, t_b: QuatTransformation, lam: float
) -> QuatTransformation:
    """Slerp the rotations and linearly interpolate the positions.

    ``lam`` lies in [0, 1]; 0 gives ``t_a`` and 1 gives ``t_b``.
    """
    if not 0.0 <= lam <= 1.0:
        raise ValueError(f"lambda must be in [0, 1], got {lam}")
    position = t_a.position + lam * (t_b.position - t_a.position)
    rotation = _slerp(t_a.rotation, t_b.rotation, lam)
    return QuatTransformation(rotation, position)


def transform_pointcloud(
    transformation: QuatTransformation, pointcloud: Sequence[Sequence[float]]
) -> np.ndarray:
    """Transform every point of a cloud; returns an Nx3 array."""
    points = np.asarray(pointcloud, dtype=float)
    if points.size == 0:
        return np.zeros((0, 3))
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"pointcloud must be Nx3, got shape {points.shape}")
    return points @ transformation.rotation_matrix().T + transformation.position