import math

import numpy as np
import pytest

from voxkit.transformation import (
    QuatTransformation,
    interpolate_componentwise,
    transform_pointcloud,
)


def _sample() -> QuatTransformation:
    return QuatTransformation.exp([0.5, -1.0, 2.0, 0.3, -0.2, 0.9])


def _other() -> QuatTransformation:
    return QuatTransformation.exp([-1.5, 0.25, 0.75, -0.4, 1.1, 0.2])


def test_identity_leaves_point_unchanged():
    t = QuatTransformation()
    np.testing.assert_allclose(t.transform([1.0, 2.0, 3.0]), [1.0, 2.0, 3.0])
    np.testing.assert_allclose(t.transformation_matrix(), np.eye(4))


def test_quarter_turn_about_z():
    half = math.sqrt(0.5)
    t = QuatTransformation([half, 0.0, 0.0, half], [0.0, 0.0, 0.0])
    np.testing.assert_allclose(t.transform([1.0, 0.0, 0.0]), [0.0, 1.0, 0.0], atol=1e-12)


def test_non_unit_quaternion_rejected():
    with pytest.raises(ValueError):
        QuatTransformation([2.0, 0.0, 0.0, 0.0], [0.0, 0.0, 0.0])


def test_as_vector_layout():
    t = _sample()
    vec = t.as_vector()
    np.testing.assert_allclose(vec[:4], t.rotation)
    np.testing.assert_allclose(vec[4:], [0.5, -1.0, 2.0])


def test_exp_log_round_trip():
    vec = np.array([0.5, -1.0, 2.0, 0.3, -0.2, 0.9])
    np.testing.assert_allclose(QuatTransformation.exp(vec).log(), vec, atol=1e-12)


def test_rotation_matrix_is_orthonormal():
    r = _sample().rotation_matrix()
    np.testing.assert_allclose(r @ r.T, np.eye(3), atol=1e-12)
    assert np.linalg.det(r) == pytest.approx(1.0)


def test_from_matrix_round_trip():
    t = _sample()
    back = QuatTransformation.from_matrix(t.transformation_matrix())
    np.testing.assert_allclose(back.transformation_matrix(), t.transformation_matrix(), atol=1e-12)


def test_from_matrix_rejects_non_rotation():
    m = np.eye(4)
    m[0, 0] = 2.0
    with pytest.raises(ValueError):
        QuatTransformation.from_matrix(m)


def test_construct_and_renormalize_accepts_noisy_matrix():
    t = _sample()
    noisy = t.transformation_matrix()
    noisy[:3, :3] *= 1.01
    fixed = QuatTransformation.construct_and_renormalize_rotation(noisy)
    assert np.linalg.norm(fixed.rotation) == pytest.approx(1.0)
    np.testing.assert_allclose(fixed.rotation_matrix(), t.rotation_matrix(), atol=1e-2)
    np.testing.assert_allclose(fixed.position, t.position)


def test_compose_with_inverse_is_identity():
    t = _sample()
    product = t * t.inverse()
    np.testing.assert_allclose(product.transformation_matrix(), np.eye(4), atol=1e-12)


def test_composition_matches_matrix_product():
    a, b = _sample(), _other()
    np.testing.assert_allclose(
        (a * b).transformation_matrix(),
        a.transformation_matrix() @ b.transformation_matrix(),
        atol=1e-12,
    )


def test_mul_with_point_transforms():
    t = _sample()
    np.testing.assert_allclose(t * [1.0, 2.0, 3.0], t.transform([1.0, 2.0, 3.0]))


def test_inverse_transform_undoes_transform():
    t = _sample()
    p = np.array([0.3, -4.0, 2.5])
    np.testing.assert_allclose(t.inverse_transform(t.transform(p)), p, atol=1e-12)


def test_transform4_consistency():
    t = _sample()
    p = np.array([1.0, -2.0, 0.5])
    np.testing.assert_allclose(t.transform4([*p, 1.0])[:3], t.transform(p))
    np.testing.assert_allclose(t.transform4([*p, 0.0])[:3], t.rotation_matrix() @ p)
    back = t.inverse_transform4(t.transform4([*p, 1.0]))
    np.testing.assert_allclose(back, [*p, 1.0], atol=1e-12)


def test_transform_vectorized_matches_single():
    t = _sample()
    points = np.array([[1.0, 0.0, -2.0], [0.0, 3.0, 1.0], [5.0, 1.0, 0.5]])
    result = t.transform_vectorized(points)
    for column in range(points.shape[1]):
        np.testing.assert_allclose(result[:, column], t.transform(points[:, column]))


def test_transform_vectorized_rejects_empty():
    with pytest.raises(ValueError):
        _sample().transform_vectorized(np.zeros((3, 0)))


def test_equality():
    assert _sample() == _sample()
    assert not (_sample() == _other())


def test_interpolate_endpoints_and_midpoint():
    a, b = _sample(), _other()
    start = interpolate_componentwise(a, b, 0.0)
    end = interpolate_componentwise(a, b, 1.0)
    np.testing.assert_allclose(start.transformation_matrix(), a.transformation_matrix(), atol=1e-12)
    np.testing.assert_allclose(end.transformation_matrix(), b.transformation_matrix(), atol=1e-12)
    mid = interpolate_componentwise(a, b, 0.5)
    np.testing.assert_allclose(mid.position, 0.5 * (a.position + b.position))


def test_interpolate_rejects_out_of_range():
    with pytest.raises(ValueError):
        interpolate_componentwise(_sample(), _other(), 1.5)


def test_random_with_norm_and_angle():
    t = QuatTransformation.random(2.0, 0.7)
    assert np.linalg.norm(t.position) == pytest.approx(2.0)
    assert np.linalg.norm(t.log()[3:]) == pytest.approx(0.7)


def test_transform_pointcloud_matches_transform():
    t = _sample()
    cloud = [[1.0, 2.0, 3.0], [-1.0, 0.0, 4.0]]
    result = transform_pointcloud(t, cloud)
    assert result.shape == (2, 3)
    for row, point in zip(result, cloud):
        np.testing.assert_allclose(row, t.transform(point))