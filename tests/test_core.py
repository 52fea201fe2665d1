"""
Unit tests for core rotation modules.
"""
import pytest
import numpy as np
from scipy.spatial.transform import Rotation

from lse.core.rotations import (
    skew, range_pi, quat_identity, quat_inverse, quat_to_rotation_matrix,
    rotation_matrix_to_quat, quat_to_rotation_vector, rotation_vector_to_quat,
    quat_left_matrix, quat_right_matrix, quat_multiply, rotate_vector,
    quat_to_ypr, ypr_to_quat, quat_to_rpy, rpy_to_quat,
    angular_rate_to_euler_rate_matrix, angular_rate_to_euler_rate_matrix_inverse
)
from lse.core.types import NormalizedQuaternion, NQuat


def random_unit_quats(n, seed=0):
    rng = np.random.default_rng(seed)
    q = rng.normal(size=(n, 4))
    return q / np.linalg.norm(q, axis=1, keepdims=True)


def same_rotation(q1, q2, atol=1e-9):
    """Quaternions q and -q describe the same rotation."""
    q1, q2 = np.asarray(q1), np.asarray(q2)
    return np.allclose(q1, q2, atol=atol) or np.allclose(q1, -q2, atol=atol)


class TestSkew:
    """Tests for skew-symmetric matrix."""

    def test_cross_product(self):
        a = np.array([0.3, -1.2, 2.0])
        b = np.array([1.5, 0.4, -0.7])
        assert np.allclose(skew(a) @ b, np.cross(a, b))

    def test_antisymmetric(self):
        S = skew(np.array([1.0, 2.0, 3.0]))
        assert np.allclose(S, -S.T)


class TestRangePi:
    """Tests for rotation vector angle wrapping."""

    def test_wraps_full_turn(self):
        v = np.array([2 * np.pi + 0.1, 0.0, 0.0])
        assert np.allclose(range_pi(v), [0.1, 0.0, 0.0])

    def test_pi_unchanged(self):
        v = np.array([0.0, np.pi, 0.0])
        assert np.array_equal(range_pi(v), v)

    def test_flips_axis_beyond_pi(self):
        v = np.array([0.0, 0.0, 1.5 * np.pi])
        assert np.allclose(range_pi(v), [0.0, 0.0, -0.5 * np.pi])

    def test_returns_copy(self):
        v = np.array([0.1, 0.0, 0.0])
        wrapped = range_pi(v)
        wrapped[0] = 5.0
        assert v[0] == 0.1

    def test_zero_vector(self):
        assert np.array_equal(range_pi(np.zeros(3)), np.zeros(3))

    def test_same_rotation(self):
        v = np.array([3.0, -4.0, 2.0])
        wrapped = range_pi(v)
        assert np.linalg.norm(wrapped) <= np.pi
        assert np.allclose(quat_to_rotation_matrix(rotation_vector_to_quat(v)),
                           quat_to_rotation_matrix(rotation_vector_to_quat(wrapped)))


class TestQuaternionConversions:
    """Tests for quaternion conversions."""

    def test_identity(self):
        q = quat_identity()
        assert np.array_equal(q, [0.0, 0.0, 0.0, 1.0])
        assert np.allclose(quat_to_rotation_matrix(q), np.eye(3))
        assert np.allclose(quat_to_rotation_vector(q), np.zeros(3))

    def test_inverse_is_involution(self):
        for q in random_unit_quats(5):
            assert np.array_equal(quat_inverse(quat_inverse(q)), q)

    def test_rotation_matrix_matches_scipy(self):
        for q in random_unit_quats(10):
            R = quat_to_rotation_matrix(q)
            assert np.allclose(R, Rotation.from_quat(q).as_matrix(), atol=1e-12)
            assert np.allclose(R @ R.T, np.eye(3), atol=1e-12)

    def test_rotation_matrix_to_quat(self):
        for q in random_unit_quats(10, seed=1):
            q_back = rotation_matrix_to_quat(quat_to_rotation_matrix(q))
            assert same_rotation(q_back, q)

    def test_rotation_vector_roundtrip(self):
        rng = np.random.default_rng(2)
        for _ in range(20):
            axis = rng.normal(size=3)
            axis /= np.linalg.norm(axis)
            v = axis * rng.uniform(0.0, np.pi - 1e-3)
            assert np.allclose(quat_to_rotation_vector(rotation_vector_to_quat(v)), v, atol=1e-9)

    def test_rotation_vector_matches_scipy(self):
        v = np.array([0.4, -0.2, 1.1])
        assert np.allclose(rotation_vector_to_quat(v), Rotation.from_rotvec(v).as_quat())

    def test_half_turn(self):
        q = rotation_vector_to_quat(np.array([np.pi, 0.0, 0.0]))
        assert np.allclose(q, [1.0, 0.0, 0.0, 0.0], atol=1e-12)
        assert np.allclose(quat_to_rotation_vector(q), [np.pi, 0.0, 0.0])

    def test_small_angle_branch(self):
        v = np.array([1e-12, -2e-12, 0.0])
        q = rotation_vector_to_quat(v)
        assert np.isclose(np.linalg.norm(q), 1.0)
        assert np.allclose(quat_to_rotation_vector(q), v, atol=1e-9)

    def test_nan_propagates(self):
        v = quat_to_rotation_vector(np.full(4, np.nan))
        assert np.all(np.isnan(v))

    def test_rotate_vector(self):
        q = rotation_vector_to_quat(np.array([0.0, 0.0, np.pi / 2]))
        assert np.allclose(rotate_vector(q, np.array([1.0, 0.0, 0.0])), [0.0, 1.0, 0.0])


class TestMultiplicationMatrices:
    """Tests for quaternion left/right multiplication matrices."""

    def test_left_right_agree(self):
        p, q = random_unit_quats(2, seed=3)
        assert np.allclose(quat_left_matrix(p) @ q, quat_right_matrix(q) @ p)

    def test_product_composes_rotations(self):
        p, q = random_unit_quats(2, seed=4)
        pq = quat_multiply(p, q)
        assert np.allclose(quat_to_rotation_matrix(pq),
                           quat_to_rotation_matrix(p) @ quat_to_rotation_matrix(q))

    def test_identity_matrices(self):
        assert np.allclose(quat_left_matrix(quat_identity()), np.eye(4))
        assert np.allclose(quat_right_matrix(quat_identity()), np.eye(4))


class TestEulerAngles:
    """Tests for the two Euler angle families."""

    def test_ypr_roundtrip(self):
        ypr = np.array([0.1, 0.2, 0.3])
        assert np.allclose(quat_to_ypr(ypr_to_quat(ypr)), ypr, atol=1e-9)

    def test_ypr_first_angle(self):
        a = 0.4
        q = ypr_to_quat(np.array([a, 0.0, 0.0]))
        assert np.allclose(q, [-np.sin(a / 2), 0.0, 0.0, np.cos(a / 2)])

    def test_rpy_zero(self):
        assert np.allclose(rpy_to_quat(np.zeros(3)), quat_identity())

    def test_rpy_first_angle(self):
        a = 0.4
        q = rpy_to_quat(np.array([a, 0.0, 0.0]))
        assert np.allclose(q, [0.0, 0.0, -np.sin(a / 2), np.cos(a / 2)])
        assert np.allclose(quat_to_rpy(q), [0.0, 0.0, a])

    def test_rpy_pitch_roundtrip(self):
        rpy = np.array([0.0, 0.5, 0.0])
        assert np.allclose(quat_to_rpy(rpy_to_quat(rpy)), rpy)

    def test_families_differ(self):
        v = np.array([0.3, 0.0, 0.0])
        assert not same_rotation(ypr_to_quat(v), rpy_to_quat(v))

    def test_euler_rate_matrix_inverse(self):
        rpy = np.array([0.1, 0.4, -0.7])
        M = angular_rate_to_euler_rate_matrix(rpy)
        M_inv = angular_rate_to_euler_rate_matrix_inverse(rpy)
        assert np.allclose(M @ M_inv, np.eye(3))

    def test_euler_rate_matrix_at_zero(self):
        assert np.allclose(angular_rate_to_euler_rate_matrix(np.zeros(3)), np.eye(3))

    @pytest.mark.parametrize("pitch", [np.pi / 2, -np.pi / 2])
    def test_gimbal_lock_returns_zero(self, pitch):
        M_inv = angular_rate_to_euler_rate_matrix_inverse(np.array([0.2, pitch, 0.3]))
        assert np.all(np.isfinite(M_inv))
        assert np.array_equal(M_inv, np.zeros((3, 3)))


class TestNormalizedQuaternion:
    """Tests for NormalizedQuaternion class."""

    def test_default_identity(self):
        q = NQuat()
        assert np.array_equal(q.to_array(), [0.0, 0.0, 0.0, 1.0])

    def test_index_access(self):
        q = NormalizedQuaternion()
        q[0] = 0.5
        assert q[0] == 0.5
        assert q.x == 0.5
        assert len(q) == 4

    def test_normalize(self):
        q = NQuat(1.0, 2.0, 3.0, 4.0).normalize()
        assert np.isclose(np.linalg.norm(q.to_array()), 1.0)

    def test_normalize_idempotent(self):
        q = NQuat(1.0, -2.0, 0.5, 4.0)
        once = q.normalize().to_array()
        twice = q.normalize().to_array()
        assert np.allclose(once, twice, atol=1e-15, rtol=0)

    def test_normalize_degenerate(self):
        assert np.array_equal(NQuat(0.0, 0.0, 0.0, 0.0).normalize().to_array(),
                              [0.0, 0.0, 0.0, 1.0])
        assert np.array_equal(NQuat(1e-11, 0.0, 0.0, 0.0).normalize().to_array(),
                              [0.0, 0.0, 0.0, 1.0])

    def test_set_identity(self):
        q = NQuat(0.1, 0.2, 0.3, 0.9)
        q.set_identity()
        assert np.array_equal(q.to_array(), quat_identity())

    def test_compose_matches_matrices(self):
        for p, q in zip(random_unit_quats(5, seed=5), random_unit_quats(5, seed=6)):
            pq = NQuat.from_array(p) * NQuat.from_array(q)
            assert np.allclose(pq.to_array(), quat_multiply(p, q))

    def test_compose_with_inverse(self):
        q = NQuat.from_array(random_unit_quats(1, seed=7)[0])
        assert np.allclose((q * q.inverse()).to_array(), quat_identity())

    def test_half_turn_squared(self):
        q = NQuat.from_array(rotation_vector_to_quat(np.array([np.pi, 0.0, 0.0])))
        assert same_rotation((q * q).to_array(), quat_identity())

    def test_rotation_vector_bridge(self):
        v = np.array([0.2, -0.5, 0.9])
        q = NQuat.from_rotation_vector(v)
        assert np.allclose(q.to_array(), rotation_vector_to_quat(v))
        assert np.allclose(q.to_rotation_vector(), v)

    def test_copy_is_independent(self):
        q = NQuat(0.0, 0.0, 0.0, 1.0)
        c = q.copy()
        q[0] = 1.0
        assert c[0] == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
