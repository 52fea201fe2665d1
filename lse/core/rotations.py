"""
Rotation representation conversions for LSE.

Conventions:
- Quaternion: (x, y, z, w), vector part first, alibi
- Rotation matrix: alibi
- Rotation vector: alibi, axis * angle (rad)
- Roll-pitch-yaw: alias

None of these functions validate their input. Non-unit quaternions or NaN
values propagate into the result; near-singular cases switch branches at
EPSILON instead of raising.
"""
import numpy as np
from scipy.spatial.transform import Rotation

EPSILON = 1e-10


def skew(v: np.ndarray) -> np.ndarray:
    """Create skew-symmetric (cross-product) matrix from vector."""
    return np.array([
        [0.0, -v[2], v[1]],
        [v[2], 0.0, -v[0]],
        [-v[1], v[0], 0.0]
    ])


def range_pi(v: np.ndarray) -> np.ndarray:
    """
    Limit the norm of a rotation vector to [0, pi].

    The angle is reduced by the nearest multiple of 2*pi; a negative
    remainder flips the axis.

    Args:
        v: Rotation vector (3,)

    Returns:
        Equivalent rotation vector with norm <= pi
    """
    v = np.array(v, dtype=np.float64)
    a = np.linalg.norm(v)
    if a <= np.pi:
        return v
    a2 = a - 2.0 * np.pi * np.floor((a + np.pi) / (2.0 * np.pi))
    return v / a * a2


def quat_identity() -> np.ndarray:
    """Return identity quaternion (0, 0, 0, 1)."""
    return np.array([0.0, 0.0, 0.0, 1.0])


def quat_inverse(q: np.ndarray) -> np.ndarray:
    """Conjugate of a unit quaternion, i.e. its inverse."""
    q = np.asarray(q, dtype=np.float64)
    return np.array([-q[0], -q[1], -q[2], q[3]])


def quat_to_rotation_matrix(q: np.ndarray) -> np.ndarray:
    """
    Convert a unit quaternion to a rotation matrix.

    R = (2w^2 - 1) I + 2w [v]x + 2 v v^T

    Args:
        q: Unit quaternion (x, y, z, w)

    Returns:
        3x3 rotation matrix
    """
    q = np.asarray(q, dtype=np.float64)
    v = q[:3]
    w = q[3]
    return (2 * w * w - 1) * np.eye(3) + 2 * w * skew(v) + 2 * np.outer(v, v)


def rotation_matrix_to_quat(R: np.ndarray) -> np.ndarray:
    """
    Convert a rotation matrix to a unit quaternion (x, y, z, w).

    The sign of the result is whatever scipy returns; both q and -q
    describe the same rotation.
    """
    return Rotation.from_matrix(np.asarray(R, dtype=np.float64)).as_quat()


def quat_to_rotation_vector(q: np.ndarray) -> np.ndarray:
    """
    Convert a quaternion to a rotation vector (logarithmic map).

    Args:
        q: Unit quaternion (x, y, z, w)

    Returns:
        Rotation vector (3,). Below EPSILON the linearization 2v is used.
    """
    q = np.asarray(q, dtype=np.float64)
    v = q[:3]
    c = q[3]
    s = np.linalg.norm(v)
    if s >= EPSILON:
        a = 2 * np.arctan2(s, c)
        return v * a / s
    return v * 2


def rotation_vector_to_quat(v: np.ndarray) -> np.ndarray:
    """
    Convert a rotation vector to a unit quaternion (exponential map).

    Args:
        v: Rotation vector (3,)

    Returns:
        Normalized quaternion (x, y, z, w)
    """
    v = np.asarray(v, dtype=np.float64)
    a = np.linalg.norm(v)
    q = np.empty(4)
    q[3] = np.cos(a / 2)
    if a >= EPSILON:
        q[:3] = np.sin(a / 2) / a * v
    else:
        q[:3] = v
    return q / np.linalg.norm(q)


def quat_left_matrix(q: np.ndarray) -> np.ndarray:
    """
    Left-hand multiplication matrix L(p) such that p * q = L(p) q.

    Args:
        q: Quaternion (x, y, z, w)

    Returns:
        4x4 matrix
    """
    q = np.asarray(q, dtype=np.float64)
    M = q[3] * np.eye(4)
    M[:3, :3] += skew(q[:3])
    M[3, :] = -q
    M[:, 3] = q
    return M


def quat_right_matrix(q: np.ndarray) -> np.ndarray:
    """
    Right-hand multiplication matrix R(q) such that p * q = R(q) p.

    Args:
        q: Quaternion (x, y, z, w)

    Returns:
        4x4 matrix
    """
    q = np.asarray(q, dtype=np.float64)
    M = q[3] * np.eye(4)
    M[:3, :3] -= skew(q[:3])
    M[3, :] = -q
    M[:, 3] = q
    return M


def quat_multiply(p: np.ndarray, q: np.ndarray) -> np.ndarray:
    """Hamilton product p * q (apply q, then p)."""
    return quat_left_matrix(p) @ np.asarray(q, dtype=np.float64)


def rotate_vector(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector by quaternion."""
    return quat_to_rotation_matrix(q) @ np.asarray(v, dtype=np.float64)


def quat_to_ypr(q: np.ndarray) -> np.ndarray:
    """Convert quaternion to the yaw-pitch-roll angle triple."""
    q = np.asarray(q, dtype=np.float64)
    ypr = np.empty(3)
    ypr[0] = np.arctan2(2 * (-q[3] * q[0] + q[1] * q[2]),
                        1 - 2 * (q[0] ** 2 + q[1] ** 2))
    ypr[1] = np.arcsin(2 * (-q[3] * q[1] - q[0] * q[2]))
    ypr[2] = np.arctan2(2 * (-q[3] * q[2] + q[0] * q[1]),
                        1 - 2 * (q[1] ** 2 + q[2] ** 2))
    return ypr


def ypr_to_quat(v: np.ndarray) -> np.ndarray:
    """Convert the yaw-pitch-roll angle triple to a quaternion."""
    c_phi, s_phi = np.cos(v[0] / 2), np.sin(v[0] / 2)
    c_theta, s_theta = np.cos(v[1] / 2), np.sin(v[1] / 2)
    c_psi, s_psi = np.cos(v[2] / 2), np.sin(v[2] / 2)
    return np.array([
        c_phi * s_theta * s_psi - c_theta * c_psi * s_phi,
        -c_phi * s_theta * c_psi - c_theta * s_psi * s_phi,
        -c_phi * c_theta * s_psi + s_theta * c_psi * s_phi,
        c_phi * c_theta * c_psi + s_theta * s_psi * s_phi
    ])


def quat_to_rpy(q: np.ndarray) -> np.ndarray:
    """
    Convert quaternion to roll-pitch-yaw angles.

    Not the inverse of ypr_to_quat; the two angle families use different
    sign conventions.
    """
    q = np.asarray(q, dtype=np.float64)
    rpy = np.empty(3)
    rpy[0] = np.arctan2(2 * (-q[2] * q[1] - q[3] * q[0]),
                        q[2] ** 2 + q[3] ** 2 - q[0] ** 2 - q[1] ** 2)
    rpy[1] = np.arcsin(2 * (q[0] * q[2] - q[3] * q[1]))
    rpy[2] = np.arctan2(-2 * q[0] * q[1] - 2 * q[3] * q[2],
                        q[0] ** 2 + q[3] ** 2 - q[2] ** 2 - q[1] ** 2)
    return rpy


def rpy_to_quat(v: np.ndarray) -> np.ndarray:
    """Convert roll-pitch-yaw angles to a quaternion."""
    c_phi, s_phi = np.cos(v[0] / 2), np.sin(v[0] / 2)
    c_theta, s_theta = np.cos(v[1] / 2), np.sin(v[1] / 2)
    c_psi, s_psi = np.cos(v[2] / 2), np.sin(v[2] / 2)
    return np.array([
        -c_phi * c_theta * s_psi - s_theta * c_psi * s_phi,
        -c_phi * s_theta * c_psi + c_theta * s_psi * s_phi,
        -c_phi * s_theta * s_psi - c_theta * c_psi * s_phi,
        c_phi * c_theta * c_psi - s_theta * s_psi * s_phi
    ])


def angular_rate_to_euler_rate_matrix(rpy: np.ndarray) -> np.ndarray:
    """
    Mapping matrix between angular rate and roll-pitch-yaw rates.

    Args:
        rpy: Roll, pitch, yaw (rad)

    Returns:
        3x3 matrix
    """
    cp, sp = np.cos(rpy[1]), np.sin(rpy[1])
    cy, sy = np.cos(rpy[2]), np.sin(rpy[2])
    return np.array([
        [cp * cy, sy, 0.0],
        [-cp * sy, cy, 0.0],
        [sp, 0.0, 1.0]
    ])


def angular_rate_to_euler_rate_matrix_inverse(rpy: np.ndarray) -> np.ndarray:
    """
    Inverse of angular_rate_to_euler_rate_matrix.

    Near gimbal lock (cos(pitch) <= EPSILON) the rates are not observable
    and the zero matrix is returned.
    """
    M = np.zeros((3, 3))
    cp = np.cos(rpy[1])
    if cp > EPSILON:
        cpi = 1.0 / cp
        tp = np.tan(rpy[1])
        cy, sy = np.cos(rpy[2]), np.sin(rpy[2])
        M[0, :] = [cpi * cy, -cpi * sy, 0.0]
        M[1, :] = [sy, cy, 0.0]
        M[2, :] = [-cy * tp, sy * tp, 1.0]
    return M
