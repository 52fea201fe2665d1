"""
Data type definitions for LSE.
"""
import numpy as np

from .rotations import EPSILON, quat_to_rotation_vector, rotation_vector_to_quat


class NormalizedQuaternion:
    """
    Mutable unit quaternion (x, y, z, w) with explicit renormalization.

    Unlike the plain array helpers in rotations, this type owns its storage
    and is what ManifoldState keeps in its quaternion slots. Normalization is
    not automatic: call normalize() after writing components by index.
    """

    __slots__ = ('_q',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0, w: float = 1.0):
        self._q = np.array([x, y, z, w], dtype=np.float64)

    def __getitem__(self, i):
        return self._q[i]

    def __setitem__(self, i, value):
        self._q[i] = value

    def __len__(self) -> int:
        return 4

    def __repr__(self) -> str:
        x, y, z, w = self._q
        return f"NormalizedQuaternion(x={x}, y={y}, z={z}, w={w})"

    @property
    def x(self) -> float:
        return float(self._q[0])

    @property
    def y(self) -> float:
        return float(self._q[1])

    @property
    def z(self) -> float:
        return float(self._q[2])

    @property
    def w(self) -> float:
        return float(self._q[3])

    def normalize(self):
        """
        Rescale to unit norm.

        A quaternion with norm <= 1e-10 carries no usable direction and is
        replaced by the identity.
        """
        a = np.sqrt(np.dot(self._q, self._q))
        if a > EPSILON:
            self._q /= a
        else:
            self.set_identity()
        return self

    def set_identity(self):
        """Set to the identity rotation."""
        self._q[:] = (0.0, 0.0, 0.0, 1.0)
        return self

    def compose(self, other: 'NormalizedQuaternion') -> 'NormalizedQuaternion':
        """
        Hamilton product self * other: apply other, then self.

        Args:
            other: Right-hand operand

        Returns:
            Normalized product as a new quaternion
        """
        a, b = self._q, other._q
        result = NormalizedQuaternion(
            a[3] * b[0] + b[3] * a[0] + a[1] * b[2] - a[2] * b[1],
            a[3] * b[1] + b[3] * a[1] + a[2] * b[0] - a[0] * b[2],
            a[3] * b[2] + b[3] * a[2] + a[0] * b[1] - a[1] * b[0],
            a[3] * b[3] - a[0] * b[0] - a[1] * b[1] - a[2] * b[2]
        )
        return result.normalize()

    def __mul__(self, other: 'NormalizedQuaternion') -> 'NormalizedQuaternion':
        if not isinstance(other, NormalizedQuaternion):
            return NotImplemented
        return self.compose(other)

    def inverse(self) -> 'NormalizedQuaternion':
        """Conjugate, valid as inverse for unit quaternions."""
        return NormalizedQuaternion(-self._q[0], -self._q[1], -self._q[2], self._q[3])

    def copy(self) -> 'NormalizedQuaternion':
        """Create an independent copy."""
        return NormalizedQuaternion.from_array(self._q)

    def to_array(self) -> np.ndarray:
        """Convert to numpy array [x, y, z, w]."""
        return self._q.copy()

    def to_rotation_vector(self) -> np.ndarray:
        """Logarithmic map to a rotation vector."""
        return quat_to_rotation_vector(self._q)

    @staticmethod
    def from_array(q: np.ndarray) -> 'NormalizedQuaternion':
        """Create from [x, y, z, w] without normalizing."""
        return NormalizedQuaternion(q[0], q[1], q[2], q[3])

    @staticmethod
    def from_rotation_vector(v: np.ndarray) -> 'NormalizedQuaternion':
        """Exponential map from a rotation vector."""
        return NormalizedQuaternion.from_array(rotation_vector_to_quat(v)).normalize()

    @staticmethod
    def identity() -> 'NormalizedQuaternion':
        """Return identity quaternion."""
        return NormalizedQuaternion()


NQuat = NormalizedQuaternion
