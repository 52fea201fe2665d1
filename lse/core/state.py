"""
Manifold state definitions for LSE.

A ManifoldState is a point on R^N x (R^3)^M x SO(3)^L. Its tangent vector
is laid out as:
[scalars (N), vectors (3 each, M), rotation vectors (3 each, L)]

Dimension of the tangent space is N + 3M + 3L.
"""
from typing import List, Tuple

import numpy as np

from .types import NormalizedQuaternion


class ManifoldState:
    """
    Composite state of scalars, 3-vectors and unit quaternions.

    Supports the box-minus (difference) and box-plus (retraction)
    operators used to linearize an error-state filter:

        x - y   -> tangent vector, quaternion slots as log(x_i * y_i^-1)
        x + d   -> new state, quaternion slots as exp(d_i) * x_i
    """

    def __init__(self, num_scalars: int = 0, num_vectors: int = 0, num_quaternions: int = 0):
        """
        Initialize state with all slots reset.

        Args:
            num_scalars: Number of scalar slots (N)
            num_vectors: Number of 3-vector slots (M)
            num_quaternions: Number of quaternion slots (L)
        """
        if min(num_scalars, num_vectors, num_quaternions) < 0:
            raise ValueError(
                f"Slot counts must be non-negative, got "
                f"({num_scalars}, {num_vectors}, {num_quaternions})"
            )
        self.scalars = np.zeros(num_scalars)
        self.vectors = np.zeros((num_vectors, 3))
        self.quaternions: List[NormalizedQuaternion] = [
            NormalizedQuaternion() for _ in range(num_quaternions)
        ]

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Slot counts (N, M, L)."""
        return len(self.scalars), len(self.vectors), len(self.quaternions)

    @property
    def dim(self) -> int:
        """Dimension of the tangent space."""
        n, m, l = self.shape
        return n + 3 * (m + l)

    def get_dim(self) -> int:
        """Dimension of the tangent space (same as dim)."""
        return self.dim

    def reset(self):
        """Zero scalars and vectors, set quaternions to identity."""
        self.scalars[:] = 0.0
        self.vectors[:] = 0.0
        for q in self.quaternions:
            q.set_identity()

    def scalar_index(self, i: int) -> int:
        """Tangent vector index of scalar slot i."""
        return i

    def vector_slice(self, i: int) -> slice:
        """Tangent vector slice of vector slot i."""
        start = len(self.scalars) + 3 * i
        return slice(start, start + 3)

    def quaternion_slice(self, i: int) -> slice:
        """Tangent vector slice of quaternion slot i."""
        start = len(self.scalars) + 3 * len(self.vectors) + 3 * i
        return slice(start, start + 3)

    def difference(self, other: 'ManifoldState') -> np.ndarray:
        """
        Box-minus: tangent vector taking other to self.

        Args:
            other: State of the same shape

        Returns:
            Tangent vector of dimension N + 3M + 3L
        """
        self._check_shape(other)
        n, m, l = self.shape
        d = np.empty(self.dim)
        d[:n] = self.scalars - other.scalars
        d[n:n + 3 * m] = (self.vectors - other.vectors).ravel()
        for i in range(l):
            dq = self.quaternions[i] * other.quaternions[i].inverse()
            d[self.quaternion_slice(i)] = dq.to_rotation_vector()
        return d

    def retract(self, delta: np.ndarray) -> 'ManifoldState':
        """
        Box-plus: apply a tangent perturbation.

        Args:
            delta: Tangent vector of dimension N + 3M + 3L

        Returns:
            New state; quaternion slots are exp(delta_i) * q_i
        """
        delta = self._check_tangent(delta)
        n, m, l = self.shape
        result = ManifoldState(n, m, l)
        result.scalars[:] = self.scalars + delta[:n]
        result.vectors[:] = self.vectors + delta[n:n + 3 * m].reshape(m, 3)
        for i in range(l):
            dq = NormalizedQuaternion.from_rotation_vector(delta[self.quaternion_slice(i)])
            result.quaternions[i] = dq * self.quaternions[i]
        return result

    def clone(self) -> 'ManifoldState':
        """Create a deep copy of the state."""
        new_state = ManifoldState(*self.shape)
        new_state.scalars[:] = self.scalars
        new_state.vectors[:] = self.vectors
        new_state.quaternions = [q.copy() for q in self.quaternions]
        return new_state

    def __sub__(self, other):
        if not isinstance(other, ManifoldState):
            return NotImplemented
        return self.difference(other)

    def __add__(self, delta):
        return self.retract(delta)

    def __iadd__(self, delta):
        moved = self.retract(delta)
        self.scalars[:] = moved.scalars
        self.vectors[:] = moved.vectors
        for q, q_moved in zip(self.quaternions, moved.quaternions):
            q[:] = q_moved.to_array()
        return self

    def _check_shape(self, other: 'ManifoldState'):
        if self.shape != other.shape:
            raise ValueError(
                f"Manifold shapes differ: {self.shape} vs {other.shape}"
            )

    def _check_tangent(self, delta) -> np.ndarray:
        delta = np.asarray(delta, dtype=np.float64).ravel()
        if delta.shape[0] != self.dim:
            raise ValueError(
                f"Tangent vector has length {delta.shape[0]}, expected {self.dim}"
            )
        return delta

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"ManifoldState(\n"
            f"  scalars: {self.scalars}\n"
            f"  vectors: {self.vectors.tolist()}\n"
            f"  quaternions: {[q.to_array().tolist() for q in self.quaternions]}\n"
            f"  dim: {self.dim}\n"
            f")"
        )


def create_manifold_state(
    num_scalars: int = 0,
    num_vectors: int = 0,
    num_quaternions: int = 0,
    scalars=None,
    vectors=None,
    quaternions=None
) -> ManifoldState:
    """
    Create a manifold state, optionally with initial slot values.

    Args:
        num_scalars: Number of scalar slots
        num_vectors: Number of 3-vector slots
        num_quaternions: Number of quaternion slots
        scalars: Initial scalars (default: zeros)
        vectors: Initial vectors, shape (M, 3) (default: zeros)
        quaternions: Initial quaternions [x, y, z, w] (default: identity)

    Returns:
        Manifold state
    """
    state = ManifoldState(num_scalars, num_vectors, num_quaternions)
    if scalars is not None:
        state.scalars[:] = scalars
    if vectors is not None:
        state.vectors[:] = np.reshape(vectors, (num_vectors, 3))
    if quaternions is not None:
        for i, q in enumerate(quaternions):
            state.quaternions[i] = NormalizedQuaternion.from_array(q).normalize()
    return state
