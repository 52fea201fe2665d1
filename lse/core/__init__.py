"""
Core components for LSE state estimation.
"""
from .rotations import (
    EPSILON,
    skew,
    range_pi,
    quat_identity,
    quat_inverse,
    quat_to_rotation_matrix,
    rotation_matrix_to_quat,
    quat_to_rotation_vector,
    rotation_vector_to_quat,
    quat_left_matrix,
    quat_right_matrix,
    quat_multiply,
    rotate_vector,
    quat_to_ypr,
    ypr_to_quat,
    quat_to_rpy,
    rpy_to_quat,
    angular_rate_to_euler_rate_matrix,
    angular_rate_to_euler_rate_matrix_inverse
)

from .types import NormalizedQuaternion, NQuat

from .state import ManifoldState, create_manifold_state

from .layout import StateLayout, load_layout, load_default_layout

__all__ = [
    # Rotations
    'EPSILON',
    'skew',
    'range_pi',
    'quat_identity',
    'quat_inverse',
    'quat_to_rotation_matrix',
    'rotation_matrix_to_quat',
    'quat_to_rotation_vector',
    'rotation_vector_to_quat',
    'quat_left_matrix',
    'quat_right_matrix',
    'quat_multiply',
    'rotate_vector',
    'quat_to_ypr',
    'ypr_to_quat',
    'quat_to_rpy',
    'rpy_to_quat',
    'angular_rate_to_euler_rate_matrix',
    'angular_rate_to_euler_rate_matrix_inverse',
    # Types
    'NormalizedQuaternion',
    'NQuat',
    # State
    'ManifoldState',
    'create_manifold_state',
    # Layout
    'StateLayout',
    'load_layout',
    'load_default_layout',
]
