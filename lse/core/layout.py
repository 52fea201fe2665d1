"""
Named state layouts for ManifoldState.

A layout assigns names to the scalar, vector and quaternion slots of a
manifold state, so that a filter can address slots and tangent blocks by
name. Layouts are described in YAML:

    scalars: [time_delay]
    vectors: [position, velocity]
    quaternions: [attitude]
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np
import yaml

from .state import ManifoldState
from .types import NormalizedQuaternion

logger = logging.getLogger(__name__)

SECTIONS = ('scalars', 'vectors', 'quaternions')

DEFAULT_LAYOUT_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    'config', 'legged_robot.yaml'
)


@dataclass
class StateLayout:
    """Slot names of a manifold state."""
    scalars: List[str] = field(default_factory=list)
    vectors: List[str] = field(default_factory=list)
    quaternions: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.scalars = list(self.scalars)
        self.vectors = list(self.vectors)
        self.quaternions = list(self.quaternions)

        names = self.scalars + self.vectors + self.quaternions
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate slot names in layout: {duplicates}")

        self._kinds: Dict[str, tuple] = {}
        for kind in SECTIONS:
            for i, name in enumerate(getattr(self, kind)):
                self._kinds[name] = (kind, i)

    @property
    def shape(self) -> tuple:
        """Slot counts (N, M, L)."""
        return len(self.scalars), len(self.vectors), len(self.quaternions)

    @property
    def dim(self) -> int:
        """Dimension of the tangent space."""
        n, m, l = self.shape
        return n + 3 * (m + l)

    def __contains__(self, name: str) -> bool:
        return name in self._kinds

    def locate(self, name: str) -> tuple:
        """
        Find the slot of a name.

        Returns:
            (kind, index) with kind one of 'scalars', 'vectors', 'quaternions'
        """
        try:
            return self._kinds[name]
        except KeyError:
            raise KeyError(f"Unknown state slot: {name!r}") from None

    def tangent_slice(self, name: str) -> slice:
        """Slice of the tangent vector belonging to a slot."""
        kind, i = self.locate(name)
        n, m, _ = self.shape
        if kind == 'scalars':
            return slice(i, i + 1)
        if kind == 'vectors':
            return slice(n + 3 * i, n + 3 * i + 3)
        start = n + 3 * m + 3 * i
        return slice(start, start + 3)

    def create_state(self) -> ManifoldState:
        """Create a reset state with this layout's shape."""
        return ManifoldState(*self.shape)

    def get(self, state: ManifoldState, name: str):
        """
        Read a slot by name.

        Returns:
            float for scalars, (3,) array for vectors, quaternion [x, y, z, w]
        """
        self._check_state(state)
        kind, i = self.locate(name)
        if kind == 'scalars':
            return float(state.scalars[i])
        if kind == 'vectors':
            return state.vectors[i].copy()
        return state.quaternions[i].to_array()

    def set(self, state: ManifoldState, name: str, value):
        """Write a slot by name. Quaternions are normalized on write."""
        self._check_state(state)
        kind, i = self.locate(name)
        if kind == 'scalars':
            state.scalars[i] = value
        elif kind == 'vectors':
            state.vectors[i] = np.asarray(value, dtype=np.float64)
        else:
            q = value if isinstance(value, NormalizedQuaternion) else \
                NormalizedQuaternion.from_array(value)
            state.quaternions[i] = q.copy().normalize()

    def to_dict(self) -> dict:
        return {kind: list(getattr(self, kind)) for kind in SECTIONS}

    @staticmethod
    def from_dict(data: dict) -> 'StateLayout':
        """
        Create a layout from a mapping of section -> list of names.

        Missing sections are empty.
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Layout must be a mapping, got {type(data).__name__}")

        unknown = set(data) - set(SECTIONS)
        if unknown:
            raise ValueError(f"Unknown layout sections: {sorted(unknown)}")

        sections = {}
        for kind in SECTIONS:
            names = data.get(kind) or []
            if not isinstance(names, list):
                raise ValueError(f"Layout section {kind!r} must be a list")
            sections[kind] = [str(n) for n in names]
        return StateLayout(**sections)

    def _check_state(self, state: ManifoldState):
        if state.shape != self.shape:
            raise ValueError(
                f"State shape {state.shape} does not match layout {self.shape}"
            )


def load_layout(path: str) -> StateLayout:
    """
    Load a state layout from a YAML file.

    Args:
        path: Path to YAML file

    Returns:
        State layout
    """
    with open(path, 'r') as f:
        data = yaml.safe_load(f)
    layout = StateLayout.from_dict(data)
    logger.debug("Loaded state layout %s from %s (dim %d)", layout.shape, path, layout.dim)
    return layout


def load_default_layout() -> StateLayout:
    """Load the legged robot layout shipped with the package."""
    return load_layout(DEFAULT_LAYOUT_PATH)
