"""
LSE: Legged State Estimation

Rotation conversions and the manifold state algebra used by an error-state
filter for legged robots.
"""

__version__ = "0.1.0"

from . import core

__all__ = ['core']
