"""
===============================================================================
HYPERSPHERE - Exact Geometry of R4 and S3
===============================================================================
Orthonormal frames of R4, rotations in SO(4) as quaternion pairs, and the
stereographic projection of the unit 3-sphere into R3.

Subpackages:
    core      -- constants, vector/matrix helpers, quaternions, configuration
    geometry  -- basis builder, Rot4, Projection
===============================================================================
"""

from hypersphere.geometry.basis import (
    any_orthogonal_to_plane,
    any_orthogonal_to_single,
    cross4d,
    is_orthonormal_basis,
    make_orthonormal_basis,
)
from hypersphere.geometry.projection import Projection, unit_projection
from hypersphere.geometry.rotation import Rot4

__all__ = [
    "Projection",
    "Rot4",
    "any_orthogonal_to_plane",
    "any_orthogonal_to_single",
    "cross4d",
    "is_orthonormal_basis",
    "make_orthonormal_basis",
    "unit_projection",
]
