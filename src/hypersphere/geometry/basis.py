"""
===============================================================================
HYPERSPHERE - Orthonormal Bases of R4
===============================================================================
Builds orthonormal 4-frames from one or two seed vectors.

    any_orthogonal_to_single  -- some vector orthogonal to v
    any_orthogonal_to_plane   -- some vector orthogonal to u and v
    cross4d                   -- vector orthogonal to u, v and w
    make_orthonormal_basis    -- full frame (a, b, c, d) from the plane (p, q)

None of these normalize their output except make_orthonormal_basis. The only
failure mode is seeds that do not span a 2-plane, reported as None.
===============================================================================
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from hypersphere.core.constants import DTYPE, ZERO_TOLERANCE
from hypersphere.core.vector import Vector4, as_vec4, is_zero, try_normalize

logger = logging.getLogger(__name__)

OrthonormalBasis = Tuple[Vector4, Vector4, Vector4, Vector4]


def any_orthogonal_to_single(v) -> Vector4:
    """
    Pick some (not normalized) vector orthogonal to *v*.

    Uses the closed form (w - z + y, z - w - x, w + x - y, y - z - x),
    whose dot product with v cancels term by term. The result is zero
    only if v is zero (modulo floating point error).
    """
    x, y, z, w = as_vec4(v)
    return np.array([w - z + y, z - w - x, w + x - y, y - z - x], dtype=DTYPE)


def any_orthogonal_to_plane(u, v) -> Vector4:
    """
    Pick some (not normalized) vector orthogonal to both *u* and *v*.

    Four generalized cross products are available, each obtained by pinning
    one output coordinate to zero. Any single one can vanish for seeds
    aligned with a coordinate axis while another stays informative, so they
    are tried in the order x, y, z, w and the first nonzero one wins.

    Returns
    -------
    Vector4
        Zero exactly when u and v are linearly dependent.
    """
    x, y, z, w = as_vec4(u)
    p, q, r, s = as_vec4(v)

    rwsz = r * w - s * z
    syqw = s * y - q * w
    qzry = q * z - r * y

    cross_x = np.array([0.0, rwsz, syqw, qzry], dtype=DTYPE)
    if not is_zero(cross_x):
        return cross_x

    pwsx = p * w - s * x
    rxpz = r * x - p * z

    cross_y = np.array([-rwsz, 0.0, pwsx, rxpz], dtype=DTYPE)
    if not is_zero(cross_y):
        return cross_y

    pyqx = p * y - q * x

    cross_z = np.array([-syqw, -pwsx, 0.0, pyqx], dtype=DTYPE)
    if not is_zero(cross_z):
        return cross_z

    logger.debug("any_orthogonal_to_plane: falling back to cross_w for u=%s v=%s", u, v)
    return np.array([-qzry, -rxpz, -pyqx, 0.0], dtype=DTYPE)


def cross4d(u, v, w) -> Vector4:
    """
    The 4D cross product.

    Signed cofactor expansion of the 4x4 determinant with rows
    (e_x, e_y, e_z, e_w), u, v, w. The result is orthogonal to all three
    inputs, and zero exactly when they are linearly dependent.

    The sign is fixed: det[u, v, w, cross4d(u, v, w)] <= 0.
    """
    ux, uy, uz, uw = as_vec4(u)
    vx, vy, vz, vw = as_vec4(v)
    wx, wy, wz, ww = as_vec4(w)

    return np.array([
        -uw * vz * wy + uz * vw * wy + uw * vy * wz - uy * vw * wz - uz * vy * ww + uy * vz * ww,
        uw * vz * wx - uz * vw * wx - uw * vx * wz + ux * vw * wz + uz * vx * ww - ux * vz * ww,
        -uw * vy * wx + uy * vw * wx + uw * vx * wy - ux * vw * wy - uy * vx * ww + ux * vy * ww,
        uz * vy * wx - uy * vz * wx - uz * vx * wy + ux * vz * wy + uy * vx * wz - ux * vy * wz,
    ], dtype=DTYPE)


def make_orthonormal_basis(p, q) -> Optional[OrthonormalBasis]:
    """
    Construct an orthonormal basis of R4 from the plane spanned by *p* and *q*.

    Parameters
    ----------
    p, q : array-like, shape (4,)
        Seed vectors. Need not be unit length or orthogonal.

    Returns
    -------
    tuple of four Vector4, or None
        ``(a, b, c, d)`` with ``a == normalize(p)``. ``b`` lies in the plane
        of p and q, orthogonal to p, on the same side as q. ``(c, d)`` span
        the orthogonal complement of that plane. None when p and q do not
        span a plane (either is zero, or they are parallel).

    Notes
    -----
    r = any_orthogonal_to_plane(p, q), s = cross4d(p, q, r), and the second
    vector is re-derived as cross4d(p, r, s) rather than by subtracting
    projections, which keeps the four outputs mutually orthogonal even when
    q is far from orthogonal to p.

    Each intermediate is normalized before it feeds the next product. The
    products are multilinear, so this changes no direction or sign, but it
    makes the degeneracy test depend only on the angle between p and q and
    not on their lengths.
    """
    p = try_normalize(as_vec4(p))
    q = try_normalize(as_vec4(q))
    if p is None or q is None:
        logger.debug("make_orthonormal_basis: zero seed vector")
        return None

    r = try_normalize(any_orthogonal_to_plane(p, q))
    if r is None:
        logger.debug("make_orthonormal_basis: seeds do not span a plane")
        return None

    s = try_normalize(cross4d(p, q, r))
    b = None if s is None else try_normalize(cross4d(p, r, s))
    if s is None or b is None:
        logger.debug("make_orthonormal_basis: seeds do not span a plane")
        return None
    return p, b, r, s


def is_orthonormal_basis(vectors: Sequence[Vector4],
                         tolerance: float = ZERO_TOLERANCE) -> bool:
    """
    Check the OrthonormalBasis invariant for four vectors.

    Every vector must have unit length and every pairwise dot product must
    vanish, both within *tolerance*.
    """
    if len(vectors) != 4:
        return False
    gram = np.array([[np.dot(a, b) for b in vectors] for a in vectors], dtype=np.float64)
    return bool(np.all(np.abs(gram - np.eye(4)) <= tolerance))
