"""
===============================================================================
HYPERSPHERE - 4D Rotations (SO(4))
===============================================================================

Rot4 stores a rotation of R4 as a pair of unit quaternions (left, right).
SO(4) is double covered by SU(2) x SU(2): every 4D rotation is the product
of a left-isoclinic and a right-isoclinic rotation, and those act on R4 as
left and right quaternion multiplication.

Point convention
----------------
A point (x, y, z, w) of R4 is read as the quaternion

    x + y*i + z*j + w*k

i.e. the FIRST vector component is the real part. This is a fixed
relabeling, not the identity mapping onto the (x, y, z, w) slots of a
quaternion. With that reading, applying a rotation is the sandwich product

    v' = left * v * right

and the scalar-first component array of the result is v' itself.

Double cover
------------
(left, right) and (-left, -right) are the same rotation. Equality and
is_near_identity check both. Flipping only ONE factor negates the rotation.

Composition
-----------
``a.mul_rot4(b)`` means "apply a, then b":

    b.left * (a.left * v * a.right) * b.right
        = (b.left * a.left) * v * (a.right * b.right)

so left factors compose in reverse order relative to right factors.

References
----------
    [1] Perez-Gracia & Thomas, "On Cayley's Factorization of 4D Rotations
        and Applications", Adv. Appl. Clifford Algebras, 2017.
    [2] Mebius, "A matrix-based proof of the quaternion representation
        theorem for four-dimensional rotations", 2005.

===============================================================================
"""

import logging
from typing import Optional, Tuple

import numpy as np

from hypersphere.core.constants import (
    COMPARISON_TOLERANCE,
    DTYPE,
    NEAR_IDENTITY_TOLERANCE,
    UNIT_TOLERANCE,
    W,
    X,
    Y,
    Z,
)
from hypersphere.core.quaternion import Quaternion
from hypersphere.core.vector import Matrix4, Vector4, as_vec4, matrix_from_columns, normalize
from hypersphere.geometry.basis import make_orthonormal_basis
from hypersphere.geometry.projection import Projection

logger = logging.getLogger(__name__)

# Quaternion units 1, i, j, k, in the point convention above these are X, Y, Z, W.
_UNITS = tuple(Quaternion.from_array(axis) for axis in (X, Y, Z, W))


def _factor_cayley(m: Matrix4) -> Tuple[Quaternion, Quaternion]:
    """
    Decompose a 4x4 rotation matrix into its isoclinic factors.

    If M v = l * v * r for all v, then for any unit quaternion c

        sum_k  M(e_k) * c * conj(e_k)  =  4 * (r * c)_w * l

    over the units e_k in {1, i, j, k}, since e * q * conj(e) summed over
    the units keeps only 4 times the scalar part of q. Taking c from
    {1, i, j, k} gives four multiples of l whose weights are the components
    of r, up to sign; at least one is large. The largest is normalized to
    give l, and r = conj(l) * M(1).

    The trace/antisymmetric-part formula is the c = 1 case alone, which
    vanishes for half-turns such as diag(-1, -1, 1, 1).

    Parameters
    ----------
    m : Matrix4
        Rotation matrix (orthonormal, determinant +1). Not checked.

    Returns
    -------
    tuple of (Quaternion, Quaternion)
        Unit (left, right), defined up to a simultaneous sign flip.
    """
    m = np.asarray(m, dtype=DTYPE)
    images = [Quaternion.from_array(m[:, k]) for k in range(4)]

    best = None
    best_norm = -1.0
    for c in _UNITS:
        acc = np.zeros(4, dtype=DTYPE)
        for image, unit in zip(images, _UNITS):
            acc += (image * c * unit.conjugate()).components
        n = float(np.linalg.norm(acc))
        if n > best_norm:
            best, best_norm = acc, n

    left = Quaternion.from_array(best).normalize()
    right = (left.conjugate() * images[0]).normalize()
    return left, right


class Rot4:
    """
    A rotation of R4 as a pair of unit quaternions.

    Instances are immutable; every operation returns a new Rot4.

    Attributes
    ----------
    left : Quaternion
        Left-isoclinic factor.
    right : Quaternion
        Right-isoclinic factor.

    Examples
    --------
    >>> r = Rot4.from_rotation_xy(np.pi / 2)
    >>> np.allclose(r.mul_vec4([1.0, 0.0, 0.0, 0.0]), [0.0, 1.0, 0.0, 0.0], atol=1e-6)
    True
    """

    IDENTITY: 'Rot4'
    NAN: 'Rot4'

    __slots__ = ('_left', '_right')

    def __init__(self, left: Quaternion, right: Quaternion) -> None:
        self._left = left.copy()
        self._right = right.copy()

    @property
    def left(self) -> Quaternion:
        return self._left.copy()

    @property
    def right(self) -> Quaternion:
        return self._right.copy()

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def identity(cls) -> 'Rot4':
        return cls(Quaternion.identity(), Quaternion.identity())

    @classmethod
    def from_pq(cls, left: Quaternion, right: Quaternion) -> 'Rot4':
        """Wrap a (left, right) pair as is, without normalizing."""
        return cls(left, right)

    @classmethod
    def from_array(cls, values) -> 'Rot4':
        """
        Read a rotation from a flat sequence of at least 8 floats.

        Layout: [left.w, left.x, left.y, left.z, right.w, right.x, right.y,
        right.z]. Extra trailing values are ignored.

        Raises
        ------
        ValueError
            If fewer than 8 values are supplied.
        """
        arr = np.asarray(values, dtype=DTYPE).ravel()
        if arr.size < 8:
            raise ValueError(f"Rot4 needs 8 values, got {arr.size}")
        return cls(Quaternion.from_array(arr[:4]), Quaternion.from_array(arr[4:8]))

    @classmethod
    def from_double_planar_rotation(cls, a, b, c, d,
                                    angle_ab: float, angle_cd: float) -> 'Rot4':
        """
        Rotate the (a, b) plane by *angle_ab* and the (c, d) plane by *angle_cd*.

        Parameters
        ----------
        a, b, c, d : array-like, shape (4,)
            An orthonormal basis of R4. Not checked.
        angle_ab, angle_cd : float
            Rotation angles in radians. A positive angle turns a towards b
            (and c towards d).

        Returns
        -------
        Rot4
            Normalized rotation equal to B * R * B^T, where B has columns
            (a, b, c, d) and R is block diagonal with two 2x2 rotations.
        """
        basis_mat = matrix_from_columns(as_vec4(a), as_vec4(b), as_vec4(c), as_vec4(d))

        sin_ab, cos_ab = np.sin(angle_ab), np.cos(angle_ab)
        if angle_cd == 0.0:
            sin_cd, cos_cd = 0.0, 1.0
        else:
            sin_cd, cos_cd = np.sin(angle_cd), np.cos(angle_cd)

        block = np.array([
            [cos_ab, -sin_ab, 0.0,    0.0],
            [sin_ab,  cos_ab, 0.0,    0.0],
            [0.0,     0.0,    cos_cd, -sin_cd],
            [0.0,     0.0,    sin_cd,  cos_cd],
        ], dtype=DTYPE)

        prod_mat = basis_mat @ block @ basis_mat.T
        left, right = _factor_cayley(prod_mat)
        return cls(left.normalize(), right.normalize())

    @classmethod
    def from_axes_angle(cls, axis_1, axis_2, angle: float) -> Optional['Rot4']:
        """
        Rotate the plane spanned by *axis_1* and *axis_2* by *angle*.

        The orthogonal complement of that plane stays fixed. The sense of
        rotation turns axis_1 towards axis_2.

        Returns
        -------
        Rot4 or None
            None if the axes do not span a plane.
        """
        basis = make_orthonormal_basis(axis_1, axis_2)
        if basis is None:
            return None
        a, b, c, d = basis
        return cls.from_double_planar_rotation(a, b, c, d, angle, 0.0)

    @classmethod
    def from_rotation_arc(cls, from_, to) -> 'Rot4':
        """
        The minimal rotation carrying the direction of *from_* onto *to*.

        Parallel, anti-parallel or zero inputs give the identity rather
        than None: animation code driving this must never stall.
        """
        basis = make_orthonormal_basis(from_, to)
        if basis is None:
            logger.debug("from_rotation_arc: degenerate arc %s -> %s, using identity",
                         from_, to)
            return cls.IDENTITY
        a, b, c, d = basis
        # Angle from both in-plane coordinates; a float32 arccos is coarse near 0.
        target = normalize(as_vec4(to))
        angle = np.arctan2(float(np.dot(b, target)), float(np.dot(a, target)))
        return cls.from_double_planar_rotation(a, b, c, d, float(angle), 0.0)

    @classmethod
    def from_rotation_matrix(cls, mat: Matrix4) -> 'Rot4':
        """
        Factor a 4x4 rotation matrix.

        *mat* must be orthonormal with determinant +1. This is not checked:
        verifying it costs as much as the factorization. Other input gives
        an unspecified result.
        """
        mat = np.asarray(mat, dtype=DTYPE)
        if mat.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 matrix, got shape {mat.shape}")
        left, right = _factor_cayley(mat)
        return cls(left, right)

    # Single-plane rotations. The second pair names the fixed plane; the
    # pairings are part of the public contract.

    @classmethod
    def from_rotation_xy(cls, angle: float) -> 'Rot4':
        return cls.from_double_planar_rotation(X, Y, Z, W, angle, 0.0)

    @classmethod
    def from_rotation_xz(cls, angle: float) -> 'Rot4':
        return cls.from_double_planar_rotation(X, Z, Y, W, angle, 0.0)

    @classmethod
    def from_rotation_xw(cls, angle: float) -> 'Rot4':
        return cls.from_double_planar_rotation(X, W, Z, Y, angle, 0.0)

    @classmethod
    def from_rotation_yz(cls, angle: float) -> 'Rot4':
        return cls.from_double_planar_rotation(Y, Z, X, W, angle, 0.0)

    @classmethod
    def from_rotation_yw(cls, angle: float) -> 'Rot4':
        return cls.from_double_planar_rotation(Y, W, X, Z, angle, 0.0)

    @classmethod
    def from_rotation_zw(cls, angle: float) -> 'Rot4':
        return cls.from_double_planar_rotation(Z, W, X, Y, angle, 0.0)

    # =========================================================================
    # CONVERSION
    # =========================================================================

    def to_array(self) -> np.ndarray:
        """Flat 8-float layout, see from_array."""
        return np.concatenate([self._left.components, self._right.components])

    def to_matrix(self) -> Matrix4:
        """The 4x4 matrix M with M @ v == self.mul_vec4(v)."""
        return matrix_from_columns(*(self.mul_vec4(axis) for axis in (X, Y, Z, W)))

    # =========================================================================
    # ALGEBRA
    # =========================================================================

    def inverse(self) -> 'Rot4':
        return Rot4(self._left.inverse(), self._right.inverse())

    def normalize(self) -> 'Rot4':
        """Renormalize both factors, countering drift from composition."""
        return Rot4(self._left.normalize(), self._right.normalize())

    def slerp(self, end: 'Rot4', s: float) -> 'Rot4':
        """
        Interpolate each factor independently towards *end*.

        Each factor takes its own short arc. No attempt is made to keep the
        two factors' sign choices consistent, so interpolating towards a
        pair whose factors disagree in sign can sweep through the negated
        rotation. Callers that need the shortest path across the double
        cover must align signs beforehand.
        """
        return Rot4(Quaternion.slerp(self._left, end._left, s),
                    Quaternion.slerp(self._right, end._right, s))

    def mul_vec4(self, rhs) -> Vector4:
        """Apply the rotation to a vector: left * v * right."""
        v = Quaternion.from_array(as_vec4(rhs))
        return (self._left * v * self._right).components

    def mul_rot4(self, rhs: 'Rot4') -> 'Rot4':
        """Compose: the result applies self first, then *rhs*."""
        return Rot4(rhs._left * self._left, self._right * rhs._right)

    def mul_proj(self, rhs: Projection) -> Projection:
        """
        Rotate a projection's whole frame.

        Rotating all four basis vectors, rather than only the centre, keeps
        the tangent frame continuous while a projection is animated.
        """
        return Projection.from_orthonormal_basis(
            self.mul_vec4(rhs.p),
            self.mul_vec4(rhs.local_x),
            self.mul_vec4(rhs.local_y),
            self.mul_vec4(rhs.local_z),
        )

    # =========================================================================
    # PREDICATES
    # =========================================================================

    def is_finite(self) -> bool:
        return self._left.is_finite() and self._right.is_finite()

    def is_nan(self) -> bool:
        return self._left.is_nan() or self._right.is_nan()

    def is_normalized(self, tolerance: float = UNIT_TOLERANCE) -> bool:
        return self._left.is_unit(tolerance) and self._right.is_unit(tolerance)

    def is_near_identity(self, tolerance: float = NEAR_IDENTITY_TOLERANCE) -> bool:
        """
        True if this is (close to) the identity rotation.

        Accepts (1, 1) and (-1, -1) but not the mixed pairs, which are the
        point reflection v -> -v.
        """
        left, right = self._left, self._right
        return ((left.is_near_identity(tolerance) and right.is_near_identity(tolerance))
                or ((-left).is_near_identity(tolerance)
                    and (-right).is_near_identity(tolerance)))

    def approx_eq(self, other: 'Rot4', tolerance: float = COMPARISON_TOLERANCE) -> bool:
        """Componentwise comparison of the pairs, up to the double cover."""
        a = self.to_array()
        b = other.to_array()
        return bool(min(np.max(np.abs(a - b)), np.max(np.abs(a + b))) < tolerance)

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __mul__(self, other):
        """
        - Rot4 * Rot4       -> mul_rot4 (self first, then other)
        - Rot4 * Projection -> mul_proj
        - Rot4 * vector     -> mul_vec4
        """
        if isinstance(other, Rot4):
            return self.mul_rot4(other)
        if isinstance(other, Projection):
            return self.mul_proj(other)
        if isinstance(other, (np.ndarray, list, tuple)):
            return self.mul_vec4(other)
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rot4):
            return NotImplemented
        return self.approx_eq(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Rot4(left={self._left!r}, right={self._right!r})"


Rot4.IDENTITY = Rot4.identity()
Rot4.NAN = Rot4(Quaternion.nan(), Quaternion.nan())
