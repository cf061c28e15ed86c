"""
===============================================================================
HYPERSPHERE - Quaternion Algebra
===============================================================================

Quaternion implementation used as the algebraic building block of the 4D
rotation type. Here a quaternion is not an attitude: it is one factor of an
isoclinic rotation of R4, acting on points of R4 by left or right
multiplication.

Convention
----------
We use the scalar-first convention:

    q = [q_w, q_x, q_y, q_z] = q_w + q_x*i + q_y*j + q_z*k

where q_w is the scalar (real) part and [q_x, q_y, q_z] is the vector
(imaginary) part, following Hamilton's original formulation.

Sign convention
---------------
An attitude library would canonicalise q and -q to the representative with
w >= 0. This class does NOT: a 4D rotation is a pair (left, right) and only
the simultaneous flip (-left, -right) leaves it unchanged. Flipping one
factor alone negates the whole rotation, so the sign of each factor is kept
exactly as computed.

References
----------
    [1] Kuipers, "Quaternions and Rotation Sequences", Princeton, 1999.
    [2] Shoemake, "Animating Rotation with Quaternion Curves", SIGGRAPH 1985.

===============================================================================
"""

import numpy as np
from typing import Union

from hypersphere.core.constants import (
    COMPARISON_TOLERANCE,
    DTYPE,
    NEAR_IDENTITY_TOLERANCE,
    UNIT_TOLERANCE,
)


class Quaternion:
    """
    Quaternion q = w + x*i + y*j + z*k.

    Attributes
    ----------
    w : float
        Scalar (real) component of the quaternion.
    x : float
        First imaginary component (i-axis).
    y : float
        Second imaginary component (j-axis).
    z : float
        Third imaginary component (k-axis).

    Examples
    --------
    >>> q = Quaternion(1.0, 0.0, 0.0, 0.0)  # Identity
    >>> r = Quaternion(0.0, 1.0, 0.0, 0.0)  # i
    >>> (r * r).w
    -1.0
    """

    _NORM_TOLERANCE = 1e-10

    def __init__(self, w: float, x: float, y: float, z: float,
                 normalize: bool = True) -> None:
        """
        Initialize a quaternion with scalar-first convention.

        Parameters
        ----------
        w, x, y, z : float
            Scalar part followed by the i, j, k components.
        normalize : bool, optional
            If True (default), normalize the quaternion to unit magnitude.
            Pass False for raw values (sentinels, intermediate sums).
        """
        self._q = np.array([w, x, y, z], dtype=DTYPE)

        if normalize:
            self._normalize_in_place()

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def w(self) -> float:
        """Scalar (real) part of the quaternion."""
        return float(self._q[0])

    @property
    def x(self) -> float:
        """First imaginary component (i-axis)."""
        return float(self._q[1])

    @property
    def y(self) -> float:
        """Second imaginary component (j-axis)."""
        return float(self._q[2])

    @property
    def z(self) -> float:
        """Third imaginary component (k-axis)."""
        return float(self._q[3])

    @property
    def components(self) -> np.ndarray:
        """
        Full quaternion as a 4-element numpy array [w, x, y, z].

        Returns
        -------
        np.ndarray
            Copy of the internal quaternion array.
        """
        return self._q.copy()

    @property
    def norm(self) -> float:
        """Euclidean norm sqrt(w^2 + x^2 + y^2 + z^2)."""
        return float(np.linalg.norm(self._q))

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _normalize_in_place(self) -> None:
        """
        Normalize the quaternion to unit magnitude in-place.

        Non-finite quaternions pass through unchanged so that NaN sentinels
        survive construction.

        Raises
        ------
        ValueError
            If the quaternion has near-zero norm (degenerate case).
        """
        n = np.linalg.norm(self._q)

        if not np.isfinite(n):
            return

        if n < self._NORM_TOLERANCE:
            raise ValueError(
                f"Cannot normalize near-zero quaternion (norm = {n:.2e})."
            )

        self._q = (self._q / n).astype(DTYPE)

    # =========================================================================
    # STATIC FACTORY METHODS
    # =========================================================================

    @staticmethod
    def identity() -> 'Quaternion':
        """
        Create the identity quaternion [1, 0, 0, 0].

        Returns
        -------
        Quaternion
            The multiplicative identity element.
        """
        return Quaternion(1.0, 0.0, 0.0, 0.0, normalize=False)

    @staticmethod
    def nan() -> 'Quaternion':
        """Quaternion with every component NaN, used as an invalid marker."""
        return Quaternion(np.nan, np.nan, np.nan, np.nan, normalize=False)

    @staticmethod
    def from_array(values) -> 'Quaternion':
        """
        Build a quaternion from a [w, x, y, z] sequence without normalizing.

        Raises
        ------
        ValueError
            If *values* does not hold exactly four components.
        """
        arr = np.asarray(values, dtype=DTYPE)
        if arr.shape != (4,):
            raise ValueError(f"Quaternion needs 4 components, got shape {arr.shape}")
        return Quaternion(arr[0], arr[1], arr[2], arr[3], normalize=False)

    # =========================================================================
    # QUATERNION ARITHMETIC
    # =========================================================================

    def conjugate(self) -> 'Quaternion':
        """
        Return the quaternion conjugate [w, -x, -y, -z].

        For unit quaternions the conjugate equals the inverse.
        """
        return Quaternion(self.w, -self.x, -self.y, -self.z, normalize=False)

    def inverse(self) -> 'Quaternion':
        """
        Return the quaternion inverse q* / |q|^2.

        Returns
        -------
        Quaternion
            The multiplicative inverse q^{-1} such that q * q^{-1} = identity.
        """
        norm_sq = np.dot(self._q, self._q)
        inv_q = np.array([self.w, -self.x, -self.y, -self.z], dtype=DTYPE) / norm_sq
        return Quaternion(inv_q[0], inv_q[1], inv_q[2], inv_q[3], normalize=False)

    def normalize(self) -> 'Quaternion':
        """
        Return a new normalized (unit-magnitude) quaternion.

        Repeated composition and interpolation make the norm drift away
        from one; call this to pull it back.
        """
        return Quaternion(self.w, self.x, self.y, self.z, normalize=True)

    def dot(self, other: 'Quaternion') -> float:
        """4D inner product of the component arrays."""
        return float(np.dot(self._q, other._q))

    def multiply(self, other: 'Quaternion') -> 'Quaternion':
        """
        Multiply this quaternion by another (Hamilton product).

        Quaternion multiplication is NOT commutative: q1 * q2 != q2 * q1
        in general.

        The Hamilton product formula is:

            (a1 + b1*i + c1*j + d1*k) * (a2 + b2*i + c2*j + d2*k) =

            (a1*a2 - b1*b2 - c1*c2 - d1*d2) +
            (a1*b2 + b1*a2 + c1*d2 - d1*c2) i +
            (a1*c2 - b1*d2 + c1*a2 + d1*b2) j +
            (a1*d2 + b1*c2 - c1*b2 + d1*a2) k

        Parameters
        ----------
        other : Quaternion
            The right-hand quaternion in the product.

        Returns
        -------
        Quaternion
            The Hamilton product self * other (not renormalized).
        """
        a1, b1, c1, d1 = self._q
        a2, b2, c2, d2 = other._q

        w = a1 * a2 - b1 * b2 - c1 * c2 - d1 * d2
        x = a1 * b2 + b1 * a2 + c1 * d2 - d1 * c2
        y = a1 * c2 - b1 * d2 + c1 * a2 + d1 * b2
        z = a1 * d2 + b1 * c2 - c1 * b2 + d1 * a2

        return Quaternion(w, x, y, z, normalize=False)

    # =========================================================================
    # PREDICATES
    # =========================================================================

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self._q)))

    def is_nan(self) -> bool:
        return bool(np.any(np.isnan(self._q)))

    def is_unit(self, tolerance: float = UNIT_TOLERANCE) -> bool:
        """
        Check if this quaternion has unit norm.

        Parameters
        ----------
        tolerance : float
            Acceptable deviation of |q|^2 from 1.0.
        """
        return abs(float(np.dot(self._q, self._q)) - 1.0) <= tolerance

    def is_near_identity(self, tolerance: float = NEAR_IDENTITY_TOLERANCE) -> bool:
        """
        True if this quaternion is within *tolerance* of +identity.

        Only +1 counts; -1 is a different element of SU(2) even though it
        induces the same 3D rotation. Rotation pairs rely on that distinction.

        Parameters
        ----------
        tolerance : float
            Maximum angle (radians) between q and [1, 0, 0, 0].
        """
        if not self.is_finite():
            return False
        w = np.clip(self.w, -1.0, 1.0)
        return bool(2.0 * np.arccos(w) < tolerance)

    # =========================================================================
    # INTERPOLATION
    # =========================================================================

    @staticmethod
    def slerp(q1: 'Quaternion', q2: 'Quaternion', t: float) -> 'Quaternion':
        """
        Spherical Linear Interpolation (SLERP) between two quaternions.

        The formula is:

            slerp(q1, q2, t) = q1 * sin((1-t)*Omega) / sin(Omega)
                              + q2 * sin(t*Omega) / sin(Omega)

        where Omega = arccos(q1 . q2) is the angle between the quaternions.

        Parameters
        ----------
        q1 : Quaternion
            Starting quaternion (at t=0).
        q2 : Quaternion
            Ending quaternion (at t=1).
        t : float
            Interpolation parameter. Values outside [0, 1] extrapolate
            along the same great circle.

        Returns
        -------
        Quaternion
            Interpolated unit quaternion at parameter t.

        Notes
        -----
        - Always interpolates along the SHORT arc: if q1 . q2 < 0, q2 is
          negated first. For a rotation pair this is applied to each factor
          independently.
        - For very small angles (Omega ~ 0), falls back to normalized
          linear interpolation (NLERP) to avoid division by zero.
        """
        dot = np.dot(q1._q, q2._q)

        q2_q = q2._q.copy()
        if dot < 0.0:
            q2_q = -q2_q
            dot = -dot

        dot = np.clip(dot, 0.0, 1.0)

        if dot > 0.9995:
            result = q1._q + t * (q2_q - q1._q)
            result = result / np.linalg.norm(result)
            return Quaternion(result[0], result[1], result[2], result[3],
                              normalize=False)

        omega = np.arccos(dot)
        sin_omega = np.sin(omega)

        scale1 = np.sin((1.0 - t) * omega) / sin_omega
        scale2 = np.sin(t * omega) / sin_omega

        result = scale1 * q1._q + scale2 * q2_q
        return Quaternion(result[0], result[1], result[2], result[3])

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __mul__(self, other: Union['Quaternion', float, int]) -> 'Quaternion':
        """
        Multiplication operator.

        - Quaternion * Quaternion -> Hamilton product
        - Quaternion * scalar -> component-wise scaling
        """
        if isinstance(other, Quaternion):
            return self.multiply(other)
        elif isinstance(other, (int, float)):
            q = self._q * float(other)
            return Quaternion(q[0], q[1], q[2], q[3], normalize=False)
        return NotImplemented

    def __rmul__(self, other: Union[float, int]) -> 'Quaternion':
        """Right-multiplication by a scalar: scalar * Quaternion."""
        if isinstance(other, (int, float)):
            q = self._q * float(other)
            return Quaternion(q[0], q[1], q[2], q[3], normalize=False)
        return NotImplemented

    def __neg__(self) -> 'Quaternion':
        """Negate all components. -q is a distinct element of SU(2)."""
        return Quaternion(-self.w, -self.x, -self.y, -self.z, normalize=False)

    def __eq__(self, other: object) -> bool:
        """
        Componentwise equality within COMPARISON_TOLERANCE.

        q and -q compare unequal; see the module notes on sign.
        """
        if not isinstance(other, Quaternion):
            return NotImplemented
        return bool(np.max(np.abs(self._q - other._q)) < COMPARISON_TOLERANCE)

    __hash__ = None

    def __repr__(self) -> str:
        return (f"Quaternion(w={self.w:+.6f}, x={self.x:+.6f}, "
                f"y={self.y:+.6f}, z={self.z:+.6f})")

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def copy(self) -> 'Quaternion':
        """Return a deep copy of this quaternion."""
        return Quaternion(self.w, self.x, self.y, self.z, normalize=False)

    @staticmethod
    def random(rng: np.random.Generator = None) -> 'Quaternion':
        """
        Generate a uniformly random unit quaternion.

        Uses the subgroup algorithm (Shoemake, 1992) to produce a quaternion
        uniformly distributed over S3. Simply normalizing a random
        4-vector does NOT produce a uniform distribution.

        Parameters
        ----------
        rng : np.random.Generator, optional
            Source of randomness; a fresh default generator if omitted.

        References
        ----------
        Shoemake, "Uniform Random Rotations", Graphics Gems III, 1992.
        """
        if rng is None:
            rng = np.random.default_rng()
        u1, u2, u3 = rng.random(3)

        sqrt_u1 = np.sqrt(u1)
        sqrt_1_minus_u1 = np.sqrt(1.0 - u1)

        w = sqrt_1_minus_u1 * np.sin(2.0 * np.pi * u2)
        x = sqrt_1_minus_u1 * np.cos(2.0 * np.pi * u2)
        y = sqrt_u1 * np.sin(2.0 * np.pi * u3)
        z = sqrt_u1 * np.cos(2.0 * np.pi * u3)

        return Quaternion(w, x, y, z)
