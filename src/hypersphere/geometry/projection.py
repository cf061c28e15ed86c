"""
===============================================================================
HYPERSPHERE - Stereographic Projection S3 -> R3
===============================================================================

Maps unit vectors on the 3-sphere to R3 by stereographic projection from a
centre p. The image is expressed in the tangent frame (local_x, local_y,
local_z) that completes p to an orthonormal basis of R4.

For a point x on S3 the projected point, still in R4 coordinates, is

    y = 2 * ( (x + p) / <p, x + p>  -  p )

which is orthogonal to p. Multiplying by the transpose of the frame matrix
[local_x | local_y | local_z | p] reads off its tangent-frame coordinates;
the fourth one is ~0 and is dropped. The transpose is cached at
construction because orthonormality makes it the inverse.

Stereographic projection is conformal, so tangent vectors can be carried
across with their angles preserved (project_normal).

Singularity
-----------
The point antipodal to p has no finite image: <p, x + p> = 0 there. The
result is non-finite and no warning is raised; callers that need a finite
answer must test with np.isfinite and pick another centre.
===============================================================================
"""

import numpy as np

from hypersphere.core.constants import DTYPE, W, X, Y, Z
from hypersphere.core.vector import (
    Matrix4,
    Vector3,
    Vector4,
    as_vec3,
    as_vec4,
    matrix_from_columns,
    normalize,
)
from hypersphere.geometry.basis import any_orthogonal_to_single, make_orthonormal_basis


class Projection:
    """
    Stereographic projection configuration.

    Attributes
    ----------
    p : Vector4
        Unit centre of projection; maps to the origin of R3.
    local_x, local_y, local_z : Vector4
        Tangent frame at p. Together with p they form an orthonormal basis.
    matrix_inverse : Matrix4
        Transpose of the matrix with columns (local_x, local_y, local_z, p).

    Instances are immutable; rotating a projection (Rot4.mul_proj) builds a
    new one.
    """

    UNIT: 'Projection'

    __slots__ = ('_p', '_local_x', '_local_y', '_local_z', '_matrix_inverse')

    def __init__(self, p: Vector4, local_x: Vector4, local_y: Vector4,
                 local_z: Vector4, matrix_inverse: Matrix4) -> None:
        arrays = [np.array(a, dtype=DTYPE) for a in
                  (p, local_x, local_y, local_z, matrix_inverse)]
        for arr in arrays:
            arr.setflags(write=False)
        (self._p, self._local_x, self._local_y,
         self._local_z, self._matrix_inverse) = arrays

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def new(cls, p) -> 'Projection':
        """
        Build a projection centred on *p* with an arbitrary tangent frame.

        Parameters
        ----------
        p : array-like, shape (4,)
            Centre of projection; normalized internally.

        Raises
        ------
        ValueError
            If p is the zero vector. A zero centre is meaningless.
        """
        p = as_vec4(p)
        basis = make_orthonormal_basis(p, any_orthogonal_to_single(p))
        if basis is None:
            raise ValueError("Center of projection cannot be zero.")
        return cls.from_orthonormal_basis(*basis)

    @classmethod
    def from_orthonormal_basis(cls, p, q, r, s) -> 'Projection':
        """
        Build a projection from a complete orthonormal basis.

        *p* becomes the centre and (q, r, s) the tangent frame. The basis is
        trusted, not checked.
        """
        p, q, r, s = (as_vec4(v) for v in (p, q, r, s))
        matrix_inverse = matrix_from_columns(q, r, s, p).T
        return cls(p, q, r, s, matrix_inverse)

    @classmethod
    def unit(cls) -> 'Projection':
        """Canonical projection: centre W, tangent frame (X, Y, Z)."""
        return cls(W, X, Y, Z, np.eye(4, dtype=DTYPE))

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def p(self) -> Vector4:
        return self._p

    @property
    def local_x(self) -> Vector4:
        return self._local_x

    @property
    def local_y(self) -> Vector4:
        return self._local_y

    @property
    def local_z(self) -> Vector4:
        return self._local_z

    @property
    def matrix_inverse(self) -> Matrix4:
        return self._matrix_inverse

    @property
    def basis(self):
        """The frame as a tuple (p, local_x, local_y, local_z)."""
        return (self._p, self._local_x, self._local_y, self._local_z)

    # =========================================================================
    # PROJECTION
    # =========================================================================

    def project(self, point) -> Vector3:
        """
        Project a point of S3 into R3.

        Parameters
        ----------
        point : array-like, shape (4,)
            Unit vector on the 3-sphere.

        Returns
        -------
        Vector3
            Tangent-frame coordinates of the projected point. Non-finite if
            *point* is antipodal to the centre.
        """
        point = as_vec4(point)
        total = point + self._p
        with np.errstate(divide='ignore', invalid='ignore'):
            projected = 2.0 * (total / np.dot(self._p, total) - self._p)
        return (self._matrix_inverse @ projected)[:3].astype(DTYPE)

    def project_points(self, points) -> np.ndarray:
        """
        Batch form of project().

        Parameters
        ----------
        points : array-like, shape (N, 4)
            Unit vectors on the 3-sphere, one per row.

        Returns
        -------
        np.ndarray, shape (N, 3)

        Raises
        ------
        ValueError
            If *points* is not an (N, 4) array.
        """
        points = np.asarray(points, dtype=DTYPE)
        if points.ndim != 2 or points.shape[1] != 4:
            raise ValueError(f"Expected an (N, 4) array, got shape {points.shape}")

        total = points + self._p
        denom = total @ self._p
        with np.errstate(divide='ignore', invalid='ignore'):
            projected = 2.0 * (total / denom[:, None] - self._p)
        return (projected @ self._matrix_inverse.T)[:, :3].astype(DTYPE)

    def project_normal(self, at, normal) -> Vector3:
        """
        Carry a tangent vector at *at* into the tangent space of the image.

        Uses the differential of the stereographic map up to scale,

            normal * (<at, p> + 1)  -  <normal, p> * (at + p)

        then reads it off in the tangent frame and normalizes. The angle
        *normal* makes with any curve through *at* is preserved.

        Parameters
        ----------
        at : array-like, shape (4,)
            Point on the 3-sphere.
        normal : array-like, shape (4,)
            Tangent vector at *at*, i.e. <normal, at> = 0. Not checked.

        Returns
        -------
        Vector3
            Unit direction in R3.
        """
        at = as_vec4(at)
        normal = as_vec4(normal)

        xp = np.dot(at, self._p) + 1.0
        np_ = np.dot(normal, self._p)

        projected = normal * xp - np_ * (at + self._p)
        return normalize((self._matrix_inverse @ projected)[:3])

    def unproject_direction(self, direction) -> Vector4:
        """Map an R3 direction back to R4 along the tangent frame at p."""
        dx, dy, dz = as_vec3(direction)
        return (dx * self._local_x + dy * self._local_y + dz * self._local_z).astype(DTYPE)

    def place_in_tangent_space(self, value) -> Vector4:
        """
        Place a point on S3 near the centre, offset along the tangent frame.

        Returns normalize(p + value.x*local_x + value.y*local_y + value.z*local_z).
        A zero offset gives p itself.
        """
        return normalize(self.unproject_direction(value) + self._p)

    # =========================================================================
    # DUNDER
    # =========================================================================

    def __repr__(self) -> str:
        return (f"Projection(p={self._p.tolist()}, local_x={self._local_x.tolist()}, "
                f"local_y={self._local_y.tolist()}, local_z={self._local_z.tolist()})")


Projection.UNIT = Projection.unit()


def unit_projection() -> Projection:
    """Return the canonical projection centred on W."""
    return Projection.UNIT

