"""
===============================================================================
HYPERSPHERE - Vector and Matrix Substrate
===============================================================================
Thin helpers over NumPy arrays for the value types used throughout the
package:

    Vector4  -- ndarray, shape (4,), components (x, y, z, w)
    Vector3  -- ndarray, shape (3,)
    Matrix4  -- ndarray, shape (4, 4), built from four column Vector4s

Every helper returns a fresh array; callers may keep or modify results
without aliasing any input.
===============================================================================
"""

from typing import Optional

import numpy as np

from hypersphere.core.constants import DTYPE, NORMALIZE_EPSILON


Vector3 = np.ndarray
Vector4 = np.ndarray
Matrix4 = np.ndarray


def vec4(x: float, y: float, z: float, w: float) -> Vector4:
    """Build a Vector4 from its four components."""
    return np.array([x, y, z, w], dtype=DTYPE)


def as_vec4(v) -> Vector4:
    """
    Coerce an array-like to a Vector4.

    Raises
    ------
    ValueError
        If *v* does not hold exactly four components.
    """
    arr = np.array(v, dtype=DTYPE)
    if arr.shape != (4,):
        raise ValueError(f"Expected a 4-component vector, got shape {arr.shape}")
    return arr


def as_vec3(v) -> Vector3:
    """
    Coerce an array-like to a Vector3.

    Raises
    ------
    ValueError
        If *v* does not hold exactly three components.
    """
    arr = np.array(v, dtype=DTYPE)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {arr.shape}")
    return arr


def is_zero(v: np.ndarray) -> bool:
    """True only when every component is exactly zero."""
    return not np.any(v)


def try_normalize(v: np.ndarray) -> Optional[np.ndarray]:
    """
    Return *v* scaled to unit length, or None if that is not possible.

    Normalization fails when the length is non-finite or does not exceed
    NORMALIZE_EPSILON. This is how degenerate seeds (zero vectors, parallel
    inputs) surface from the basis builder.
    """
    n = np.linalg.norm(v)
    if not np.isfinite(n) or n <= NORMALIZE_EPSILON:
        return None
    return (v / n).astype(DTYPE)


def normalize(v: np.ndarray) -> np.ndarray:
    """
    Return *v* scaled to unit length.

    No guard against zero: a zero vector produces NaN components, which
    callers can detect with np.isfinite.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        return (v / np.linalg.norm(v)).astype(DTYPE)


def matrix_from_columns(a: Vector4, b: Vector4, c: Vector4, d: Vector4) -> Matrix4:
    """Assemble a 4x4 matrix whose columns are a, b, c, d."""
    return np.column_stack([a, b, c, d]).astype(DTYPE)
