"""
===============================================================================
HYPERSPHERE - Numeric Constants
===============================================================================
Central repository for the floating-point representation, tolerances and
coordinate axes shared by the basis builder, the rotation type and the
stereographic projection. Everything runs in single precision; the tolerances
below are sized for float32 round-off, not float64.
===============================================================================
"""

import numpy as np


# =============================================================================
# FLOATING REPRESENTATION
# =============================================================================
DTYPE = np.float32

# =============================================================================
# TOLERANCES
# =============================================================================
ZERO_TOLERANCE = 1e-5            # |a . b| below this counts as orthogonal
NORMALIZE_EPSILON = 1e-6         # vectors shorter than this cannot be normalized
COMPARISON_TOLERANCE = 1e-5      # componentwise equality of rotations
NEAR_IDENTITY_TOLERANCE = 2.5e-3  # rad, deviation of each factor from identity
UNIT_TOLERANCE = 2e-4            # | |q|^2 - 1 | for "is normalized"

# =============================================================================
# STANDARD AXES OF R4
# =============================================================================
X = np.array([1.0, 0.0, 0.0, 0.0], dtype=DTYPE)
Y = np.array([0.0, 1.0, 0.0, 0.0], dtype=DTYPE)
Z = np.array([0.0, 0.0, 1.0, 0.0], dtype=DTYPE)
W = np.array([0.0, 0.0, 0.0, 1.0], dtype=DTYPE)

for _axis in (X, Y, Z, W):
    _axis.setflags(write=False)
del _axis
