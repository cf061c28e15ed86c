"""
===============================================================================
HYPERSPHERE - Core Module
===============================================================================
Numeric substrate shared by the geometry modules.

Submodules:
    constants   -- float32 dtype, tolerances, standard axes
    vector      -- Vector4 / Vector3 / Matrix4 helpers on NumPy arrays
    quaternion  -- Hamilton quaternions without sign canonicalisation
    config      -- YAML tolerance configuration
===============================================================================
"""
