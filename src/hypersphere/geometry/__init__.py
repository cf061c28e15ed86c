"""
===============================================================================
HYPERSPHERE - Geometry Module
===============================================================================
Submodules:
    basis       -- orthonormal bases of R4 from one or two seed vectors
    projection  -- stereographic projection S3 -> R3
    rotation    -- Rot4, rotations of R4 as (left, right) quaternion pairs
===============================================================================
"""
