"""
===============================================================================
HYPERSPHERE - Tolerance Configuration
===============================================================================
Loads tolerance overrides from a YAML file. A config file looks like:

    tolerances:
      zero: 1.0e-5
      comparison: 1.0e-5
      near_identity: 2.5e-3
      unit: 2.0e-4

Missing keys keep the defaults from core.constants. The loaded values are
passed explicitly to the predicates that accept a ``tolerance`` keyword; the
package holds no global configuration state.
===============================================================================
"""

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Union

import yaml

from hypersphere.core.constants import (
    COMPARISON_TOLERANCE,
    NEAR_IDENTITY_TOLERANCE,
    UNIT_TOLERANCE,
    ZERO_TOLERANCE,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToleranceConfig:
    """
    Tolerances used by the geometry predicates.

    Attributes
    ----------
    zero : float
        Absolute bound under which a dot product counts as orthogonal.
    comparison : float
        Componentwise bound for equality of rotations.
    near_identity : float
        Angle (radians) each quaternion factor may deviate from identity.
    unit : float
        Allowed deviation of |q|^2 from 1.
    """
    zero: float = ZERO_TOLERANCE
    comparison: float = COMPARISON_TOLERANCE
    near_identity: float = NEAR_IDENTITY_TOLERANCE
    unit: float = UNIT_TOLERANCE


def load_config(config_path: Union[str, Path]) -> ToleranceConfig:
    """
    Load tolerance settings from a YAML file.

    Args:
        config_path: Path to the YAML file.

    Returns:
        ToleranceConfig with the file's values applied over the defaults.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file contains unknown keys or non-positive values.
    """
    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info("Loading tolerance configuration from: %s", path)
    with open(path, 'r') as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config root must be a mapping, got {type(raw).__name__}")

    unknown_sections = set(raw) - {'tolerances'}
    if unknown_sections:
        raise ValueError(f"Unknown config sections: {sorted(unknown_sections)}")

    section = raw.get('tolerances') or {}
    known = {f.name for f in fields(ToleranceConfig)}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"Unknown tolerance keys: {sorted(unknown)}")

    values = {}
    for key, value in section.items():
        value = float(value)
        if value <= 0.0:
            raise ValueError(f"Tolerance '{key}' must be positive, got {value}")
        values[key] = value

    config = replace(ToleranceConfig(), **values)
    logger.debug("Tolerance configuration: %s", config)
    return config
