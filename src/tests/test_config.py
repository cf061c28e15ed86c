"""
===============================================================================
HYPERSPHERE - Configuration Test Suite
===============================================================================
Tests for loading tolerance overrides from YAML and feeding them to the
geometry predicates.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import dataclasses

import pytest

from hypersphere.core.config import ToleranceConfig, load_config
from hypersphere.core.constants import (
    COMPARISON_TOLERANCE,
    NEAR_IDENTITY_TOLERANCE,
    UNIT_TOLERANCE,
    ZERO_TOLERANCE,
)
from hypersphere.geometry.rotation import Rot4


@pytest.fixture
def write_config(tmp_path):
    """Write YAML text to a temporary file and return its path."""
    def _write(text):
        path = tmp_path / "hypersphere.yaml"
        path.write_text(text)
        return path
    return _write


class TestDefaults:

    def test_default_values(self):
        config = ToleranceConfig()
        assert config.zero == ZERO_TOLERANCE
        assert config.comparison == COMPARISON_TOLERANCE
        assert config.near_identity == NEAR_IDENTITY_TOLERANCE
        assert config.unit == UNIT_TOLERANCE

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            ToleranceConfig().zero = 1.0

    def test_empty_file_gives_defaults(self, write_config):
        assert load_config(write_config("")) == ToleranceConfig()

    def test_empty_section_gives_defaults(self, write_config):
        assert load_config(write_config("tolerances:\n")) == ToleranceConfig()


class TestLoading:

    def test_partial_override(self, write_config):
        config = load_config(write_config("tolerances:\n  near_identity: 0.1\n"))
        assert config.near_identity == pytest.approx(0.1)
        assert config.zero == ZERO_TOLERANCE

    def test_full_override(self, write_config):
        config = load_config(write_config(
            "tolerances:\n"
            "  zero: 1.0e-4\n"
            "  comparison: 2.0e-3\n"
            "  near_identity: 0.01\n"
            "  unit: 1.0e-3\n"
        ))
        assert config == ToleranceConfig(zero=1e-4, comparison=2e-3,
                                         near_identity=0.01, unit=1e-3)

    def test_accepts_str_path(self, write_config):
        path = write_config("tolerances:\n  unit: 0.5\n")
        assert load_config(str(path)).unit == pytest.approx(0.5)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_unknown_key(self, write_config):
        with pytest.raises(ValueError, match="Unknown tolerance keys"):
            load_config(write_config("tolerances:\n  angle: 0.1\n"))

    def test_unknown_section(self, write_config):
        with pytest.raises(ValueError, match="Unknown config sections"):
            load_config(write_config("camera:\n  fov: 90\n"))

    @pytest.mark.parametrize("value", ["0.0", "-1.0e-3"])
    def test_non_positive(self, write_config, value):
        with pytest.raises(ValueError, match="must be positive"):
            load_config(write_config(f"tolerances:\n  zero: {value}\n"))

    def test_non_mapping_root(self, write_config):
        with pytest.raises(ValueError, match="mapping"):
            load_config(write_config("- 1\n- 2\n"))


class TestPredicatesWithConfig:

    def test_near_identity_tolerance(self, write_config):
        config = load_config(write_config("tolerances:\n  near_identity: 0.1\n"))
        rot = Rot4.from_rotation_xy(0.05)
        assert not rot.is_near_identity()
        assert rot.is_near_identity(tolerance=config.near_identity)

    def test_comparison_tolerance(self, write_config):
        config = load_config(write_config("tolerances:\n  comparison: 1.0e-2\n"))
        a = Rot4.from_rotation_zw(0.0)
        b = Rot4.from_rotation_zw(1e-3)
        assert not a.approx_eq(b)
        assert a.approx_eq(b, tolerance=config.comparison)
