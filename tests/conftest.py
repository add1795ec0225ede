"""
Shared fixtures for exposure equivalence tests.
"""

import pytest

import exposure_equivalence.config as config_module
import exposure_equivalence.exposure.calculator as calculator_module
from exposure_equivalence.core.models import ExposureTriangle, SolveRequest
from exposure_equivalence.core.types import IncrementGranularity, ParameterKind
from exposure_equivalence.exposure.calculator import ExposureCalculator


@pytest.fixture(autouse=True)
def reset_globals():
    """Drop cached settings and the shared calculator between tests."""
    config_module._settings = None
    calculator_module._default_calculator = None
    yield
    config_module._settings = None
    calculator_module._default_calculator = None


@pytest.fixture
def calculator():
    """Create default exposure calculator."""
    return ExposureCalculator()


@pytest.fixture
def base_triangle():
    """Sunny afternoon baseline: 1/125, f/8, ISO 100."""
    return ExposureTriangle(shutter_speed="1/125", aperture="f/8", iso="100")


@pytest.fixture
def portrait_triangle():
    """Baseline used by the documentation examples: 1/125, f/5.6, ISO 100."""
    return ExposureTriangle(shutter_speed="1/125", aperture="f/5.6", iso="100")


@pytest.fixture
def shutter_request(base_triangle):
    """A valid full-stop request solving for shutter speed."""
    return SolveRequest(
        base=base_triangle,
        target_aperture="f/11",
        target_iso="100",
        parameter_to_solve=ParameterKind.SHUTTER_SPEED,
        granularity=IncrementGranularity.FULL,
    )
