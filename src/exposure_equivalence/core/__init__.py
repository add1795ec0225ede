"""
Core data models and types for the exposure equivalence engine.
"""

from exposure_equivalence.core.models import (
    ExposureTriangle,
    InvalidInput,
    OutOfRange,
    OverExposed,
    SolveOutcome,
    SolveRequest,
    Success,
    UnderExposed,
)
from exposure_equivalence.core.types import (
    IncrementGranularity,
    InputError,
    OutcomeKind,
    ParameterKind,
)

__all__ = [
    # Models
    "ExposureTriangle",
    "SolveRequest",
    "SolveOutcome",
    "Success",
    "OverExposed",
    "UnderExposed",
    "OutOfRange",
    "InvalidInput",
    # Types
    "IncrementGranularity",
    "InputError",
    "OutcomeKind",
    "ParameterKind",
]
