"""
Exposure Equivalence - reciprocity calculations for photographers.

Given a baseline shutter speed, aperture and ISO, this package finds the
value of one setting that keeps identical exposure after the other two
change:

- Token parsing and formatting for shutter speeds, apertures and ISO
- Full, half and third stop ladders matching camera dials
- Exposure equivalence solving with EV compensation
- Over/underexposure and out-of-range classification as plain values
- Request validation with caller-facing messages
"""

__version__ = "1.0.0"

# Core models
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

# Configuration
from exposure_equivalence.config import (
    Settings,
    configure,
    get_settings,
)

# Exposure
from exposure_equivalence.exposure import (
    ExposureCalculator,
    build_ladder,
    decode,
    encode,
    exposure_value,
    solve,
)

__all__ = [
    "__version__",
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
    # Configuration
    "Settings",
    "configure",
    "get_settings",
    # Exposure
    "ExposureCalculator",
    "build_ladder",
    "decode",
    "encode",
    "exposure_value",
    "solve",
]
