"""
Exposure equivalence: keep the same exposure while trading shutter speed,
aperture and ISO against each other.

- codec: tokens such as "1/125", "f/5.6" and "400" to and from stop values
- ladder: full, half and third stop values a camera offers
- solver: stop arithmetic and over/underexposure classification
- validator: request checks that run before any arithmetic
- calculator: the public facade tying the pieces together
"""

from exposure_equivalence.exposure.calculator import (
    ExposureCalculator,
    exposure_value,
    get_calculator,
    solve,
)
from exposure_equivalence.exposure.codec import (
    STOP_BOUNDS,
    TokenFormatError,
    decode,
    encode,
    format_stop,
    is_valid_token,
)
from exposure_equivalence.exposure.ladder import (
    Ladder,
    LadderEntry,
    build_ladder,
    ladder_tokens,
)
from exposure_equivalence.exposure.solver import (
    EquivalenceSolver,
    Solution,
    StopTriangle,
    required_stop,
)
from exposure_equivalence.exposure.validator import (
    RequestValidator,
    ValidationError,
    ValidationResult,
)

__all__ = [
    # Facade
    "ExposureCalculator",
    "exposure_value",
    "get_calculator",
    "solve",
    # Codec
    "STOP_BOUNDS",
    "TokenFormatError",
    "decode",
    "encode",
    "format_stop",
    "is_valid_token",
    # Ladders
    "Ladder",
    "LadderEntry",
    "build_ladder",
    "ladder_tokens",
    # Solver
    "EquivalenceSolver",
    "Solution",
    "StopTriangle",
    "required_stop",
    # Validation
    "RequestValidator",
    "ValidationError",
    "ValidationResult",
]
