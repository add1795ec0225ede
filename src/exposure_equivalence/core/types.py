"""
Domain-specific types and enumerations for exposure equivalence.
"""

from enum import Enum
from fractions import Fraction
from typing import Any, Optional


class ParameterKind(str, Enum):
    """The three legs of the exposure triangle."""

    SHUTTER_SPEED = "shutter_speed"
    APERTURE = "aperture"
    ISO = "iso"

    @property
    def label(self) -> str:
        """Human-readable name used in messages."""
        return _KIND_LABELS[self]

    @property
    def light_sign(self) -> int:
        """+1 when a higher stop value admits more light, -1 otherwise."""
        return -1 if self is ParameterKind.APERTURE else 1

    @classmethod
    def coerce(cls, value: Any) -> Optional["ParameterKind"]:
        """Parse a boundary value into a ParameterKind, or None if unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        return _KIND_ALIASES.get(value.strip().lower())


_KIND_LABELS = {
    ParameterKind.SHUTTER_SPEED: "shutter speed",
    ParameterKind.APERTURE: "aperture",
    ParameterKind.ISO: "ISO",
}

_KIND_ALIASES = {
    "shutter_speed": ParameterKind.SHUTTER_SPEED,
    "shutterspeed": ParameterKind.SHUTTER_SPEED,
    "shutterspeeds": ParameterKind.SHUTTER_SPEED,
    "shutter": ParameterKind.SHUTTER_SPEED,
    "aperture": ParameterKind.APERTURE,
    "iso": ParameterKind.ISO,
}


class IncrementGranularity(str, Enum):
    """Stop increments offered by a camera dial."""

    FULL = "full"
    HALF = "half"
    THIRD = "third"

    @property
    def step(self) -> Fraction:
        """Exact stop size of one click."""
        return _GRANULARITY_STEPS[self]

    @classmethod
    def coerce(cls, value: Any) -> Optional["IncrementGranularity"]:
        """Parse a boundary value into a granularity, or None if unknown.

        Accepts the enum itself, its string value in any case, or the
        legacy scale integers 1, 2 and 3.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return _GRANULARITY_SCALES.get(value)
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


_GRANULARITY_STEPS = {
    IncrementGranularity.FULL: Fraction(1),
    IncrementGranularity.HALF: Fraction(1, 2),
    IncrementGranularity.THIRD: Fraction(1, 3),
}

_GRANULARITY_SCALES = {
    1: IncrementGranularity.FULL,
    2: IncrementGranularity.HALF,
    3: IncrementGranularity.THIRD,
}


class OutcomeKind(str, Enum):
    """Tag of a solve outcome."""

    SUCCESS = "success"
    OVEREXPOSED = "overexposed"
    UNDEREXPOSED = "underexposed"
    OUT_OF_RANGE = "out_of_range"
    INVALID_INPUT = "invalid_input"


class InputError(str, Enum):
    """Why a request was rejected before solving."""

    MISSING = "missing"
    MALFORMED = "malformed"
    OUT_OF_BOUNDS = "out_of_bounds"
    UNSUPPORTED = "unsupported"
