"""
Core data models for the exposure equivalence engine.

Requests are Pydantic models so they can be built from loosely typed input
(form fields, JSON payloads) and compared structurally. Outcomes are frozen
dataclasses forming a tagged union that callers can pattern-match on.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from exposure_equivalence.core.types import (
    IncrementGranularity,
    InputError,
    OutcomeKind,
    ParameterKind,
)


class ExposureTriangle(BaseModel):
    """Shutter speed, aperture and ISO tokens, e.g. ("1/125", "f/5.6", "100")."""

    model_config = ConfigDict(frozen=True)

    shutter_speed: Optional[str] = Field(default=None, description="Shutter token")
    aperture: Optional[str] = Field(default=None, description="Aperture token")
    iso: Optional[str] = Field(default=None, description="ISO token")

    def get(self, kind: ParameterKind) -> Optional[str]:
        """Return the token for one leg of the triangle."""
        return getattr(self, kind.value)

    def replace(self, kind: ParameterKind, token: str) -> "ExposureTriangle":
        """Return a copy with one leg replaced."""
        return self.model_copy(update={kind.value: token})


class SolveRequest(BaseModel):
    """Everything needed to solve for one leg of the triangle.

    ``granularity`` and ``parameter_to_solve`` accept raw strings so that
    unsupported values reach the validator instead of failing construction.
    A missing granularity means the configured default.
    The target that matches ``parameter_to_solve`` is ignored.
    """

    model_config = ConfigDict(frozen=True)

    base: Optional[ExposureTriangle] = Field(default=None)
    target_shutter_speed: Optional[str] = Field(default=None)
    target_aperture: Optional[str] = Field(default=None)
    target_iso: Optional[str] = Field(default=None)
    parameter_to_solve: Union[ParameterKind, str, None] = Field(default=None)
    granularity: Union[IncrementGranularity, str, int, None] = Field(
        default=None, description="Configured default when None"
    )
    ev_compensation: Any = Field(default=0.0, description="Stops, -5 to +5")

    def target(self, kind: ParameterKind) -> Optional[str]:
        """Return the target token for a parameter kind."""
        return getattr(self, f"target_{kind.value}")


@dataclass(frozen=True)
class Success:
    """The solved parameter snapped onto the ladder."""

    kind: ClassVar[OutcomeKind] = OutcomeKind.SUCCESS

    parameter: ParameterKind
    token: str
    stop_value: float
    settings: ExposureTriangle

    @property
    def is_success(self) -> bool:
        return True

    @property
    def message(self) -> str:
        return f"{self.parameter.label.capitalize()}: {self.token}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "parameter": self.parameter.value,
            "token": self.token,
            "stop_value": self.stop_value,
            "settings": self.settings.model_dump(),
            "message": self.message,
        }


@dataclass(frozen=True)
class OverExposed:
    """More light is needed than the solved parameter can deliver."""

    kind: ClassVar[OutcomeKind] = OutcomeKind.OVEREXPOSED

    parameter: ParameterKind
    stops_over: float

    @property
    def is_success(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return f"Image will be overexposed by {self.stops_over:.1f} stops"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "parameter": self.parameter.value,
            "stops_over": self.stops_over,
            "message": self.message,
        }


@dataclass(frozen=True)
class UnderExposed:
    """Less light is needed than the solved parameter can cut."""

    kind: ClassVar[OutcomeKind] = OutcomeKind.UNDEREXPOSED

    parameter: ParameterKind
    stops_under: float

    @property
    def is_success(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return f"Image will be underexposed by {self.stops_under:.1f} stops"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "parameter": self.parameter.value,
            "stops_under": self.stops_under,
            "message": self.message,
        }


@dataclass(frozen=True)
class OutOfRange:
    """A caller-supplied target lies outside its physical domain."""

    kind: ClassVar[OutcomeKind] = OutcomeKind.OUT_OF_RANGE

    parameter: ParameterKind
    attempted_stop_value: float
    token: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return f"The requested {self.parameter.label} exceeds available limits"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "parameter": self.parameter.value,
            "attempted_stop_value": self.attempted_stop_value,
            "token": self.token,
            "message": self.message,
        }


@dataclass(frozen=True)
class InvalidInput:
    """The request was rejected before any calculation."""

    kind: ClassVar[OutcomeKind] = OutcomeKind.INVALID_INPUT

    reason: str
    field: Optional[str] = None
    error: InputError = InputError.MALFORMED

    @property
    def is_success(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.reason

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "reason": self.reason,
            "field": self.field,
            "error": self.error.value,
            "message": self.message,
        }


ExposureFailure = Union[OverExposed, UnderExposed, OutOfRange]
SolveOutcome = Union[Success, OverExposed, UnderExposed, OutOfRange, InvalidInput]
