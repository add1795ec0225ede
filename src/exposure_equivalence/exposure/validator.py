"""
Pre-flight validation of solve requests.

Every rule is independent and cheap: presence checks, token format checks,
enum membership and the EV compensation range. No ladder is built and no
stop arithmetic happens here, so a rejected request costs nothing further.
"""

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Optional

from exposure_equivalence.config import get_settings
from exposure_equivalence.core.models import InvalidInput, SolveRequest
from exposure_equivalence.core.types import IncrementGranularity, InputError, ParameterKind
from exposure_equivalence.exposure.codec import TokenFormatError, parse_physical

FORMAT_HINTS = {
    ParameterKind.SHUTTER_SPEED: 'must be in valid format (e.g., 1/125, 2", 0.5)',
    ParameterKind.APERTURE: "must be in valid f-stop format (e.g., f/2.8)",
    ParameterKind.ISO: "must be a valid numeric value (e.g., 100, 400, 1600)",
}


@dataclass(frozen=True)
class ValidationError:
    """A single failed rule."""

    field: str
    message: str
    error: InputError

    def to_invalid_input(self) -> InvalidInput:
        return InvalidInput(reason=self.message, field=self.field, error=self.error)


@dataclass
class ValidationResult:
    """Outcome of validating a request."""

    errors: list[ValidationError] = field(default_factory=list)
    granularity: Optional[IncrementGranularity] = None
    parameter: Optional[ParameterKind] = None
    ev_compensation: float = 0.0

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def first_error(self) -> Optional[ValidationError]:
        return self.errors[0] if self.errors else None


def _is_blank(token: Optional[str]) -> bool:
    return token is None or (isinstance(token, str) and not token.strip())


class RequestValidator:
    """Validate a SolveRequest before it reaches the solver."""

    def __init__(
        self,
        max_ev_compensation: Optional[float] = None,
        default_granularity: Optional[IncrementGranularity] = None,
    ):
        """Initialize validator.

        Args:
            max_ev_compensation: Largest allowed |EV compensation|. Defaults
                to the configured value.
            default_granularity: Granularity for requests that name none.
                Defaults to the configured value.
        """
        settings = get_settings().exposure
        if max_ev_compensation is None:
            max_ev_compensation = settings.max_ev_compensation
        self.max_ev_compensation = max_ev_compensation
        self.default_granularity = default_granularity or settings.default_granularity

    def validate(self, request: SolveRequest) -> ValidationResult:
        """Run every rule and collect the failures.

        Args:
            request: Request to check.

        Returns:
            ValidationResult with parsed enums and EV compensation on success.
        """
        result = ValidationResult()
        errors = result.errors

        base = request.base
        if base is None:
            errors.append(
                ValidationError("base", "Base exposure settings are required", InputError.MISSING)
            )
        else:
            for kind in ParameterKind:
                errors.extend(self._check_token(base.get(kind), kind, f"base_{kind.value}", "Base"))

        granularity = request.granularity
        if granularity is None:
            granularity = self.default_granularity
        result.granularity = IncrementGranularity.coerce(granularity)
        if result.granularity is None:
            errors.append(
                ValidationError(
                    "granularity", "Invalid exposure increment value", InputError.UNSUPPORTED
                )
            )

        result.parameter = ParameterKind.coerce(request.parameter_to_solve)
        if result.parameter is None:
            errors.append(
                ValidationError(
                    "parameter_to_solve", "Invalid calculation type", InputError.UNSUPPORTED
                )
            )

        compensation = self._coerce_compensation(request.ev_compensation)
        if compensation is None:
            errors.append(
                ValidationError(
                    "ev_compensation", "EV compensation must be a number", InputError.MALFORMED
                )
            )
        elif abs(compensation) > self.max_ev_compensation:
            limit = f"{self.max_ev_compensation:g}"
            errors.append(
                ValidationError(
                    "ev_compensation",
                    f"EV compensation must be between -{limit} and +{limit} stops",
                    InputError.OUT_OF_BOUNDS,
                )
            )
        else:
            result.ev_compensation = compensation

        if result.parameter is not None:
            for kind in ParameterKind:
                if kind is result.parameter:
                    continue
                errors.extend(
                    self._check_token(request.target(kind), kind, f"target_{kind.value}", "Target")
                )

        return result

    def _check_token(
        self, token: Optional[str], kind: ParameterKind, field_name: str, role: str
    ) -> list[ValidationError]:
        if _is_blank(token):
            return [
                ValidationError(field_name, f"{role} {kind.label} is required", InputError.MISSING)
            ]
        try:
            parse_physical(kind, token)
        except TokenFormatError as exc:
            if exc.out_of_bounds:
                return [
                    ValidationError(
                        field_name,
                        f"{role} {kind.label} is out of bounds: {exc.reason}",
                        InputError.OUT_OF_BOUNDS,
                    )
                ]
            return [
                ValidationError(
                    field_name, f"{role} {kind.label} {FORMAT_HINTS[kind]}", InputError.MALFORMED
                )
            ]
        return []

    @staticmethod
    def _coerce_compensation(value: Any) -> Optional[float]:
        if value is None:
            return 0.0
        if isinstance(value, bool) or not isinstance(value, (Real, str)):
            return None
        try:
            number = float(value)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return number
