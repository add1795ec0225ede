"""
Exposure equivalence calculator.

Given a baseline shutter speed, aperture and ISO, find the value of one leg
that keeps the same exposure after the other two change, optionally shifted
by EV compensation and snapped to the camera's full, half or third stop
values.

Example:
    calculator = ExposureCalculator()
    outcome = calculator.calculate_shutter_speed(
        ExposureTriangle(shutter_speed="1/125", aperture="f/5.6", iso="100"),
        target_aperture="f/2.8",
        target_iso="100",
        granularity="full",
    )
    outcome.token  # "1/500"

Every public operation returns a SolveOutcome value; bad input never raises.
"""

from typing import Iterable, Optional, Union

from exposure_equivalence.config import get_settings
from exposure_equivalence.core.logging import LoggingMixin
from exposure_equivalence.core.models import (
    ExposureTriangle,
    InvalidInput,
    SolveOutcome,
    SolveRequest,
    Success,
)
from exposure_equivalence.core.types import IncrementGranularity, InputError, ParameterKind
from exposure_equivalence.exposure.codec import (
    TokenFormatError,
    decode,
    encode,
    parse_aperture,
    parse_iso,
    parse_shutter_speed,
    physical_to_stop,
)
from exposure_equivalence.exposure.ladder import build_ladder, ladder_tokens
from exposure_equivalence.exposure.solver import EquivalenceSolver, Solution, StopTriangle
from exposure_equivalence.exposure.validator import RequestValidator

GranularityLike = Union[IncrementGranularity, str, int]


class ExposureCalculator(LoggingMixin):
    """Solve exposure equivalence requests.

    Pipeline: validate, decode the knowns into stop space, solve, encode the
    solved stop back into a ladder token. Instances hold only configuration,
    so one calculator can serve concurrent callers.
    """

    def __init__(
        self,
        validator: Optional[RequestValidator] = None,
        solver: Optional[EquivalenceSolver] = None,
    ):
        """Initialize calculator.

        Args:
            validator: Request validator. If None, uses configured defaults.
            solver: Equivalence solver. If None, uses the configured tolerance.
        """
        settings = get_settings().exposure
        self.validator = validator or RequestValidator(
            settings.max_ev_compensation, settings.default_granularity
        )
        self.solver = solver or EquivalenceSolver(settings.stop_tolerance)
        self.default_granularity = settings.default_granularity

    def solve(self, request: SolveRequest) -> SolveOutcome:
        """Solve a request.

        Args:
            request: Baseline, knowns, parameter to solve, granularity and
                EV compensation.

        Returns:
            Success, OverExposed, UnderExposed, OutOfRange or InvalidInput.
        """
        validation = self.validator.validate(request)
        if not validation.is_valid:
            error = validation.first_error
            self.logger.debug(f"Rejected request: {error.field}: {error.message}")
            return error.to_invalid_input()

        parameter = validation.parameter
        granularity = validation.granularity

        try:
            base = StopTriangle(
                *(decode(kind, request.base.get(kind), granularity) for kind in ParameterKind)
            )
            knowns = {
                kind: decode(kind, request.target(kind), granularity)
                for kind in ParameterKind
                if kind is not parameter
            }
        except TokenFormatError as exc:
            return InvalidInput(
                reason=str(exc), field=exc.kind.value, error=InputError.MALFORMED
            )

        known_tokens = {kind: request.target(kind) for kind in knowns}
        result = self.solver.solve(
            base,
            knowns,
            parameter,
            granularity,
            ev_compensation=validation.ev_compensation,
            known_tokens=known_tokens,
        )

        if not isinstance(result, Solution):
            self.logger.warning(
                f"Cannot solve {parameter.label}: {result.message}",
                extra={"parameter": parameter.value, "outcome": result.kind.value},
            )
            return result

        token = encode(parameter, result.stop_value, granularity, self.solver.tolerance)
        settings = ExposureTriangle(
            **{
                kind.value: self._canonical_token(kind, knowns[kind], tok, granularity)
                for kind, tok in known_tokens.items()
            }
        )
        settings = settings.replace(parameter, token)

        self.logger.debug(
            f"Solved {parameter.label}: {token} (raw {result.raw_stop_value:.3f} stops)",
            extra={"parameter": parameter.value, "granularity": granularity.value},
        )
        return Success(
            parameter=parameter, token=token, stop_value=result.stop_value, settings=settings
        )

    def _canonical_token(
        self, kind: ParameterKind, stop_value: float, token: str, granularity: IncrementGranularity
    ) -> str:
        """Ladder label for a known that sits on the ladder, else the trimmed token."""
        entry = build_ladder(kind, granularity).snap(stop_value, self.solver.tolerance)
        if abs(entry.stop_value - stop_value) <= self.solver.tolerance:
            return entry.token
        return token.strip()

    def solve_many(self, requests: Iterable[SolveRequest]) -> list[SolveOutcome]:
        """Solve requests independently; a failure never stops the batch."""
        return [self.solve(request) for request in requests]

    # =========================================================================
    # One method per direction
    # =========================================================================

    def calculate_shutter_speed(
        self,
        base: ExposureTriangle,
        target_aperture: str,
        target_iso: str,
        granularity: Optional[GranularityLike] = None,
        ev_compensation: float = 0.0,
    ) -> SolveOutcome:
        """Find the shutter speed for a new aperture and ISO."""
        return self.solve(
            SolveRequest(
                base=base,
                target_aperture=target_aperture,
                target_iso=target_iso,
                parameter_to_solve=ParameterKind.SHUTTER_SPEED,
                granularity=granularity,
                ev_compensation=ev_compensation,
            )
        )

    def calculate_aperture(
        self,
        base: ExposureTriangle,
        target_shutter_speed: str,
        target_iso: str,
        granularity: Optional[GranularityLike] = None,
        ev_compensation: float = 0.0,
    ) -> SolveOutcome:
        """Find the aperture for a new shutter speed and ISO."""
        return self.solve(
            SolveRequest(
                base=base,
                target_shutter_speed=target_shutter_speed,
                target_iso=target_iso,
                parameter_to_solve=ParameterKind.APERTURE,
                granularity=granularity,
                ev_compensation=ev_compensation,
            )
        )

    def calculate_iso(
        self,
        base: ExposureTriangle,
        target_shutter_speed: str,
        target_aperture: str,
        granularity: Optional[GranularityLike] = None,
        ev_compensation: float = 0.0,
    ) -> SolveOutcome:
        """Find the ISO for a new shutter speed and aperture."""
        return self.solve(
            SolveRequest(
                base=base,
                target_shutter_speed=target_shutter_speed,
                target_aperture=target_aperture,
                parameter_to_solve=ParameterKind.ISO,
                granularity=granularity,
                ev_compensation=ev_compensation,
            )
        )

    # =========================================================================
    # Ladder listings
    # =========================================================================

    def get_shutter_speeds(self, granularity: Optional[GranularityLike] = None) -> list[str]:
        """Selectable shutter speeds, fastest first."""
        return self._ladder(ParameterKind.SHUTTER_SPEED, granularity)

    def get_apertures(self, granularity: Optional[GranularityLike] = None) -> list[str]:
        """Selectable apertures, widest first."""
        return self._ladder(ParameterKind.APERTURE, granularity)

    def get_isos(self, granularity: Optional[GranularityLike] = None) -> list[str]:
        """Selectable ISO values, lowest first."""
        return self._ladder(ParameterKind.ISO, granularity)

    def _ladder(self, kind: ParameterKind, granularity: Optional[GranularityLike]) -> list[str]:
        resolved = IncrementGranularity.coerce(self._granularity(granularity))
        if resolved is None:
            raise ValueError(f"Unsupported granularity: {granularity!r}")
        return ladder_tokens(kind, resolved)

    def _granularity(self, granularity: Optional[GranularityLike]) -> GranularityLike:
        return self.default_granularity if granularity is None else granularity


def exposure_value(triangle: ExposureTriangle) -> float:
    """Exposure value normalised to ISO 100 (EV100).

    EV = log2(N^2 / t) - log2(ISO / 100). Uses the printed numbers, so
    f/5.6 at 1/125 s and ISO 100 gives about 11.9.

    Raises:
        TokenFormatError: If any token is malformed.
    """
    seconds = parse_shutter_speed(triangle.shutter_speed)
    f_number = parse_aperture(triangle.aperture)
    iso = parse_iso(triangle.iso)
    return (
        physical_to_stop(ParameterKind.APERTURE, f_number)
        - physical_to_stop(ParameterKind.SHUTTER_SPEED, seconds)
        - physical_to_stop(ParameterKind.ISO, iso)
    )


_default_calculator: Optional[ExposureCalculator] = None


def get_calculator() -> ExposureCalculator:
    """Get the shared calculator, creating it if necessary."""
    global _default_calculator
    if _default_calculator is None:
        _default_calculator = ExposureCalculator()
    return _default_calculator


def solve(request: SolveRequest) -> SolveOutcome:
    """Solve a request with the shared calculator."""
    return get_calculator().solve(request)
