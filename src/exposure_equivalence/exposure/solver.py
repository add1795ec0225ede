"""
Exposure equivalence solver.

Works entirely in stop space. The total exposure level of a triangle is

    EV = shutter_stop - aperture_stop + iso_stop

so a longer shutter, a wider aperture (smaller f-number) or a higher ISO each
raise it. Keeping EV constant while two legs change fixes the third.
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Union

from exposure_equivalence.core.models import (
    ExposureFailure,
    OutOfRange,
    OverExposed,
    UnderExposed,
)
from exposure_equivalence.core.types import IncrementGranularity, ParameterKind
from exposure_equivalence.exposure.ladder import build_ladder


@dataclass(frozen=True)
class StopTriangle:
    """An exposure triangle decoded into stop values."""

    shutter_speed: float
    aperture: float
    iso: float

    def get(self, kind: ParameterKind) -> float:
        return getattr(self, kind.value)

    @property
    def exposure_level(self) -> float:
        """Total light captured, in stops."""
        return self.shutter_speed - self.aperture + self.iso


@dataclass(frozen=True)
class Solution:
    """A solved stop value and its snapped ladder position."""

    parameter: ParameterKind
    raw_stop_value: float
    stop_value: float


def required_stop(
    base: StopTriangle,
    knowns: Mapping[ParameterKind, float],
    parameter: ParameterKind,
    ev_compensation: float = 0.0,
) -> float:
    """Solve for the stop value that keeps exposure equal to the base.

    Args:
        base: Baseline triangle in stop space.
        knowns: Stop values of the two legs that are not being solved.
        parameter: Leg to solve for.
        ev_compensation: Extra light in stops (+1 doubles the exposure).

    Returns:
        Unsnapped stop value of the solved leg.
    """
    desired = base.exposure_level + ev_compensation
    contribution = sum(kind.light_sign * stop for kind, stop in knowns.items() if kind is not parameter)
    return (desired - contribution) * parameter.light_sign


class EquivalenceSolver:
    """Solve one leg of the exposure triangle and classify the result."""

    def __init__(self, tolerance: float = 1e-6):
        """Initialize solver.

        Args:
            tolerance: Stop distance treated as equal when snapping and
                checking bounds.
        """
        self.tolerance = tolerance

    def solve(
        self,
        base: StopTriangle,
        knowns: Mapping[ParameterKind, float],
        parameter: ParameterKind,
        granularity: IncrementGranularity,
        ev_compensation: float = 0.0,
        known_tokens: Optional[Mapping[ParameterKind, str]] = None,
    ) -> Union[Solution, ExposureFailure]:
        """Solve for ``parameter`` and snap it onto the granularity's ladder.

        The unsnapped value is checked against the ladder bounds first: past
        the bright end is overexposure, past the dark end is underexposure.
        Only then are the caller's knowns checked against their own domains.

        Args:
            base: Baseline triangle in stop space.
            knowns: Stop values of the two fixed legs.
            parameter: Leg to solve for.
            granularity: Ladder increments to snap onto.
            ev_compensation: Extra light in stops.
            known_tokens: Tokens the knowns were decoded from, for reporting.

        Returns:
            A Solution, or an OverExposed, UnderExposed or OutOfRange failure.
        """
        missing = [kind for kind in ParameterKind if kind is not parameter and kind not in knowns]
        if missing:
            raise ValueError(f"Missing known values for: {', '.join(k.value for k in missing)}")

        raw = required_stop(base, knowns, parameter, ev_compensation)
        ladder = build_ladder(parameter, granularity)

        past_bright = (raw - ladder.brightest_stop) * parameter.light_sign
        if past_bright > self.tolerance:
            return OverExposed(parameter=parameter, stops_over=past_bright)

        past_dark = (ladder.darkest_stop - raw) * parameter.light_sign
        if past_dark > self.tolerance:
            return UnderExposed(parameter=parameter, stops_under=past_dark)

        for kind in ParameterKind:
            if kind is parameter:
                continue
            stop = knowns[kind]
            if not build_ladder(kind, granularity).contains(stop, self.tolerance):
                token = known_tokens.get(kind) if known_tokens else None
                return OutOfRange(parameter=kind, attempted_stop_value=stop, token=token)

        entry = ladder.snap(raw, self.tolerance)
        return Solution(parameter=parameter, raw_stop_value=raw, stop_value=entry.stop_value)
