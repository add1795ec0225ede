"""
Value codec for exposure tokens.

Converts shutter speed, aperture and ISO tokens to and from stop values.
Every kind uses a base-2 logarithmic axis where a larger stop value means
more of the physical quantity:

- Shutter speed: log2(seconds), 1 second = 0
- Aperture: 2 * log2(f-number), f/1 = 0 (one stop per factor of sqrt(2))
- ISO: log2(ISO / 100), ISO 100 = 0

Cameras print rounded nominal labels ("1/60" is really 1/64 s, "f/5.6" is
really f/5.657), so tokens that match a ladder label decode to the label's
exact stop position rather than to the logarithm of the printed number.
"""

import math
import re
from fractions import Fraction
from typing import Optional

from exposure_equivalence.core.types import IncrementGranularity, ParameterKind

_NUMBER = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$")
_INTEGER = re.compile(r"^\d+$")

SECONDS_MARK = '"'
APERTURE_PREFIX = "f/"
ISO_REFERENCE = 100
MAX_ISO_TOKEN = 102400


class TokenFormatError(ValueError):
    """Raised when a token cannot be parsed for its parameter kind."""

    def __init__(
        self,
        kind: ParameterKind,
        token: Optional[str],
        reason: str,
        out_of_bounds: bool = False,
    ):
        self.kind = kind
        self.token = token
        self.reason = reason
        self.out_of_bounds = out_of_bounds
        super().__init__(f"Invalid {kind.label} format: {token!r} ({reason})")


# Physical bounds of every ladder, as exact stop positions
STOP_BOUNDS: dict[ParameterKind, tuple[Fraction, Fraction]] = {
    ParameterKind.SHUTTER_SPEED: (Fraction(-13), Fraction(5)),  # 1/8000 .. 30"
    ParameterKind.APERTURE: (Fraction(0), Fraction(12)),  # f/1 .. f/64
    ParameterKind.ISO: (Fraction(-1), Fraction(8)),  # 50 .. 25600
}

# Nominal camera labels, one per grid position from the lower bound up.
# None marks a position the camera dial skips.
NOMINAL_LABELS: dict[tuple[ParameterKind, IncrementGranularity], tuple[Optional[str], ...]] = {
    (ParameterKind.SHUTTER_SPEED, IncrementGranularity.FULL): (
        "1/8000", "1/4000", "1/2000", "1/1000", "1/500", "1/250", "1/125",
        "1/60", "1/30", "1/15", "1/8", "1/4", "1/2",
        '1"', '2"', '4"', '8"', '15"', '30"',
    ),
    (ParameterKind.SHUTTER_SPEED, IncrementGranularity.HALF): (
        "1/8000", "1/6000", "1/4000", "1/3000", "1/2000", "1/1500", "1/1000",
        "1/750", "1/500", "1/350", "1/250", "1/180", "1/125", "1/90", "1/60",
        "1/45", "1/30", "1/20", "1/15", "1/10", "1/8", "1/6", "1/4", "1/3",
        "1/2", '0.7"', '1"', '1.5"', '2"', '3"', '4"', '6"', '8"', '10"',
        '15"', '20"', '30"',
    ),
    (ParameterKind.SHUTTER_SPEED, IncrementGranularity.THIRD): (
        "1/8000", "1/6400", "1/5000", "1/4000", "1/3200", "1/2500", "1/2000",
        "1/1600", "1/1250", "1/1000", "1/800", "1/640", "1/500", "1/400",
        "1/320", "1/250", "1/200", "1/160", "1/125", "1/100", "1/80", "1/60",
        "1/50", "1/40", "1/30", "1/25", "1/20", "1/15", "1/13", "1/10", "1/8",
        "1/6", "1/5", "1/4", "1/3", "1/2.5", "1/2", "1/1.6", "1/1.3",
        '1"', '1.3"', '1.6"', '2"', '2.5"', '3.2"', '4"', '5"', '6"', '8"',
        '10"', '13"', '15"', '20"', '25"', '30"',
    ),
    (ParameterKind.APERTURE, IncrementGranularity.FULL): (
        "f/1", "f/1.4", "f/2", "f/2.8", "f/4", "f/5.6", "f/8", "f/11",
        "f/16", "f/22", "f/32", "f/45", "f/64",
    ),
    (ParameterKind.APERTURE, IncrementGranularity.HALF): (
        "f/1", "f/1.2", "f/1.4", None, "f/2", "f/2.4", "f/2.8", "f/3.3",
        "f/4", "f/4.8", "f/5.6", "f/6.7", "f/8", "f/9.5", "f/11", "f/13",
        "f/16", "f/19", "f/22", "f/27", "f/32", "f/38", "f/45", "f/54", "f/64",
    ),
    (ParameterKind.APERTURE, IncrementGranularity.THIRD): (
        "f/1", "f/1.1", "f/1.2", "f/1.4", "f/1.6", "f/1.8", "f/2", "f/2.2",
        "f/2.5", "f/2.8", "f/3.2", "f/3.5", "f/4", "f/4.5", "f/5", "f/5.6",
        "f/6.3", "f/7.1", "f/8", "f/9", "f/10", "f/11", "f/13", "f/14",
        "f/16", "f/18", "f/20", "f/22", "f/25", "f/29", "f/32", "f/36",
        "f/40", "f/45", "f/51", "f/57", "f/64",
    ),
    (ParameterKind.ISO, IncrementGranularity.FULL): (
        "50", "100", "200", "400", "800", "1600", "3200", "6400", "12800", "25600",
    ),
    (ParameterKind.ISO, IncrementGranularity.HALF): (
        "50", "70", "100", "140", "200", "280", "400", "560", "800", "1100",
        "1600", "2200", "3200", "4500", "6400", "9000", "12800", "18000", "25600",
    ),
    (ParameterKind.ISO, IncrementGranularity.THIRD): (
        "50", None, None, "100", "125", "160", "200", "250", "320", "400",
        "500", "640", "800", "1000", "1250", "1600", "2000", "2500", "3200",
        "4000", "5000", "6400", "8000", "10000", "12800", "16000", "20000", "25600",
    ),
}

# Dial values that sit between grid positions
OFF_GRID_LABELS: dict[tuple[ParameterKind, IncrementGranularity], dict[str, float]] = {
    (ParameterKind.ISO, IncrementGranularity.HALF): {"3600": math.log2(36)},
    (ParameterKind.ISO, IncrementGranularity.THIRD): {"70": -0.5},
}


def ladder_positions(kind: ParameterKind, granularity: IncrementGranularity) -> list[Fraction]:
    """Exact stop positions of a ladder, from the lower bound upwards."""
    low, high = STOP_BOUNDS[kind]
    step = granularity.step
    count = int((high - low) / step) + 1
    return [low + i * step for i in range(count)]


def ladder_catalogue(
    kind: ParameterKind, granularity: IncrementGranularity
) -> list[tuple[str, float]]:
    """Labels and stop positions a camera dial offers, lowest stop first.

    Grid positions come from stepping the granularity between the kind's
    bounds; skipped positions are dropped and off-grid dial values added.
    """
    entries = []
    for position in ladder_positions(kind, granularity):
        label = _nominal_label(kind, position, granularity)
        if label is not None:
            entries.append((label, float(position)))
    entries.extend(OFF_GRID_LABELS.get((kind, granularity), {}).items())
    return sorted(entries, key=lambda entry: entry[1])


def _nominal_label(
    kind: ParameterKind, position: Fraction, granularity: IncrementGranularity
) -> Optional[str]:
    labels = NOMINAL_LABELS[(kind, granularity)]
    low, _ = STOP_BOUNDS[kind]
    index = (position - low) / granularity.step
    if index.denominator != 1 or not 0 <= index < len(labels):
        return None
    return labels[int(index)]


# =============================================================================
# Parsing
# =============================================================================


def _parse_number(kind: ParameterKind, token: str, text: str) -> float:
    text = text.strip()
    if not _NUMBER.match(text):
        raise TokenFormatError(kind, token, f"{text!r} is not a number")
    value = float(text)
    if not math.isfinite(value):
        raise TokenFormatError(kind, token, "value is too large", out_of_bounds=True)
    if value <= 0:
        raise TokenFormatError(kind, token, "value must be positive", out_of_bounds=True)
    return value


def parse_shutter_speed(token: str) -> float:
    """Parse a shutter token ("1/125", "2", '30"') into seconds."""
    kind = ParameterKind.SHUTTER_SPEED
    text = _require_text(kind, token)
    if "/" in text:
        numerator, _, denominator = text.partition("/")
        seconds = _parse_number(kind, token, numerator) / _parse_number(kind, token, denominator)
        if not 0 < seconds < math.inf:
            raise TokenFormatError(kind, token, "duration out of range", out_of_bounds=True)
        return seconds
    if text.endswith(SECONDS_MARK):
        text = text[: -len(SECONDS_MARK)]
    return _parse_number(kind, token, text)


def parse_aperture(token: str) -> float:
    """Parse an aperture token ("f/5.6" or "5.6") into an f-number."""
    kind = ParameterKind.APERTURE
    text = _require_text(kind, token)
    if text.lower().startswith(APERTURE_PREFIX):
        text = text[len(APERTURE_PREFIX):]
    return _parse_number(kind, token, text)


def parse_iso(token: str, max_iso: int = MAX_ISO_TOKEN) -> float:
    """Parse an ISO token ("100") into a sensitivity."""
    kind = ParameterKind.ISO
    text = _require_text(kind, token)
    if not _INTEGER.match(text):
        raise TokenFormatError(kind, token, "ISO must be a whole number")
    value = int(text)
    if value <= 0:
        raise TokenFormatError(kind, token, "value must be positive", out_of_bounds=True)
    if value > max_iso:
        raise TokenFormatError(kind, token, f"ISO above {max_iso}", out_of_bounds=True)
    return float(value)


def _require_text(kind: ParameterKind, token: Optional[str]) -> str:
    if not isinstance(token, str) or not token.strip():
        raise TokenFormatError(kind, token, "value is empty")
    return token.strip()


_PARSERS = {
    ParameterKind.SHUTTER_SPEED: parse_shutter_speed,
    ParameterKind.APERTURE: parse_aperture,
    ParameterKind.ISO: parse_iso,
}


def parse_physical(kind: ParameterKind, token: str) -> float:
    """Parse a token into its physical quantity (seconds, f-number, ISO)."""
    return _PARSERS[kind](token)


def is_valid_token(kind: ParameterKind, token: Optional[str]) -> bool:
    """Check whether a token is well-formed for its kind."""
    try:
        parse_physical(kind, token)
    except TokenFormatError:
        return False
    return True


# =============================================================================
# Stop conversion
# =============================================================================


def physical_to_stop(kind: ParameterKind, value: float) -> float:
    """Convert seconds, f-number or ISO into a stop value."""
    if kind is ParameterKind.SHUTTER_SPEED:
        return math.log2(value)
    if kind is ParameterKind.APERTURE:
        return 2 * math.log2(value)
    return math.log2(value / ISO_REFERENCE)


def stop_to_physical(kind: ParameterKind, stop_value: float) -> float:
    """Convert a stop value back into seconds, f-number or ISO."""
    if kind is ParameterKind.SHUTTER_SPEED:
        return 2.0 ** stop_value
    if kind is ParameterKind.APERTURE:
        return 2.0 ** (stop_value / 2)
    return ISO_REFERENCE * 2.0 ** stop_value


def decode(
    kind: ParameterKind,
    token: str,
    granularity: Optional[IncrementGranularity] = None,
) -> float:
    """Decode a token into a stop value.

    Nominal labels resolve to their exact ladder position. When a label
    appears on several ladders ("1/6" is both a half and a third stop), the
    requested granularity wins, then the position closest to the printed
    number. Other tokens decode by formula.

    Args:
        kind: Parameter the token belongs to.
        token: Token such as "1/125", "f/5.6" or "400".
        granularity: Ladder to prefer when a label is ambiguous.

    Returns:
        Stop value on the kind's axis.

    Raises:
        TokenFormatError: If the token is malformed.
    """
    value = parse_physical(kind, token)
    computed = physical_to_stop(kind, value)

    # Import here to avoid circular imports
    from exposure_equivalence.exposure.ladder import build_ladder

    if granularity is not None:
        entry = build_ladder(kind, granularity).find(value)
        if entry is not None:
            return entry.stop_value

    matches = []
    for candidate in IncrementGranularity:
        entry = build_ladder(kind, candidate).find(value)
        if entry is not None:
            matches.append(entry.stop_value)
    if matches:
        return min(matches, key=lambda stop: (abs(stop - computed), stop))
    return computed


def encode(
    kind: ParameterKind,
    stop_value: float,
    granularity: IncrementGranularity,
    tolerance: float = 1e-6,
) -> str:
    """Encode a stop value as the nearest token on a granularity's ladder."""
    from exposure_equivalence.exposure.ladder import build_ladder

    return build_ladder(kind, granularity).snap(stop_value, tolerance).token


# =============================================================================
# Formatting
# =============================================================================


def _trim(value: float, places: int = 1) -> str:
    text = f"{value:.{places}f}".rstrip("0").rstrip(".")
    return text or "0"


def format_physical(kind: ParameterKind, value: float) -> str:
    """Format a physical quantity as a token when no nominal label exists."""
    if kind is ParameterKind.SHUTTER_SPEED:
        if value < 1:
            return f"1/{_trim(1 / value)}"
        return f"{_trim(value)}{SECONDS_MARK}"
    if kind is ParameterKind.APERTURE:
        return f"{APERTURE_PREFIX}{_trim(value)}"
    return str(int(round(value)))


def format_stop(
    kind: ParameterKind, position: Fraction, granularity: IncrementGranularity
) -> str:
    """Format a ladder position as its nominal camera label."""
    label = _nominal_label(kind, position, granularity)
    if label is not None:
        return label
    return format_physical(kind, stop_to_physical(kind, float(position)))
