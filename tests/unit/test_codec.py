"""
Tests for the token codec.

Covers parsing of shutter, aperture and ISO tokens, conversion to and from
stop values, nominal label disambiguation and fallback formatting.
"""

import math
from fractions import Fraction

import pytest

from exposure_equivalence.core.types import IncrementGranularity, ParameterKind
from exposure_equivalence.exposure.codec import (
    TokenFormatError,
    decode,
    encode,
    format_physical,
    format_stop,
    is_valid_token,
    parse_aperture,
    parse_iso,
    parse_shutter_speed,
    physical_to_stop,
    stop_to_physical,
)

SHUTTER = ParameterKind.SHUTTER_SPEED
APERTURE = ParameterKind.APERTURE
ISO = ParameterKind.ISO

FULL = IncrementGranularity.FULL
HALF = IncrementGranularity.HALF
THIRD = IncrementGranularity.THIRD


# =============================================================================
# Parsing
# =============================================================================


class TestParseShutterSpeed:
    """Tests for shutter speed tokens."""

    @pytest.mark.parametrize(
        "token,seconds",
        [
            ("1/125", 1 / 125),
            ("1/2.5", 0.4),
            ('2"', 2.0),
            ("2", 2.0),
            ("0.5", 0.5),
            (" 1/60 ", 1 / 60),
        ],
    )
    def test_valid_tokens(self, token, seconds):
        """Fractions, bare seconds and the seconds mark all parse."""
        assert parse_shutter_speed(token) == pytest.approx(seconds)

    @pytest.mark.parametrize("token", ["abc", "1/", "/125", "1/1/2", "fast", '"'])
    def test_malformed_tokens(self, token):
        """Garbage is rejected as malformed."""
        with pytest.raises(TokenFormatError) as exc_info:
            parse_shutter_speed(token)
        assert exc_info.value.out_of_bounds is False

    def test_zero_denominator_is_out_of_bounds(self):
        """A zero duration is a well-formed but impossible value."""
        with pytest.raises(TokenFormatError) as exc_info:
            parse_shutter_speed("1/0")
        assert exc_info.value.out_of_bounds is True

    @pytest.mark.parametrize(
        "token",
        [
            "1/" + "9" * 400,
            "9" * 400,
            "9" * 300 + "/0." + "0" * 100 + "1",
            "0." + "0" * 200 + "1/1" + "0" * 200,
            "0." + "0" * 400 + "1",
        ],
    )
    def test_unrepresentable_durations_are_out_of_bounds(self, token):
        """Digits that overflow or underflow a float are rejected, not propagated."""
        with pytest.raises(TokenFormatError) as exc_info:
            parse_shutter_speed(token)
        assert exc_info.value.out_of_bounds is True

    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_empty_tokens(self, token):
        """Empty input reports an empty value."""
        with pytest.raises(TokenFormatError, match="value is empty"):
            parse_shutter_speed(token)


class TestParseAperture:
    """Tests for aperture tokens."""

    @pytest.mark.parametrize(
        "token,f_number",
        [("f/5.6", 5.6), ("F/8", 8.0), ("11", 11.0), ("f/1.4", 1.4)],
    )
    def test_valid_tokens(self, token, f_number):
        """The f/ prefix is optional and case-insensitive."""
        assert parse_aperture(token) == pytest.approx(f_number)

    def test_malformed_token(self):
        """A trailing letter is not an f-number."""
        with pytest.raises(TokenFormatError):
            parse_aperture("f/5.6x")

    def test_negative_is_malformed(self):
        """Signs are not part of the token grammar."""
        with pytest.raises(TokenFormatError) as exc_info:
            parse_aperture("f/-2")
        assert exc_info.value.out_of_bounds is False

    def test_zero_is_out_of_bounds(self):
        """f/0 parses but has no physical meaning."""
        with pytest.raises(TokenFormatError) as exc_info:
            parse_aperture("f/0")
        assert exc_info.value.out_of_bounds is True

    def test_huge_f_number_is_out_of_bounds(self):
        with pytest.raises(TokenFormatError, match="too large") as exc_info:
            parse_aperture("f/" + "9" * 400)
        assert exc_info.value.out_of_bounds is True


class TestParseIso:
    """Tests for ISO tokens."""

    def test_valid_token(self):
        """Whole numbers parse."""
        assert parse_iso("400") == 400.0

    @pytest.mark.parametrize("token", ["100.5", "ISO100", "abc", "-100"])
    def test_malformed_tokens(self, token):
        """ISO must be a whole number."""
        with pytest.raises(TokenFormatError, match="Invalid ISO format"):
            parse_iso(token)

    def test_above_maximum_is_out_of_bounds(self):
        """Values above the supported maximum are out of bounds."""
        with pytest.raises(TokenFormatError) as exc_info:
            parse_iso("204800")
        assert exc_info.value.out_of_bounds is True
        assert "102400" in exc_info.value.reason

    def test_custom_maximum(self):
        """The maximum can be lowered."""
        with pytest.raises(TokenFormatError):
            parse_iso("6400", max_iso=3200)


class TestTokenFormatError:
    """Tests for the parse error type."""

    def test_is_value_error(self):
        """Callers catching ValueError also catch token errors."""
        with pytest.raises(ValueError):
            parse_aperture("wide open")

    def test_message_names_kind_and_token(self):
        """The message says which kind and which token failed."""
        error = TokenFormatError(APERTURE, "f/x", "'x' is not a number")
        assert str(error) == "Invalid aperture format: 'f/x' ('x' is not a number)"
        assert error.kind is APERTURE
        assert error.token == "f/x"

    def test_is_valid_token(self):
        """is_valid_token wraps the parsers without raising."""
        assert is_valid_token(SHUTTER, "1/250")
        assert not is_valid_token(SHUTTER, "soon")
        assert not is_valid_token(ISO, None)


# =============================================================================
# Stop conversion
# =============================================================================


class TestStopConversion:
    """Tests for physical value <-> stop value conversion."""

    def test_reference_points(self):
        """One second, f/1 and ISO 100 sit at stop zero."""
        assert physical_to_stop(SHUTTER, 1.0) == 0.0
        assert physical_to_stop(APERTURE, 1.0) == 0.0
        assert physical_to_stop(ISO, 100.0) == 0.0

    def test_one_stop_factors(self):
        """A stop doubles time and ISO and multiplies f-number by sqrt(2)."""
        assert physical_to_stop(SHUTTER, 2.0) == pytest.approx(1.0)
        assert physical_to_stop(APERTURE, math.sqrt(2)) == pytest.approx(1.0)
        assert physical_to_stop(ISO, 200.0) == pytest.approx(1.0)

    @pytest.mark.parametrize("kind", list(ParameterKind))
    def test_inverse(self, kind):
        """stop_to_physical undoes physical_to_stop."""
        for stop in (-3.0, -0.5, 0.0, 1.0 / 3, 4.0):
            physical = stop_to_physical(kind, stop)
            assert physical_to_stop(kind, physical) == pytest.approx(stop)


# =============================================================================
# Decoding
# =============================================================================


class TestDecode:
    """Tests for decoding tokens to stop values."""

    @pytest.mark.parametrize(
        "kind,token,stop",
        [
            (SHUTTER, "1/125", -7),
            (SHUTTER, "1/60", -6),
            (SHUTTER, '1"', 0),
            (SHUTTER, "1", 0),
            (SHUTTER, "0.5", -1),
            (SHUTTER, '30"', 5),
            (APERTURE, "f/5.6", 5),
            (APERTURE, "F/8", 6),
            (APERTURE, "f/22", 9),
            (ISO, "100", 0),
            (ISO, "1600", 4),
            (ISO, "50", -1),
        ],
    )
    def test_nominal_labels_decode_exactly(self, kind, token, stop):
        """Rounded camera labels decode to their exact positions."""
        assert decode(kind, token) == stop
        for granularity in IncrementGranularity:
            assert decode(kind, token, granularity) == stop

    def test_third_stop_label(self):
        """Third-stop labels land on exact thirds."""
        assert decode(APERTURE, "f/7.1", THIRD) == pytest.approx(17 / 3)
        assert decode(SHUTTER, "1/160", THIRD) == pytest.approx(-22 / 3)
        assert decode(ISO, "125", THIRD) == pytest.approx(1 / 3)

    def test_half_stop_label(self):
        """Half-stop labels land on exact halves."""
        assert decode(APERTURE, "f/9.5", HALF) == 6.5
        assert decode(SHUTTER, "1/90", HALF) == -6.5
        assert decode(ISO, "140", HALF) == 0.5

    def test_ambiguous_label_prefers_requested_granularity(self):
        """A label printed on two ladders follows the requested one."""
        assert decode(APERTURE, "f/1.2", HALF) == 0.5
        assert decode(APERTURE, "f/1.2", THIRD) == pytest.approx(2 / 3)
        assert decode(SHUTTER, "1/6", HALF) == -2.5
        assert decode(SHUTTER, "1/6", THIRD) == pytest.approx(-8 / 3)

    def test_ambiguous_label_without_granularity(self):
        """Without a preference, the position nearest the printed number wins."""
        # 2 * log2(1.2) is about 0.53, nearer the half stop
        assert decode(APERTURE, "f/1.2") == 0.5
        # log2(1/6) is about -2.585, nearer the third stop
        assert decode(SHUTTER, "1/6") == pytest.approx(-8 / 3)

    def test_label_from_another_ladder(self):
        """A half-stop label still decodes exactly when full stops are requested."""
        assert decode(APERTURE, "f/9.5", FULL) == 6.5

    @pytest.mark.parametrize(
        "kind,token",
        [(SHUTTER, "1/137"), (APERTURE, "f/3"), (ISO, "300"), (ISO, "25")],
    )
    def test_unlisted_tokens_decode_by_formula(self, kind, token):
        """Tokens on no ladder use the logarithm of the printed number."""
        expected = {
            "1/137": math.log2(1 / 137),
            "f/3": 2 * math.log2(3),
            "300": math.log2(3),
            "25": -2.0,
        }[token]
        assert decode(kind, token) == pytest.approx(expected)

    def test_malformed_token_raises(self):
        """Decode propagates parse errors."""
        with pytest.raises(TokenFormatError):
            decode(ISO, "lots")


# =============================================================================
# Encoding and formatting
# =============================================================================


class TestEncode:
    """Tests for encoding stop values as ladder tokens."""

    def test_exact_positions(self):
        """Stop values on the ladder encode to their labels."""
        assert encode(SHUTTER, -7, FULL) == "1/125"
        assert encode(APERTURE, 5, FULL) == "f/5.6"
        assert encode(ISO, 2, FULL) == "400"
        assert encode(APERTURE, 17 / 3, THIRD) == "f/7.1"

    def test_nearest_position(self):
        """Values between positions snap to the nearest one."""
        assert encode(SHUTTER, -6.9, FULL) == "1/125"
        assert encode(ISO, 0.4, HALF) == "140"

    def test_ties_favour_more_light(self):
        """Halfway values pick the longer shutter, wider aperture, higher ISO."""
        assert encode(SHUTTER, -6.5, FULL) == "1/60"
        assert encode(APERTURE, 5.5, FULL) == "f/5.6"
        assert encode(ISO, 0.5, FULL) == "200"

    def test_clamps_to_bounds(self):
        """Values past either end snap to the nearest bound."""
        assert encode(ISO, 20, FULL) == "25600"
        assert encode(SHUTTER, -20, FULL) == "1/8000"


class TestFormatting:
    """Tests for token formatting."""

    def test_nominal_label(self):
        """Ladder positions format as their printed camera labels."""
        assert format_stop(SHUTTER, Fraction(-6), FULL) == "1/60"
        assert format_stop(APERTURE, Fraction(17, 3), THIRD) == "f/7.1"
        assert format_stop(SHUTTER, Fraction(-1, 2), HALF) == '0.7"'

    def test_fallback_formatting(self):
        """Positions past the catalogue fall back to the computed value."""
        assert format_stop(SHUTTER, Fraction(6), FULL) == '64"'
        assert format_stop(APERTURE, Fraction(13), FULL) == "f/90.5"
        assert format_stop(ISO, Fraction(9), FULL) == "51200"

    def test_format_physical(self):
        """Physical values format in each kind's notation."""
        assert format_physical(SHUTTER, 0.25) == "1/4"
        assert format_physical(SHUTTER, 2.5) == '2.5"'
        assert format_physical(APERTURE, 2.0) == "f/2"
        assert format_physical(ISO, 399.6) == "400"
