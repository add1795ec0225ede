"""
Stop ladders: the selectable values a camera offers for one parameter.

A ladder is a pure function of (parameter kind, granularity). Ladders are
built from the codec's dial catalogues: the granularity's exact stop grid
between the kind's physical bounds, minus the positions a dial skips, plus
the few dial values that sit between grid positions. Results are memoised
process-wide; ladders are immutable, so the cache is never invalidated.
"""

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Optional

from exposure_equivalence.core.types import IncrementGranularity, ParameterKind
from exposure_equivalence.exposure.codec import ladder_catalogue, parse_physical


@dataclass(frozen=True)
class LadderEntry:
    """One selectable value: its token and exact stop position."""

    token: str
    stop_value: float
    physical_value: float


@dataclass(frozen=True)
class Ladder:
    """Ordered, deduplicated values for one parameter at one granularity."""

    kind: ParameterKind
    granularity: IncrementGranularity
    entries: tuple[LadderEntry, ...]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[LadderEntry]:
        return iter(self.entries)

    @property
    def tokens(self) -> list[str]:
        return [entry.token for entry in self.entries]

    @property
    def min_stop(self) -> float:
        return self.entries[0].stop_value

    @property
    def max_stop(self) -> float:
        return self.entries[-1].stop_value

    @property
    def brightest_stop(self) -> float:
        """Bound on the side that admits the most light."""
        return self.max_stop if self.kind.light_sign > 0 else self.min_stop

    @property
    def darkest_stop(self) -> float:
        """Bound on the side that admits the least light."""
        return self.min_stop if self.kind.light_sign > 0 else self.max_stop

    def contains(self, stop_value: float, tolerance: float = 1e-6) -> bool:
        """Check whether a stop value lies within the ladder's bounds."""
        return self.min_stop - tolerance <= stop_value <= self.max_stop + tolerance

    def find(self, physical_value: float) -> Optional[LadderEntry]:
        """Return the entry whose token parses to the given physical value."""
        for entry in self.entries:
            if math.isclose(entry.physical_value, physical_value, rel_tol=1e-9):
                return entry
        return None

    def snap(self, stop_value: float, tolerance: float = 1e-6) -> LadderEntry:
        """Return the entry nearest to a raw stop value.

        Values outside the ladder snap to the closest bound. When two entries
        are equally near (within tolerance), the one admitting more light
        wins: the longer shutter speed, the wider aperture, the higher ISO.
        """
        best = self.entries[0]
        best_distance = abs(best.stop_value - stop_value)
        for entry in self.entries[1:]:
            distance = abs(entry.stop_value - stop_value)
            if distance < best_distance - tolerance:
                best, best_distance = entry, distance
            elif abs(distance - best_distance) <= tolerance and self._brighter(entry, best):
                best, best_distance = entry, distance
        return best

    def _brighter(self, entry: LadderEntry, other: LadderEntry) -> bool:
        return (entry.stop_value - other.stop_value) * self.kind.light_sign > 0


@lru_cache(maxsize=None)
def build_ladder(kind: ParameterKind, granularity: IncrementGranularity) -> Ladder:
    """Build the ladder for a parameter kind at a granularity.

    Sizes: full stops give 19 shutter speeds, 13 apertures and 10 ISOs;
    half stops 37/24/20; third stops 55/37/27.
    """
    kind = ParameterKind(kind)
    granularity = IncrementGranularity(granularity)

    entries = tuple(
        LadderEntry(token, stop_value, parse_physical(kind, token))
        for token, stop_value in ladder_catalogue(kind, granularity)
    )
    return Ladder(kind=kind, granularity=granularity, entries=entries)


def ladder_tokens(kind: ParameterKind, granularity: IncrementGranularity) -> list[str]:
    """List the tokens of a ladder, lowest stop first."""
    return build_ladder(kind, granularity).tokens
