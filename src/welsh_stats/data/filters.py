"""Import-time filters for areas, measures, and years."""

from collections.abc import Iterable

from attrs import define, field

from ..errors import InvalidArgumentError


def _lowered(tokens: Iterable[str] | None) -> frozenset[str]:
    """Normalize filter tokens to a lowercase frozenset, dropping blanks."""
    if not tokens:
        return frozenset()
    return frozenset(token.strip().lower() for token in tokens if token.strip())


def _year_range(years: tuple[int, int] | None) -> tuple[int, int]:
    if years is None:
        return (0, 0)
    start, end = years
    start, end = int(start), int(end)
    if start < 0 or end < 0:
        raise InvalidArgumentError(f"Year bounds must be non-negative, got {years!r}")
    return (start, end)


@define(slots=True, frozen=True)
class ImportFilters:
    """Which areas, measures, and years a parser keeps.

    Empty token sets and the ``(0, 0)`` year range mean "keep everything".
    A single zero bound leaves that side of the range open.
    """

    areas: frozenset[str] = field(converter=_lowered, factory=frozenset)
    measures: frozenset[str] = field(converter=_lowered, factory=frozenset)
    years: tuple[int, int] = field(converter=_year_range, default=(0, 0))

    def matches_area(self, code: str, names: Iterable[str] = ()) -> bool:
        """Return True when a token equals the code or occurs in one of the names."""
        if not self.areas:
            return True
        lowered_code = code.lower()
        lowered_names = [name.lower() for name in names]
        for token in self.areas:
            if token == lowered_code:
                return True
            if any(token in name for name in lowered_names):
                return True
        return False

    def matches_measure(self, codename: str) -> bool:
        """Return True when the codename is selected, ignoring case."""
        if not self.measures:
            return True
        return codename.lower() in self.measures

    def includes_year(self, year: int) -> bool:
        """Return True when ``year`` falls inside the inclusive year range."""
        start, end = self.years
        if start and year < start:
            return False
        if end and year > end:
            return False
        return True


NO_FILTERS = ImportFilters()

__all__ = ["ImportFilters", "NO_FILTERS"]
