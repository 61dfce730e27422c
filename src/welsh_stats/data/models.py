"""Domain models for local-authority statistics: measures, areas, and collections."""

import json
from collections.abc import Iterator
from typing import Any

import marshmallow as ma
from attrs import define, field, setters

from ..errors import InvalidArgumentError, NotFoundError
from ..math import average, difference, percentage_difference


def _lower(value: str) -> str:
    """Normalize a key to lowercase."""
    return value.lower()


def _float_years(years: dict[int, float]) -> dict[int, float]:
    """Coerce year keys to int and values to float."""
    return {int(year): float(value) for year, value in years.items()}


def _lang_key(lang: str) -> str:
    """Validate a three-letter language code and return it lowercase."""
    if len(lang) != 3 or not lang.isalpha():
        raise InvalidArgumentError(
            f"Language code must be three alphabetical letters only, got {lang!r}"
        )
    return lang.lower()


def _names_map(names: dict[str, str]) -> dict[str, str]:
    return {_lang_key(lang): name for lang, name in names.items()}


def _measures_map(measures: dict[str, "Measure"]) -> dict[str, "Measure"]:
    return {codename.lower(): measure for codename, measure in measures.items()}


@define(slots=True)
class Measure:
    """A named statistic with one value per year.

    The codename is stored lowercase and cannot be reassigned once set.
    """

    codename: str = field(converter=_lower, on_setattr=setters.frozen)
    label: str = ""
    _years: dict[int, float] = field(factory=dict, converter=_float_years, alias="years")

    @property
    def years(self) -> dict[int, float]:
        """Return a chronologically ordered copy of the year map."""
        return {year: self._years[year] for year in sorted(self._years)}

    def get_value(self, year: int) -> float:
        """Return the value stored for ``year``."""
        try:
            return self._years[year]
        except KeyError:
            raise NotFoundError(f"No value found for year {year}") from None

    def set_value(self, year: int, value: float) -> None:
        """Insert or overwrite the value for ``year``."""
        self._years[int(year)] = float(value)

    def copy(self) -> "Measure":
        """Return an independent measure with the same codename, label, and years."""
        return Measure(self.codename, self.label, years=dict(self._years))

    def merge(self, other: "Measure") -> None:
        """Fold another measure's years into this one, preferring its values."""
        for year, value in other._years.items():
            self.set_value(year, value)

    def values(self) -> list[float]:
        """Return the stored values in chronological order."""
        return [self._years[year] for year in sorted(self._years)]

    def get_average(self) -> float:
        return average(self.values())

    def get_difference(self) -> float:
        return difference(self.values())

    def get_difference_as_percentage(self) -> float:
        return percentage_difference(self.values())

    def size(self) -> int:
        return len(self._years)

    def __len__(self) -> int:
        return len(self._years)


@define(slots=True)
class Area:
    """A local authority with names in several languages and a set of measures."""

    code: str = field(on_setattr=setters.frozen)
    _names: dict[str, str] = field(factory=dict, converter=_names_map, alias="names")
    _measures: dict[str, Measure] = field(factory=dict, converter=_measures_map, alias="measures")

    @property
    def names(self) -> dict[str, str]:
        """Return a copy of the language code to name mapping."""
        return dict(self._names)

    @property
    def measures(self) -> dict[str, Measure]:
        """Return the measures keyed by codename, in codename order."""
        return {key: self._measures[key] for key in sorted(self._measures)}

    def get_name(self, lang: str) -> str:
        """Return the name for a stored three-letter language code."""
        try:
            return self._names[lang]
        except KeyError:
            raise NotFoundError(
                f"No name found for language {lang!r} in area {self.code}"
            ) from None

    def set_name(self, lang: str, name: str) -> None:
        """Store ``name`` under ``lang``, replacing any existing name.

        Raises:
            InvalidArgumentError: If ``lang`` is not exactly three letters.
        """
        self._names[_lang_key(lang)] = name

    def get_measure(self, codename: str) -> Measure:
        """Return a measure by codename, ignoring case."""
        try:
            return self._measures[codename.lower()]
        except KeyError:
            raise NotFoundError(f"No measure found matching {codename}") from None

    def set_measure(self, codename: str, measure: Measure) -> None:
        """Insert a measure, merging its years into any existing one with the same key."""
        key = codename.lower()
        existing = self._measures.get(key)
        if existing is None:
            self._measures[key] = measure
            return
        if existing == measure:
            return
        existing.merge(measure)

    def merge(self, other: "Area") -> None:
        """Fold another area's names and measures into this one.

        Measures new to this area are copied, so later writes through
        ``other`` do not reach the merged data.
        """
        for lang, name in other._names.items():
            self.set_name(lang, name)
        for codename, measure in other._measures.items():
            self.set_measure(codename, measure.copy())

    def size(self) -> int:
        return len(self._measures)

    def __len__(self) -> int:
        return len(self._measures)


class AreaSchema(ma.Schema):
    """Marshmallow schema for the JSON view of an :class:`Area`.

    ``measures`` collapses every measure of the area into a single
    year to value mapping; measures are visited in codename order, so a
    later codename wins when two measures share a year.
    """

    names = ma.fields.Dict(keys=ma.fields.Str(), values=ma.fields.Str())
    measures = ma.fields.Method("flatten_measures")

    def flatten_measures(self, area: Area) -> dict[str, float]:
        flattened: dict[str, float] = {}
        for measure in area.measures.values():
            for year, value in measure.years.items():
                flattened[str(year)] = value
        return flattened


@define(slots=True)
class Areas:
    """Collection of areas keyed by local authority code."""

    _areas: dict[str, Area] = field(factory=dict, alias="areas")

    def set_area(self, code: str, area: Area) -> None:
        """Insert an area, merging it into any existing area with the same code.

        A new code stores ``area`` itself. For a known code the stored area
        absorbs copies of the incoming measures and ``area`` is left detached.
        """
        existing = self._areas.get(code)
        if existing is None:
            self._areas[code] = area
            return
        if existing == area:
            return
        existing.merge(area)

    def get_area(self, code: str) -> Area:
        """Return the area stored under ``code``."""
        try:
            return self._areas[code]
        except KeyError:
            raise NotFoundError(f"No area found matching {code}") from None

    def size(self) -> int:
        return len(self._areas)

    def __len__(self) -> int:
        return len(self._areas)

    def __contains__(self, code: object) -> bool:
        return code in self._areas

    def __iter__(self) -> Iterator[Area]:
        """Iterate areas in ascending local authority code order."""
        for code in sorted(self._areas):
            yield self._areas[code]

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly mapping of code to names and flattened measures."""
        schema = AreaSchema()
        return {area.code: schema.dump(area) for area in self}

    def to_json(self) -> str:
        """Serialize the collection to a JSON string; empty collections give ``{}``."""
        return json.dumps(self.to_dict(), ensure_ascii=False, allow_nan=False)


__all__ = ["Area", "AreaSchema", "Areas", "Measure"]
