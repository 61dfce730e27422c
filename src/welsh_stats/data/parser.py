"""Parsers that merge StatsWales CSV and JSON tables into an :class:`Areas` collection.

Every parser reads an already-open text stream, never closes it, and folds
each parsed row into ``areas`` through :meth:`Areas.set_area`. Rows merged
before a failure stay merged; there is no rollback.
"""

import csv
import json
import math
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any, TextIO

import structlog

from ..errors import ConfigurationError, ParseError
from .files import ColumnMapping, ColumnRole, SourceDataType
from .filters import NO_FILTERS, ImportFilters
from .models import Area, Areas, Measure

logger = structlog.get_logger(__name__)

REFERENCE_ROLES = (ColumnRole.AUTH_CODE, ColumnRole.AUTH_NAME_ENG, ColumnRole.AUTH_NAME_CYM)


def _describe(stream: TextIO) -> str:
    """Best-effort name for a stream, used in error messages."""
    return str(getattr(stream, "name", "<stream>"))


@contextmanager
def _parse_errors(source: str) -> Iterator[None]:
    """Re-raise low-level read and decode failures as :class:`ParseError`."""
    try:
        yield
    except ParseError:
        raise
    except (csv.Error, OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ParseError(f"Error parsing {source}: {exc}") from exc


def _require(cols: ColumnMapping, roles: Iterable[ColumnRole]) -> None:
    missing = [role.value for role in roles if role not in cols]
    if missing:
        raise ConfigurationError(f"Not enough columns in mapping, missing: {', '.join(missing)}")


def _is_blank(row: list[str]) -> bool:
    return all(not cell.strip() for cell in row)


def _known_names(areas: Areas, code: str) -> list[str]:
    """Names already imported for ``code``, used by the area filter."""
    if code not in areas:
        return []
    return list(areas.get_area(code).names.values())


def populate_from_authority_code_csv(
    areas: Areas,
    stream: TextIO,
    cols: ColumnMapping,
    filters: ImportFilters = NO_FILTERS,
) -> int:
    """Merge the reference list of authority codes with English and Welsh names.

    The first line is a header and is discarded. Every other line must hold
    exactly three fields: code, English name, Welsh name.

    Returns:
        The number of rows merged into ``areas``.
    """
    _require(cols, REFERENCE_ROLES)
    source = _describe(stream)
    merged = 0
    skipped = 0
    with _parse_errors(source):
        reader = csv.reader(stream)
        if next(reader, None) is None:
            logger.warning("parser.empty_source", source=source, layout="authority-code-csv")
            return 0
        for row in reader:
            if _is_blank(row):
                continue
            if len(row) != 3:
                raise ParseError(
                    f"Error parsing {source}: line {reader.line_num} has {len(row)} fields, "
                    "expected 3"
                )
            code, eng, cym = (cell.strip() for cell in row)
            area = Area(code)
            area.set_name("eng", eng)
            area.set_name("cym", cym)
            if not filters.matches_area(code, (eng, cym)):
                skipped += 1
                logger.debug("parser.row_skipped", source=source, line=reader.line_num, code=code)
                continue
            areas.set_area(code, area)
            merged += 1
    logger.debug("parser.authority_codes_loaded", source=source, merged=merged, skipped=skipped)
    return merged


def _single_measure(cols: ColumnMapping) -> tuple[str, str]:
    _require(cols, (ColumnRole.SINGLE_MEASURE_CODE, ColumnRole.SINGLE_MEASURE_NAME))
    return cols[ColumnRole.SINGLE_MEASURE_CODE], cols[ColumnRole.SINGLE_MEASURE_NAME]


def _header_years(header: list[str], source: str) -> list[int]:
    try:
        return [int(cell.strip()) for cell in header[1:]]
    except ValueError as exc:
        raise ParseError(f"Error parsing {source}: invalid year in header: {exc}") from exc


def populate_from_authority_by_year_csv(
    areas: Areas,
    stream: TextIO,
    cols: ColumnMapping,
    filters: ImportFilters = NO_FILTERS,
) -> int:
    """Merge a table of one measure with an authority per row and a year per column.

    The measure codename and label come from the ``SINGLE_MEASURE_CODE`` and
    ``SINGLE_MEASURE_NAME`` entries of ``cols``. Empty cells are skipped.
    """
    codename, label = _single_measure(cols)
    source = _describe(stream)
    merged = 0
    skipped = 0
    with _parse_errors(source):
        reader = csv.reader(stream)
        header = next(reader, None)
        if header is None:
            logger.warning("parser.empty_source", source=source, layout="authority-by-year-csv")
            return 0
        years = _header_years(header, source)
        keep_measure = filters.matches_measure(codename)
        for row in reader:
            if _is_blank(row):
                continue
            code = row[0].strip()
            cells = row[1:]
            if len(cells) != len(years):
                raise ParseError(
                    f"Error parsing {source}: line {reader.line_num} has {len(cells)} values "
                    f"for {len(years)} years"
                )
            if not keep_measure or not filters.matches_area(code, _known_names(areas, code)):
                skipped += 1
                logger.debug("parser.row_skipped", source=source, line=reader.line_num, code=code)
                continue
            measure = Measure(codename, label)
            for year, cell in zip(years, cells):
                text = cell.strip()
                if not text or not filters.includes_year(year):
                    continue
                try:
                    value = float(text)
                except ValueError as exc:
                    raise ParseError(
                        f"Error parsing {source}: line {reader.line_num}: {exc}"
                    ) from exc
                if not math.isfinite(value):
                    raise ParseError(
                        f"Error parsing {source}: line {reader.line_num} has non-finite value "
                        f"{text!r}"
                    )
                measure.set_value(year, value)
            area = Area(code)
            area.set_measure(codename, measure)
            areas.set_area(code, area)
            merged += 1
    logger.debug(
        "parser.by_year_loaded",
        source=source,
        measure=codename,
        years=len(years),
        merged=merged,
        skipped=skipped,
    )
    return merged


def _field(record: dict[str, Any], name: str, source: str, index: int) -> Any:
    try:
        return record[name]
    except KeyError:
        raise ParseError(f"Error parsing {source}: record {index} has no field {name!r}") from None


def _to_float(raw: Any, source: str, index: int) -> float:
    """Accept finite JSON numbers and numeric strings."""
    if isinstance(raw, bool) or raw is None:
        raise ParseError(f"Error parsing {source}: record {index} has non-numeric value {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ParseError(
            f"Error parsing {source}: record {index} has non-numeric value {raw!r}"
        ) from exc
    if not math.isfinite(value):
        raise ParseError(f"Error parsing {source}: record {index} has non-finite value {raw!r}")
    return value


def _to_year(raw: Any, source: str, index: int) -> int:
    message = f"Error parsing {source}: record {index} has invalid year {raw!r}"
    if isinstance(raw, bool) or raw is None:
        raise ParseError(message)
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise ParseError(message) from exc


def _json_rows(document: Any, source: str) -> list[Any]:
    """Return the row records, unwrapping the StatsWales ``value`` envelope."""
    rows = document.get("value") if isinstance(document, dict) else document
    if not isinstance(rows, list):
        raise ParseError(f"Error parsing {source}: expected an array of records")
    return rows


def _measure_identity(
    record: dict[str, Any], cols: ColumnMapping, source: str, index: int
) -> tuple[str, str]:
    """Resolve the codename and label, from literals for single-measure files."""
    if ColumnRole.SINGLE_MEASURE_CODE in cols:
        codename = cols[ColumnRole.SINGLE_MEASURE_CODE]
    else:
        codename = str(_field(record, cols[ColumnRole.MEASURE_CODE], source, index))
    if ColumnRole.SINGLE_MEASURE_NAME in cols:
        label = cols[ColumnRole.SINGLE_MEASURE_NAME]
    elif ColumnRole.MEASURE_NAME in cols:
        label = str(_field(record, cols[ColumnRole.MEASURE_NAME], source, index))
    else:
        label = codename
    return codename, label


def populate_from_welsh_stats_json(
    areas: Areas,
    stream: TextIO,
    cols: ColumnMapping,
    filters: ImportFilters = NO_FILTERS,
) -> int:
    """Merge a StatsWales JSON table where each record is one (area, measure, year, value).

    Each record becomes an :class:`Area` holding a single one-year
    :class:`Measure`; merging assembles the full histories.
    """
    _require(cols, (ColumnRole.AUTH_CODE, ColumnRole.YEAR, ColumnRole.VALUE))
    if ColumnRole.MEASURE_CODE not in cols and ColumnRole.SINGLE_MEASURE_CODE not in cols:
        raise ConfigurationError("Not enough columns in mapping, missing: measure_code")
    source = _describe(stream)
    with _parse_errors(source):
        document = json.load(stream)
    rows = _json_rows(document, source)

    merged = 0
    skipped = 0
    for index, record in enumerate(rows):
        if not isinstance(record, dict):
            raise ParseError(f"Error parsing {source}: record {index} is not an object")
        code = str(_field(record, cols[ColumnRole.AUTH_CODE], source, index)).strip()
        codename, label = _measure_identity(record, cols, source, index)
        year = _to_year(_field(record, cols[ColumnRole.YEAR], source, index), source, index)
        value = _to_float(_field(record, cols[ColumnRole.VALUE], source, index), source, index)

        names: dict[str, str] = {}
        for role, lang in ((ColumnRole.AUTH_NAME_ENG, "eng"), (ColumnRole.AUTH_NAME_CYM, "cym")):
            if role in cols:
                name = record.get(cols[role])
                if name:
                    names[lang] = str(name)

        candidate_names = list(names.values()) + _known_names(areas, code)
        if not (
            filters.matches_area(code, candidate_names)
            and filters.matches_measure(codename)
            and filters.includes_year(year)
        ):
            skipped += 1
            logger.debug(
                "parser.row_skipped", source=source, record=index, code=code, measure=codename
            )
            continue

        measure = Measure(codename, label)
        measure.set_value(year, value)
        area = Area(code)
        for lang, name in names.items():
            area.set_name(lang, name)
        area.set_measure(codename, measure)
        areas.set_area(code, area)
        merged += 1

    logger.debug(
        "parser.json_loaded", source=source, records=len(rows), merged=merged, skipped=skipped
    )
    return merged


def populate(
    areas: Areas,
    stream: TextIO,
    source_type: SourceDataType,
    cols: ColumnMapping,
    filters: ImportFilters = NO_FILTERS,
) -> int:
    """Dispatch ``stream`` to the parser for ``source_type``."""
    if source_type is SourceDataType.AUTHORITY_CODE_CSV:
        return populate_from_authority_code_csv(areas, stream, cols, filters)
    if source_type is SourceDataType.AUTHORITY_BY_YEAR_CSV:
        return populate_from_authority_by_year_csv(areas, stream, cols, filters)
    if source_type is SourceDataType.WELSH_STATS_JSON:
        return populate_from_welsh_stats_json(areas, stream, cols, filters)
    raise ConfigurationError(f"Unexpected data type: {source_type!r}")


__all__ = [
    "populate",
    "populate_from_authority_by_year_csv",
    "populate_from_authority_code_csv",
    "populate_from_welsh_stats_json",
]
