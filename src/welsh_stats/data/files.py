"""Catalog of known StatsWales dataset files and their column mappings."""

import enum
import json
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import marshmallow as ma
from attrs import define, field

from ..errors import ConfigurationError


class SourceDataType(enum.Enum):
    """File layouts understood by :func:`welsh_stats.data.parser.populate`."""

    AUTHORITY_CODE_CSV = "authority-code-csv"
    AUTHORITY_BY_YEAR_CSV = "authority-by-year-csv"
    WELSH_STATS_JSON = "welsh-stats-json"


class ColumnRole(enum.Enum):
    """Semantic role a source column (or literal value) plays during import."""

    AUTH_CODE = "auth_code"
    AUTH_NAME_ENG = "auth_name_eng"
    AUTH_NAME_CYM = "auth_name_cym"
    MEASURE_CODE = "measure_code"
    MEASURE_NAME = "measure_name"
    SINGLE_MEASURE_CODE = "single_measure_code"
    SINGLE_MEASURE_NAME = "single_measure_name"
    YEAR = "year"
    VALUE = "value"


ColumnMapping = Mapping[ColumnRole, str]


def _frozen_mapping(cols: Mapping[ColumnRole, str]) -> Mapping[ColumnRole, str]:
    return MappingProxyType({ColumnRole(role): name for role, name in cols.items()})


@define(frozen=True)
class InputFileSource:
    """One importable dataset: where it lives and how to read it."""

    name: str
    code: str
    file: str
    parser: SourceDataType = field(converter=SourceDataType)
    cols: ColumnMapping = field(converter=_frozen_mapping, eq=False)


AREAS = InputFileSource(
    name="Areas",
    code="areas",
    file="areas.csv",
    parser=SourceDataType.AUTHORITY_CODE_CSV,
    cols={
        ColumnRole.AUTH_CODE: "Local authority code",
        ColumnRole.AUTH_NAME_ENG: "Name (eng)",
        ColumnRole.AUTH_NAME_CYM: "Name (cym)",
    },
)

POPDEN = InputFileSource(
    name="Population density",
    code="popden",
    file="popu1009.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols={
        ColumnRole.AUTH_CODE: "Localauthority_Code",
        ColumnRole.AUTH_NAME_ENG: "Localauthority_ItemName_ENG",
        ColumnRole.MEASURE_CODE: "Measure_Code",
        ColumnRole.MEASURE_NAME: "Measure_ItemName_ENG",
        ColumnRole.YEAR: "Year_Code",
        ColumnRole.VALUE: "Data",
    },
)

BIZ = InputFileSource(
    name="Active Businesses",
    code="biz",
    file="econ0080.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols={
        ColumnRole.AUTH_CODE: "Area_Code",
        ColumnRole.AUTH_NAME_ENG: "Area_ItemName_ENG",
        ColumnRole.MEASURE_CODE: "Variable_Code",
        ColumnRole.MEASURE_NAME: "Variable_ItemName_ENG",
        ColumnRole.YEAR: "Year_Code",
        ColumnRole.VALUE: "Data",
    },
)

AQI = InputFileSource(
    name="Air Quality Indicators",
    code="aqi",
    file="envi0201.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols={
        ColumnRole.AUTH_CODE: "Area_Code",
        ColumnRole.AUTH_NAME_ENG: "Area_ItemName_ENG",
        ColumnRole.MEASURE_CODE: "Pollutant_ItemName_ENG",
        ColumnRole.MEASURE_NAME: "Pollutant_ItemName_ENG",
        ColumnRole.YEAR: "Year_Code",
        ColumnRole.VALUE: "Data",
    },
)

TRAINS = InputFileSource(
    name="Rail passenger journeys",
    code="trains",
    file="tran0152.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols={
        ColumnRole.AUTH_CODE: "LocalAuthority_Code",
        ColumnRole.AUTH_NAME_ENG: "LocalAuthority_ItemName_ENG",
        ColumnRole.SINGLE_MEASURE_CODE: "rail",
        ColumnRole.SINGLE_MEASURE_NAME: "Rail passenger journeys",
        ColumnRole.YEAR: "Year_Code",
        ColumnRole.VALUE: "Data",
    },
)

COMPLETE_POPDEN = InputFileSource(
    name="Population density",
    code="complete-popden",
    file="complete-popu1009-popden.csv",
    parser=SourceDataType.AUTHORITY_BY_YEAR_CSV,
    cols={
        ColumnRole.AUTH_CODE: "AuthorityCode",
        ColumnRole.SINGLE_MEASURE_CODE: "dens",
        ColumnRole.SINGLE_MEASURE_NAME: "Population density",
    },
)

COMPLETE_POP = InputFileSource(
    name="Population",
    code="complete-pop",
    file="complete-popu1009-pop.csv",
    parser=SourceDataType.AUTHORITY_BY_YEAR_CSV,
    cols={
        ColumnRole.AUTH_CODE: "AuthorityCode",
        ColumnRole.SINGLE_MEASURE_CODE: "pop",
        ColumnRole.SINGLE_MEASURE_NAME: "Population",
    },
)

COMPLETE_AREA = InputFileSource(
    name="Land area",
    code="complete-area",
    file="complete-popu1009-area.csv",
    parser=SourceDataType.AUTHORITY_BY_YEAR_CSV,
    cols={
        ColumnRole.AUTH_CODE: "AuthorityCode",
        ColumnRole.SINGLE_MEASURE_CODE: "area",
        ColumnRole.SINGLE_MEASURE_NAME: "Land area",
    },
)


@define(frozen=True)
class Catalog:
    """Immutable set of dataset definitions handed to the importer."""

    areas: InputFileSource
    datasets: tuple[InputFileSource, ...] = field(converter=tuple)

    def codes(self) -> list[str]:
        return [source.code for source in self.datasets]

    def get(self, code: str) -> InputFileSource:
        """Return the dataset registered under ``code``."""
        for source in self.datasets:
            if source.code == code:
                return source
        raise ConfigurationError(f"No dataset matches key: {code}")

    def select(self, codes: list[str] | None) -> list[InputFileSource]:
        """Resolve dataset codes in order; no codes (or ``all``) selects every dataset."""
        if not codes or "all" in codes:
            return list(self.datasets)
        return [self.get(code) for code in codes]


DEFAULT_CATALOG = Catalog(
    areas=AREAS,
    datasets=(
        POPDEN,
        BIZ,
        AQI,
        TRAINS,
        COMPLETE_POPDEN,
        COMPLETE_POP,
        COMPLETE_AREA,
    ),
)


class InputFileSourceSchema(ma.Schema):
    """Marshmallow schema for one catalog entry."""

    name = ma.fields.Str(required=True)
    code = ma.fields.Str(required=True)
    file = ma.fields.Str(required=True)
    parser = ma.fields.Enum(SourceDataType, by_value=True, required=True)
    cols = ma.fields.Dict(
        keys=ma.fields.Enum(ColumnRole, by_value=True),
        values=ma.fields.Str(),
        required=True,
    )

    @ma.post_load
    def make_source(self, data: dict[str, Any], **kwargs: object) -> InputFileSource:
        """Instantiate :class:`InputFileSource` from validated payloads."""
        return InputFileSource(**data)


class CatalogSchema(ma.Schema):
    """Marshmallow schema for a full catalog file."""

    areas = ma.fields.Nested(InputFileSourceSchema, required=True)
    datasets = ma.fields.List(ma.fields.Nested(InputFileSourceSchema), required=True)

    @ma.post_load
    def make_catalog(self, data: dict[str, Any], **kwargs: object) -> Catalog:
        """Instantiate :class:`Catalog` objects from validated payloads."""
        return Catalog(areas=data["areas"], datasets=data["datasets"])


def load_catalog(path: str | Path) -> Catalog:
    """Read a JSON catalog file, raising :class:`ConfigurationError` when it is invalid."""
    catalog_path = Path(path)
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
        return CatalogSchema().load(payload)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read catalog {catalog_path}: {exc}") from exc
    except ma.ValidationError as exc:
        raise ConfigurationError(f"Invalid catalog {catalog_path}: {exc.messages}") from exc


__all__ = [
    "AREAS",
    "Catalog",
    "CatalogSchema",
    "ColumnMapping",
    "ColumnRole",
    "DEFAULT_CATALOG",
    "InputFileSource",
    "InputFileSourceSchema",
    "SourceDataType",
    "load_catalog",
]
