"""Top-level data module for StatsWales imports."""

from .files import (
    DEFAULT_CATALOG,
    Catalog,
    ColumnRole,
    InputFileSource,
    SourceDataType,
    load_catalog,
)
from .filters import ImportFilters
from .ingest import StatsImporter
from .models import Area, Areas, Measure
from .parser import (
    populate,
    populate_from_authority_by_year_csv,
    populate_from_authority_code_csv,
    populate_from_welsh_stats_json,
)
from .sources import InputFile, InputSource

__all__ = [
    "Area",
    "Areas",
    "Catalog",
    "ColumnRole",
    "DEFAULT_CATALOG",
    "ImportFilters",
    "InputFile",
    "InputFileSource",
    "InputSource",
    "Measure",
    "SourceDataType",
    "StatsImporter",
    "load_catalog",
    "populate",
    "populate_from_authority_by_year_csv",
    "populate_from_authority_code_csv",
    "populate_from_welsh_stats_json",
]
