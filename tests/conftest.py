"""Global test configuration and fixtures."""

import io
import json

import pytest
import structlog

from welsh_stats.data.files import AREAS, Catalog, ColumnRole, InputFileSource, SourceDataType

AREAS_CSV = (
    "Local authority code,Name (eng),Name (cym)\n"
    "W06000001,Isle of Anglesey,Ynys Môn\n"
    "W06000002,Gwynedd,Gwynedd\n"
    "W06000011,Swansea,Abertawe\n"
)

POP_CSV = (
    "AuthorityCode,1991,1992,1993\n"
    "W06000001,100,200,300\n"
    "W06000011,1000,1100,1250\n"
)

POPDEN_RECORDS = [
    {
        "Localauthority_Code": "W06000011",
        "Localauthority_ItemName_ENG": "Swansea",
        "Measure_Code": "Dens",
        "Measure_ItemName_ENG": "Population density",
        "Year_Code": "2015",
        "Data": 642.3,
    },
    {
        "Localauthority_Code": "W06000011",
        "Localauthority_ItemName_ENG": "Swansea",
        "Measure_Code": "Dens",
        "Measure_ItemName_ENG": "Population density",
        "Year_Code": "2016",
        "Data": "645.5",
    },
    {
        "Localauthority_Code": "W06000001",
        "Localauthority_ItemName_ENG": "Isle of Anglesey",
        "Measure_Code": "Area",
        "Measure_ItemName_ENG": "Land area",
        "Year_Code": "2015",
        "Data": 711.0,
    },
]

POPDEN_COLS = {
    ColumnRole.AUTH_CODE: "Localauthority_Code",
    ColumnRole.AUTH_NAME_ENG: "Localauthority_ItemName_ENG",
    ColumnRole.MEASURE_CODE: "Measure_Code",
    ColumnRole.MEASURE_NAME: "Measure_ItemName_ENG",
    ColumnRole.YEAR: "Year_Code",
    ColumnRole.VALUE: "Data",
}

POP_COLS = {
    ColumnRole.AUTH_CODE: "AuthorityCode",
    ColumnRole.SINGLE_MEASURE_CODE: "pop",
    ColumnRole.SINGLE_MEASURE_NAME: "Population",
}


@pytest.fixture
def areas_stream():
    return io.StringIO(AREAS_CSV)


@pytest.fixture
def pop_stream():
    return io.StringIO(POP_CSV)


@pytest.fixture
def popden_stream():
    return io.StringIO(json.dumps({"odata.metadata": "ignored", "value": POPDEN_RECORDS}))


@pytest.fixture
def test_catalog():
    """A catalog pointing at the files written by ``dataset_dir``."""
    return Catalog(
        areas=AREAS,
        datasets=(
            InputFileSource(
                name="Population density",
                code="popden",
                file="popden.json",
                parser=SourceDataType.WELSH_STATS_JSON,
                cols=POPDEN_COLS,
            ),
            InputFileSource(
                name="Population",
                code="pop",
                file="pop.csv",
                parser=SourceDataType.AUTHORITY_BY_YEAR_CSV,
                cols=POP_COLS,
            ),
        ),
    )


@pytest.fixture
def dataset_dir(tmp_path):
    """Write a small set of dataset files and return their directory."""
    (tmp_path / "areas.csv").write_text(AREAS_CSV, encoding="utf-8")
    (tmp_path / "pop.csv").write_text(POP_CSV, encoding="utf-8")
    (tmp_path / "popden.json").write_text(
        json.dumps({"value": POPDEN_RECORDS}), encoding="utf-8"
    )
    return tmp_path


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
