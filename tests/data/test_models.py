"""Unit tests for the data models."""

import json

import pytest
from attrs.exceptions import FrozenAttributeError

from welsh_stats.data.models import Area, Areas, Measure
from welsh_stats.errors import InvalidArgumentError, NotFoundError


def test_measure_codename_is_lowercase_and_frozen():
    """Codenames are normalized on construction and cannot be reassigned."""
    measure = Measure("Pop", "Population")
    assert measure.codename == "pop"
    with pytest.raises(FrozenAttributeError):
        measure.codename = "dens"
    measure.label = "Total population"
    assert measure.label == "Total population"


def test_measure_get_and_set_value():
    """Values can be inserted, overwritten, and read back."""
    measure = Measure("pop", "Population")
    measure.set_value(1999, 12345678.9)
    measure.set_value(1999, 12345679.9)
    assert measure.get_value(1999) == pytest.approx(12345679.9)
    assert measure.size() == 1


def test_measure_missing_year_names_the_year():
    """Unknown years raise NotFoundError mentioning the year."""
    measure = Measure("pop", "Population")
    with pytest.raises(NotFoundError, match="2001"):
        measure.get_value(2001)


def test_measure_years_are_chronological():
    """The year map is ordered by year regardless of insertion order."""
    measure = Measure("pop", "Population")
    for year in (2003, 1999, 2001):
        measure.set_value(year, float(year))
    assert list(measure.years) == [1999, 2001, 2003]


def test_measure_statistics():
    """Average, difference, and percentage use first and last years by key."""
    measure = Measure("pop", "Population")
    measure.set_value(2010, 150.0)
    measure.set_value(2000, 100.0)
    measure.set_value(2005, 50.0)
    assert measure.get_average() == pytest.approx(100.0)
    assert measure.get_difference() == pytest.approx(50.0)
    assert measure.get_difference_as_percentage() == pytest.approx(50.0)


def test_measure_statistics_without_enough_data():
    """Empty and single-year measures report zeros instead of raising."""
    empty = Measure("pop", "Population")
    assert empty.get_average() == 0
    assert empty.get_difference() == 0
    assert empty.get_difference_as_percentage() == 0

    single = Measure("pop", "Population", years={1999: 5.0})
    assert single.get_difference() == 0
    assert single.get_average() == pytest.approx(5.0)


def test_measure_percentage_with_zero_first_value_is_zero():
    """A zero starting value gives a percentage of zero rather than infinity."""
    measure = Measure("pop", "Population", years={2000: 0.0, 2001: 10.0})
    assert measure.get_difference() == pytest.approx(10.0)
    assert measure.get_difference_as_percentage() == 0


def test_measure_equality():
    """Measures are equal only when codename, label, and data match."""
    first = Measure("pop", "Population", years={2000: 1.0})
    assert first == Measure("POP", "Population", years={2000: 1.0})
    assert first != Measure("pop", "People", years={2000: 1.0})
    assert first != Measure("pop", "Population", years={2000: 2.0})


@pytest.mark.parametrize("lang", ["eng", "ENG", "Cym", "fra"])
def test_area_name_round_trip(lang):
    """Names round-trip through a lowercase language code."""
    area = Area("W06000023")
    area.set_name(lang, "Powys")
    assert area.get_name(lang.lower()) == "Powys"


@pytest.mark.parametrize("lang", ["en", "engl", "e1g", "", "en "])
def test_area_rejects_bad_language_codes(lang):
    """Only three alphabetic characters are accepted."""
    area = Area("W06000023")
    with pytest.raises(InvalidArgumentError):
        area.set_name(lang, "Powys")


def test_area_get_name_is_case_sensitive():
    """Lookups use the stored lowercase key as given."""
    area = Area("W06000023")
    area.set_name("eng", "Powys")
    with pytest.raises(NotFoundError):
        area.get_name("ENG")


def test_area_set_name_overwrites():
    area = Area("W06000023")
    area.set_name("eng", "Powis")
    area.set_name("eng", "Powys")
    assert area.get_name("eng") == "Powys"


def test_area_measure_keys_ignore_case():
    """Measures stored as pop and POP share a single entry."""
    area = Area("W06000023")
    area.set_measure("pop", Measure("pop", "Population", years={2000: 1.0}))
    area.set_measure("POP", Measure("POP", "Population", years={2001: 2.0}))
    assert area.size() == 1
    assert area.get_measure("Pop").years == {2000: 1.0, 2001: 2.0}


def test_area_missing_measure_names_the_codename():
    area = Area("W06000023")
    with pytest.raises(NotFoundError, match="dens"):
        area.get_measure("dens")


def test_measure_merge_disjoint_years_unions():
    """Disjoint year sets are combined."""
    area = Area("W06000023")
    area.set_measure("pop", Measure("pop", "Population", years={2000: 1.0, 2001: 2.0}))
    area.set_measure("pop", Measure("pop", "Population", years={2002: 3.0}))
    assert area.get_measure("pop").years == {2000: 1.0, 2001: 2.0, 2002: 3.0}


def test_measure_merge_overlap_prefers_incoming():
    """On a shared year the incoming value wins and other years are kept."""
    area = Area("W06000023")
    area.set_measure("pop", Measure("pop", "Population", years={2000: 1.0, 2001: 2.0}))
    area.set_measure("pop", Measure("pop", "Other label", years={2001: 20.0, 2002: 3.0}))
    merged = area.get_measure("pop")
    assert merged.years == {2000: 1.0, 2001: 20.0, 2002: 3.0}
    assert merged.label == "Population"


def test_area_equality():
    first = Area("W06000023", names={"eng": "Powys"})
    assert first == Area("W06000023", names={"ENG": "Powys"})
    assert first != Area("W06000024", names={"eng": "Powys"})


def test_areas_set_area_merges_names_and_measures():
    """Re-inserting an area folds its names and measures into the existing one."""
    areas = Areas()
    original = Area("W06000011")
    original.set_name("eng", "Swansea")
    original.set_measure("pop", Measure("pop", "Population", years={1991: 1.0}))
    areas.set_area("W06000011", original)

    incoming = Area("W06000011")
    incoming.set_name("cym", "Abertawe")
    incoming.set_measure("pop", Measure("pop", "Population", years={1992: 2.0}))
    incoming.set_measure("dens", Measure("dens", "Density", years={1991: 3.0}))
    areas.set_area("W06000011", incoming)

    stored = areas.get_area("W06000011")
    assert stored is original
    assert stored.names == {"eng": "Swansea", "cym": "Abertawe"}
    assert stored.size() == 2
    assert stored.get_measure("pop").years == {1991: 1.0, 1992: 2.0}
    assert areas.size() == 1


def test_areas_reinserting_equal_area_is_noop():
    areas = Areas()
    area = Area("W06000011", names={"eng": "Swansea"})
    areas.set_area("W06000011", area)
    areas.set_area("W06000011", Area("W06000011", names={"eng": "Swansea"}))
    assert areas.get_area("W06000011") is area
    assert areas.size() == 1


def test_areas_missing_code_names_the_code():
    with pytest.raises(NotFoundError, match="W06000099"):
        Areas().get_area("W06000099")


def test_areas_iterate_in_code_order():
    areas = Areas()
    for code in ("W06000011", "W06000001", "W06000002"):
        areas.set_area(code, Area(code))
    assert [area.code for area in areas] == ["W06000001", "W06000002", "W06000011"]
    assert "W06000002" in areas


def test_empty_areas_to_json():
    assert Areas().to_json() == "{}"


def test_areas_to_json_flattens_measures():
    """Each area's measures collapse into one year to value mapping."""
    areas = Areas()
    area = Area("W06000011")
    area.set_name("eng", "Swansea")
    area.set_name("cym", "Abertawe")
    area.set_measure("dens", Measure("dens", "Density", years={2015: 642.3, 2016: 645.5}))
    area.set_measure("pop", Measure("pop", "Population", years={2016: 244500.0, 2017: 245000.0}))
    areas.set_area("W06000011", area)

    payload = json.loads(areas.to_json())
    assert payload == {
        "W06000011": {
            "names": {"eng": "Swansea", "cym": "Abertawe"},
            "measures": {"2015": 642.3, "2016": 244500.0, "2017": 245000.0},
        }
    }


def test_areas_to_json_refuses_non_finite_values():
    """Output is strict JSON, so NaN cannot be written."""
    areas = Areas()
    areas.set_area("W06000011", Area("W06000011", measures={"pop": Measure("pop", "P")}))
    areas.get_area("W06000011").get_measure("pop").set_value(2000, float("nan"))
    with pytest.raises(ValueError):
        areas.to_json()


def test_merged_measures_are_detached_from_the_incoming_area():
    """Writes through a merged-in area do not change the stored collection."""
    areas = Areas()
    areas.set_area("W06000011", Area("W06000011", names={"eng": "Swansea"}))
    incoming = Area("W06000011")
    incoming.set_measure("pop", Measure("pop", "Population", years={2000: 1.0}))
    areas.set_area("W06000011", incoming)

    incoming.get_measure("pop").set_value(2001, 9.0)
    assert areas.get_area("W06000011").get_measure("pop").years == {2000: 1.0}


def test_measure_copy_is_independent():
    measure = Measure("pop", "Population", years={2000: 1.0})
    clone = measure.copy()
    clone.set_value(2001, 2.0)
    assert clone == Measure("pop", "Population", years={2000: 1.0, 2001: 2.0})
    assert measure.years == {2000: 1.0}
